# ledger/__init__.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Ledger collaborator public API

"""Network-facing collaborators for footprint restoration.

Primary Components:
    LedgerGateway: capability protocol consumed by the restoration logic
    StellarRpcGateway: Soroban RPC implementation of LedgerGateway
    KeypairSigner: signer collaborator backed by a stellar_sdk Keypair
    contract_instance_key: deterministic instance storage key of a contract
"""

from .exceptions import (
    RestorerError,
    QueryFailed,
    PrepareFailed,
    SubmissionFailed,
    TransactionFormatError,
)
from .footprint import contract_instance_key, footprint_of, read_write_data
from .gateway import LedgerGateway, StellarRpcGateway
from .signer import KeypairSigner, Signer

__all__ = [
    "RestorerError",
    "QueryFailed",
    "PrepareFailed",
    "SubmissionFailed",
    "TransactionFormatError",
    "contract_instance_key",
    "footprint_of",
    "read_write_data",
    "LedgerGateway",
    "StellarRpcGateway",
    "KeypairSigner",
    "Signer",
]
