# ledger/footprint.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Deterministic resolution of footprint keys and Soroban transaction data

"""Conversions between contract identifiers, XDR ledger keys and FootprintKey.

A contract's instance storage lives under a single persistent CONTRACT_DATA
key whose value is the LEDGER_KEY_CONTRACT_INSTANCE marker, so it can be
derived from the contract id alone without touching the network.
"""

from typing import Sequence, Tuple

from stellar_sdk import Address, SorobanDataBuilder
from stellar_sdk import xdr as stellar_xdr

from model.ledger import FootprintKey


def contract_instance_key(contract_id: str) -> FootprintKey:
    """Resolve the instance storage key of a contract.

    Args:
        contract_id: Contract strkey ("C...")

    Returns:
        FootprintKey labelled with the contract id

    Raises:
        ValueError: If the contract id is not a valid contract address
    """
    ledger_key = stellar_xdr.LedgerKey(
        type=stellar_xdr.LedgerEntryType.CONTRACT_DATA,
        contract_data=stellar_xdr.LedgerKeyContractData(
            contract=Address(contract_id).to_xdr_sc_address(),
            key=stellar_xdr.SCVal(stellar_xdr.SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE),
            durability=stellar_xdr.ContractDataDurability.PERSISTENT,
        ),
    )
    return FootprintKey(xdr=ledger_key.to_xdr(), label=contract_id)


def to_ledger_key(key: FootprintKey) -> stellar_xdr.LedgerKey:
    return stellar_xdr.LedgerKey.from_xdr(key.xdr)


def describe_ledger_key(ledger_key: stellar_xdr.LedgerKey) -> str:
    """Short human label for an arbitrary ledger key."""
    entry_type = ledger_key.type
    if entry_type == stellar_xdr.LedgerEntryType.CONTRACT_DATA:
        contract = Address.from_xdr_sc_address(ledger_key.contract_data.contract).address
        durability = ledger_key.contract_data.durability.name.lower()
        if ledger_key.contract_data.key.type == stellar_xdr.SCValType.SCV_LEDGER_KEY_CONTRACT_INSTANCE:
            return contract
        return f"{contract}:data:{durability}"
    if entry_type == stellar_xdr.LedgerEntryType.CONTRACT_CODE:
        return f"code:{ledger_key.contract_code.hash.hash.hex()[:16]}"
    return entry_type.name.lower()


def from_ledger_key(ledger_key: stellar_xdr.LedgerKey) -> FootprintKey:
    return FootprintKey(xdr=ledger_key.to_xdr(), label=describe_ledger_key(ledger_key))


def read_write_data(keys: Sequence[FootprintKey]) -> stellar_xdr.SorobanTransactionData:
    """Soroban transaction data naming `keys` as the read-write footprint."""
    return SorobanDataBuilder().set_read_write([to_ledger_key(k) for k in keys]).build()


def footprint_of(transaction_data: str) -> Tuple[Tuple[FootprintKey, ...], Tuple[FootprintKey, ...]]:
    """Split base64 Soroban transaction data into (read_only, read_write) keys."""
    footprint = stellar_xdr.SorobanTransactionData.from_xdr(transaction_data).resources.footprint
    read_only = tuple(from_ledger_key(k) for k in footprint.read_only)
    read_write = tuple(from_ledger_key(k) for k in footprint.read_write)
    return read_only, read_write
