# ledger/gateway.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Ledger/RPC collaborator: capability protocol and Soroban RPC adapter

"""Access to the ledger through a Soroban RPC endpoint.

The restoration logic depends only on the LedgerGateway protocol, a small
capability set {fetch_account, fetch_latest_ledger_seq, fetch_ledger_entries,
simulate, prepare, submit}. StellarRpcGateway implements it over
stellar_sdk.SorobanServer and translates every SDK failure into the
exceptions of ledger.exceptions, so callers never handle SDK types.

Example:
    >>> gateway = StellarRpcGateway("https://soroban-rpc.example", Network.PUBLIC_NETWORK_PASSPHRASE)
    >>> gateway.fetch_latest_ledger_seq()
"""

import struct
from typing import Any, Dict, List, Optional, Protocol, Sequence

from stellar_sdk import Network, SorobanServer, TransactionEnvelope
from stellar_sdk import xdr as stellar_xdr
from pydantic import ValidationError
from stellar_sdk.exceptions import SdkError

from model.account import Account
from model.ledger import (
    FootprintKey,
    LedgerEntryState,
    RestorePreamble,
    SimulationResult,
    SubmitResponse,
)
from utils.logger import get_logger

from .exceptions import PrepareFailed, QueryFailed, SubmissionFailed, TransactionFormatError
from .footprint import footprint_of, to_ledger_key

logger = get_logger(__name__)

# Failures SorobanServer raises besides SdkError: malformed RPC payloads fail
# pydantic validation, malformed XDR fails decoding.
RPC_ERRORS = (SdkError, ValidationError, ValueError)
XDR_ERRORS = (ValueError, EOFError, struct.error)


class LedgerGateway(Protocol):
    """Capabilities the restoration logic consumes from the network."""

    network_passphrase: str

    def fetch_account(self, public_key: str) -> Account: ...

    def fetch_latest_ledger_seq(self) -> int: ...

    def fetch_ledger_entries(self, keys: Sequence[FootprintKey]) -> List[LedgerEntryState]: ...

    def simulate(self, envelope: Any) -> SimulationResult: ...

    def prepare(self, envelope: Any) -> Any: ...

    def submit(self, envelope: Any) -> SubmitResponse: ...

    def decode_envelope(self, envelope_xdr: str) -> Any: ...


class StellarRpcGateway:
    """LedgerGateway over a Soroban RPC server.

    Args:
        rpc_url: Soroban RPC endpoint
        network_passphrase: Passphrase of the network the endpoint serves
        server: Pre-built SorobanServer, mainly for tests
    """

    def __init__(self, rpc_url: str,
                 network_passphrase: str = Network.PUBLIC_NETWORK_PASSPHRASE,
                 server: Optional[SorobanServer] = None):
        self.rpc_url = rpc_url
        self.network_passphrase = network_passphrase
        self.server = server if server is not None else SorobanServer(rpc_url)

    def fetch_account(self, public_key: str) -> Account:
        try:
            loaded = self.server.load_account(public_key)
        except RPC_ERRORS as e:
            raise QueryFailed(f"Could not load account {public_key}: {e}") from e
        return Account(public_key=public_key, sequence=loaded.sequence)

    def fetch_latest_ledger_seq(self) -> int:
        try:
            return self.server.get_latest_ledger().sequence
        except RPC_ERRORS as e:
            raise QueryFailed(f"Could not fetch latest ledger: {e}") from e

    def fetch_ledger_entries(self, keys: Sequence[FootprintKey]) -> List[LedgerEntryState]:
        if not keys:
            return []
        requested = {k.xdr: k for k in keys}
        try:
            response = self.server.get_ledger_entries([to_ledger_key(k) for k in keys])
        except RPC_ERRORS as e:
            raise QueryFailed(f"Could not fetch ledger entries: {e}") from e

        states = []
        for entry in response.entries or []:
            key = requested.get(entry.key, FootprintKey(xdr=entry.key))
            states.append(LedgerEntryState(
                key=key,
                live_until_ledger_seq=entry.live_until_ledger,
                last_modified_ledger_seq=entry.last_modified_ledger,
            ))
        logger.debug(f"Fetched {len(states)} entr(ies) for {len(keys)} key(s) "
                     f"at ledger {response.latest_ledger}")
        return states

    def simulate(self, envelope: TransactionEnvelope) -> SimulationResult:
        try:
            response = self.server.simulate_transaction(envelope)
        except RPC_ERRORS as e:
            raise QueryFailed(f"Simulation request failed: {e}") from e
        if response.error:
            raise QueryFailed(f"Simulation rejected: {response.error}")

        try:
            return SimulationResult(
                min_resource_fee=int(response.min_resource_fee or 0),
                restore_preamble=self._preamble(response.restore_preamble),
            )
        except XDR_ERRORS as e:
            raise QueryFailed(f"Undecodable restore preamble: {e}") from e

    @staticmethod
    def _preamble(restore_preamble) -> Optional[RestorePreamble]:
        if restore_preamble is None:
            return None
        data = restore_preamble.transaction_data
        read_only, read_write = footprint_of(data)
        return RestorePreamble(
            min_resource_fee=int(restore_preamble.min_resource_fee),
            transaction_data=data,
            read_only=read_only,
            read_write=read_write,
        )

    def prepare(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        try:
            return self.server.prepare_transaction(envelope)
        # stellar-sdk asserts that a successful simulation carries transaction data
        except RPC_ERRORS + (AssertionError,) as e:
            raise PrepareFailed(f"Could not prepare transaction: {e}") from e

    def submit(self, envelope: TransactionEnvelope) -> SubmitResponse:
        try:
            response = self.server.send_transaction(envelope)
        except RPC_ERRORS as e:
            raise SubmissionFailed(f"Could not send transaction: {e}") from e

        return SubmitResponse(
            status=response.status.value,
            tx_hash=response.hash,
            error_result_code=self._error_result_code(response.error_result_xdr),
            raw=self._raw(response),
        )

    def decode_envelope(self, envelope_xdr: str) -> TransactionEnvelope:
        """Decode a base64 transaction envelope for this gateway's network."""
        try:
            return TransactionEnvelope.from_xdr(envelope_xdr.strip(), self.network_passphrase)
        except XDR_ERRORS as e:
            raise TransactionFormatError(f"Invalid transaction envelope: {e}") from e

    @staticmethod
    def _error_result_code(error_result_xdr: Optional[str]) -> Optional[str]:
        if not error_result_xdr:
            return None
        try:
            return stellar_xdr.TransactionResult.from_xdr(error_result_xdr).result.code.name
        except XDR_ERRORS as e:
            logger.warning(f"Undecodable error result {error_result_xdr!r}: {e}")
            return None

    @staticmethod
    def _raw(response) -> Dict[str, Any]:
        return response.model_dump(mode="json", exclude_none=True)
