# model/ledger.py

"""
Ledger-side records returned by the RPC collaborator: footprint keys, the
TTL state of the entries behind them, simulation results and the immediate
response to a submitted transaction. None of these types know about the
wire format; the gateway translates to and from it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class FootprintKey:
    """One ledger entry whose liveness is managed.

    Attributes:
      xdr: base64 encoded LedgerKey, opaque to everything but the gateway.
      label: human readable name (the contract id for instance keys).
    """
    xdr: str
    label: str = ""

    def __str__(self) -> str:
        return self.label or f"{self.xdr[:12]}…"


@dataclass(frozen=True, slots=True)
class LedgerEntryState:
    key: FootprintKey
    live_until_ledger_seq: Optional[int]
    last_modified_ledger_seq: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RestorePreamble:
    """Restoration data reported by a simulation that touched archived entries."""
    min_resource_fee: int
    transaction_data: str
    read_only: Tuple[FootprintKey, ...] = ()
    read_write: Tuple[FootprintKey, ...] = ()

    @property
    def keys(self) -> Tuple[FootprintKey, ...]:
        return self.read_only + self.read_write


@dataclass(frozen=True, slots=True)
class SimulationResult:
    min_resource_fee: int
    restore_preamble: Optional[RestorePreamble] = None

    @property
    def needs_restoration(self) -> bool:
        return self.restore_preamble is not None


@dataclass(frozen=True, slots=True)
class SubmitResponse:
    """Immediate (not finalized) answer to a submitted transaction."""
    status: str
    tx_hash: Optional[str] = None
    error_result_code: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        code = f" {self.error_result_code}" if self.error_result_code else ""
        return f"{self.status}{code} hash={self.tx_hash}"
