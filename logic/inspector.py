# logic/inspector.py

"""
LedgerEntryInspector: resolves a contract's instance storage key and fetches
the TTL state of the entries behind it. The result is always a value; an
empty footprint and a failed query are reported through Inspection.status
rather than raised, so the orchestrator can branch on them explicitly.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Optional, Sequence, Tuple

from ledger.exceptions import QueryFailed
from ledger.footprint import contract_instance_key
from ledger.gateway import LedgerGateway
from model.ledger import FootprintKey, LedgerEntryState
from utils.logger import get_logger

logger = get_logger(__name__)


class InspectionStatus(Enum):
    FOUND = auto()
    EMPTY = auto()  # no footprint exists, terminal but not an error
    QUERY_FAILED = auto()


@dataclass(frozen=True, slots=True)
class Inspection:
    status: InspectionStatus
    keys: Tuple[FootprintKey, ...] = ()
    entries: Tuple[LedgerEntryState, ...] = ()
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str, keys: Sequence[FootprintKey] = ()) -> "Inspection":
        return cls(InspectionStatus.QUERY_FAILED, keys=tuple(keys), error=error)


@dataclass(slots=True)
class LedgerEntryInspector:
    gateway: LedgerGateway
    key_resolver: Callable[[str], FootprintKey] = field(default=contract_instance_key)

    def inspect(self, contract_id: str) -> Inspection:
        """Inspect the instance storage footprint of `contract_id`."""
        try:
            key = self.key_resolver(contract_id)
        except ValueError as e:
            logger.warning(f"Cannot resolve footprint of {contract_id}: {e}")
            return Inspection.failed(f"invalid contract id: {e}")
        return self.inspect_keys([key])

    def inspect_keys(self, keys: Sequence[FootprintKey]) -> Inspection:
        """Inspect arbitrary footprint keys, e.g. those named by a restore preamble."""
        keys = tuple(keys)
        try:
            entries: List[LedgerEntryState] = self.gateway.fetch_ledger_entries(keys)
        except QueryFailed as e:
            logger.warning(f"Footprint query failed for {', '.join(map(str, keys))}: {e}")
            return Inspection.failed(str(e), keys)

        if not entries:
            return Inspection(InspectionStatus.EMPTY, keys=keys)
        return Inspection(InspectionStatus.FOUND, keys=keys, entries=tuple(entries))
