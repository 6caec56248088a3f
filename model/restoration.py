# model/restoration.py

"""
Restoration records: the transaction built for one attempt, the classified
outcome of submitting it, and the per-contract and per-run reports the
orchestrator produces. A ContractReport remembers the states it walked so a
finished run can be summarised or drawn.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from .ledger import FootprintKey


class RestorationState(Enum):
    """Per-contract states of the restoration loop."""
    INSPECTING = auto()
    DECIDING = auto()
    BUILDING = auto()
    SUBMITTING = auto()
    COOLING = auto()
    DONE = auto()

    def __str__(self) -> str:
        return self.name


class Disposition(Enum):
    """How a contract left the loop."""
    NO_FOOTPRINT = auto()  # nothing stored, nothing to do
    QUERY_FAILED = auto()  # skipped, batch continues
    HEALTHY = auto()
    WOULD_RESTORE = auto()  # dry run stopped before building
    PREPARE_FAILED = auto()
    ACCEPTED = auto()
    INSUFFICIENT_BALANCE = auto()
    SUBMISSION_ERROR = auto()

    def __str__(self) -> str:
        return self.name

    @property
    def submitted(self) -> bool:
        return self in (Disposition.ACCEPTED,
                        Disposition.INSUFFICIENT_BALANCE,
                        Disposition.SUBMISSION_ERROR)


class FeeMode(Enum):
    NOMINAL = auto()
    SIMULATED = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class RestorationTransaction:
    """A signed, submission-ready restoration. Built per attempt, never reused."""
    envelope: Any
    fee: int
    footprint: Tuple[FootprintKey, ...]
    fee_mode: FeeMode
    sequence: int


class OutcomeKind(Enum):
    ACCEPTED = auto()
    INSUFFICIENT_BALANCE = auto()
    OTHER_ERROR = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    kind: OutcomeKind
    detail: Optional[str] = None
    tx_hash: Optional[str] = None

    @classmethod
    def accepted(cls, tx_hash: Optional[str] = None) -> "SubmissionOutcome":
        return cls(OutcomeKind.ACCEPTED, tx_hash=tx_hash)

    @classmethod
    def insufficient_balance(cls, detail: Optional[str] = None) -> "SubmissionOutcome":
        return cls(OutcomeKind.INSUFFICIENT_BALANCE, detail=detail)

    @classmethod
    def other_error(cls, detail: str) -> "SubmissionOutcome":
        return cls(OutcomeKind.OTHER_ERROR, detail=detail)

    @property
    def disposition(self) -> Disposition:
        return {
            OutcomeKind.ACCEPTED: Disposition.ACCEPTED,
            OutcomeKind.INSUFFICIENT_BALANCE: Disposition.INSUFFICIENT_BALANCE,
            OutcomeKind.OTHER_ERROR: Disposition.SUBMISSION_ERROR,
        }[self.kind]

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}" if self.detail else str(self.kind)


@dataclass(slots=True)
class ContractReport:
    """What happened to one contract (or one transaction) during a run."""
    target: str
    path: List[RestorationState] = field(default_factory=list)
    disposition: Optional[Disposition] = None
    outcome: Optional[SubmissionOutcome] = None
    detail: Optional[str] = None

    def enter(self, state: RestorationState) -> None:
        self.path.append(state)

    def finish(self, disposition: Disposition, detail: Optional[str] = None) -> "ContractReport":
        self.disposition = disposition
        if detail is not None:
            self.detail = detail
        self.path.append(RestorationState.DONE)
        return self

    @property
    def submitted(self) -> bool:
        return self.disposition is not None and self.disposition.submitted


@dataclass(slots=True)
class RunReport:
    snapshot_seq: int
    contracts: List[ContractReport] = field(default_factory=list)

    def add(self, report: ContractReport) -> None:
        self.contracts.append(report)

    def counts(self) -> Dict[str, int]:
        tally = Counter(r.disposition for r in self.contracts)
        return {d.name: tally.get(d, 0) for d in Disposition}

    def by_disposition(self, disposition: Disposition) -> List[ContractReport]:
        return [r for r in self.contracts if r.disposition is disposition]

    @property
    def submissions(self) -> int:
        return sum(1 for r in self.contracts if r.submitted)

    @property
    def needs_funding(self) -> bool:
        return any(r.disposition is Disposition.INSUFFICIENT_BALANCE for r in self.contracts)
