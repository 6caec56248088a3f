# model/__init__.py

"""
Domain objects for a restoration run: the source account snapshot, ledger
keys and their TTL state, simulation and submission records, and the
per-contract reports. These types carry no network or signing logic.
"""

from .account import Account
from .ledger import (
    FootprintKey,
    LedgerEntryState,
    RestorePreamble,
    SimulationResult,
    SubmitResponse,
)
from .restoration import (
    ContractReport,
    Disposition,
    FeeMode,
    OutcomeKind,
    RestorationState,
    RestorationTransaction,
    RunReport,
    SubmissionOutcome,
)

__all__ = [
    "Account",
    "FootprintKey",
    "LedgerEntryState",
    "RestorePreamble",
    "SimulationResult",
    "SubmitResponse",
    "ContractReport",
    "Disposition",
    "FeeMode",
    "OutcomeKind",
    "RestorationState",
    "RestorationTransaction",
    "RunReport",
    "SubmissionOutcome",
]
