# logic/__init__.py

"""Restoration decision engine.

This package provides:
  • needs_restoration / evaluate: the expiration policy
  • LedgerEntryInspector: footprint TTL queries
  • RestorationTransactionBuilder: nominal and simulation-derived restorations
  • TransactionSubmitter: submission and outcome classification
  • RestorationOrchestrator: the per-contract restoration loop
"""

from .verdict import RestorationVerdict
from .expiration_policy import evaluate, expired_keys, needs_restoration
from .inspector import Inspection, InspectionStatus, LedgerEntryInspector
from .builder import RestorationTransactionBuilder
from .submitter import TransactionSubmitter, classify
from .orchestrator import RestorationOrchestrator

__all__ = [
    "RestorationVerdict",
    "evaluate",
    "expired_keys",
    "needs_restoration",
    "Inspection",
    "InspectionStatus",
    "LedgerEntryInspector",
    "RestorationTransactionBuilder",
    "TransactionSubmitter",
    "classify",
    "RestorationOrchestrator",
]
