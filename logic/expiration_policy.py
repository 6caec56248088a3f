# logic/expiration_policy.py

"""
Expiration policy: the single comparison deciding whether a storage entry
must be restored. An entry stays live through its exact live-until ledger,
so restoration is needed only once the reference ledger is strictly past it.
"""

from functools import reduce
from typing import List, Optional, Sequence

from model.ledger import FootprintKey, LedgerEntryState
from .verdict import RestorationVerdict


def needs_restoration(current_ledger_seq: int, live_until_ledger_seq: Optional[int]) -> RestorationVerdict:
    """Verdict for one entry. Entries without a TTL never expire."""
    if live_until_ledger_seq is None:
        return RestorationVerdict.HEALTHY
    if current_ledger_seq > live_until_ledger_seq:
        return RestorationVerdict.NEEDS_RESTORATION
    return RestorationVerdict.HEALTHY


def evaluate(current_ledger_seq: int, entries: Sequence[LedgerEntryState]) -> RestorationVerdict:
    """Footprint verdict: NEEDS_RESTORATION if any entry needs it."""
    verdicts = (needs_restoration(current_ledger_seq, e.live_until_ledger_seq) for e in entries)
    return reduce(RestorationVerdict.combine, verdicts, RestorationVerdict.HEALTHY)


def expired_keys(current_ledger_seq: int, entries: Sequence[LedgerEntryState]) -> List[FootprintKey]:
    """Keys of the entries that need restoration, in entry order."""
    return [
        e.key for e in entries
        if needs_restoration(current_ledger_seq, e.live_until_ledger_seq)
        is RestorationVerdict.NEEDS_RESTORATION
    ]
