# logic/verdict.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Verdict enumeration for storage entry liveness decisions

from enum import Enum, auto


class RestorationVerdict(Enum):
    """Two-valued result of checking a storage entry's TTL.

    An entry is either still live at the reference ledger or it has passed its
    live-until ledger and must be restored before it can be used again. A
    contract's footprint may hold several entries; their verdicts are folded
    with `combine`, where a single expired entry makes the whole footprint
    need restoration.

    Values:
        NEEDS_RESTORATION: The entry's TTL has elapsed
        HEALTHY: The entry is live through the reference ledger
    """

    NEEDS_RESTORATION = auto()
    HEALTHY = auto()

    def __str__(self) -> str:
        """Human-readable verdict name."""
        return self.name

    def combine(self, other: "RestorationVerdict") -> "RestorationVerdict":
        """Fold this verdict with another entry's verdict.

        Combination rules:
        - NEEDS_RESTORATION with anything = NEEDS_RESTORATION
        - HEALTHY with HEALTHY = HEALTHY

        Args:
            other: Verdict of another entry of the same footprint

        Returns:
            Combined footprint verdict
        """
        if RestorationVerdict.NEEDS_RESTORATION in (self, other):
            return RestorationVerdict.NEEDS_RESTORATION
        return RestorationVerdict.HEALTHY
