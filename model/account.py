# model/account.py

"""
Account
=======

Immutable snapshot of the source account used to sign restoration
transactions. A submitted transaction consumes the next sequence number, so
a snapshot is only good for one submission; the orchestrator replaces it
with a freshly fetched value after every submission attempt.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Account:
    public_key: str
    sequence: int

    def next_sequence(self) -> int:
        """Sequence number the next transaction built from this snapshot will carry."""
        return self.sequence + 1

    def __str__(self) -> str:
        return f"{self.public_key[:6]}…{self.public_key[-4:]}#{self.sequence}"
