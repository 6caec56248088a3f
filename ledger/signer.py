# ledger/signer.py

"""
Signer collaborator. Holds the private key and signs transaction envelopes;
nothing else in the project ever sees the secret.
"""

from typing import Any, Protocol

from stellar_sdk import Keypair


class Signer(Protocol):
    @property
    def public_key(self) -> str: ...

    def sign(self, envelope: Any) -> None: ...


class KeypairSigner:
    """Signer backed by an in-memory stellar_sdk Keypair."""

    def __init__(self, keypair: Keypair):
        self._keypair = keypair

    @classmethod
    def from_secret(cls, secret: str) -> "KeypairSigner":
        return cls(Keypair.from_secret(secret))

    @property
    def public_key(self) -> str:
        return self._keypair.public_key

    def sign(self, envelope: Any) -> None:
        envelope.sign(self._keypair)

    def __repr__(self) -> str:
        return f"KeypairSigner({self.public_key})"
