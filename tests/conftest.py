# tests/conftest.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Test configuration and shared fixtures for pytest

"""Test configuration and shared fixtures for footprint restorer tests.

The configuration handles:
- Python path setup for module imports
- An in-memory FakeLedgerGateway implementing the LedgerGateway capabilities
- A throwaway signer and a recording sleep so the full loop runs instantly
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

# Ensure project modules can be imported
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from stellar_sdk import Keypair, Network, StrKey  # noqa: E402

from ledger.exceptions import PrepareFailed, QueryFailed  # noqa: E402
from ledger.footprint import contract_instance_key  # noqa: E402
from ledger.signer import KeypairSigner  # noqa: E402
from logic.orchestrator import RestorationOrchestrator  # noqa: E402
from model.account import Account  # noqa: E402
from model.ledger import LedgerEntryState, SimulationResult, SubmitResponse  # noqa: E402


def make_contract_id(seed: int) -> str:
    """Deterministic, checksum-valid contract strkey."""
    return StrKey.encode_contract(bytes([seed % 256]) * 32)


class FakeLedgerGateway:
    """In-memory ledger answering the LedgerGateway capability set.

    Attributes:
        ttl: live-until ledger per footprint key xdr; absent keys have no entry
        failing_keys: key xdrs whose query raises QueryFailed
        submit_responses: queued responses (or exceptions) for submit, PENDING when empty
        calls: capability names in call order
    """

    network_passphrase = Network.TESTNET_NETWORK_PASSPHRASE

    def __init__(self, latest_ledger: int = 101, sequence: int = 1000):
        self.latest_ledger = latest_ledger
        self.sequence = sequence
        self.ttl: Dict[str, Optional[int]] = {}
        self.failing_keys: Set[str] = set()
        self.account_failures = 0
        self.ledger_failure = False
        self.prepare_error: Optional[str] = None
        self.simulation = SimulationResult(min_resource_fee=0)
        self.submit_responses: List[object] = []
        self.calls: List[str] = []
        self.prepared: List[object] = []
        self.submitted: List[object] = []

    def set_ttl(self, contract_id: str, live_until: Optional[int]) -> None:
        self.ttl[contract_instance_key(contract_id).xdr] = live_until

    def fail_queries_for(self, contract_id: str) -> None:
        self.failing_keys.add(contract_instance_key(contract_id).xdr)

    def fetch_account(self, public_key: str) -> Account:
        self.calls.append("fetch_account")
        if self.account_failures:
            self.account_failures -= 1
            raise QueryFailed("account endpoint unavailable")
        return Account(public_key=public_key, sequence=self.sequence)

    def fetch_latest_ledger_seq(self) -> int:
        self.calls.append("fetch_latest_ledger_seq")
        if self.ledger_failure:
            raise QueryFailed("ledger endpoint unavailable")
        return self.latest_ledger

    def fetch_ledger_entries(self, keys):
        self.calls.append("fetch_ledger_entries")
        if any(k.xdr in self.failing_keys for k in keys):
            raise QueryFailed("getLedgerEntries timed out")
        return [
            LedgerEntryState(key=k, live_until_ledger_seq=self.ttl[k.xdr], last_modified_ledger_seq=1)
            for k in keys if k.xdr in self.ttl
        ]

    def simulate(self, envelope):
        self.calls.append("simulate")
        if isinstance(self.simulation, Exception):
            raise self.simulation
        return self.simulation

    def prepare(self, envelope):
        self.calls.append("prepare")
        if self.prepare_error:
            raise PrepareFailed(self.prepare_error)
        self.prepared.append(envelope)
        return envelope

    def submit(self, envelope) -> SubmitResponse:
        self.calls.append("submit")
        self.submitted.append(envelope)
        response = self.submit_responses.pop(0) if self.submit_responses else None
        if isinstance(response, Exception):
            raise response
        self.sequence += 1
        return response or SubmitResponse(status="PENDING", tx_hash=f"hash-{len(self.submitted)}")

    def decode_envelope(self, envelope_xdr: str):
        return envelope_xdr


@pytest.fixture
def signer() -> KeypairSigner:
    return KeypairSigner(Keypair.random())


@pytest.fixture
def gateway() -> FakeLedgerGateway:
    return FakeLedgerGateway()


@pytest.fixture
def sleeps() -> List[float]:
    """Records every cooldown the orchestrator requests."""
    return []


@pytest.fixture
def orchestrator(gateway, signer, sleeps) -> RestorationOrchestrator:
    return RestorationOrchestrator.create(gateway, signer, cooldown=10.0, sleep=sleeps.append)


@pytest.fixture
def contract_ids() -> List[str]:
    return [make_contract_id(seed) for seed in range(1, 6)]


@pytest.fixture
def new_contract_id():
    """Factory for extra deterministic contract ids."""
    return make_contract_id
