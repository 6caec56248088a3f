# tests/ledger_tests/test_gateway.py

"""
Tests for StellarRpcGateway against a stub SorobanServer: SDK failures map to
ledger exceptions and RPC payloads map to the project's ledger records.
"""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError
from stellar_sdk import Account as SdkAccount
from stellar_sdk import Keypair, Network, StrKey, TransactionBuilder
from stellar_sdk.exceptions import SdkError
from stellar_sdk.soroban_rpc import GetLedgerEntriesResponse, SendTransactionResponse

from ledger.exceptions import PrepareFailed, QueryFailed, SubmissionFailed, TransactionFormatError
from ledger.footprint import contract_instance_key, read_write_data
from ledger.gateway import StellarRpcGateway

INSUFFICIENT_BALANCE_RESULT = "AAAAAAAAAGT////5AAAAAA=="


class StubServer:
    """Answers each SorobanServer method with a canned value or exception."""

    def __init__(self, **answers):
        self.answers = answers
        self.requests = []

    def _answer(self, name, *args):
        self.requests.append((name, args))
        answer = self.answers[name]
        if isinstance(answer, Exception):
            raise answer
        return answer

    def load_account(self, public_key):
        return self._answer("load_account", public_key)

    def get_latest_ledger(self):
        return self._answer("get_latest_ledger")

    def get_ledger_entries(self, keys):
        return self._answer("get_ledger_entries", keys)

    def simulate_transaction(self, envelope):
        return self._answer("simulate_transaction", envelope)

    def prepare_transaction(self, envelope):
        return self._answer("prepare_transaction", envelope)

    def send_transaction(self, envelope):
        return self._answer("send_transaction", envelope)


def _gateway(**answers) -> StellarRpcGateway:
    return StellarRpcGateway("http://rpc.invalid", Network.TESTNET_NETWORK_PASSPHRASE,
                             server=StubServer(**answers))


def _send_response(status, error_result_xdr=None) -> SendTransactionResponse:
    payload = {"status": status, "hash": "ab" * 32, "latestLedger": 101, "latestLedgerCloseTime": 1700000000}
    if error_result_xdr:
        payload["errorResultXdr"] = error_result_xdr
    return SendTransactionResponse.model_validate(payload)


def _contract(seed: int) -> str:
    return StrKey.encode_contract(bytes([seed]) * 32)


def _malformed_payload_error() -> ValidationError:
    try:
        GetLedgerEntriesResponse.model_validate({"entries": "not-a-list"})
    except ValidationError as e:
        return e
    raise AssertionError("payload unexpectedly validated")


class TestQueries:

    def test_fetch_account_reads_sequence(self):
        public_key = Keypair.random().public_key
        gateway = _gateway(load_account=SdkAccount(public_key, 42))

        account = gateway.fetch_account(public_key)

        assert account.public_key == public_key
        assert account.sequence == 42

    def test_fetch_account_failure(self):
        gateway = _gateway(load_account=SdkError("account not found"))
        with pytest.raises(QueryFailed, match="account not found"):
            gateway.fetch_account(Keypair.random().public_key)

    def test_latest_ledger(self):
        gateway = _gateway(get_latest_ledger=SimpleNamespace(sequence=123))
        assert gateway.fetch_latest_ledger_seq() == 123

    def test_latest_ledger_failure(self):
        gateway = _gateway(get_latest_ledger=SdkError("timeout"))
        with pytest.raises(QueryFailed):
            gateway.fetch_latest_ledger_seq()

    def test_ledger_entries_are_matched_to_requested_keys(self):
        key = contract_instance_key(_contract(1))
        entry = SimpleNamespace(key=key.xdr, live_until_ledger=150, last_modified_ledger=90)
        gateway = _gateway(get_ledger_entries=SimpleNamespace(entries=[entry], latest_ledger=101))

        states = gateway.fetch_ledger_entries([key, contract_instance_key(_contract(2))])

        assert len(states) == 1
        assert states[0].key == key
        assert states[0].live_until_ledger_seq == 150
        assert states[0].last_modified_ledger_seq == 90

    def test_missing_entries_yield_empty_list(self):
        gateway = _gateway(get_ledger_entries=SimpleNamespace(entries=None, latest_ledger=101))
        assert gateway.fetch_ledger_entries([contract_instance_key(_contract(3))]) == []

    def test_no_keys_skips_the_request(self):
        gateway = _gateway()
        assert gateway.fetch_ledger_entries([]) == []
        assert gateway.server.requests == []

    def test_ledger_entries_failure(self):
        gateway = _gateway(get_ledger_entries=SdkError("bad request"))
        with pytest.raises(QueryFailed):
            gateway.fetch_ledger_entries([contract_instance_key(_contract(4))])


class TestSimulation:

    def test_restore_preamble_is_decoded(self):
        keys = [contract_instance_key(_contract(5))]
        data = read_write_data(keys).to_xdr()
        response = SimpleNamespace(
            error=None,
            min_resource_fee="1000",
            restore_preamble=SimpleNamespace(transaction_data=data, min_resource_fee="555"),
        )

        result = _gateway(simulate_transaction=response).simulate("envelope")

        assert result.needs_restoration
        assert result.restore_preamble.min_resource_fee == 555
        assert result.restore_preamble.transaction_data == data
        assert list(result.restore_preamble.read_write) == keys
        assert result.min_resource_fee == 1000

    def test_no_preamble(self):
        response = SimpleNamespace(error=None, min_resource_fee="10", restore_preamble=None)
        result = _gateway(simulate_transaction=response).simulate("envelope")
        assert not result.needs_restoration

    def test_simulation_error_is_a_failed_query(self):
        response = SimpleNamespace(error="HostError: trapped", min_resource_fee=None, restore_preamble=None)
        with pytest.raises(QueryFailed, match="HostError"):
            _gateway(simulate_transaction=response).simulate("envelope")


class TestPrepareAndSubmit:

    def test_prepare_failure(self):
        with pytest.raises(PrepareFailed):
            _gateway(prepare_transaction=SdkError("simulation failed")).prepare("envelope")

    def test_submit_pending(self):
        response = _gateway(send_transaction=_send_response("PENDING")).submit("envelope")

        assert response.status == "PENDING"
        assert response.tx_hash == "ab" * 32
        assert response.error_result_code is None
        assert response.raw["status"] == "PENDING"

    def test_submit_error_decodes_result_code(self):
        gateway = _gateway(send_transaction=_send_response("ERROR", INSUFFICIENT_BALANCE_RESULT))

        response = gateway.submit("envelope")

        assert response.status == "ERROR"
        assert response.error_result_code == "txINSUFFICIENT_BALANCE"

    def test_undecodable_result_code_is_dropped(self):
        response = _gateway(send_transaction=_send_response("ERROR", "AAAA")).submit("envelope")
        assert response.error_result_code is None

    def test_transport_failure(self):
        with pytest.raises(SubmissionFailed):
            _gateway(send_transaction=SdkError("connection reset")).submit("envelope")


class TestDecodeEnvelope:

    def test_round_trip(self):
        keypair = Keypair.random()
        envelope = (
            TransactionBuilder(SdkAccount(keypair.public_key, 1), Network.TESTNET_NETWORK_PASSPHRASE, base_fee=100)
            .append_restore_footprint_op()
            .set_timeout(30)
            .build()
        )

        decoded = _gateway().decode_envelope(envelope.to_xdr() + "\n")

        assert decoded.transaction.source.account_id == keypair.public_key
        assert decoded.network_passphrase == Network.TESTNET_NETWORK_PASSPHRASE

    def test_garbage_is_rejected(self):
        with pytest.raises(TransactionFormatError):
            _gateway().decode_envelope("AAAA")


class TestNonSdkFailures:
    """stellar-sdk failures outside SdkError still surface as ledger exceptions."""

    def test_malformed_ledger_entries_payload(self):
        gateway = _gateway(get_ledger_entries=_malformed_payload_error())
        with pytest.raises(QueryFailed):
            gateway.fetch_ledger_entries([contract_instance_key(_contract(6))])

    def test_malformed_account_payload(self):
        gateway = _gateway(load_account=_malformed_payload_error())
        with pytest.raises(QueryFailed):
            gateway.fetch_account(Keypair.random().public_key)

    def test_malformed_simulation_payload(self):
        with pytest.raises(QueryFailed):
            _gateway(simulate_transaction=_malformed_payload_error()).simulate("envelope")

    def test_undecodable_restore_preamble(self):
        response = SimpleNamespace(
            error=None,
            min_resource_fee="10",
            restore_preamble=SimpleNamespace(transaction_data="AAAA", min_resource_fee="1"),
        )
        with pytest.raises(QueryFailed, match="preamble"):
            _gateway(simulate_transaction=response).simulate("envelope")

    @pytest.mark.parametrize("error", [
        ValueError("cannot assemble transaction"),
        AssertionError("simulation carries no transaction data"),
    ])
    def test_prepare_assembly_failures(self, error):
        with pytest.raises(PrepareFailed):
            _gateway(prepare_transaction=error).prepare("envelope")

    def test_malformed_send_payload(self):
        with pytest.raises(SubmissionFailed):
            _gateway(send_transaction=_malformed_payload_error()).submit("envelope")
