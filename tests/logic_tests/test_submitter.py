# tests/logic_tests/test_submitter.py

import pytest

from ledger.exceptions import SubmissionFailed
from stellar_sdk.soroban_rpc import SendTransactionStatus

from logic.submitter import ACCEPTED_STATUSES, TransactionSubmitter, classify
from model.ledger import SubmitResponse
from model.restoration import Disposition, FeeMode, OutcomeKind, RestorationTransaction


def _restoration() -> RestorationTransaction:
    return RestorationTransaction(envelope="signed-envelope", fee=100, footprint=(),
                                  fee_mode=FeeMode.NOMINAL, sequence=1)


class TestClassification:

    @pytest.mark.parametrize("status", ["PENDING", "DUPLICATE", "pending"])
    def test_pending_and_duplicate_are_accepted(self, status):
        outcome = classify(SubmitResponse(status=status, tx_hash="abc"))

        assert outcome.kind is OutcomeKind.ACCEPTED
        assert outcome.tx_hash == "abc"
        assert outcome.disposition is Disposition.ACCEPTED

    def test_accepted_statuses_are_real_send_statuses(self):
        assert ACCEPTED_STATUSES == {SendTransactionStatus.PENDING.value, SendTransactionStatus.DUPLICATE.value}

    def test_insufficient_balance_is_distinct(self):
        outcome = classify(SubmitResponse(status="ERROR", error_result_code="txINSUFFICIENT_BALANCE"))

        assert outcome.kind is OutcomeKind.INSUFFICIENT_BALANCE
        assert outcome.disposition is Disposition.INSUFFICIENT_BALANCE

    def test_other_error_codes_carry_raw_detail(self):
        raw = {"status": "ERROR", "errorResultXdr": "AAAA"}
        outcome = classify(SubmitResponse(status="ERROR", error_result_code="txBAD_SEQ", raw=raw))

        assert outcome.kind is OutcomeKind.OTHER_ERROR
        assert "errorResultXdr" in outcome.detail

    def test_try_again_later_is_an_error(self):
        outcome = classify(SubmitResponse(status="TRY_AGAIN_LATER"))

        assert outcome.kind is OutcomeKind.OTHER_ERROR
        assert "TRY_AGAIN_LATER" in outcome.detail


class TestTransactionSubmitter:

    def test_submits_the_envelope(self, gateway):
        outcome = TransactionSubmitter(gateway).submit(_restoration())

        assert gateway.submitted == ["signed-envelope"]
        assert outcome.kind is OutcomeKind.ACCEPTED

    def test_transport_failure_becomes_other_error(self, gateway):
        gateway.submit_responses.append(SubmissionFailed("connection reset"))

        outcome = TransactionSubmitter(gateway).submit(_restoration())

        assert outcome.kind is OutcomeKind.OTHER_ERROR
        assert "connection reset" in outcome.detail

    def test_insufficient_balance_response(self, gateway):
        gateway.submit_responses.append(
            SubmitResponse(status="ERROR", error_result_code="txINSUFFICIENT_BALANCE"))

        outcome = TransactionSubmitter(gateway).submit(_restoration())

        assert outcome.kind is OutcomeKind.INSUFFICIENT_BALANCE
