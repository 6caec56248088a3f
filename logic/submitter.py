# logic/submitter.py

"""
TransactionSubmitter: sends a signed restoration and classifies the network's
immediate response. It does not wait for ledger inclusion. Delivery failures
are folded into OTHER_ERROR so a bad submission never stops the batch.
"""

from dataclasses import dataclass

from ledger.exceptions import RestorerError
from ledger.gateway import LedgerGateway
from model.ledger import SubmitResponse
from model.restoration import OutcomeKind, RestorationTransaction, SubmissionOutcome
from utils.logger import get_logger

logger = get_logger(__name__)

# Immediate sendTransaction statuses; TRY_AGAIN_LATER and ERROR are not acceptances.
ACCEPTED_STATUSES = frozenset({"PENDING", "DUPLICATE"})
INSUFFICIENT_BALANCE_CODE = "txINSUFFICIENT_BALANCE"


def classify(response: SubmitResponse) -> SubmissionOutcome:
    """Map an immediate submission response onto a SubmissionOutcome."""
    status = response.status.upper()
    if status in ACCEPTED_STATUSES:
        return SubmissionOutcome.accepted(response.tx_hash)
    if status == "ERROR" and response.error_result_code == INSUFFICIENT_BALANCE_CODE:
        return SubmissionOutcome.insufficient_balance(response.error_result_code)
    return SubmissionOutcome.other_error(str(response.raw or response))


@dataclass(slots=True)
class TransactionSubmitter:
    gateway: LedgerGateway

    def submit(self, restoration: RestorationTransaction) -> SubmissionOutcome:
        try:
            response = self.gateway.submit(restoration.envelope)
        except RestorerError as e:
            logger.error(f"Error sending restoration transaction: {e}")
            return SubmissionOutcome.other_error(str(e))

        logger.submission_response(response)
        logger.debug(f"Raw response: {response.raw}")
        outcome = classify(response)
        if outcome.kind is OutcomeKind.OTHER_ERROR:
            logger.error(f"Error restoring footprint transaction: {outcome.detail}")
        return outcome
