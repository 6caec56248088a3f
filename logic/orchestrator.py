# logic/orchestrator.py

"""
RestorationOrchestrator: drives the per-contract loop
INSPECTING → DECIDING → BUILDING → SUBMITTING → COOLING → DONE
over a list of contracts, or over the single footprint a simulated
transaction reports as archived.

The ledger snapshot is captured once by `setup()` and serves as the
expiration baseline for the whole run. The source Account is threaded
through the loop as a value: every step receives the current snapshot and a
submission attempt hands back a freshly fetched one, because each submission
consumes a sequence number. Every per-contract failure ends in a
ContractReport disposition; only setup failures escape `run`.
"""

import time
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from ledger.exceptions import PrepareFailed, QueryFailed, RestorerError, SubmissionFailed
from ledger.gateway import LedgerGateway
from ledger.signer import Signer
from model.account import Account
from model.ledger import FootprintKey, LedgerEntryState, RestorePreamble
from model.restoration import (
    ContractReport,
    Disposition,
    OutcomeKind,
    RestorationState,
    RunReport,
)
from utils.logger import get_logger

from .builder import DEFAULT_BASE_FEE, DEFAULT_TIMEOUT_SECONDS, RestorationTransactionBuilder
from .expiration_policy import evaluate, expired_keys, needs_restoration
from .inspector import InspectionStatus, LedgerEntryInspector
from .submitter import TransactionSubmitter
from .verdict import RestorationVerdict

logger = get_logger(__name__)

DEFAULT_COOLDOWN_SECONDS = 10.0

FAILURE_DISPOSITIONS = (
    (PrepareFailed, Disposition.PREPARE_FAILED),
    (SubmissionFailed, Disposition.SUBMISSION_ERROR),
)


class RestorationOrchestrator:
    """
    Sequential restoration loop. Collaborators are injected so the whole loop
    runs against a fake gateway and a no-op `sleep` in tests.
    """

    def __init__(self, gateway: LedgerGateway, signer: Signer,
                 inspector: LedgerEntryInspector,
                 builder: RestorationTransactionBuilder,
                 submitter: TransactionSubmitter,
                 cooldown: float = DEFAULT_COOLDOWN_SECONDS,
                 sleep: Callable[[float], None] = time.sleep,
                 dry_run: bool = False):
        self.gateway = gateway
        self.signer = signer
        self.inspector = inspector
        self.builder = builder
        self.submitter = submitter
        self.cooldown = cooldown
        self.sleep = sleep
        self.dry_run = dry_run
        self.snapshot_seq: Optional[int] = None

    @classmethod
    def create(cls, gateway: LedgerGateway, signer: Signer, *,
               base_fee: int = DEFAULT_BASE_FEE,
               timeout: int = DEFAULT_TIMEOUT_SECONDS,
               cooldown: float = DEFAULT_COOLDOWN_SECONDS,
               sleep: Callable[[float], None] = time.sleep,
               dry_run: bool = False) -> "RestorationOrchestrator":
        """Wire the default inspector, builder and submitter around `gateway`."""
        return cls(
            gateway=gateway,
            signer=signer,
            inspector=LedgerEntryInspector(gateway),
            builder=RestorationTransactionBuilder(
                gateway=gateway,
                signer=signer,
                network_passphrase=gateway.network_passphrase,
                base_fee=base_fee,
                timeout=timeout,
            ),
            submitter=TransactionSubmitter(gateway),
            cooldown=cooldown,
            sleep=sleep,
            dry_run=dry_run,
        )

    def setup(self) -> Account:
        """Fetch the source account and capture the run's ledger snapshot.

        Raises:
            QueryFailed: If either query fails; the run has no baseline then
        """
        account = self.gateway.fetch_account(self.signer.public_key)
        self.snapshot_seq = self.gateway.fetch_latest_ledger_seq()
        return account

    def run(self, contract_ids: Sequence[str]) -> RunReport:
        """Process every contract once, in order, and report each outcome."""
        account: Optional[Account] = self.setup()
        logger.run_start(self.signer.public_key, self.snapshot_seq, len(contract_ids))

        report = RunReport(snapshot_seq=self.snapshot_seq)
        for contract_id in contract_ids:
            contract_report, account = self.process_contract(contract_id, account)
            report.add(contract_report)

        logger.run_summary(report.counts())
        return report

    def run_transaction(self, envelope: Any, label: str = "transaction") -> RunReport:
        """Restore whatever archived entries `envelope` would need."""
        account = self.setup()
        logger.run_start(self.signer.public_key, self.snapshot_seq)

        report = RunReport(snapshot_seq=self.snapshot_seq)
        contract_report, _ = self.restore_for_transaction(envelope, account, label)
        report.add(contract_report)

        logger.run_summary(report.counts())
        return report

    def process_contract(self, contract_id: str,
                         account: Optional[Account]) -> Tuple[ContractReport, Optional[Account]]:
        """Walk one contract through the loop.

        Returns:
            The contract's report and the Account to use for the next contract
        """
        report = ContractReport(contract_id)
        logger.contract_start(contract_id)
        try:
            return self._process_contract(report, account)
        except RestorerError as e:
            return self._abandon(report, e), account

    def _process_contract(self, report: ContractReport,
                          account: Optional[Account]) -> Tuple[ContractReport, Optional[Account]]:
        contract_id = report.target
        report.enter(RestorationState.INSPECTING)
        inspection = self.inspector.inspect(contract_id)
        if inspection.status is InspectionStatus.EMPTY:
            logger.info(f"No footprint found for contract {contract_id}")
            return self._done(report, Disposition.NO_FOOTPRINT), account
        if inspection.status is InspectionStatus.QUERY_FAILED:
            return self._done(report, Disposition.QUERY_FAILED, inspection.error), account

        report.enter(RestorationState.DECIDING)
        self._log_entries(inspection.entries)
        verdict = evaluate(self.snapshot_seq, inspection.entries)
        logger.verdict(contract_id, verdict.name)
        if verdict is RestorationVerdict.HEALTHY:
            return self._done(report, Disposition.HEALTHY), account
        if self.dry_run:
            return self._done(report, Disposition.WOULD_RESTORE), account

        keys = expired_keys(self.snapshot_seq, inspection.entries)
        return self._restore(report, account, keys)

    def restore_for_transaction(self, envelope: Any, account: Optional[Account],
                                label: str = "transaction") -> Tuple[ContractReport, Optional[Account]]:
        """Simulate `envelope` and restore the footprint its preamble names."""
        report = ContractReport(label)
        logger.contract_start(label)
        try:
            return self._restore_for_transaction(report, envelope, account)
        except RestorerError as e:
            return self._abandon(report, e), account

    def _restore_for_transaction(self, report: ContractReport, envelope: Any,
                                 account: Optional[Account]) -> Tuple[ContractReport, Optional[Account]]:
        label = report.target
        report.enter(RestorationState.INSPECTING)
        try:
            simulation = self.gateway.simulate(envelope)
        except QueryFailed as e:
            logger.warning(f"Simulation of {label} failed: {e}")
            return self._done(report, Disposition.QUERY_FAILED, str(e)), account

        report.enter(RestorationState.DECIDING)
        preamble = simulation.restore_preamble
        if preamble is None:
            logger.verdict(label, RestorationVerdict.HEALTHY.name)
            return self._done(report, Disposition.HEALTHY), account

        logger.verdict(label, RestorationVerdict.NEEDS_RESTORATION.name)
        logger.info(f"Minimum resource fee needed: {preamble.min_resource_fee}")
        self._log_preamble(preamble)
        if self.dry_run:
            return self._done(report, Disposition.WOULD_RESTORE), account

        return self._restore(report, account, preamble.read_write, preamble)

    def _restore(self, report: ContractReport, account: Optional[Account],
                 keys: Sequence[FootprintKey],
                 preamble: Optional[RestorePreamble] = None) -> Tuple[ContractReport, Optional[Account]]:
        report.enter(RestorationState.BUILDING)
        if account is None:
            account = self._fetch_account()
            if account is None:
                return self._done(report, Disposition.QUERY_FAILED, "source account unavailable"), None

        try:
            restoration = self.builder.build(account, keys, preamble)
        except PrepareFailed as e:
            logger.warning(f"Restoration of {report.target} abandoned: {e}")
            return self._done(report, Disposition.PREPARE_FAILED, str(e)), account

        report.enter(RestorationState.SUBMITTING)
        outcome = self.submitter.submit(restoration)
        report.outcome = outcome
        if outcome.kind is OutcomeKind.INSUFFICIENT_BALANCE:
            logger.insufficient_balance(account.public_key)

        report.enter(RestorationState.COOLING)
        self.sleep(self.cooldown)

        # The attempt may have consumed the sequence number.
        refreshed = self._fetch_account()
        return self._done(report, outcome.disposition, outcome.detail), refreshed

    def _fetch_account(self) -> Optional[Account]:
        try:
            return self.gateway.fetch_account(self.signer.public_key)
        except QueryFailed as e:
            logger.warning(f"Could not refresh source account: {e}")
            return None

    def _log_entries(self, entries: Iterable[LedgerEntryState]) -> None:
        for entry in entries:
            verdict = needs_restoration(self.snapshot_seq, entry.live_until_ledger_seq)
            logger.entry_ttl(str(entry.key), entry.live_until_ledger_seq, self.snapshot_seq, verdict.name)

    def _log_preamble(self, preamble: RestorePreamble) -> None:
        for title, keys in (("Read-only", preamble.read_only), ("Read-write", preamble.read_write)):
            if keys:
                logger.info(f"{title} entries that may need restoration:")
                for index, key in enumerate(keys, start=1):
                    logger.info(f"  Entry {index}: {key}")

        if not preamble.keys:
            return
        inspection = self.inspector.inspect_keys(preamble.keys)
        if inspection.status is InspectionStatus.FOUND:
            self._log_entries(inspection.entries)

    def _abandon(self, report: ContractReport, error: RestorerError) -> ContractReport:
        disposition = next((d for kind, d in FAILURE_DISPOSITIONS if isinstance(error, kind)),
                           Disposition.QUERY_FAILED)
        logger.warning(f"Processing of {report.target} failed: {error}")
        return self._done(report, disposition, str(error))

    @staticmethod
    def _done(report: ContractReport, disposition: Disposition,
              detail: Optional[str] = None) -> ContractReport:
        logger.contract_done(report.target, disposition.name, detail)
        return report.finish(disposition, detail)
