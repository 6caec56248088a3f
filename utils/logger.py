# utils/logger.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Logging utility for restoration runs with configurable levels

import logging
import sys
from enum import Enum
from typing import Dict, Optional

ROOT_LOGGER_NAME = "footprint_restorer"


class LogLevel(Enum):
    """Log levels for restoration runs."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class RestorerLogger:
    """Restoration logger with domain helpers for each step of a run.

    Only the root instance owns a handler; module loggers are its children
    and propagate to it, so one level setting governs the whole run.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME, level: LogLevel = LogLevel.INFO):
        self.logger = logging.getLogger(name)
        if name != ROOT_LOGGER_NAME:
            return

        self.logger.setLevel(level.value)
        self.logger.handlers.clear()
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level.value)
        handler.setFormatter(RestorerFormatter())
        self.logger.addHandler(handler)
        self.logger.propagate = False

    def set_level(self, level: LogLevel):
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    def debug(self, message: str, **kwargs):
        """Raw responses, keys and per-entry TTLs."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """A contract was skipped; the run goes on."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    # Restoration events
    def run_start(self, public_key: str, ledger_seq: int, contract_count: Optional[int] = None):
        self.info("=== Starting Restoration Run ===")
        self.info(f"Source account: {public_key}")
        self.info(f"Ledger snapshot: {ledger_seq}")
        if contract_count is not None:
            self.info(f"Contracts to check: {contract_count}")

    def contract_start(self, contract_id: str):
        self.info(f"Processing contract: {contract_id}")

    def entry_ttl(self, label: str, live_until: Optional[int], snapshot_seq: int, verdict: str):
        self.debug(f"    🔍 {label}: live until {live_until}, snapshot {snapshot_seq} → {verdict}")

    def verdict(self, contract_id: str, verdict: str):
        if verdict == "NEEDS_RESTORATION":
            self.info(f"🟠 {contract_id} should be restored")
        else:
            self.info(f"🟢 {contract_id} is live, nothing to do")

    def transaction_built(self, fee: int, fee_mode: str, key_count: int):
        self.debug(f"    🔧 Built restoration ({fee_mode} fee {fee}) for {key_count} key(s)")

    def submission_response(self, raw: object):
        self.info(f"🚀 Submission response: {raw}")

    def insufficient_balance(self, public_key: str):
        """Funding notice; the account must be topped up before the next run."""
        self.error(
            f"💸 Insufficient balance to restore footprint. Please fund the account {public_key}."
        )

    def contract_done(self, contract_id: str, disposition: str, detail: Optional[str] = None):
        detail_str = f" ({detail})" if detail else ""
        self.debug(f"    ✅ {contract_id} done: {disposition}{detail_str}")

    def run_summary(self, counts: dict):
        summary = ", ".join(f"{name}={count}" for name, count in counts.items() if count)
        self.info(f"\n>>> RUN SUMMARY: {summary or 'nothing processed'} <<<")


class RestorerFormatter(logging.Formatter):
    """Bare messages for progress output, a level tag on everything else."""

    PREFIXES = {
        logging.DEBUG: "[DEBUG] ",
        logging.WARNING: "[WARN] ",
        logging.ERROR: "[ERROR] ",
        logging.CRITICAL: "[ERROR] ",
    }

    def format(self, record):
        return f"{self.PREFIXES.get(record.levelno, '')}{record.getMessage()}"


_loggers: Dict[str, RestorerLogger] = {}


def get_logger(name: Optional[str] = None) -> RestorerLogger:
    """Get the restorer logger for `name`.

    Args:
        name: Module name; the logger becomes a child of the shared root.
            The root itself is returned when omitted.

    Returns:
        RestorerLogger instance, cached per name
    """
    if ROOT_LOGGER_NAME not in _loggers:
        _loggers[ROOT_LOGGER_NAME] = RestorerLogger(ROOT_LOGGER_NAME)
    full_name = f"{ROOT_LOGGER_NAME}.{name}" if name and name != ROOT_LOGGER_NAME else ROOT_LOGGER_NAME
    if full_name not in _loggers:
        _loggers[full_name] = RestorerLogger(full_name)
    return _loggers[full_name]


def set_log_level(level: LogLevel):
    get_logger().set_level(level)


def configure_logging(quiet: bool = False, debug: bool = False):
    """Configure logging from command line flags.

    Args:
        quiet: Only warnings and errors
        debug: Enable debug output (overrides quiet)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif quiet:
        set_log_level(LogLevel.WARNING)
    else:
        set_log_level(LogLevel.INFO)
