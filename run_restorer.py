#!/usr/bin/env python3
# run_restorer.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Command-line interface for footprint restoration runs

import sys
import argparse
import math
from pathlib import Path
from typing import Optional, Sequence

from stellar_sdk.exceptions import Ed25519SecretSeedInvalidError

from ledger.exceptions import QueryFailed, TransactionFormatError
from ledger.gateway import StellarRpcGateway
from ledger.signer import KeypairSigner
from logic.orchestrator import RestorationOrchestrator
from model.restoration import RunReport
from utils.config import ConfigMissing, RestorerConfig, load_config
from utils.contract_list import ContractListFormatError, read_contract_list
from utils.fsm_visualizer import visualize_restoration_run
from utils.logger import configure_logging, get_logger

EXIT_OK = 0
EXIT_CONFIG_MISSING = 1
EXIT_INPUT_ERROR = 2
EXIT_SETUP_FAILED = 3
EXIT_INTERRUPTED = 4


def cooldown_seconds(value: str) -> float:
    """argparse type for --cooldown: a finite, non-negative number of seconds."""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid cooldown {value!r}: not a number")
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError(f"invalid cooldown {value!r}: must be finite and non-negative")
    return seconds


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser for command line interface.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Restore expired Soroban contract storage footprints",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_restorer.py -c tokenList.json
  python run_restorer.py -c tokenList.json --dry-run --debug
  python run_restorer.py --transaction-xdr AAAAAgAAAA...

Environment:
  RPC_URL, PRIVATE_KEY (required); NETWORK_PASSPHRASE, RESTORE_COOLDOWN_SECONDS,
  RESTORE_BASE_FEE, RESTORE_TX_TIMEOUT (optional). A .env file is honoured.
        """,
    )

    parser.add_argument(
        "-c", "--contracts", type=Path, default=Path("tokenList.json"),
        help="Path to the JSON token list of contracts to check",
    )

    parser.add_argument(
        "--transaction-xdr", metavar="XDR",
        help="Restore the archived footprint this transaction envelope needs instead",
    )

    parser.add_argument(
        "--dry-run", action="store_true",
        help="Report what would be restored without building or submitting",
    )

    parser.add_argument(
        "--cooldown", type=cooldown_seconds, default=None,
        help="Seconds to pause after each submission (overrides RESTORE_COOLDOWN_SECONDS)",
    )

    parser.add_argument(
        "--env-file", type=Path, default=None, help="Load environment from this .env file"
    )

    parser.add_argument(
        "--visualize", action="store_true", help="Render the finished run with Graphviz"
    )

    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only print warnings and errors"
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output (overrides --quiet)"
    )

    return parser


def build_orchestrator(config: RestorerConfig, cooldown: Optional[float] = None,
                       dry_run: bool = False) -> RestorationOrchestrator:
    """Wire the Soroban RPC gateway and keypair signer from `config`.

    Raises:
        ConfigMissing: If the private key is not a valid secret seed
    """
    try:
        signer = KeypairSigner.from_secret(config.private_key)
    except Ed25519SecretSeedInvalidError as e:
        raise ConfigMissing(f"PRIVATE_KEY is not a valid secret seed: {e}")

    gateway = StellarRpcGateway(config.rpc_url, config.network_passphrase)
    return RestorationOrchestrator.create(
        gateway,
        signer,
        base_fee=config.base_fee,
        timeout=config.tx_timeout,
        cooldown=config.cooldown if cooldown is None else cooldown,
        dry_run=dry_run,
    )


def execute(args: argparse.Namespace) -> RunReport:
    """Run the restoration described by parsed command line arguments."""
    config = load_config(env_file=args.env_file)
    orchestrator = build_orchestrator(config, args.cooldown, args.dry_run)

    if args.transaction_xdr:
        envelope = orchestrator.gateway.decode_envelope(args.transaction_xdr)
        return orchestrator.run_transaction(envelope)

    contracts = read_contract_list(str(args.contracts))
    return orchestrator.run(contracts)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for footprint restoration.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(quiet=args.quiet, debug=args.debug)
    logger = get_logger()

    try:
        report = execute(args)
        if args.visualize:
            visualize_restoration_run(report)
        return EXIT_OK

    except ConfigMissing as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_MISSING

    except (ContractListFormatError, TransactionFormatError) as e:
        logger.error(f"Input error: {e}")
        return EXIT_INPUT_ERROR

    except QueryFailed as e:
        logger.error(f"Setup failed: {e}")
        return EXIT_SETUP_FAILED

    except KeyboardInterrupt:
        logger.error("Restoration interrupted by user")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
