# utils/config.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Environment-sourced run configuration

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from stellar_sdk import Network

from ledger.exceptions import RestorerError
from utils.logger import get_logger

DEFAULT_COOLDOWN_SECONDS = 10.0
DEFAULT_BASE_FEE = 100
DEFAULT_TX_TIMEOUT = 30


class ConfigMissing(RestorerError):
    """Exception raised when a required setting is absent or malformed."""

    pass


@dataclass(frozen=True)
class RestorerConfig:
    """Settings for one restoration run.

    Attributes:
        rpc_url: Soroban RPC endpoint
        private_key: Secret seed of the signing account
        network_passphrase: Network the endpoint serves
        cooldown: Seconds to pause after each submission
        base_fee: Nominal fee of restoration transactions, in stroops
        tx_timeout: Validity window of restoration transactions, in seconds
    """

    rpc_url: str
    private_key: str
    network_passphrase: str = Network.PUBLIC_NETWORK_PASSPHRASE
    cooldown: float = DEFAULT_COOLDOWN_SECONDS
    base_fee: int = DEFAULT_BASE_FEE
    tx_timeout: int = DEFAULT_TX_TIMEOUT

    def __repr__(self) -> str:
        return (f"RestorerConfig(rpc_url={self.rpc_url!r}, private_key='***', "
                f"network_passphrase={self.network_passphrase!r}, cooldown={self.cooldown}, "
                f"base_fee={self.base_fee}, tx_timeout={self.tx_timeout})")


def _required(env: Mapping[str, str], name: str, what: str) -> str:
    value = (env.get(name) or "").strip()
    if not value:
        raise ConfigMissing(f"Please provide {what} ({name})")
    return value


def _number(env: Mapping[str, str], name: str, default, kind=int):
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigMissing(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(value):
        raise ConfigMissing(f"{name} must be a finite number, got {raw!r}")
    if value < 0:
        raise ConfigMissing(f"{name} must not be negative, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None,
                env_file: Optional[Path] = None) -> RestorerConfig:
    """Build the run configuration from environment variables.

    Args:
        env: Mapping to read instead of os.environ (tests)
        env_file: Optional .env file loaded into os.environ first

    Returns:
        Validated RestorerConfig

    Raises:
        ConfigMissing: If PRIVATE_KEY or RPC_URL is absent, or a number is malformed
    """
    logger = get_logger()
    if env is None:
        if env_file is not None and not env_file.exists():
            raise ConfigMissing(f"Environment file not found: {env_file}")
        if load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True)):
            logger.debug(f"Loaded environment from {env_file or '.env'}")
        env = os.environ

    private_key = _required(env, "PRIVATE_KEY", "a private key")
    rpc_url = _required(env, "RPC_URL", "a RPC URL")

    return RestorerConfig(
        rpc_url=rpc_url,
        private_key=private_key,
        network_passphrase=(env.get("NETWORK_PASSPHRASE") or "").strip()
        or Network.PUBLIC_NETWORK_PASSPHRASE,
        cooldown=_number(env, "RESTORE_COOLDOWN_SECONDS", DEFAULT_COOLDOWN_SECONDS, float),
        base_fee=_number(env, "RESTORE_BASE_FEE", DEFAULT_BASE_FEE),
        tx_timeout=_number(env, "RESTORE_TX_TIMEOUT", DEFAULT_TX_TIMEOUT),
    )
