# utils/__init__.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Utility module exports

from .logger import LogLevel, configure_logging, get_logger
from .config import ConfigMissing, RestorerConfig, load_config
from .contract_list import ContractListFormatError, parse_contract_list, read_contract_list

__all__ = [
    "LogLevel",
    "configure_logging",
    "get_logger",
    "ConfigMissing",
    "RestorerConfig",
    "load_config",
    "ContractListFormatError",
    "parse_contract_list",
    "read_contract_list",
]
