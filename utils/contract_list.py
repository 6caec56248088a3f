# utils/contract_list.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# JSON token list reader for the contracts to keep alive

import json
from pathlib import Path
from typing import Any, List

from ledger.exceptions import RestorerError
from utils.logger import get_logger


class ContractListFormatError(RestorerError):
    """Exception raised when a contract list file is missing or malformed."""

    pass


def _contract_of(item: Any, position: int) -> str:
    if isinstance(item, str):
        contract = item
    elif isinstance(item, dict) and isinstance(item.get("contract"), str):
        contract = item["contract"]
    else:
        raise ContractListFormatError(f"Entry {position} has no contract id: {item!r}")
    contract = contract.strip()
    if not contract:
        raise ContractListFormatError(f"Entry {position} has an empty contract id")
    return contract


def parse_contract_list(document: Any) -> List[str]:
    """Extract contract ids from a parsed token list.

    Accepted shapes:
        {"assets": [{"contract": "C..."}, ...]}
        [{"contract": "C..."}, ...]
        ["C...", ...]

    Duplicates are dropped, first occurrence wins.

    Raises:
        ContractListFormatError: If the document has none of the shapes above
    """
    if isinstance(document, dict):
        if "assets" not in document:
            raise ContractListFormatError("Token list object must contain an 'assets' array")
        items = document["assets"]
    else:
        items = document
    if not isinstance(items, list):
        raise ContractListFormatError("Contract list must be an array")

    contracts: List[str] = []
    seen = set()
    for position, item in enumerate(items, start=1):
        contract = _contract_of(item, position)
        if contract not in seen:
            seen.add(contract)
            contracts.append(contract)
    return contracts


def read_contract_list(filepath: str) -> List[str]:
    """Read contract ids from a JSON token list file.

    Args:
        filepath: Path to the token list

    Returns:
        Contract ids in file order

    Raises:
        ContractListFormatError: If the file is missing, not JSON or malformed
    """
    logger = get_logger()
    path = Path(filepath)

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ContractListFormatError(f"Contract list not found: {filepath}")
    except OSError as e:
        raise ContractListFormatError(f"Could not read contract list {filepath}: {e}")
    except json.JSONDecodeError as e:
        raise ContractListFormatError(f"Contract list is not valid JSON: {e}")

    contracts = parse_contract_list(document)
    logger.debug(f"Read {len(contracts)} contract(s) from {filepath}")
    return contracts
