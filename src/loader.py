"""
JSON loader for transaction exports.

Reads a file shaped as an array of transaction objects and hands the
records to a TransactionStore. The store itself never touches files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from src.transaction_store import TransactionStore

logger = logging.getLogger(__name__)


class TransactionFileError(Exception):
    """Error raised when the transactions file cannot be read or is not an array."""
    pass


def load_transactions(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read raw transaction records from a JSON file.

    Args:
        path: Path to a UTF-8 JSON file containing an array of objects

    Returns:
        The decoded list of records (not validated)

    Raises:
        TransactionFileError: If the file is missing or unreadable, not UTF-8
            JSON, or not an array
    """
    file_path = Path(path)

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise TransactionFileError(f"Transactions file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise TransactionFileError(f"Invalid JSON in {file_path}: {e}")
    except UnicodeDecodeError as e:
        raise TransactionFileError(f"{file_path} is not valid UTF-8: {e}")
    except OSError as e:
        raise TransactionFileError(f"Cannot read {file_path}: {e}")

    if not isinstance(data, list):
        raise TransactionFileError(
            f"Expected a JSON array in {file_path}, got {type(data).__name__}"
        )

    logger.info(f"Loaded {len(data)} record(s) from {file_path.name}")
    return data


def load_store(path: Union[str, Path], reject_duplicate_ids: bool = False) -> TransactionStore:
    """
    Build a TransactionStore from a JSON file.

    Raises:
        TransactionFileError: If the file cannot be read
        MalformedRecordError: If any record is invalid (message names its index)
    """
    records = load_transactions(path)
    return TransactionStore.from_records(records, reject_duplicate_ids=reject_duplicate_ids)
