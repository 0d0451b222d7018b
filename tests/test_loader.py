"""
Unit tests for the JSON transaction loader.

Run with: pytest tests/test_loader.py -v
"""

import json
import sys
from pathlib import Path
from decimal import Decimal

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.loader import load_transactions, load_store, TransactionFileError
from src.models.transaction import MalformedRecordError
from src.transaction_store import DuplicateTransactionError

SAMPLE_FILE = Path(__file__).parent.parent / "data" / "transactions.json"


def write_json(tmp_path, payload, name="transactions.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadTransactions:
    """Tests for reading raw records."""

    def test_reads_array(self, tmp_path):
        path = write_json(tmp_path, [{"transaction_id": "1"}])
        assert load_transactions(path) == [{"transaction_id": "1"}]

    def test_accepts_string_path(self, tmp_path):
        path = write_json(tmp_path, [])
        assert load_transactions(str(path)) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(TransactionFileError, match="not found"):
            load_transactions(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(TransactionFileError, match="Invalid JSON"):
            load_transactions(path)

    def test_non_array_document(self, tmp_path):
        path = write_json(tmp_path, {"transactions": []})

        with pytest.raises(TransactionFileError, match="Expected a JSON array"):
            load_transactions(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"merchant_name": "Caf\xe9 \xff"}]')

        with pytest.raises(TransactionFileError, match="not valid UTF-8"):
            load_transactions(path)

    def test_directory_path(self, tmp_path):
        with pytest.raises(TransactionFileError, match="Cannot read"):
            load_transactions(tmp_path)


class TestLoadStore:
    """Tests for building a store from a file."""

    def test_sample_file(self):
        store = load_store(SAMPLE_FILE)

        assert len(store) == 5
        assert store.total_amount() == Decimal("1520.50")
        assert store.most_frequent_month() == "2019-01"
        assert store.dominant_type() == "debit"
        assert [t.id for t in store.by_amount_range(90, 100)] == ["1", "4"]

    def test_malformed_record_aborts_load(self, tmp_path):
        path = write_json(tmp_path, [
            {
                "transaction_id": "1",
                "transaction_date": "2019-01-01",
                "transaction_amount": "oops",
                "transaction_type": "debit",
            },
        ])

        with pytest.raises(MalformedRecordError, match="Record 0"):
            load_store(path)

    def test_strict_duplicates(self, tmp_path):
        row = {
            "transaction_id": "1",
            "transaction_date": "2019-01-01",
            "transaction_amount": 1,
            "transaction_type": "debit",
        }
        path = write_json(tmp_path, [row, row])

        assert len(load_store(path)) == 2
        with pytest.raises(DuplicateTransactionError):
            load_store(path, reject_duplicate_ids=True)
