"""
Data models for transaction processing.

This module exports the typed transaction record and the helpers
used to build it from raw JSON data.
"""

from .transaction import (
    Transaction,
    Direction,
    MalformedRecordError,
    parse_amount,
    parse_date,
)

__all__ = [
    'Transaction',
    'Direction',
    'MalformedRecordError',
    'parse_amount',
    'parse_date',
]
