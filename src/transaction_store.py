"""
In-memory transaction store with read-only query operations.

The store holds transactions in insertion order. All queries are pure
computations over that sequence; the only mutators are ``add`` and
``remove_by_id``.
"""

import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from src.models.transaction import (
    CREDIT,
    DEBIT,
    MalformedRecordError,
    Transaction,
    parse_amount,
    parse_date,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[Transaction], bool]
DateLike = Union[str, date]

# Returned by dominant_type() when debit and credit counts match
EQUAL = "equal"


class DuplicateTransactionError(ValueError):
    """Error raised when adding an id that is already stored (strict mode)."""
    pass


class TransactionStore:
    """
    Ordered collection of transactions with aggregate and filter queries.

    Args:
        records: Initial transactions or raw dictionaries, added in order
        reject_duplicate_ids: When True, adding an id that already exists
            raises DuplicateTransactionError. When False (default) the
            record is accepted, a warning is logged and the id is
            remembered in ``duplicate_ids``.

    Example:
        >>> store = TransactionStore([
        ...     {"transaction_id": "1", "transaction_date": "2019-01-01",
        ...      "transaction_amount": 50, "transaction_type": "debit"},
        ... ])
        >>> store.total_amount()
        Decimal('50')
    """

    def __init__(
        self,
        records: Iterable[Union[Transaction, Mapping[str, Any]]] = (),
        reject_duplicate_ids: bool = False,
    ):
        self._records: List[Transaction] = []
        self._id_counts: Counter = Counter()
        self._reject_duplicate_ids = reject_duplicate_ids

        for record in records:
            self.add(record)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Union[Transaction, Mapping[str, Any]]],
        reject_duplicate_ids: bool = False,
    ) -> "TransactionStore":
        """
        Bulk-load a store, reporting the index of the first bad record.

        Raises:
            MalformedRecordError: If any record fails validation
        """
        store = cls(reject_duplicate_ids=reject_duplicate_ids)
        for index, record in enumerate(records):
            try:
                store.add(record)
            except MalformedRecordError as e:
                raise MalformedRecordError(f"Record {index}: {e}") from e
        return store

    # ============================================================
    # Mutators
    # ============================================================

    def add(self, record: Union[Transaction, Mapping[str, Any]]) -> Transaction:
        """
        Append a transaction to the end of the store.

        Args:
            record: A Transaction or a raw dictionary (see Transaction.from_dict)

        Returns:
            The stored Transaction

        Raises:
            MalformedRecordError: If a raw dictionary fails validation
            DuplicateTransactionError: If the id exists and the store is strict
        """
        transaction = record if isinstance(record, Transaction) else Transaction.from_dict(record)

        if transaction.id in self:
            if self._reject_duplicate_ids:
                raise DuplicateTransactionError(
                    f"Transaction id already stored: '{transaction.id}'"
                )
            logger.warning(f"Accepted duplicate transaction id '{transaction.id}'")

        self._records.append(transaction)
        self._id_counts[transaction.id] += 1
        return transaction

    def remove_by_id(self, transaction_id: str) -> bool:
        """
        Remove the first transaction with the given id.

        Returns:
            True if a transaction was removed, False if the id is absent
        """
        for index, transaction in enumerate(self._records):
            if transaction.id == transaction_id:
                del self._records[index]
                self._id_counts[transaction_id] -= 1
                if not self._id_counts[transaction_id]:
                    del self._id_counts[transaction_id]
                return True
        return False

    # ============================================================
    # Collection access
    # ============================================================

    def all(self) -> Tuple[Transaction, ...]:
        """Return every transaction in insertion order (read-only view)."""
        return tuple(self._records)

    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Return the first transaction with this id, or None."""
        return next((t for t in self._records if t.id == transaction_id), None)

    @property
    def duplicate_ids(self) -> Set[str]:
        """Ids that currently appear more than once."""
        return {tx_id for tx_id, n in self._id_counts.items() if n > 1}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._records))

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._id_counts

    # ============================================================
    # Aggregates
    # ============================================================

    def unique_types(self) -> Set[str]:
        return {t.type for t in self._records}

    def total_amount(self, predicate: Optional[Predicate] = None) -> Decimal:
        """
        Sum amounts over all transactions, or those matching ``predicate``.

        Amounts are summed as supplied (see Transaction.signed_amount for
        the direction-aware value).
        """
        return sum(
            (t.amount for t in self._select(predicate)),
            Decimal(0),
        )

    def total_amount_by_date(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        day: Optional[int] = None,
    ) -> Decimal:
        """Sum amounts for a year, month and/or day; None matches any value."""
        def matches(t: Transaction) -> bool:
            return (
                (year is None or t.date.year == year)
                and (month is None or t.date.month == month)
                and (day is None or t.date.day == day)
            )

        return self.total_amount(matches)

    def total_debit_amount(self) -> Decimal:
        return self.total_amount(lambda t: t.type == DEBIT)

    def average_amount(self) -> Decimal:
        """Mean amount, or exactly Decimal(0) for an empty store."""
        if not self._records:
            return Decimal(0)
        return self.total_amount() / len(self._records)

    def most_frequent_month(self, predicate: Optional[Predicate] = None) -> Optional[str]:
        """
        Return the "YYYY-MM" month with the most matching transactions.

        Ties go to the month that appears first in insertion order.
        Returns None when no transaction matches.
        """
        counts = Counter(t.month_key for t in self._select(predicate))
        if not counts:
            return None
        # Counter preserves first-seen order and most_common() is stable
        return counts.most_common(1)[0][0]

    def most_frequent_debit_month(self) -> Optional[str]:
        return self.most_frequent_month(lambda t: t.type == DEBIT)

    def dominant_type(self) -> str:
        """
        Compare debit and credit counts.

        Returns:
            "debit", "credit", or "equal". Other types are not counted.
        """
        debit = sum(1 for t in self._records if t.type == DEBIT)
        credit = sum(1 for t in self._records if t.type == CREDIT)
        if debit > credit:
            return DEBIT
        if credit > debit:
            return CREDIT
        return EQUAL

    def descriptions(self) -> List[str]:
        return [t.description for t in self._records]

    # ============================================================
    # Filters (order-preserving)
    # ============================================================

    def by_type(self, transaction_type: str) -> List[Transaction]:
        return self._select(lambda t: t.type == transaction_type)

    def by_merchant(self, merchant_name: str) -> List[Transaction]:
        return self._select(lambda t: t.merchant == merchant_name)

    def by_amount_range(self, minimum: Any, maximum: Any) -> List[Transaction]:
        """Transactions with minimum <= amount <= maximum."""
        low = parse_amount(minimum, bounded=False)
        high = parse_amount(maximum, bounded=False)
        return self._select(lambda t: low <= t.amount <= high)

    def by_date_range(self, start: DateLike, end: DateLike) -> List[Transaction]:
        """Transactions dated from ``start`` through ``end``, both included."""
        first = parse_date(start)
        last = parse_date(end)
        return self._select(lambda t: first <= t.date <= last)

    def before_date(self, cutoff: DateLike) -> List[Transaction]:
        """Transactions dated strictly before ``cutoff``."""
        limit = parse_date(cutoff)
        return self._select(lambda t: t.date < limit)

    def _select(self, predicate: Optional[Predicate]) -> List[Transaction]:
        if predicate is None:
            return list(self._records)
        return [t for t in self._records if predicate(t)]
