"""
Ledger of manually entered transactions.

Backs the "add transaction" form: each submitted entry gets a short
random id and the current timestamp, and the running total is
recomputed from the store on every call. Rendering is left to the
caller; ``rows()`` returns plain values for a table.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, List, Optional

from src.models.transaction import MalformedRecordError, Transaction, parse_amount
from src.transaction_store import TransactionStore

logger = logging.getLogger(__name__)

ID_LENGTH = 6
NO_SELECTION_TEXT = "Select a transaction from the table"


def generate_id() -> str:
    """Return a short random hex id (6 characters)."""
    return uuid.uuid4().hex[:ID_LENGTH]


@dataclass(frozen=True)
class LedgerRow:
    """One display row of the ledger table."""
    id: str
    date: str
    category: str
    description: str
    style: str  # "positive" or "negative"


class Ledger:
    """
    Form-driven ledger built on a TransactionStore.

    Args:
        store: Backing store (a new empty one by default)
        id_factory: Callable producing new ids, replaceable in tests
        clock: Callable returning the current datetime
    """

    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store if store is not None else TransactionStore(reject_duplicate_ids=True)
        self._id_factory = id_factory
        self._clock = clock

    def add_entry(
        self,
        amount: Any,
        category: str,
        description: str,
        when: Optional[datetime] = None,
    ) -> Transaction:
        """
        Validate form input and append a new entry.

        Args:
            amount: Signed amount (number or numeric string)
            category: Category label chosen in the form
            description: Free text, surrounding whitespace is stripped
            when: Timestamp for the entry (defaults to now)

        Returns:
            The stored Transaction

        Raises:
            MalformedRecordError: If any field is empty or not text, or the
                amount is invalid
        """
        missing = [
            name for name, value in (
                ("amount", amount),
                ("category", category),
                ("description", description),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise MalformedRecordError(f"Please fill in all fields: {missing}")

        for name, value in (("category", category), ("description", description)):
            if not isinstance(value, str):
                raise MalformedRecordError(
                    f"Field '{name}' must be text, got {type(value).__name__}"
                )

        timestamp = (when or self._clock()).replace(microsecond=0)
        transaction = Transaction(
            id=self._id_factory(),
            date=timestamp.date(),
            time=timestamp.time(),
            amount=parse_amount(amount),
            type=category.strip(),
            description=description.strip(),
        )
        self.store.add(transaction)
        logger.debug(f"Ledger entry {transaction.id} added ({transaction.amount})")
        return transaction

    def remove_entry(self, entry_id: str) -> bool:
        """Remove an entry; False if no entry has that id."""
        return self.store.remove_by_id(entry_id)

    def total(self) -> Decimal:
        return self.store.total_amount()

    def formatted_total(self) -> str:
        """Running total with two decimals, e.g. "-12.50"."""
        return f"{self.total():.2f}"

    def rows(self) -> List[LedgerRow]:
        """Table rows in entry order; non-negative amounts are "positive"."""
        rows = []
        for transaction in self.store:
            entry_id, date_text, category, short_description = transaction.to_ledger_row()
            rows.append(LedgerRow(
                id=entry_id,
                date=date_text,
                category=category,
                description=short_description,
                style="positive" if transaction.amount >= 0 else "negative",
            ))
        return rows

    def full_description(self, entry_id: Optional[str]) -> str:
        """Full description of the selected entry, or the placeholder text."""
        if entry_id is None:
            return NO_SELECTION_TEXT
        transaction = self.store.find_by_id(entry_id)
        if transaction is None:
            return NO_SELECTION_TEXT
        return transaction.description
