"""
Transaction dataclass for financial transaction records.

This module provides a typed, validated data structure for transactions
loaded from JSON exports or entered through the ledger form.

Two input shapes are understood:
- Export shape: transaction_id, transaction_date, transaction_amount,
  transaction_type, merchant_name, transaction_description
- Ledger shape: id, date, amount, category, description

Direction mapping:
    The stored ``amount`` is kept exactly as supplied. ``signed_amount`` is
    the canonical signed view: "debit" is always negative, "credit" is
    always positive, and any other type keeps the sign it was given.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Mapping, Optional, Union
import logging

logger = logging.getLogger(__name__)

# Type alias for the two recognized direction labels
Direction = Literal["debit", "credit"]

DEBIT = "debit"
CREDIT = "credit"

# Number of words kept in the ledger table description column
SHORT_DESCRIPTION_WORDS = 4

# Amounts must stay below 10**MAX_AMOUNT_DIGITS in magnitude so sums cannot
# overflow the Decimal context
MAX_AMOUNT_DIGITS = 15


class MalformedRecordError(ValueError):
    """Error raised when a record is missing fields or has a bad amount/date."""
    pass


def parse_amount(value: Any, bounded: bool = True) -> Decimal:
    """
    Convert a number or numeric string into a finite Decimal.

    Args:
        value: int, float, Decimal or numeric string ("12.50", " -3 ")
        bounded: Reject magnitudes of 10**MAX_AMOUNT_DIGITS and above
            (query bounds pass False)

    Returns:
        Decimal value

    Raises:
        MalformedRecordError: If the value is not a finite number or is too large
    """
    if isinstance(value, bool) or value is None:
        raise MalformedRecordError(f"Invalid amount: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # str() avoids binary float noise: 0.1 -> Decimal('0.1')
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise MalformedRecordError(f"Invalid amount: {value!r}")
    else:
        raise MalformedRecordError(f"Invalid amount: {value!r}")

    _check_amount(amount, value, bounded)
    return amount


def _check_amount(amount: Decimal, original: Any, bounded: bool = True) -> None:
    if not amount.is_finite():
        raise MalformedRecordError(f"Amount must be finite, got {original!r}")
    if bounded and amount and amount.adjusted() >= MAX_AMOUNT_DIGITS:
        raise MalformedRecordError(f"Amount out of range, got {original!r}")


def parse_date(value: Union[str, date]) -> date:
    """
    Normalize a date argument to a ``datetime.date``.

    Accepts ``date``, ``datetime`` (time part dropped) or an ISO string
    ("2019-01-01", "2019-01-01T10:30:00", "2019-01-01 10:30:00").

    Raises:
        MalformedRecordError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return _parse_timestamp(value)[0]


def _parse_timestamp(value: Any) -> tuple[date, Optional[time]]:
    """Split an ISO date/datetime string into its date and optional time."""
    if isinstance(value, datetime):
        return value.date(), value.time()
    if isinstance(value, date):
        return value, None
    if not isinstance(value, str) or not value.strip():
        raise MalformedRecordError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text), None
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedRecordError(
            f"Invalid date format: '{value}'. Expected: YYYY-MM-DD[ HH:MM:SS]"
        )
    return parsed.date(), parsed.time()


@dataclass(frozen=True)
class Transaction:
    """
    Represents a single financial transaction.

    Instances are immutable once created, so a store can hand them out
    without copying.

    Attributes:
        id: Opaque identifier, expected to be unique within a store
        date: Calendar date of the transaction
        amount: Amount as supplied by the source (Decimal)
        type: Category label ("debit", "credit" or a free-form category)
        merchant: Merchant name (optional)
        description: Free-form description (optional)
        time: Time of day when the source provides one

    Example:
        >>> tx = Transaction.from_dict({
        ...     "transaction_id": "1",
        ...     "transaction_date": "2019-01-01",
        ...     "transaction_amount": "100.00",
        ...     "transaction_type": "debit",
        ...     "merchant_name": "SuperMart",
        ...     "transaction_description": "Groceries",
        ... })
        >>> tx.signed_amount
        Decimal('-100.00')
        >>> tx.month_key
        '2019-01'
    """

    id: str
    date: date
    amount: Decimal
    type: str
    merchant: str = ""
    description: str = ""
    time: Optional[time] = None

    def __post_init__(self):
        """
        Validation that runs after __init__.

        A transaction that gets past here can always be summed: no
        missing ids, no NaN amounts.
        """
        self._validate_id()
        self._validate_type()
        self._validate_date()
        self._validate_amount()

    def _validate_id(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise MalformedRecordError("Transaction id cannot be empty")

    def _validate_type(self) -> None:
        if not isinstance(self.type, str) or not self.type:
            raise MalformedRecordError("Transaction type cannot be empty")

    def _validate_date(self) -> None:
        if not isinstance(self.date, date) or isinstance(self.date, datetime):
            raise MalformedRecordError(
                f"Transaction date must be a date, got {self.date!r}"
            )

    def _validate_amount(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise MalformedRecordError(
                f"Transaction amount must be a Decimal, got {self.amount!r}"
            )
        _check_amount(self.amount, self.amount)

    # ============================================================
    # Computed Properties
    # ============================================================

    @property
    def direction(self) -> Direction:
        """
        Return "debit" or "credit".

        Taken from ``type`` when it is one of the two labels, otherwise
        from the sign of ``amount`` (negative means money out).
        """
        if self.type == DEBIT:
            return DEBIT
        if self.type == CREDIT:
            return CREDIT
        return DEBIT if self.amount < 0 else CREDIT

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by ``type`` applied."""
        if self.type == DEBIT:
            return -abs(self.amount)
        if self.type == CREDIT:
            return abs(self.amount)
        return self.amount

    @property
    def is_expense(self) -> bool:
        return self.direction == DEBIT

    @property
    def month_key(self) -> str:
        """Calendar month as "YYYY-MM", used for monthly grouping."""
        return f"{self.date.year:04d}-{self.date.month:02d}"

    @property
    def short_description(self) -> str:
        """First four words of the description, for table display."""
        return " ".join(self.description.split(" ")[:SHORT_DESCRIPTION_WORDS])

    @property
    def timestamp_text(self) -> str:
        """Date, plus time when known, as "YYYY-MM-DD[ HH:MM:SS]"."""
        if self.time is None:
            return self.date.isoformat()
        return f"{self.date.isoformat()} {self.time.strftime('%H:%M:%S')}"

    # ============================================================
    # Conversion Methods
    # ============================================================

    def to_ledger_row(self) -> list[str]:
        """
        Convert to a row for the ledger table.

        Column order: Id | Date | Category | Description (short)
        """
        return [
            self.id,
            self.timestamp_text,
            self.type,
            self.short_description,
        ]

    def to_dict(self) -> dict[str, str]:
        """
        Convert to the export JSON shape.

        The amount is rendered as a string so the Decimal is not rounded
        through float.
        """
        return {
            "transaction_id": self.id,
            "transaction_date": self.timestamp_text,
            "transaction_amount": str(self.amount),
            "transaction_type": self.type,
            "merchant_name": self.merchant,
            "transaction_description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """
        Create a Transaction from an export or ledger dictionary.

        Export keys take precedence when both shapes are present.

        Args:
            data: Dictionary with transaction fields

        Returns:
            Transaction instance

        Raises:
            MalformedRecordError: If required fields are missing or invalid
        """
        if not isinstance(data, Mapping):
            raise MalformedRecordError(
                f"Transaction record must be an object, got {type(data).__name__}"
            )

        fields = {
            "id": _first(data, "transaction_id", "id"),
            "date": _first(data, "transaction_date", "date"),
            "amount": _first(data, "transaction_amount", "amount"),
            "type": _first(data, "transaction_type", "category", "type"),
        }
        missing = [name for name, value in fields.items() if value in (None, "")]
        if missing:
            raise MalformedRecordError(f"Missing required fields: {missing}")

        record_date, record_time = _parse_timestamp(fields["date"])

        return cls(
            id=str(fields["id"]),
            date=record_date,
            time=record_time,
            amount=parse_amount(fields["amount"]),
            type=str(fields["type"]),
            merchant=str(_first(data, "merchant_name", "merchant") or ""),
            description=str(_first(data, "transaction_description", "description") or ""),
        )


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in ``data``."""
    for key in keys:
        if key in data:
            return data[key]
    return None
