"""Transaction and category records plus the parsers used at the entry boundary.

Every value that reaches the stores passes through one of the ``parse_*``
helpers below, so the aggregation layer can assume well-typed records:
dates are :class:`datetime.date`, amounts are non-negative floats and the
transaction type is exactly ``Income`` or ``Expense``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime
from typing import Any, Dict

import pandas as pd

from .errors import ValidationError

INCOME = 'Income'
EXPENSE = 'Expense'
TRANSACTION_TYPES = (INCOME, EXPENSE)


@dataclass(frozen=True)
class Transaction:
    id: int
    date: date
    description: str
    amount: float
    category: str
    type: str

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def month_key(self) -> str:
        return f"{self.date.year}-{self.date.month:02d}"

    def with_changes(self, **changes: Any) -> 'Transaction':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        """Rebuild a transaction from its serialised form, re-validating every field."""
        return cls(
            id=int(data['id']),
            date=parse_date(data.get('date')),
            description=clean_text(data.get('description')),
            amount=parse_amount(data.get('amount')),
            category=clean_text(data.get('category')),
            type=parse_type(data.get('type')),
        )


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    type: str
    budget: float = 0.0

    def with_changes(self, **changes: Any) -> 'Category':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        return cls(
            id=int(data['id']),
            name=clean_text(data.get('name')),
            type=parse_type(data.get('type')),
            budget=parse_budget(data.get('budget')),
        )


def clean_text(value: Any) -> str:
    if value is None:
        return ''
    if not isinstance(value, str) and pd.isna(value):
        return ''
    return str(value).strip()


def _to_number(value: Any) -> float:
    """Convert textual amount representations into floats (NaN when unparseable)."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip()
        # Handle accounting negatives e.g. (123.45)
        if cleaned.startswith("(") and cleaned.endswith(")"):
            cleaned = f"-{cleaned[1:-1]}"
        # Remove common currency markers
        value = cleaned.replace("$", "").replace(",", "").strip()
    number = pd.to_numeric(pd.Series([value], dtype=object), errors='coerce').iloc[0]
    return math.nan if pd.isna(number) else float(number)


def parse_amount(value: Any) -> float:
    """Parse a transaction amount and return its positive magnitude.

    Raises:
        ValidationError: If the value is blank, non-numeric or not finite.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Amount is required")
    number = _to_number(value)
    if not math.isfinite(number):
        raise ValidationError(f"Amount '{value}' is not a number")
    return abs(number)


def parse_budget(value: Any) -> float:
    """Parse a category budget; blank or unparseable input becomes 0."""
    if value is None:
        return 0.0
    number = _to_number(value)
    if not math.isfinite(number):
        return 0.0
    return abs(number)


def parse_date(value: Any) -> date:
    """Parse a calendar date from a date, datetime, Timestamp or string.

    Raises:
        ValidationError: If the value is blank or not a valid calendar date.
    """
    if value is None or value is pd.NaT or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Date is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = pd.to_datetime(value, errors='coerce')
    if pd.isna(parsed):
        raise ValidationError(f"Date '{value}' is not a valid date")
    return parsed.date()


def parse_type(value: Any) -> str:
    """Return ``Income`` or ``Expense``; anything else is rejected."""
    text = value.strip() if isinstance(value, str) else value
    if text not in TRANSACTION_TYPES:
        raise ValidationError(f"Type must be 'Income' or 'Expense', got '{value}'")
    return text


def parse_category_name(value: Any) -> str:
    name = clean_text(value)
    if not name:
        raise ValidationError("Category name is required")
    return name
