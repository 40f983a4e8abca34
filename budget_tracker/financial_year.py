"""Financial-year helpers.

A financial year runs from July 1 to June 30 and is labelled by the two
calendar years it straddles, e.g. ``"2024-2025"``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Tuple

from .models import Transaction

FY_START_MONTH = 7


def financial_year_for(day: date) -> str:
    """Return the label of the financial year containing ``day``."""
    start = day.year if day.month >= FY_START_MONTH else day.year - 1
    return f"{start}-{start + 1}"


def current_financial_year(today: Optional[date] = None) -> str:
    return financial_year_for(today or date.today())


def parse_label(label: str) -> Tuple[int, int]:
    """Split a ``"Y1-Y2"`` label into its start and end years.

    Raises:
        ValueError: If the label is malformed or does not span consecutive years.
    """
    parts = str(label).strip().split('-')
    if len(parts) != 2:
        raise ValueError(f"Invalid financial year label '{label}'")
    try:
        start, end = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid financial year label '{label}'") from None
    if end != start + 1:
        raise ValueError(f"Financial year '{label}' must span consecutive years")
    return start, end


def resolve_range(label: str) -> Tuple[date, date]:
    """Return the inclusive ``(July 1, June 30)`` bounds of a financial year."""
    start, end = parse_label(label)
    return date(start, FY_START_MONTH, 1), date(end, FY_START_MONTH - 1, 30)


def contains(label: str, day: date) -> bool:
    start, end = resolve_range(label)
    return start <= day <= end


def shift_financial_year(label: str, years: int) -> str:
    start, _ = parse_label(label)
    return f"{start + years}-{start + years + 1}"


def available_financial_years(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
) -> List[str]:
    """List selectable financial years.

    Always includes the current and next financial year relative to ``today``,
    plus every year that holds at least one transaction.
    """
    current = current_financial_year(today)
    years = {current, shift_financial_year(current, 1)}
    years.update(financial_year_for(txn.date) for txn in transactions)
    return sorted(years)
