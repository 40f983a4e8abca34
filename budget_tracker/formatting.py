"""Formatting utilities for currency, percentages and month labels."""

from __future__ import annotations

from datetime import date
from typing import Union


def escape_dollar_for_markdown(amount: float) -> str:
    """Format a dollar amount and escape the dollar sign for markdown rendering.

    Streamlit markdown treats ``$`` as a LaTeX delimiter, which turns the
    text between two amounts into italics.

    Example:
        >>> escape_dollar_for_markdown(1234.56)
        '\\\\$1,234.56'
    """
    return f"${amount:,.2f}".replace("$", "\\$")


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with thousands separators.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-100)
        '-$100.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    if not include_sign:
        return f"{amount:,.2f}"
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.2f}"


def format_signed_currency(amount: float, positive: str = '+$', negative: str = '-$') -> str:
    """Prefix the absolute amount with a sign, e.g. ``+$3,800.00`` or ``-$100.00``."""
    prefix = positive if amount >= 0 else negative
    return f"{prefix}{abs(amount):,.2f}"


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{value:.{decimals}f}%"


def month_label(month_key: str, long: bool = True) -> str:
    """Turn ``2024-08`` into ``August 2024`` (or ``Aug 2024``)."""
    year, month = (int(part) for part in month_key.split('-'))
    return date(year, month, 1).strftime('%B %Y' if long else '%b %Y')
