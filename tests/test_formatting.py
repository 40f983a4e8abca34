"""Tests for the currency, percent and month label helpers."""

from __future__ import annotations

from budget_tracker.formatting import (
    escape_dollar_for_markdown,
    format_currency,
    format_percent,
    format_signed_currency,
    month_label,
)


def test_format_currency() -> None:
    assert format_currency(1234.56) == "$1,234.56"
    assert format_currency(0) == "$0.00"
    assert format_currency(1234.56, include_sign=False) == "1,234.56"


def test_negative_currency_puts_sign_before_dollar() -> None:
    assert format_currency(-100) == "-$100.00"
    assert format_currency(-1234.5) == "-$1,234.50"
    assert format_currency(-100, include_sign=False) == "-100.00"


def test_signed_currency_and_percent() -> None:
    assert format_signed_currency(3800) == "+$3,800.00"
    assert format_signed_currency(-100) == "-$100.00"
    assert format_percent(116.666) == "116.7%"


def test_markdown_escape_and_month_label() -> None:
    assert escape_dollar_for_markdown(1234.56) == "\\$1,234.56"
    assert month_label("2024-08") == "August 2024"
    assert month_label("2024-08", long=False) == "Aug 2024"
