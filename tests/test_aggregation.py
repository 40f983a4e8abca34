"""Tests for the budget aggregation functions."""

from __future__ import annotations

from datetime import date
from typing import List

import pytest

from budget_tracker import aggregation as agg
from budget_tracker.models import Category, Transaction

FY = "2024-2025"


def _build_transactions() -> List[Transaction]:
    return [
        Transaction(1, date(2024, 8, 1), 'Pay', 4500.0, 'Salary', 'Income'),
        Transaction(2, date(2024, 8, 15), 'Groceries', 700.0, 'Food', 'Expense'),
    ]


def _build_categories() -> List[Category]:
    return [
        Category(1, 'Salary', 'Income', 5000.0),
        Category(2, 'Food', 'Expense', 600.0),
    ]


def test_totals_and_net_position() -> None:
    transactions = _build_transactions()
    assert agg.total_income(transactions, FY) == 4500.0
    assert agg.total_expenses(transactions, FY) == 700.0
    assert agg.net_position(transactions, FY) == 3800.0


def test_category_breakdown_scenario() -> None:
    breakdown = agg.category_breakdown(_build_categories(), _build_transactions(), FY)

    food = breakdown['Food']
    assert food.actual == 700.0
    assert food.remaining == -100.0
    assert food.percentage == pytest.approx(116.67, abs=0.01)
    assert food.is_over_budget

    salary = breakdown['Salary']
    assert salary.actual == 4500.0
    assert salary.remaining == -500.0
    assert salary.percentage == pytest.approx(90.0)
    assert salary.is_under_target


def test_march_belongs_to_previous_financial_year() -> None:
    transactions = [Transaction(1, date(2024, 3, 1), 'Bill', 50.0, 'Utilities', 'Expense')]
    assert agg.transactions_in_fy(transactions, "2023-2024") == transactions
    assert agg.transactions_in_fy(transactions, FY) == []


def test_transactions_in_fy_is_idempotent() -> None:
    transactions = _build_transactions() + [
        Transaction(3, date(2025, 7, 1), 'Next year', 10.0, 'Food', 'Expense'),
        Transaction(4, date(2024, 6, 30), 'Last year', 10.0, 'Food', 'Expense'),
    ]
    once = agg.transactions_in_fy(transactions, FY)
    assert agg.transactions_in_fy(once, FY) == once
    assert [t.id for t in once] == [1, 2]


def test_fy_none_uses_all_transactions() -> None:
    transactions = _build_transactions() + [Transaction(3, date(2020, 1, 1), 'Old', 100.0, 'Food', 'Expense')]
    assert agg.total_expenses(transactions, None) == 800.0


def test_net_position_equals_income_minus_expenses() -> None:
    transactions = [
        Transaction(i, date(2024, 7 + (i % 6), 1), '', amount, 'Food', kind)
        for i, (amount, kind) in enumerate([(0.1, 'Income'), (0.2, 'Expense'), (1234.56, 'Income'), (99.99, 'Expense')])
    ]
    expected = agg.total_income(transactions, FY) - agg.total_expenses(transactions, FY)
    assert agg.net_position(transactions, FY) == expected


def test_percentage_zero_when_budget_zero() -> None:
    categories = [Category(1, 'Gifts', 'Expense', 0.0), Category(2, 'Rent', 'Expense', 1000.0)]
    transactions = [Transaction(1, date(2024, 9, 1), '', 80.0, 'Gifts', 'Expense')]
    breakdown = agg.category_breakdown(categories, transactions, FY)
    assert breakdown['Gifts'].percentage == 0
    assert not breakdown['Gifts'].is_over_budget
    # Categories without activity still appear with actual 0.
    assert breakdown['Rent'].actual == 0
    assert breakdown['Rent'].percentage == 0


def test_deleted_category_keeps_totals_but_leaves_breakdown() -> None:
    categories = _build_categories()
    transactions = _build_transactions()
    before = agg.total_expenses(transactions, FY)

    remaining = [c for c in categories if c.name != 'Food']
    breakdown = agg.category_breakdown(remaining, transactions, FY)

    assert 'Food' not in breakdown
    assert agg.total_expenses(transactions, FY) == before
    assert [t.id for t in agg.orphaned_transactions(remaining, transactions, FY)] == [2]


def test_duplicate_category_names_later_wins() -> None:
    categories = [Category(1, 'Food', 'Expense', 600.0), Category(2, 'Food', 'Expense', 900.0)]
    breakdown = agg.category_breakdown(categories, _build_transactions(), FY)
    assert breakdown['Food'].budget == 900.0
    assert breakdown['Food'].actual == 700.0


def test_monthly_series_is_sparse_and_sorted() -> None:
    transactions = _build_transactions() + [
        Transaction(3, date(2025, 1, 3), 'Bonus', 300.0, 'Salary', 'Income'),
    ]
    series = agg.monthly_series(transactions, FY)
    assert list(series) == ['2024-08', '2025-01']
    assert series['2024-08'].income == 4500.0
    assert series['2024-08'].expenses == 700.0
    assert series['2024-08'].net == 3800.0


def test_fill_month_gaps_covers_financial_year() -> None:
    filled = agg.fill_month_gaps(agg.monthly_series(_build_transactions(), FY), FY)
    assert len(filled) == 12
    assert list(filled)[0] == '2024-07'
    assert list(filled)[-1] == '2025-06'
    assert filled['2024-07'].income == 0
    assert filled['2024-08'].income == 4500.0


def test_split_by_type_orders_by_actual() -> None:
    categories = _build_categories() + [Category(3, 'Rent', 'Expense', 1500.0)]
    transactions = _build_transactions() + [Transaction(3, date(2024, 9, 1), '', 1500.0, 'Rent', 'Expense')]
    income, expense = agg.split_by_type(agg.category_breakdown(categories, transactions, FY))
    assert [b.name for b in income] == ['Salary']
    assert [b.name for b in expense] == ['Rent', 'Food']


def test_budget_utilization() -> None:
    assert agg.budget_utilization(_build_transactions(), FY) == pytest.approx(700 / 4500 * 100)
    expenses_only = [Transaction(1, date(2024, 8, 1), '', 50.0, 'Food', 'Expense')]
    assert agg.budget_utilization(expenses_only, FY) == 0.0


def test_latest_transaction_date() -> None:
    assert agg.latest_transaction_date(_build_transactions()) == date(2024, 8, 15)
    assert agg.latest_transaction_date([]) is None


def test_transactions_by_category_groups_within_year() -> None:
    transactions = _build_transactions() + [
        Transaction(3, date(2024, 9, 2), 'Lunch', 15.0, 'Food', 'Expense'),
        Transaction(4, date(2025, 7, 1), 'Next year', 30.0, 'Food', 'Expense'),
    ]
    grouped = agg.transactions_by_category(transactions, FY)
    assert sorted(grouped) == ['Food', 'Salary']
    assert [txn.id for txn in grouped['Food']] == [2, 3]
    assert [txn.id for txn in agg.transactions_by_category(transactions, None)['Food']] == [2, 3, 4]
