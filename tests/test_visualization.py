from __future__ import annotations

from datetime import date

from budget_tracker import aggregation as agg
from budget_tracker.models import Category, Transaction
from budget_tracker.visualization import (
    create_budget_vs_actual_chart,
    create_expense_pie_chart,
    create_income_expense_chart,
    create_income_pie_chart,
)

FY = "2024-2025"


def _build_breakdown():
    categories = [
        Category(1, 'Salary', 'Income', 5000.0),
        Category(2, 'Food', 'Expense', 600.0),
        Category(3, 'Rent', 'Expense', 1200.0),
    ]
    transactions = [
        Transaction(1, date(2024, 8, 1), 'Pay', 4500.0, 'Salary', 'Income'),
        Transaction(2, date(2024, 8, 15), 'Groceries', 700.0, 'Food', 'Expense'),
    ]
    return transactions, agg.category_breakdown(categories, transactions, FY)


def test_income_expense_chart_has_three_lines() -> None:
    transactions, _ = _build_breakdown()
    fig = create_income_expense_chart(agg.monthly_series(transactions, FY))
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses', 'Net']
    assert list(fig.data[2].y) == [3800.0]
    assert list(fig.data[0].x) == ['Aug 2024']


def test_expense_pie_skips_categories_without_spending() -> None:
    _, breakdown = _build_breakdown()
    fig = create_expense_pie_chart(breakdown)
    assert list(fig.data[0].labels) == ['Food']


def test_budget_vs_actual_bars() -> None:
    _, breakdown = _build_breakdown()
    fig = create_budget_vs_actual_chart(breakdown)
    budget, actual = fig.data
    assert list(budget.x) == ['Food', 'Rent']
    assert list(budget.y) == [600.0, 1200.0]
    assert list(actual.y) == [700.0, 0.0]


def test_empty_inputs_give_placeholder_figure() -> None:
    assert create_income_expense_chart({}).layout.title.text == "No data to display"
    assert create_income_pie_chart({}).layout.title.text == "No data to display"
    assert create_budget_vs_actual_chart({}).layout.title.text == "No data to display"
