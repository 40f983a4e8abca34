from __future__ import annotations

from datetime import date
from typing import List

import pytest

from budget_tracker import aggregation as agg
from budget_tracker.models import Category, Transaction
from budget_tracker.reports import (
    ALL,
    ReportFilters,
    available_months,
    breakdown_frame,
    category_analysis,
    filter_transactions,
    flag_large_transactions,
    monthly_pivot,
    monthly_totals,
    report_title,
    summary_cards,
    transactions_frame,
)

FY = "2024-2025"


def _build_transactions() -> List[Transaction]:
    return [
        Transaction(1, date(2024, 8, 1), 'Pay', 4500.0, 'Salary', 'Income'),
        Transaction(2, date(2024, 8, 15), 'Groceries', 700.0, 'Food', 'Expense'),
        Transaction(3, date(2024, 9, 3), 'Market', 120.0, 'Food', 'Expense'),
        Transaction(4, date(2024, 9, 10), 'Gift', 60.0, 'Presents', 'Expense'),
    ]


def _breakdown():
    categories = [Category(1, 'Salary', 'Income', 5000.0), Category(2, 'Food', 'Expense', 600.0)]
    return agg.category_breakdown(categories, _build_transactions(), FY)


def test_transactions_frame_newest_first() -> None:
    df = transactions_frame(_build_transactions())
    assert df['id'].tolist() == [4, 3, 2, 1]
    assert df.loc[0, 'Month'] == '2024-09'


def test_transactions_frame_empty() -> None:
    df = transactions_frame([])
    assert df.empty
    assert 'Amount' in df.columns


def test_filters() -> None:
    transactions = _build_transactions()
    assert [t.id for t in filter_transactions(transactions, ReportFilters(month='2024-08'))] == [1, 2]
    assert [t.id for t in filter_transactions(transactions, ReportFilters(category='Food'))] == [2, 3]
    assert [t.id for t in filter_transactions(transactions, ReportFilters(type='Income'))] == [1]
    assert filter_transactions(transactions, ReportFilters()) == transactions


def test_available_months() -> None:
    assert available_months(_build_transactions()) == ['2024-09', '2024-08']


def test_monthly_pivot() -> None:
    pivot = monthly_pivot(_build_transactions())
    first = pivot.iloc[0]
    assert first['Month'] == '2024-09'
    assert first['Month Label'] == 'September 2024'
    food_august = pivot[(pivot['Month'] == '2024-08') & (pivot['Category'] == 'Food')].iloc[0]
    assert food_august['Expenses'] == 700.0
    assert food_august['Income'] == 0.0


def test_monthly_totals() -> None:
    totals = monthly_totals(_build_transactions())
    assert totals['Month'].tolist() == ['2024-08', '2024-09']
    assert totals['Net'].tolist() == [3800.0, -180.0]


def test_category_analysis_includes_orphans_with_zero_budget() -> None:
    analysis = category_analysis(_build_transactions(), _breakdown()).set_index('Category')

    assert analysis.loc['Food', 'Expenses'] == 820.0
    assert analysis.loc['Food', 'Variance'] == -220.0
    assert analysis.loc['Food', 'Status'] == 'Over Budget'
    assert analysis.loc['Food', 'Count'] == 2

    assert analysis.loc['Salary', 'Variance'] == -500.0
    assert analysis.loc['Salary', 'Status'] == 'Under Target'
    assert analysis.loc['Salary', 'Percentage'] == pytest.approx(90.0)

    assert analysis.loc['Presents', 'Budget'] == 0.0
    assert analysis.loc['Presents', 'Percentage'] == 0.0
    assert analysis.loc['Presents', 'Status'] == 'On Track'


def test_category_analysis_sorted_by_total() -> None:
    analysis = category_analysis(_build_transactions(), _breakdown())
    assert analysis['Category'].tolist() == ['Salary', 'Food', 'Presents']


def test_breakdown_frame_filters_by_type() -> None:
    df = breakdown_frame(_breakdown(), 'Expense')
    assert df['Category'].tolist() == ['Food']
    assert df.loc[0, 'Remaining'] == -220.0
    assert df.loc[0, 'Status'] == 'Over budget'


def test_summary_cards() -> None:
    cards = summary_cards(_build_transactions(), FY)
    assert cards['total_income'] == 4500.0
    assert cards['total_expenses'] == 880.0
    assert cards['net_position'] == 3620.0
    assert cards['budget_utilization'] == pytest.approx(880 / 4500 * 100)
    assert cards['transaction_count'] == 4


def test_flag_large_transactions() -> None:
    assert [t.id for t in flag_large_transactions(_build_transactions(), 500)] == [1, 2]
    assert flag_large_transactions(_build_transactions(), 4500) == []


def test_report_title() -> None:
    assert report_title(FY) == "Budget Report - FY 2024-2025"
    filters = ReportFilters(month='2024-08', category='Food', type=ALL)
    assert report_title(FY, filters) == "Budget Report - FY 2024-2025 - August 2024 - Category: Food"
