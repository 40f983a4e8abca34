"""Report tables built on top of the aggregation layer.

These helpers turn transactions and category breakdowns into pandas
DataFrames for the Reports, Summary and Transactions pages and for the
CSV/PDF exports.  Like the aggregation functions they are pure and
recompute from their inputs on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from . import aggregation as agg
from .formatting import month_label
from .models import EXPENSE, INCOME, Transaction

ALL = 'all'

TRANSACTION_COLUMNS = ['id', 'Date', 'Description', 'Amount', 'Category', 'Type', 'Month']
PIVOT_COLUMNS = ['Month', 'Month Label', 'Category', 'Income', 'Expenses', 'Total']
ANALYSIS_COLUMNS = [
    'Category', 'Type', 'Income', 'Expenses', 'Total', 'Count',
    'Budget', 'Variance', 'Percentage', 'Status',
]


@dataclass(frozen=True)
class ReportFilters:
    month: str = ALL
    category: str = ALL
    type: str = ALL

    def matches(self, txn: Transaction) -> bool:
        return (
            (self.month == ALL or txn.month_key == self.month)
            and (self.category == ALL or txn.category == self.category)
            and (self.type == ALL or txn.type == self.type)
        )


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabulate transactions with one row each, newest first."""
    rows = [
        {
            'id': txn.id,
            'Date': pd.Timestamp(txn.date),
            'Description': txn.description,
            'Amount': txn.amount,
            'Category': txn.category,
            'Type': txn.type,
            'Month': txn.month_key,
        }
        for txn in transactions
    ]
    if not rows:
        return pd.DataFrame(columns=TRANSACTION_COLUMNS)
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    return df.sort_values(['Date', 'id'], ascending=False).reset_index(drop=True)


def filter_transactions(transactions: Iterable[Transaction], filters: ReportFilters) -> List[Transaction]:
    return [txn for txn in transactions if filters.matches(txn)]


def available_months(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct ``YYYY-MM`` keys, newest first."""
    return sorted({txn.month_key for txn in transactions}, reverse=True)


def monthly_pivot(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Income, expenses and total per (month, category), newest month first."""
    df = transactions_frame(transactions)
    if df.empty:
        return pd.DataFrame(columns=PIVOT_COLUMNS)
    df['Income'] = df['Amount'].where(df['Type'] == INCOME, 0.0)
    df['Expenses'] = df['Amount'].where(df['Type'] != INCOME, 0.0)
    pivot = (
        df.groupby(['Month', 'Category'], as_index=False)[['Income', 'Expenses']]
        .sum()
    )
    pivot['Total'] = pivot['Income'] + pivot['Expenses']
    pivot['Month Label'] = pivot['Month'].map(month_label)
    pivot = pivot.sort_values(['Month', 'Category'], ascending=[False, True]).reset_index(drop=True)
    return pivot[PIVOT_COLUMNS]


def monthly_totals(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """Month-level income, expenses and net, oldest month first."""
    series = agg.monthly_series(transactions, None)
    rows = [
        {
            'Month': month,
            'Month Label': month_label(month),
            'Income': totals.income,
            'Expenses': totals.expenses,
            'Net': totals.net,
        }
        for month, totals in series.items()
    ]
    return pd.DataFrame(rows, columns=['Month', 'Month Label', 'Income', 'Expenses', 'Net'])


def _status(txn_type: str, income: float, expenses: float, budget: float) -> str:
    if txn_type == EXPENSE and budget > 0 and expenses > budget:
        return 'Over Budget'
    if txn_type == INCOME and budget > 0 and income < budget:
        return 'Under Target'
    return 'On Track'


def category_analysis(
    transactions: Iterable[Transaction],
    breakdown: Dict[str, agg.CategoryBudget],
) -> pd.DataFrame:
    """Per-category totals for the (filtered) transactions compared with budgets.

    Categories without a known budget (orphans) are listed with a budget of 0.
    The type shown is the category's own type, or the first transaction's
    type for orphans.
    """
    data: Dict[str, Dict[str, float]] = {}
    for name, group in agg.transactions_by_category(transactions, None).items():
        known = breakdown.get(name)
        income = sum(txn.amount for txn in group if txn.type == INCOME)
        expenses = sum(txn.amount for txn in group if txn.type != INCOME)
        data[name] = {
            'Category': name,
            'Type': known.type if known else group[0].type,
            'Income': income,
            'Expenses': expenses,
            'Total': income + expenses,
            'Count': len(group),
            'Budget': known.budget if known else 0.0,
        }

    if not data:
        return pd.DataFrame(columns=ANALYSIS_COLUMNS)

    rows = []
    for entry in data.values():
        budget = entry['Budget']
        if entry['Type'] == EXPENSE:
            variance = budget - entry['Expenses']
            actual = entry['Expenses']
        else:
            variance = entry['Income'] - budget
            actual = entry['Income']
        entry['Variance'] = variance
        entry['Percentage'] = (actual / budget) * 100 if budget > 0 else 0.0
        entry['Status'] = _status(entry['Type'], entry['Income'], entry['Expenses'], budget)
        rows.append(entry)

    df = pd.DataFrame(rows, columns=ANALYSIS_COLUMNS)
    return df.sort_values('Total', ascending=False).reset_index(drop=True)


def breakdown_frame(breakdown: Dict[str, agg.CategoryBudget], txn_type: Optional[str] = None) -> pd.DataFrame:
    """Budget/actual/remaining table for every known category."""
    columns = ['Category', 'Type', 'Budget', 'Actual', 'Remaining', 'Percentage', 'Status']
    rows = []
    for entry in breakdown.values():
        if txn_type is not None and entry.type != txn_type:
            continue
        if entry.is_over_budget:
            status = 'Over budget'
        elif entry.is_under_target:
            status = 'Under target'
        else:
            status = 'On track'
        rows.append({
            'Category': entry.name,
            'Type': entry.type,
            'Budget': entry.budget,
            'Actual': entry.actual,
            'Remaining': entry.remaining,
            'Percentage': entry.percentage,
            'Status': status,
        })
    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        return df
    return df.sort_values('Actual', ascending=False).reset_index(drop=True)


def summary_cards(transactions: Sequence[Transaction], fy: Optional[str]) -> Dict[str, float]:
    income = agg.total_income(transactions, fy)
    expenses = agg.total_expenses(transactions, fy)
    return {
        'total_income': income,
        'total_expenses': expenses,
        'net_position': income - expenses,
        'budget_utilization': agg.budget_utilization(transactions, fy),
        'transaction_count': len(agg.transactions_in_fy(transactions, fy)),
    }


def flag_large_transactions(transactions: Iterable[Transaction], threshold: float) -> List[Transaction]:
    """Transactions whose amount exceeds the alert threshold."""
    return [txn for txn in transactions if txn.amount > threshold]


def report_title(fy: str, filters: Optional[ReportFilters] = None) -> str:
    title = f"Budget Report - FY {fy}"
    if filters is None:
        return title
    if filters.month != ALL:
        title += f" - {month_label(filters.month)}"
    if filters.category != ALL:
        title += f" - Category: {filters.category}"
    if filters.type != ALL:
        title += f" - Type: {filters.type}"
    return title
