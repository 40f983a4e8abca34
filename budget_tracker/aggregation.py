"""Budget aggregation over the transaction and category stores.

Every function here is pure: it takes the full store contents plus a
financial-year label and recomputes its result from scratch.  Nothing is
cached and nothing raises for well-typed input.  Passing ``fy=None`` uses
all transactions regardless of date.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .financial_year import resolve_range
from .models import EXPENSE, INCOME, Category, Transaction


@dataclass
class MonthlyTotals:
    income: float = 0.0
    expenses: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses


@dataclass
class CategoryBudget:
    """Budget versus actual figures for one category in one financial year."""

    name: str
    type: str
    budget: float
    actual: float = 0.0
    transactions: List[Transaction] = field(default_factory=list)

    @property
    def remaining(self) -> float:
        # Expense budgets are caps; income budgets are targets.
        if self.type == EXPENSE:
            return self.budget - self.actual
        return self.actual - self.budget

    @property
    def percentage(self) -> float:
        return (self.actual / self.budget) * 100 if self.budget > 0 else 0.0

    @property
    def is_over_budget(self) -> bool:
        return self.type == EXPENSE and self.budget > 0 and self.actual > self.budget

    @property
    def is_under_target(self) -> bool:
        return self.type == INCOME and self.budget > 0 and self.actual < self.budget


def transactions_in_fy(transactions: Iterable[Transaction], fy: Optional[str]) -> List[Transaction]:
    """Return the transactions dated inside the financial year (bounds inclusive)."""
    if fy is None:
        return list(transactions)
    start, end = resolve_range(fy)
    return [txn for txn in transactions if start <= txn.date <= end]


def _sum_type(transactions: Iterable[Transaction], fy: Optional[str], txn_type: str) -> float:
    return sum((txn.amount for txn in transactions_in_fy(transactions, fy) if txn.type == txn_type), 0.0)


def total_income(transactions: Iterable[Transaction], fy: Optional[str]) -> float:
    return _sum_type(transactions, fy, INCOME)


def total_expenses(transactions: Iterable[Transaction], fy: Optional[str]) -> float:
    return _sum_type(transactions, fy, EXPENSE)


def net_position(transactions: Sequence[Transaction], fy: Optional[str]) -> float:
    return total_income(transactions, fy) - total_expenses(transactions, fy)


def monthly_series(transactions: Iterable[Transaction], fy: Optional[str]) -> Dict[str, MonthlyTotals]:
    """Sum income and expenses per ``YYYY-MM`` month.

    The mapping is sparse: months without transactions are absent.  Use
    :func:`fill_month_gaps` when a continuous axis is needed.
    """
    series: Dict[str, MonthlyTotals] = {}
    for txn in transactions_in_fy(transactions, fy):
        totals = series.setdefault(txn.month_key, MonthlyTotals())
        if txn.type == INCOME:
            totals.income += txn.amount
        else:
            totals.expenses += txn.amount
    return dict(sorted(series.items()))


def fiscal_months(fy: str) -> List[str]:
    """The twelve ``YYYY-MM`` keys of a financial year, July first."""
    start, _ = resolve_range(fy)
    months: List[str] = []
    year, month = start.year, start.month
    for _ in range(12):
        months.append(f"{year}-{month:02d}")
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months


def fill_month_gaps(series: Dict[str, MonthlyTotals], fy: str) -> Dict[str, MonthlyTotals]:
    """Return a new twelve-month mapping with zero totals for missing months."""
    return {
        month: MonthlyTotals(series[month].income, series[month].expenses) if month in series else MonthlyTotals()
        for month in fiscal_months(fy)
    }


def transactions_by_category(
    transactions: Iterable[Transaction],
    fy: Optional[str],
) -> Dict[str, List[Transaction]]:
    grouped: Dict[str, List[Transaction]] = {}
    for txn in transactions_in_fy(transactions, fy):
        grouped.setdefault(txn.category, []).append(txn)
    return grouped


def category_breakdown(
    categories: Iterable[Category],
    transactions: Iterable[Transaction],
    fy: Optional[str],
) -> Dict[str, CategoryBudget]:
    """Compare each category's budget with its actual total for the year.

    Every known category appears, including ones without activity.
    Transactions whose category name matches no known category are left
    out; they still count towards :func:`total_income` and
    :func:`total_expenses`.
    """
    breakdown: Dict[str, CategoryBudget] = {}
    for category in categories:
        # Keyed by name: a later category with the same name replaces the earlier one.
        breakdown[category.name] = CategoryBudget(
            name=category.name,
            type=category.type,
            budget=category.budget or 0.0,
        )
    for txn in transactions_in_fy(transactions, fy):
        entry = breakdown.get(txn.category)
        if entry is None:
            continue
        entry.actual += txn.amount
        entry.transactions.append(txn)
    return breakdown


def orphaned_transactions(
    categories: Iterable[Category],
    transactions: Iterable[Transaction],
    fy: Optional[str],
) -> List[Transaction]:
    """Transactions in the year whose category no longer exists."""
    known = {category.name for category in categories}
    return [txn for txn in transactions_in_fy(transactions, fy) if txn.category not in known]


def split_by_type(breakdown: Dict[str, CategoryBudget]) -> Tuple[List[CategoryBudget], List[CategoryBudget]]:
    """Split a breakdown into (income, expense) lists, each sorted by actual descending."""
    income = sorted((b for b in breakdown.values() if b.type == INCOME), key=lambda b: b.actual, reverse=True)
    expense = sorted((b for b in breakdown.values() if b.type == EXPENSE), key=lambda b: b.actual, reverse=True)
    return income, expense


def budget_utilization(transactions: Sequence[Transaction], fy: Optional[str]) -> float:
    """Expenses as a percentage of income; 0 when either side is empty."""
    income = total_income(transactions, fy)
    expenses = total_expenses(transactions, fy)
    if income <= 0 or expenses <= 0:
        return 0.0
    return expenses / income * 100


def latest_transaction_date(transactions: Iterable[Transaction]) -> Optional[date]:
    dates = [txn.date for txn in transactions]
    return max(dates) if dates else None
