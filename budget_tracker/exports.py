"""CSV and PDF exports of report data.

Exports only consume aggregation and report outputs; they never change
state.  PDF documents are drawn with matplotlib onto A4 portrait pages.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure

from . import aggregation as agg
from .formatting import format_currency, format_percent
from .importer import REQUIRED_COLUMNS
from .models import EXPENSE, Transaction
from .reports import ReportFilters, category_analysis, report_title

A4_PORTRAIT = (8.27, 11.69)
ROWS_PER_PAGE = 28

REPORT_HEADER = ['Date', 'Description', 'Amount', 'Category', 'Type', 'Budget', 'Variance']
SUMMARY_HEADER = ['Category', 'Type', 'Income', 'Expenses', 'Budget', 'Variance', 'Utilization %']


def export_filename(kind: str, fy: str, generated_on: date, ext: str) -> str:
    return f"budget-{kind}-{fy}-{generated_on.isoformat()}.{ext}"


def _rows_to_csv(rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerows(rows)
    return buffer.getvalue()


def _transaction_budget_columns(txn: Transaction, breakdown: Dict[str, agg.CategoryBudget]):
    info = breakdown.get(txn.category)
    budget = info.budget if info else 0.0
    actual = info.actual if info else 0.0
    if txn.type == EXPENSE:
        variance = budget - actual if budget > 0 else 0.0
    else:
        variance = actual - budget
    return budget, variance


def report_to_csv(
    transactions: Sequence[Transaction],
    breakdown: Dict[str, agg.CategoryBudget],
    fy: str,
    filters: Optional[ReportFilters] = None,
    generated_on: Optional[date] = None,
) -> str:
    """Detailed report: transaction listing followed by a category summary.

    ``transactions`` are the already-filtered rows; ``breakdown`` is the
    full-year category breakdown that supplies budgets and variances.
    """
    generated_on = generated_on or date.today()
    rows: List[List[object]] = [
        [report_title(fy, filters)],
        [f"Generated on: {generated_on.isoformat()}"],
        [],
        REPORT_HEADER,
    ]
    for txn in sorted(transactions, key=lambda t: (t.date, t.id), reverse=True):
        budget, variance = _transaction_budget_columns(txn, breakdown)
        rows.append([
            txn.date.isoformat(),
            txn.description,
            f"{txn.amount:.2f}",
            txn.category,
            txn.type,
            f"{budget:.2f}",
            f"{variance:.2f}",
        ])

    rows.extend([[], ['Summary'], SUMMARY_HEADER])
    analysis = category_analysis(transactions, breakdown)
    for _, item in analysis.iterrows():
        rows.append([
            item['Category'],
            item['Type'],
            f"{item['Income']:.2f}",
            f"{item['Expenses']:.2f}",
            f"{item['Budget']:.2f}",
            f"{item['Variance']:.2f}",
            f"{item['Percentage']:.1f}%",
        ])
    return _rows_to_csv(rows)


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    """Plain listing in the import column layout, so the file can be re-imported."""
    rows: List[List[object]] = [list(REQUIRED_COLUMNS)]
    for txn in sorted(transactions, key=lambda t: (t.date, t.id)):
        rows.append([txn.date.isoformat(), txn.description, f"{txn.amount:.2f}", txn.category, txn.type])
    return _rows_to_csv(rows)


# ---------------------------------------------------------------------------
# PDF
# ---------------------------------------------------------------------------


def _draw_header(fig: Figure, title: str, subtitle: str) -> None:
    fig.text(0.5, 0.96, title, ha='center', va='top', fontsize=16, fontweight='bold', color='#0284c7')
    fig.text(0.5, 0.925, subtitle, ha='center', va='top', fontsize=9, color='#64748b')


def _draw_table(fig: Figure, header: List[str], rows: List[List[str]], top: float) -> None:
    ax = fig.add_axes([0.06, 0.05, 0.88, top - 0.05])
    ax.axis('off')
    if not rows:
        ax.text(0.5, 0.95, 'No data available', ha='center', va='top', fontsize=10, color='#64748b')
        return
    table = ax.table(cellText=rows, colLabels=header, loc='upper center', cellLoc='left')
    table.auto_set_font_size(False)
    table.set_fontsize(8)
    table.scale(1, 1.3)
    for (row, _), cell in table.get_celld().items():
        if row == 0:
            cell.set_text_props(fontweight='bold')
            cell.set_facecolor('#e2e8f0')


def _render_pdf(title: str, subtitle: str, summary_lines: List[str], header: List[str], rows: List[List[str]]) -> bytes:
    buffer = io.BytesIO()
    chunks = [rows[i:i + ROWS_PER_PAGE] for i in range(0, len(rows), ROWS_PER_PAGE)] or [[]]
    with PdfPages(buffer) as pdf:
        for index, chunk in enumerate(chunks):
            fig = Figure(figsize=A4_PORTRAIT)
            _draw_header(fig, title, subtitle)
            top = 0.89
            if index == 0:
                for line in summary_lines:
                    fig.text(0.08, top, line, ha='left', va='top', fontsize=10)
                    top -= 0.025
                top -= 0.01
            _draw_table(fig, header, chunk, top)
            pdf.savefig(fig)
    return buffer.getvalue()


def _breakdown_rows(breakdown: Dict[str, agg.CategoryBudget]) -> List[List[str]]:
    rows = []
    income, expense = agg.split_by_type(breakdown)
    for entry in expense + income:
        rows.append([
            entry.name,
            entry.type,
            format_currency(entry.budget),
            format_currency(entry.actual),
            format_currency(entry.remaining),
            format_percent(entry.percentage),
        ])
    return rows


def summary_to_pdf(
    transactions: Sequence[Transaction],
    categories,
    fy: str,
    generated_on: Optional[date] = None,
) -> bytes:
    """Financial-year summary: headline figures plus the budget breakdown."""
    generated_on = generated_on or date.today()
    breakdown = agg.category_breakdown(categories, transactions, fy)
    income = agg.total_income(transactions, fy)
    expenses = agg.total_expenses(transactions, fy)
    summary_lines = [
        f"Total Income: {format_currency(income)}",
        f"Total Expenses: {format_currency(expenses)}",
        f"Net Position: {format_currency(income - expenses)}",
        f"Budget Utilization: {format_percent(agg.budget_utilization(transactions, fy))}",
    ]
    return _render_pdf(
        title=f"Budget Summary - FY {fy}",
        subtitle=f"Financial Year: {fy} | Generated on: {generated_on.isoformat()}",
        summary_lines=summary_lines,
        header=['Category', 'Type', 'Budget', 'Actual', 'Remaining', 'Used'],
        rows=_breakdown_rows(breakdown),
    )


def report_to_pdf(
    transactions: Sequence[Transaction],
    breakdown: Dict[str, agg.CategoryBudget],
    fy: str,
    filters: Optional[ReportFilters] = None,
    generated_on: Optional[date] = None,
) -> bytes:
    """Detailed report for the filtered transactions: totals plus category analysis."""
    generated_on = generated_on or date.today()
    analysis = category_analysis(transactions, breakdown)
    income = float(analysis['Income'].sum()) if not analysis.empty else 0.0
    expenses = float(analysis['Expenses'].sum()) if not analysis.empty else 0.0
    rows = [
        [
            str(item['Category']),
            str(item['Type']),
            format_currency(item['Income']),
            format_currency(item['Expenses']),
            format_currency(item['Budget']),
            format_currency(item['Variance']),
            format_percent(item['Percentage']),
            str(item['Status']),
        ]
        for _, item in analysis.iterrows()
    ]
    return _render_pdf(
        title=report_title(fy, filters),
        subtitle=f"Generated on: {generated_on.isoformat()}",
        summary_lines=[
            f"Total Income: {format_currency(income)}",
            f"Total Expenses: {format_currency(expenses)}",
            f"Net: {format_currency(income - expenses)}",
        ],
        header=['Category', 'Type', 'Income', 'Expenses', 'Budget', 'Variance', 'Used', 'Status'],
        rows=rows,
    )
