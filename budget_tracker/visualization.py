"""Plotly visualisation helpers for the budget tracker.

Each function accepts an output of :mod:`budget_tracker.aggregation` and
returns a ``plotly.graph_objects.Figure`` that Streamlit renders via
``st.plotly_chart``.  Empty inputs produce a figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import CategoryBudget, MonthlyTotals
from .formatting import month_label
from .models import EXPENSE, INCOME

INCOME_COLOR = '#22c55e'
EXPENSE_COLOR = '#ef4444'
NET_COLOR = '#0ea5e9'
BUDGET_COLOR = '#94a3b8'


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_income_expense_chart(series: Dict[str, MonthlyTotals], title: str | None = None) -> go.Figure:
    """Line chart of monthly income, expenses and net.

    Parameters
    ----------
    series : dict
        Month key (``YYYY-MM``) to :class:`MonthlyTotals`, as returned by
        :func:`aggregation.monthly_series` or :func:`aggregation.fill_month_gaps`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Interactive line chart.
    """
    if not series:
        return _empty_figure()
    months = sorted(series)
    labels = [month_label(month, long=False) for month in months]
    fig = go.Figure()
    for name, values, color in (
        ('Income', [series[m].income for m in months], INCOME_COLOR),
        ('Expenses', [series[m].expenses for m in months], EXPENSE_COLOR),
        ('Net', [series[m].net for m in months], NET_COLOR),
    ):
        fig.add_trace(go.Scatter(
            x=labels,
            y=values,
            name=name,
            mode='lines+markers',
            line={'color': color, 'width': 3, 'shape': 'spline'},
        ))
    fig.update_layout(
        title=title or "Income vs Expenses Over Time",
        xaxis_title="Month",
        yaxis_title="Amount",
        yaxis_tickprefix="$",
        hovermode="x unified",
        legend={'orientation': 'h', 'y': -0.2},
    )
    return fig


def _category_pie(breakdown: Dict[str, CategoryBudget], txn_type: str, title: str) -> go.Figure:
    rows: List[Dict[str, float]] = [
        {'Category': entry.name, 'Value': entry.actual}
        for entry in breakdown.values()
        if entry.type == txn_type and entry.actual > 0
    ]
    if not rows:
        return _empty_figure()
    df = pd.DataFrame(rows).sort_values('Value', ascending=False)
    fig = px.pie(df, names="Category", values="Value", hole=0.3)
    fig.update_traces(hovertemplate="%{label}: $%{value:,.2f} (%{percent})<extra></extra>")
    fig.update_layout(title=title)
    return fig


def create_expense_pie_chart(breakdown: Dict[str, CategoryBudget]) -> go.Figure:
    """Share of actual spending per expense category."""
    return _category_pie(breakdown, EXPENSE, "Expense Categories Breakdown")


def create_income_pie_chart(breakdown: Dict[str, CategoryBudget]) -> go.Figure:
    """Share of actual income per income category."""
    return _category_pie(breakdown, INCOME, "Income Sources Breakdown")


def create_budget_vs_actual_chart(breakdown: Dict[str, CategoryBudget], txn_type: str = EXPENSE) -> go.Figure:
    """Grouped bars comparing budget and actual per category of one type."""
    entries = [entry for entry in breakdown.values() if entry.type == txn_type]
    if not entries:
        return _empty_figure()
    names = [entry.name for entry in entries]
    actual_color = EXPENSE_COLOR if txn_type == EXPENSE else INCOME_COLOR
    fig = go.Figure()
    fig.add_trace(go.Bar(name='Budget', x=names, y=[e.budget for e in entries], marker_color=BUDGET_COLOR))
    fig.add_trace(go.Bar(name='Actual', x=names, y=[e.actual for e in entries], marker_color=actual_color))
    label = 'Expenses' if txn_type == EXPENSE else 'Income'
    fig.update_layout(
        title=f"Budget vs Actual {label}",
        barmode='group',
        xaxis_title="Category",
        yaxis_title="Amount",
        yaxis_tickprefix="$",
    )
    return fig
