"""Main entry point for the Streamlit multi-page app.

Pages in the pages/ directory will automatically appear in the sidebar.
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Add project root to path for imports
project_root = Path(__file__).parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from budget_tracker import aggregation as agg
from budget_tracker.config import ensure_data_directories
from budget_tracker.formatting import escape_dollar_for_markdown, format_currency
from budget_tracker.reports import flag_large_transactions
from budget_tracker.session import page_setup


def main():
    """Render the home overview."""
    ensure_data_directories()
    state = page_setup("Budget Tracker", "💰")

    if not state.transactions:
        _render_welcome_screen()
        return

    fy = state.financial_year
    st.header(f"💰 Financial Year {fy}")
    fy_transactions = state.fy_transactions()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_currency(state.total_income()))
    col2.metric("Total Expenses", format_currency(state.total_expenses()))
    col3.metric("Net Position", format_currency(state.net_position()))

    latest = agg.latest_transaction_date(fy_transactions)
    if latest is None:
        st.info(f"No transactions recorded in FY {fy} yet. Pick another year in the sidebar or add one on the Transactions page.")
    else:
        st.caption(f"{len(fy_transactions)} transactions this year · latest on {latest:%d %b %Y}")

    large = flag_large_transactions(fy_transactions, state.alert_threshold)
    if large:
        st.warning(
            f"⚠️ {len(large)} transaction(s) this year exceed the alert threshold of "
            f"{escape_dollar_for_markdown(state.alert_threshold)}."
        )

    orphans = agg.orphaned_transactions(state.categories, state.transactions, fy)
    if orphans:
        st.info(
            f"{len(orphans)} transaction(s) use categories that no longer exist and are "
            "left out of the budget breakdown."
        )


def _render_welcome_screen() -> None:
    """Render welcome screen when no transactions exist."""
    st.markdown("""
    # Welcome to Your Budget Tracker! 💰

    Track income and expenses against per-category budgets, organised by
    financial year (July 1 to June 30).

    ## Getting Started

    1. **Review your categories** on the 🏷️ Categories page and set budgets
    2. **Add transactions** one at a time or import a spreadsheet on the 💳 Transactions page
    3. **Check progress** on the 📊 Summary, 📈 Reports and 📉 Charts pages

    ## Supported File Formats

    - CSV files
    - Excel files (.xlsx, .xls)

    Files need the columns Date, Description, Amount, Category and Type.
    Download the import template from the Transactions page to get started! 🚀
    """)


if __name__ == "__main__":
    main()
