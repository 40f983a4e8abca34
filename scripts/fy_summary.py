#!/usr/bin/env python3
"""Print a financial-year summary from a saved budget state file."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_tracker import aggregation as agg
from budget_tracker import config
from budget_tracker.exports import export_filename, report_to_csv, summary_to_pdf
from budget_tracker.financial_year import parse_label
from budget_tracker.formatting import format_currency, format_percent
from budget_tracker.reports import breakdown_frame, summary_cards
from budget_tracker.state import BudgetState
from budget_tracker.storage import StateStore


def _export(state: BudgetState, fy: str, kind: str, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    today = date.today()
    path = out_dir / export_filename('summary' if kind == 'pdf' else 'report', fy, today, kind)
    if kind == 'pdf':
        path.write_bytes(summary_to_pdf(state.transactions, state.categories, fy, today))
    else:
        fy_transactions = state.fy_transactions(fy)
        path.write_text(report_to_csv(fy_transactions, state.category_breakdown(fy), fy, None, today), encoding="utf-8")
    return path


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Show the budget summary for a financial year.')
    parser.add_argument('--state', default=config.get_state_path(), help='Path to the budget state JSON file')
    parser.add_argument('--fy', help='Financial year label, e.g. 2024-2025 (defaults to the saved selection)')
    parser.add_argument('--export', choices=['csv', 'pdf'], help='Also write the report to the exports directory')
    parser.add_argument('--out-dir', default=str(config.EXPORTS_DIR), help='Directory for exported files')
    args = parser.parse_args(argv)

    state_path = Path(args.state)
    if not state_path.exists():
        print(f"State file not found: {state_path}")
        return 1

    state = BudgetState.load(StateStore(state_path))
    fy = args.fy or state.financial_year
    try:
        parse_label(fy)
    except ValueError as exc:
        print(exc)
        return 1

    cards = summary_cards(state.transactions, fy)
    print(f"Budget summary for FY {fy}")
    print(f"  Total income:       {format_currency(cards['total_income'])}")
    print(f"  Total expenses:     {format_currency(cards['total_expenses'])}")
    print(f"  Net position:       {format_currency(cards['net_position'])}")
    print(f"  Budget utilization: {format_percent(cards['budget_utilization'])}")
    print(f"  Transactions:       {cards['transaction_count']}")

    table = breakdown_frame(state.category_breakdown(fy))
    if not table.empty:
        print("\nCategories:")
        print(table.to_string(index=False, float_format=lambda v: f"{v:,.2f}"))

    orphans = agg.orphaned_transactions(state.categories, state.transactions, fy)
    if orphans:
        print(f"\n{len(orphans)} transaction(s) reference missing categories:")
        for name in sorted({txn.category for txn in orphans}):
            print(f"  - {name}")

    if args.export:
        path = _export(state, fy, args.export, Path(args.out_dir))
        print(f"\nWrote {path}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
