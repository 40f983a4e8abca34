"""Application state for the budget tracker.

:class:`BudgetState` owns the transaction and category stores, the alert
threshold and the selected financial year.  The composition root (the
Streamlit session or a script) creates one and hands it to whatever needs
it.  Stores are tuples that are replaced as a whole on every mutation, and
each mutation is followed by a snapshot save when a :class:`StateStore` is
attached.  Derived figures are recomputed on every read.
"""

from __future__ import annotations

import time
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from . import aggregation as agg
from .config import DEFAULT_ALERT_THRESHOLD
from .errors import TransactionImportError, ValidationError
from .financial_year import available_financial_years, current_financial_year, parse_label
from .importer import ImportResult, read_import
from .log_utils import get_logger
from .models import (
    Category,
    Transaction,
    clean_text,
    parse_amount,
    parse_budget,
    parse_category_name,
    parse_date,
    parse_type,
)
from .storage import Snapshot, StateStore, default_categories

logger = get_logger(__name__)


def _timestamp_id() -> int:
    return int(time.time() * 1000)


class BudgetState:
    """Single-user budget state with explicit mutation methods."""

    def __init__(
        self,
        transactions: Tuple[Transaction, ...] = (),
        categories: Optional[Tuple[Category, ...]] = None,
        alert_threshold: float = DEFAULT_ALERT_THRESHOLD,
        financial_year: Optional[str] = None,
        store: Optional[StateStore] = None,
    ):
        self.transactions: Tuple[Transaction, ...] = tuple(transactions)
        self.categories: Tuple[Category, ...] = (
            tuple(categories) if categories is not None else default_categories()
        )
        self.alert_threshold = float(alert_threshold)
        self.financial_year = financial_year or current_financial_year()
        self.store = store

    @classmethod
    def load(cls, store: Optional[StateStore] = None, today: Optional[date] = None) -> 'BudgetState':
        store = store or StateStore()
        snapshot = store.load(today)
        return cls(
            transactions=snapshot.transactions,
            categories=snapshot.categories,
            alert_threshold=snapshot.alert_threshold,
            financial_year=snapshot.financial_year,
            store=store,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot(
            transactions=self.transactions,
            categories=self.categories,
            alert_threshold=self.alert_threshold,
            financial_year=self.financial_year,
        )

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())

    def _allocate_ids(self, existing: set, count: int) -> List[int]:
        """Timestamp-based ids, bumped past any that are already taken."""
        ids: List[int] = []
        candidate = _timestamp_id()
        while len(ids) < count:
            if candidate not in existing:
                ids.append(candidate)
                existing.add(candidate)
            candidate += 1
        return ids

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(self, date: Any, description: Any, amount: Any, category: Any, type: Any) -> Transaction:
        """Validate form input and append a new transaction.

        Raises:
            ValidationError: If the date, amount or type is invalid.
        """
        existing = {txn.id for txn in self.transactions}
        txn = Transaction(
            id=self._allocate_ids(existing, 1)[0],
            date=parse_date(date),
            description=clean_text(description),
            amount=parse_amount(amount),
            category=clean_text(category),
            type=parse_type(type),
        )
        self.transactions = self.transactions + (txn,)
        self._persist()
        return txn

    def update_transaction(self, txn_id: int, **changes: Any) -> Optional[Transaction]:
        """Replace fields of an existing transaction; unknown ids are ignored."""
        parsers = {
            'date': parse_date,
            'description': clean_text,
            'amount': parse_amount,
            'category': clean_text,
            'type': parse_type,
        }
        unknown = set(changes) - set(parsers)
        if unknown:
            raise ValidationError(f"Unknown transaction fields: {', '.join(sorted(unknown))}")
        parsed = {key: parsers[key](value) for key, value in changes.items()}

        updated: Optional[Transaction] = None
        result = []
        for txn in self.transactions:
            if txn.id == txn_id:
                txn = txn.with_changes(**parsed)
                updated = txn
            result.append(txn)
        if updated is None:
            logger.info("Update ignored: no transaction with id %s", txn_id)
            return None
        self.transactions = tuple(result)
        self._persist()
        return updated

    def delete_transaction(self, txn_id: int) -> bool:
        remaining = tuple(txn for txn in self.transactions if txn.id != txn_id)
        if len(remaining) == len(self.transactions):
            logger.info("Delete ignored: no transaction with id %s", txn_id)
            return False
        self.transactions = remaining
        self._persist()
        return True

    def import_transactions(self, source) -> ImportResult:
        """Append every row of an import file, or none of them."""
        try:
            rows = read_import(source)
        except TransactionImportError as exc:
            logger.warning("Import failed: %s", exc)
            return ImportResult(success=False, error=str(exc))
        existing = {txn.id for txn in self.transactions}
        ids = self._allocate_ids(existing, len(rows))
        imported = tuple(Transaction(id=txn_id, **row) for txn_id, row in zip(ids, rows))
        self.transactions = self.transactions + imported
        self._persist()
        logger.info("Imported %d transactions", len(imported))
        return ImportResult(success=True, count=len(imported))

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, name: Any, type: Any, budget: Any = 0) -> Category:
        existing = {category.id for category in self.categories}
        category = Category(
            id=self._allocate_ids(existing, 1)[0],
            name=parse_category_name(name),
            type=parse_type(type),
            budget=parse_budget(budget),
        )
        self.categories = self.categories + (category,)
        self._persist()
        return category

    def update_category(self, category_id: int, **changes: Any) -> Optional[Category]:
        """Edit a category in place.

        Renaming does not touch transactions that used the old name; they
        become orphans and drop out of the budget breakdown.
        """
        parsers = {'name': parse_category_name, 'type': parse_type, 'budget': parse_budget}
        unknown = set(changes) - set(parsers)
        if unknown:
            raise ValidationError(f"Unknown category fields: {', '.join(sorted(unknown))}")
        parsed = {key: parsers[key](value) for key, value in changes.items()}

        updated: Optional[Category] = None
        result = []
        for category in self.categories:
            if category.id == category_id:
                category = category.with_changes(**parsed)
                updated = category
            result.append(category)
        if updated is None:
            logger.info("Update ignored: no category with id %s", category_id)
            return None
        self.categories = tuple(result)
        self._persist()
        return updated

    def delete_category(self, category_id: int) -> bool:
        """Remove a category; its transactions are kept as orphans."""
        remaining = tuple(c for c in self.categories if c.id != category_id)
        if len(remaining) == len(self.categories):
            logger.info("Delete ignored: no category with id %s", category_id)
            return False
        self.categories = remaining
        self._persist()
        return True

    def category_names(self, txn_type: Optional[str] = None) -> List[str]:
        return [c.name for c in self.categories if txn_type is None or c.type == txn_type]

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_alert_threshold(self, value: Any) -> float:
        """Store a new alert threshold; unparseable input becomes 0."""
        self.alert_threshold = parse_budget(value)
        self._persist()
        return self.alert_threshold

    def set_financial_year(self, label: str) -> str:
        """Select the financial year used by the read helpers.

        Raises:
            ValueError: If the label is not a valid financial year.
        """
        parse_label(label)
        self.financial_year = label
        self._persist()
        return label

    # ------------------------------------------------------------------
    # Derived views, recomputed on every call
    # ------------------------------------------------------------------

    def _fy(self, fy: Optional[str]) -> str:
        return fy or self.financial_year

    def fy_transactions(self, fy: Optional[str] = None) -> List[Transaction]:
        return agg.transactions_in_fy(self.transactions, self._fy(fy))

    def total_income(self, fy: Optional[str] = None) -> float:
        return agg.total_income(self.transactions, self._fy(fy))

    def total_expenses(self, fy: Optional[str] = None) -> float:
        return agg.total_expenses(self.transactions, self._fy(fy))

    def net_position(self, fy: Optional[str] = None) -> float:
        return agg.net_position(self.transactions, self._fy(fy))

    def monthly_series(self, fy: Optional[str] = None) -> Dict[str, agg.MonthlyTotals]:
        return agg.monthly_series(self.transactions, self._fy(fy))

    def category_breakdown(self, fy: Optional[str] = None) -> Dict[str, agg.CategoryBudget]:
        return agg.category_breakdown(self.categories, self.transactions, self._fy(fy))

    def available_financial_years(self, today: Optional[date] = None) -> List[str]:
        years = available_financial_years(self.transactions, today)
        if self.financial_year not in years:
            years = sorted(set(years) | {self.financial_year})
        return years
