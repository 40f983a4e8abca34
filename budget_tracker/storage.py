"""Persistence for the budget tracker state.

Transactions, categories, the alert threshold and the selected financial
year are written together as one JSON snapshot.  The file is replaced
atomically so a crash mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_ALERT_THRESHOLD, DEFAULT_CATEGORIES, STATE_PATH
from .financial_year import current_financial_year, parse_label
from .log_utils import get_logger
from .models import Category, Transaction

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1


def default_categories() -> Tuple[Category, ...]:
    return tuple(Category.from_dict(entry) for entry in DEFAULT_CATEGORIES)


@dataclass
class Snapshot:
    transactions: Tuple[Transaction, ...] = ()
    categories: Tuple[Category, ...] = field(default_factory=default_categories)
    alert_threshold: float = DEFAULT_ALERT_THRESHOLD
    financial_year: str = field(default_factory=current_financial_year)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': SNAPSHOT_VERSION,
            'transactions': [txn.to_dict() for txn in self.transactions],
            'categories': [category.to_dict() for category in self.categories],
            'alert_threshold': float(self.alert_threshold),
            'financial_year': self.financial_year,
            'saved_at': datetime.now(timezone.utc).isoformat(),
        }


def _load_records(entries: Any, factory, kind: str) -> Optional[List[Any]]:
    if not isinstance(entries, list):
        return None
    records = []
    for entry in entries:
        try:
            records.append(factory(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed %s record %r: %s", kind, entry, exc)
    return records


def snapshot_from_dict(data: Dict[str, Any], today: Optional[date] = None) -> Snapshot:
    """Build a snapshot from decoded JSON, using defaults for anything missing."""
    snapshot = Snapshot(financial_year=current_financial_year(today))

    transactions = _load_records(data.get('transactions'), Transaction.from_dict, 'transaction')
    if transactions is not None:
        snapshot.transactions = tuple(transactions)

    categories = _load_records(data.get('categories'), Category.from_dict, 'category')
    if categories is not None:
        snapshot.categories = tuple(categories)

    threshold = data.get('alert_threshold')
    if isinstance(threshold, (int, float)) and not isinstance(threshold, bool):
        snapshot.alert_threshold = float(threshold)

    label = data.get('financial_year')
    if isinstance(label, str):
        try:
            parse_label(label)
            snapshot.financial_year = label
        except ValueError:
            logger.warning("Ignoring invalid stored financial year %r", label)

    return snapshot


class StateStore:
    """Reads and writes the JSON state snapshot."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else STATE_PATH

    def load(self, today: Optional[date] = None) -> Snapshot:
        """Load the snapshot; a missing or corrupt file yields the defaults."""
        if not self.path.exists():
            logger.info("No saved state at %s; starting from defaults", self.path)
            return Snapshot(financial_year=current_financial_year(today))
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read state file %s: %s", self.path, exc)
            return Snapshot(financial_year=current_financial_year(today))
        if not isinstance(data, dict):
            logger.warning("State file %s does not hold an object; using defaults", self.path)
            return Snapshot(financial_year=current_financial_year(today))
        return snapshot_from_dict(data, today)

    def save(self, snapshot: Snapshot) -> None:
        """Write the snapshot atomically.

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = snapshot.to_dict()
        fd, tmp_name = tempfile.mkstemp(prefix='.budget_state.', suffix='.json', dir=self.path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise OSError(f"Failed to save state to {self.path}: {exc}") from exc
        logger.debug("Saved %d transactions and %d categories to %s",
                     len(snapshot.transactions), len(snapshot.categories), self.path)
