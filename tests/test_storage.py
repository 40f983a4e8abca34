from __future__ import annotations

import json
from datetime import date

from budget_tracker.config import DEFAULT_ALERT_THRESHOLD
from budget_tracker.models import Category, Transaction
from budget_tracker.storage import Snapshot, StateStore, default_categories, snapshot_from_dict

TODAY = date(2024, 10, 1)


def _snapshot() -> Snapshot:
    return Snapshot(
        transactions=(Transaction(1, date(2024, 8, 1), 'Pay', 4500.0, 'Salary', 'Income'),),
        categories=(Category(1, 'Salary', 'Income', 5000.0),),
        alert_threshold=750.0,
        financial_year="2023-2024",
    )


def test_missing_file_yields_defaults(tmp_path) -> None:
    snapshot = StateStore(tmp_path / "state.json").load(TODAY)
    assert snapshot.transactions == ()
    assert len(snapshot.categories) == 12
    assert snapshot.alert_threshold == DEFAULT_ALERT_THRESHOLD == 500.0
    assert snapshot.financial_year == "2024-2025"


def test_save_and_load(tmp_path) -> None:
    store = StateStore(tmp_path / "nested" / "state.json")
    store.save(_snapshot())

    loaded = store.load(TODAY)
    assert loaded.transactions == _snapshot().transactions
    assert loaded.categories == _snapshot().categories
    assert loaded.alert_threshold == 750.0
    assert loaded.financial_year == "2023-2024"
    # No temporary files are left next to the snapshot.
    assert [p.name for p in store.path.parent.iterdir()] == ["state.json"]


def test_saved_file_is_plain_json(tmp_path) -> None:
    store = StateStore(tmp_path / "state.json")
    store.save(_snapshot())
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data['version'] == 1
    assert data['transactions'][0]['date'] == '2024-08-01'
    assert 'saved_at' in data


def test_corrupt_file_yields_defaults(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    snapshot = StateStore(path).load(TODAY)
    assert snapshot.categories == default_categories()
    assert snapshot.transactions == ()


def test_non_object_file_yields_defaults(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert StateStore(path).load(TODAY).transactions == ()


def test_malformed_records_are_skipped() -> None:
    data = {
        'transactions': [
            {'id': 1, 'date': '2024-08-01', 'description': 'ok', 'amount': 10, 'category': 'Food', 'type': 'Expense'},
            {'id': 2, 'date': 'never', 'description': 'bad', 'amount': 10, 'category': 'Food', 'type': 'Expense'},
            {'date': '2024-08-01'},
        ],
        'alert_threshold': 'lots',
        'financial_year': '2024-2030',
    }
    snapshot = snapshot_from_dict(data, TODAY)
    assert [txn.id for txn in snapshot.transactions] == [1]
    assert len(snapshot.categories) == 12
    assert snapshot.alert_threshold == 500.0
    assert snapshot.financial_year == "2024-2025"


def test_empty_category_list_is_kept() -> None:
    snapshot = snapshot_from_dict({'categories': []}, TODAY)
    assert snapshot.categories == ()
