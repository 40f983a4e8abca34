"""Configuration management for the budget tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

# Base project root - assumes this file is in budget_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Single JSON snapshot holding transactions, categories, threshold and FY
STATE_PATH = Path(
    os.getenv("BUDGET_TRACKER_STATE_PATH", DATA_DIR / "budget_state.json")
).resolve()

LOG_LEVEL = os.getenv("BUDGET_TRACKER_LOG_LEVEL", "INFO").upper()

# Hosted identity service (Supabase). Both must be set for sign-in to be enforced.
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
USERS_TABLE = os.getenv("BUDGET_TRACKER_USERS_TABLE", "users")
CREDENTIALS_FUNCTION = os.getenv("BUDGET_TRACKER_CREDENTIALS_FUNCTION", "send-credentials")

DEFAULT_ALERT_THRESHOLD = 500.0

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {'id': 1, 'name': 'Salary', 'type': 'Income', 'budget': 5000.0},
    {'id': 2, 'name': 'Freelance', 'type': 'Income', 'budget': 1000.0},
    {'id': 3, 'name': 'Investments', 'type': 'Income', 'budget': 500.0},
    {'id': 4, 'name': 'Other Income', 'type': 'Income', 'budget': 200.0},
    {'id': 5, 'name': 'Housing', 'type': 'Expense', 'budget': 1200.0},
    {'id': 6, 'name': 'Transportation', 'type': 'Expense', 'budget': 400.0},
    {'id': 7, 'name': 'Food', 'type': 'Expense', 'budget': 600.0},
    {'id': 8, 'name': 'Utilities', 'type': 'Expense', 'budget': 300.0},
    {'id': 9, 'name': 'Entertainment', 'type': 'Expense', 'budget': 200.0},
    {'id': 10, 'name': 'Healthcare', 'type': 'Expense', 'budget': 150.0},
    {'id': 11, 'name': 'Shopping', 'type': 'Expense', 'budget': 300.0},
    {'id': 12, 'name': 'Other Expenses', 'type': 'Expense', 'budget': 250.0},
]


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def identity_configured() -> bool:
    """Return True when Supabase credentials are available."""
    return bool(SUPABASE_URL and SUPABASE_KEY)


def get_state_path() -> str:
    """Get the state file path as a string."""
    return str(STATE_PATH)
