"""Configuration management for the budget planner.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

# Base project root - assumes this file is in budget_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_PLANNER_DATA_DIR", _PROJECT_ROOT / "data"))

# Local key/value store standing in for the browser's localStorage
STORAGE_PATH = Path(
    os.getenv("BUDGET_PLANNER_STORAGE_PATH", DATA_DIR / "local_storage.json")
).resolve()

LOG_LEVEL = os.getenv("BUDGET_PLANNER_LOG_LEVEL", "INFO").upper()

# Persisted snapshot layout
STORAGE_KEY = "budget-planner-v1"
SCHEMA_VERSION = 1
LEGACY_INCOMES_KEY = "incomes"
LEGACY_EXPENSES_KEY = "expenses"

# Budget defaults
DEFAULT_CURRENCY = "USD"
NEW_ITEM_NAME = "New Item"
UNNAMED_ITEM_NAME = "Item"
DEFAULT_INCOME_NAMES: List[str] = ["Primary Paycheck"]
DEFAULT_EXPENSE_NAMES: List[str] = [
    "Rent / Mortgage",
    "Credit Cards",
    "Utilities & Internet",
    "Insurance",
    "Groceries",
    "Transport",
    "Subscriptions",
]
RESET_PROMPT = "Reset all values?"

# Chart
PLACEHOLDER_NAME = "No expenses"
PLACEHOLDER_VALUE = 1
CHART_COLORS: List[str] = [
    "#0ea5e9",
    "#22c55e",
    "#f97316",
    "#a855f7",
    "#eab308",
    "#ef4444",
    "#14b8a6",
    "#8b5cf6",
]


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORAGE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)

