"""Configuration management for the compound dashboard.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in compound_dashboard/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("COMPOUND_DATA_DIR", _PROJECT_ROOT / "data"))
USERS_DIR = Path(os.getenv("COMPOUND_USERS_DIR", DATA_DIR / "users"))

# Identity stand-in used when the caller does not supply a user id
DEFAULT_USER = os.getenv("COMPOUND_USER", "demo@example.com")

LOG_LEVEL = os.getenv("COMPOUND_LOG_LEVEL", "INFO").upper()
CURRENCY_SYMBOL = os.getenv("COMPOUND_CURRENCY_SYMBOL", "R$")

# Share of the spendable amount (income minus savings goal) that triggers
# the "approaching limit" warning.
BUDGET_WARNING_THRESHOLD = float(os.getenv("COMPOUND_BUDGET_WARNING_THRESHOLD", "0.9"))

# Values a freshly created scenario starts with, kept as user-facing text
SCENARIO_DEFAULTS = {
    'principal': '10',
    'daily_rate_percent': '10',
    'days': '7',
    'daily_contribution': '0',
}
LEGACY_SCENARIO_NAME = 'My scenario'


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, USERS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)