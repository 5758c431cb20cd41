"""Configuration management for the family budget planner.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in family_budget/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FAMILY_BUDGET_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORTS_DIR = DATA_DIR / "exports"

# Budget document
BUDGET_FILE = Path(
    os.getenv("FAMILY_BUDGET_FILE", DATA_DIR / "budget.json")
).resolve()

LOG_LEVEL = os.getenv("FAMILY_BUDGET_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_budget_file() -> str:
    """Get the budget document path as a string."""
    return str(BUDGET_FILE)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Install a console handler on the package logger.

    The library modules only emit records; scripts and the Streamlit page
    call this once at start-up.  Calling it again replaces the handler
    rather than stacking duplicates.
    """
    logger = logging.getLogger("family_budget")
    logger.setLevel((level or LOG_LEVEL).upper())
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)
    return logger
