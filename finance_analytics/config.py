"""Configuration for the finance analytics engine and dashboard.

Paths and runtime switches can be overridden through environment
variables; engine constants are fixed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Project root - assumes this file is in finance_analytics/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

SEED_PATH = Path(
    os.getenv("FINANCE_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json")
).resolve()

DEFAULT_USER_ID = os.getenv("FINANCE_USER_ID", "demo")

LOG_LEVEL = os.getenv("FINANCE_LOG_LEVEL", "INFO").upper()

STRICT_VALIDATION = os.getenv("FINANCE_STRICT_VALIDATION", "0").lower() in ("1", "true", "yes")

# Engine constants
TREND_MONTHS = 6
DARKEN_STEP = 0.15
TOP_SLICES = 5
RECENT_LIMIT = 5
UNCATEGORIZED_LABEL = "Uncategorized"


def configure_logging(level: str | None = None) -> None:
    """Set up root logging once for the application entry point."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
