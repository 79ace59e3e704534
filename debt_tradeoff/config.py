"""Engine-wide settings, read once from the environment."""

from __future__ import annotations

import logging
import os

NUM_SIMULATIONS = int(os.getenv("DEBT_TRADEOFF_NUM_SIMULATIONS", "500"))
INCOME_VARIANCE = float(os.getenv("DEBT_TRADEOFF_INCOME_VARIANCE", "0.10"))
EXPENSE_VARIANCE = float(os.getenv("DEBT_TRADEOFF_EXPENSE_VARIANCE", "0.15"))
RETURN_VARIANCE = float(os.getenv("DEBT_TRADEOFF_RETURN_VARIANCE", "0.20"))
PROJECTION_MONTHS = int(os.getenv("DEBT_TRADEOFF_PROJECTION_MONTHS", "60"))
DISCOUNT_RATE = float(os.getenv("DEBT_TRADEOFF_DISCOUNT_RATE", "0.05"))

# 0 runs Monte Carlo trials on the calling thread
MAX_WORKERS = max(0, int(os.getenv("DEBT_TRADEOFF_MAX_WORKERS", "0")))
TIMELINE_INTERVAL_MONTHS = max(1, int(os.getenv("DEBT_TRADEOFF_TIMELINE_INTERVAL", "6")))
FALLBACK_EXPECTED_RETURN = float(os.getenv("DEBT_TRADEOFF_FALLBACK_RETURN", "0.07"))
LOG_LEVEL = os.getenv("DEBT_TRADEOFF_LOG_LEVEL", "WARNING").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a basic stream handler for the package logger.

    Library code only creates module loggers; applications that want the
    engine's debug trace call this once at startup.
    """
    resolved = (level or LOG_LEVEL).upper()
    package_logger = logging.getLogger("debt_tradeoff")
    package_logger.setLevel(resolved)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
