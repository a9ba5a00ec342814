"""Configuration management for the expense tracker.

This module centralizes all configuration values including the backend
address, defaults, and environment variable overrides.  Values are read
once at import time.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

# Backend
API_BASE_URL = (
    os.getenv("EXPENSE_TRACKER_API_BASE_URL")
    or os.getenv("VITE_API_BASE_URL")
    or "http://localhost:8080/api"
).rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("EXPENSE_TRACKER_REQUEST_TIMEOUT", "10"))

# Budget and advisor
DEFAULT_BUDGET = float(os.getenv("EXPENSE_TRACKER_DEFAULT_BUDGET", "2000"))
ADVISOR_DELAY_SECONDS = float(os.getenv("EXPENSE_TRACKER_ADVISOR_DELAY", "1.5"))
WARNING_THRESHOLD_PERCENT = 80

# Export
EXPORT_FILENAME = "expenses.csv"
EXPORT_HEADER = "Date,Description,Category,Amount"

# Presentation
CATEGORIES = ("Food", "Transport", "Utilities", "Entertainment", "Other")
CURRENCY_SYMBOL = "₹"
CHART_COLORS = ["#6366f1", "#ec4899", "#10b981", "#f59e0b", "#8b5cf6"]

LOG_LEVEL = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the package logger if none is present."""
    logger = logging.getLogger("expense_tracker")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level or LOG_LEVEL)
    return logger


def expenses_url(base_url: Optional[str] = None) -> str:
    """Return the collection endpoint for the given (or configured) base URL."""
    return f"{(base_url or API_BASE_URL).rstrip('/')}/expenses"
