# src/transmute/core/__init__.py
"""Core infrastructure: deployment settings and logging."""

from transmute.core.config import (
    LoggingSettings,
    TransmuteSettings,
    load_settings,
)
from transmute.core.logging import configure_from, configure_logging, get_logger

__all__ = [
    "LoggingSettings",
    "TransmuteSettings",
    "configure_from",
    "configure_logging",
    "get_logger",
    "load_settings",
]
