"""Utility functions for spanfmt."""

from .logging import (
    TRACE_LEVEL,
    JSONFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)

__all__ = [
    "TRACE_LEVEL",
    "JSONFormatter",
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
]
