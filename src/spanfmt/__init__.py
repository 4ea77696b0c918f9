"""spanfmt: compact human-readable rendering of time spans."""

import logging

from .exceptions import DurationFormatError, SpanFmtError
from .models.duration import ZERO, Duration
from .utils.time_format import (
    DurationBreakdown,
    DurationFormatter,
    FormatResult,
    decompose,
    format_duration,
)

__version__ = "0.1.0"

logging.getLogger("spanfmt").addHandler(logging.NullHandler())

__all__ = [
    "Duration",
    "DurationBreakdown",
    "DurationFormatError",
    "DurationFormatter",
    "FormatResult",
    "SpanFmtError",
    "ZERO",
    "decompose",
    "format_duration",
]
