"""Time formatting utilities.

Renders a signed span as a compact string such as ``"1h, 23m, 45s"``. The
magnitude of the span is split into weeks, days, hours, minutes, seconds,
milliseconds, microseconds and nanoseconds; zero-valued units are left out.

Example:
    >>> from datetime import timedelta
    >>> from spanfmt import Duration, format_duration
    >>> format_duration(timedelta(hours=1, minutes=23, seconds=45))
    '1h, 23m, 45s'
    >>> format_duration(Duration.of(seconds=5, milliseconds=123))
    '5s, 123ms'
    >>> format_duration(0)
    ''
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional, Tuple, cast

from ..exceptions import DurationFormatError
from ..models.duration import (
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
    NANOS_PER_WEEK,
    DurationLike,
    to_nanoseconds,
)
from .logging import TRACE_LEVEL, get_logger

if TYPE_CHECKING:
    from ..config.settings import Settings

SEPARATOR = ", "

# (field, nanoseconds per unit, modulus, suffix), coarsest first
UNIT_TABLE: Tuple[Tuple[str, int, Optional[int], str], ...] = (
    ("weeks", NANOS_PER_WEEK, None, "w"),
    ("days", NANOS_PER_DAY, 7, "d"),
    ("hours", NANOS_PER_HOUR, 24, "h"),
    ("minutes", NANOS_PER_MINUTE, 60, "m"),
    ("seconds", NANOS_PER_SECOND, 60, "s"),
    ("milliseconds", NANOS_PER_MILLISECOND, 1000, "ms"),
    ("microseconds", NANOS_PER_MICROSECOND, 1000, "μs"),
    ("nanoseconds", 1, 1000, "ns"),
)


@dataclass(frozen=True)
class DurationBreakdown:
    """Non-negative unit buckets of a duration's magnitude."""

    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    milliseconds: int = 0
    microseconds: int = 0
    nanoseconds: int = 0

    def parts(self) -> Iterator[Tuple[int, str]]:
        """Yield (value, suffix) for every bucket, coarsest first."""
        for field, _, _, suffix in UNIT_TABLE:
            yield getattr(self, field), suffix

    def render(self) -> str:
        """Join the non-zero buckets, e.g. ``"5m, 23s"``."""
        return SEPARATOR.join(
            f"{value}{suffix}" for value, suffix in self.parts() if value > 0
        )


def decompose(duration: DurationLike) -> DurationBreakdown:
    """Split the magnitude of a duration into unit buckets.

    Args:
        duration: Duration, timedelta or int nanoseconds

    Returns:
        Breakdown whose buckets all lie inside their unit range

    Raises:
        DurationFormatError: If the duration is outside the representable range
    """
    magnitude = abs(to_nanoseconds(duration))
    buckets = {}
    for field, unit_nanos, modulus, _ in UNIT_TABLE:
        value = magnitude // unit_nanos
        buckets[field] = value if modulus is None else value % modulus
    return DurationBreakdown(**buckets)


@dataclass(frozen=True)
class FormatResult:
    """Outcome of a formatting attempt: a string or a DurationFormatError."""

    value: Optional[str] = None
    error: Optional[DurationFormatError] = None

    def __post_init__(self) -> None:
        """Ensure exactly one of value and error is set."""
        if (self.value is None) == (self.error is None):
            raise ValueError("FormatResult needs exactly one of value or error")

    @classmethod
    def ok(cls, value: str) -> "FormatResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DurationFormatError) -> "FormatResult":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the formatted string or raise the stored error."""
        if self.error is not None:
            raise self.error
        return cast(str, self.value)

    def unwrap_or(self, default: str) -> str:
        return default if self.value is None else self.value


class DurationFormatter:
    """Formats durations as comma-separated unit parts.

    Negative durations are rendered by their magnitude. With ``show_sign``
    a single leading "-" marks them instead.
    """

    def __init__(
        self, show_sign: bool = False, logger: Optional[logging.Logger] = None
    ) -> None:
        """Initialize the formatter.

        Args:
            show_sign: Prefix negative durations with "-"
            logger: Diagnostics sink (defaults to this module's logger)
        """
        self.show_sign = show_sign
        self.logger = logger or get_logger(__name__)

    @classmethod
    def from_settings(
        cls, settings: "Settings", logger: Optional[logging.Logger] = None
    ) -> "DurationFormatter":
        """Create a formatter using the options of a Settings instance."""
        return cls(show_sign=settings.show_sign, logger=logger)

    def format(self, duration: DurationLike) -> str:
        """Format a duration as a human-readable string.

        Args:
            duration: Duration, timedelta or int nanoseconds

        Returns:
            Formatted string (e.g., "1h, 23m, 45s"), empty for a zero duration

        Raises:
            TypeError: If duration is not of an accepted type
            DurationFormatError: If the duration is outside the representable
                range and its sub-second remainder cannot be produced
        """
        self.logger.debug(f"Will try to render duration: {duration!r}")
        try:
            nanoseconds = to_nanoseconds(duration)
        except DurationFormatError as e:
            self.logger.error(f"Cannot render duration {duration!r}: {e}")
            raise
        if nanoseconds == 0:
            self.logger.debug("Duration is zero, nothing to render")
            return ""

        breakdown = decompose(nanoseconds)
        if self.logger.isEnabledFor(TRACE_LEVEL):
            self.logger.trace(  # type: ignore[attr-defined]
                f"Unit breakdown for {nanoseconds}ns: {breakdown}",
                extra={"breakdown": vars(breakdown)},
            )

        rendered = breakdown.render()
        if self.show_sign and nanoseconds < 0:
            rendered = f"-{rendered}"

        self.logger.debug(f"Rendered duration: {rendered}")
        return rendered

    def try_format(self, duration: DurationLike) -> FormatResult:
        """Like format, but returns a FormatResult instead of raising."""
        try:
            return FormatResult.ok(self.format(duration))
        except DurationFormatError as e:
            return FormatResult.failure(e)


def format_duration(
    duration: DurationLike,
    show_sign: bool = False,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Format a duration as a human-readable string.

    Args:
        duration: Duration, timedelta or int nanoseconds
        show_sign: Prefix negative durations with "-"
        logger: Optional diagnostics sink

    Returns:
        Formatted duration string (e.g., "1h, 23m, 45s", "5s, 123ms", "")
    """
    return DurationFormatter(show_sign=show_sign, logger=logger).format(duration)
