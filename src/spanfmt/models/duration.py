"""Signed time span with nanosecond resolution."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Union

from ..exceptions import DurationFormatError

NANOS_PER_MICROSECOND = 1_000
NANOS_PER_MILLISECOND = 1_000 * NANOS_PER_MICROSECOND
NANOS_PER_SECOND = 1_000 * NANOS_PER_MILLISECOND
NANOS_PER_MINUTE = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR = 60 * NANOS_PER_MINUTE
NANOS_PER_DAY = 24 * NANOS_PER_HOUR
NANOS_PER_WEEK = 7 * NANOS_PER_DAY

# Same limit as a signed 64-bit nanosecond counter
MAX_NANOSECONDS = 2**63 - 1


def _trunc_div(value: int, divisor: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def check_nanoseconds(nanoseconds: int) -> int:
    """Ensure a nanosecond count fits the representable range.

    Raises:
        DurationFormatError: If the magnitude exceeds MAX_NANOSECONDS
    """
    if abs(nanoseconds) > MAX_NANOSECONDS:
        raise DurationFormatError(
            "Duration is too large to be expressed in nanoseconds",
            {"nanoseconds": nanoseconds, "limit": MAX_NANOSECONDS},
        )
    return nanoseconds


def timedelta_to_nanoseconds(value: timedelta) -> int:
    """Exact nanosecond count of a timedelta (no float rounding)."""
    return (
        (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    ) * NANOS_PER_MICROSECOND


@dataclass(frozen=True, order=True)
class Duration:
    """An immutable signed span of time counted in nanoseconds."""

    nanoseconds: int = 0

    def __post_init__(self) -> None:
        """Validate the nanosecond count."""
        if isinstance(self.nanoseconds, bool) or not isinstance(
            self.nanoseconds, int
        ):
            raise TypeError(
                f"nanoseconds must be an int, got {type(self.nanoseconds).__name__}"
            )
        check_nanoseconds(self.nanoseconds)

    @classmethod
    def of(
        cls,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> "Duration":
        """Build a duration from whole unit counts, which may be negative."""
        return cls(
            weeks * NANOS_PER_WEEK
            + days * NANOS_PER_DAY
            + hours * NANOS_PER_HOUR
            + minutes * NANOS_PER_MINUTE
            + seconds * NANOS_PER_SECOND
            + milliseconds * NANOS_PER_MILLISECOND
            + microseconds * NANOS_PER_MICROSECOND
            + nanoseconds
        )

    @classmethod
    def from_timedelta(cls, value: timedelta) -> "Duration":
        """Convert a timedelta exactly."""
        return cls(timedelta_to_nanoseconds(value))

    @classmethod
    def between(cls, start: datetime, end: datetime) -> "Duration":
        """Signed span from start to end (negative if end is earlier)."""
        return cls.from_timedelta(end - start)

    @property
    def total_weeks(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_WEEK)

    @property
    def total_days(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_DAY)

    @property
    def total_hours(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_HOUR)

    @property
    def total_minutes(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_MINUTE)

    @property
    def total_seconds(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_SECOND)

    @property
    def total_milliseconds(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_MILLISECOND)

    @property
    def total_microseconds(self) -> int:
        return _trunc_div(self.nanoseconds, NANOS_PER_MICROSECOND)

    def is_zero(self) -> bool:
        return self.nanoseconds == 0

    def is_negative(self) -> bool:
        return self.nanoseconds < 0

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta, truncating anything below a microsecond."""
        return timedelta(microseconds=self.total_microseconds)

    def __bool__(self) -> bool:
        return self.nanoseconds != 0

    def __add__(self, other: object) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.nanoseconds + other.nanoseconds)

    def __sub__(self, other: object) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.nanoseconds - other.nanoseconds)

    def __neg__(self) -> "Duration":
        return Duration(-self.nanoseconds)

    def __abs__(self) -> "Duration":
        return Duration(abs(self.nanoseconds))

    def __str__(self) -> str:
        return f"{self.nanoseconds}ns"


ZERO = Duration()

DurationLike = Union[Duration, timedelta, int]


def to_nanoseconds(value: DurationLike) -> int:
    """Nanosecond count of any accepted duration input.

    Raises:
        TypeError: If value is not a Duration, timedelta or int
        DurationFormatError: If value is outside the representable range
    """
    if isinstance(value, Duration):
        return value.nanoseconds
    if isinstance(value, timedelta):
        return check_nanoseconds(timedelta_to_nanoseconds(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return check_nanoseconds(value)
    raise TypeError(
        f"Expected Duration, timedelta or int nanoseconds, got {type(value).__name__}"
    )
