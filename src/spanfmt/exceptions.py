"""Exception hierarchy for spanfmt.

Every error raised on purpose by the package derives from SpanFmtError, which
carries an optional context dictionary describing the failing input.
"""

from typing import Any, Dict, Optional


class SpanFmtError(Exception):
    """Base exception for all spanfmt errors.

    Attributes:
        context: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the error.

        Args:
            message: The error message
            context: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        base_message = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_message} (context: {context_str})"
        return base_message


class DurationFormatError(SpanFmtError):
    """Raised when a duration cannot be broken down into its unit buckets."""

    pass
