"""Error type shared by the field filters."""
from __future__ import annotations


class PatternError(ValueError):
    """Raised when a filter pattern can't be compiled.

    ``field`` is filled in by the Filterer so that the caller can tell the
    user which option was wrong.
    """

    def __init__(self, message: str, pattern: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.pattern = pattern
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"invalid {self.field} pattern {self.pattern!r}: {self.message}"
        return f"invalid pattern {self.pattern!r}: {self.message}"
