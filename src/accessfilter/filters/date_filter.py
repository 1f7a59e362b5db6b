"""Date and date-interval matching.

Accepted patterns (``/`` and ``-`` are interchangeable inside a date)::

    2024/03/15          that day
    2024/03             the whole month
    2024                the whole year
    03/15               that day, year taken from the input's date range
    15                  that day, year and month taken from the input's range
    2024/03/01..03/10   closed interval (``-`` also works with ``/`` dates)
    >2024/03/10         after, ``>=`` to include the day itself
    <2024/03/10         before, ``<=`` to include the day itself
"""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

from .base import PatternError

_ONE_DAY = timedelta(days=1)
_PART_SEP_RE = re.compile(r"[/-]")
_COMPARATORS = (">=", "<=", ">", "<")


class DateFilter:
    """Closed date interval, either side possibly open.

    Built once from a user pattern, then queried with :meth:`contains`.
    ``default_year`` and ``default_month`` fill in the parts a short pattern
    leaves out; when they are ``None`` such a pattern is rejected.
    """

    def __init__(
        self,
        pattern: str,
        default_year: int | None = None,
        default_month: int | None = None,
    ) -> None:
        self.pattern = pattern
        self._default_year = default_year
        self._default_month = default_month
        self.min_date, self.max_date = self._compile(pattern.strip())

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def contains(self, day: date) -> bool:
        """Return True if ``day`` falls in the interval, bounds included."""
        if self.min_date is not None and day < self.min_date:
            return False
        if self.max_date is not None and day > self.max_date:
            return False
        return True

    matches = contains

    def __repr__(self) -> str:
        return f"DateFilter({self.min_date} .. {self.max_date})"

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _compile(self, pattern: str) -> tuple[date | None, date | None]:
        if not pattern:
            raise PatternError("empty date pattern", pattern)

        for op in _COMPARATORS:
            if pattern.startswith(op):
                start, end = self._span(pattern[len(op):].strip())
                try:
                    if op == ">":
                        return end + _ONE_DAY, None
                    if op == "<":
                        return None, start - _ONE_DAY
                except OverflowError as exc:
                    raise PatternError("no date lies beyond the calendar limit", pattern) from exc
                if op == ">=":
                    return start, None
                return None, end

        if ".." in pattern:
            left, _, right = pattern.partition("..")
        elif "/" in pattern and "-" in pattern:
            parts = pattern.split("-")
            if len(parts) != 2:
                raise PatternError("a date range needs exactly two ends", pattern)
            left, right = parts
        else:
            return self._span(pattern)

        start, _ = self._span(left.strip())
        _, end = self._span(right.strip())
        if start > end:
            raise PatternError("range start is after range end", pattern)
        return start, end

    def _span(self, text: str) -> tuple[date, date]:
        """Return the first and last day denoted by a single date spec."""
        parts = _PART_SEP_RE.split(text) if text else []
        if not parts or not all(p.isascii() and p.isdigit() for p in parts):
            raise PatternError(f"not a date: {text!r}", self.pattern)
        if len(parts) > 3:
            raise PatternError(f"too many parts in {text!r}", self.pattern)

        year: int | None
        month: int | None
        day: int | None = None
        if len(parts) == 3:
            if len(parts[0]) != 4:
                raise PatternError(f"expected a 4 digit year in {text!r}", self.pattern)
            year, month, day = (int(p) for p in parts)
        elif len(parts) == 2 and len(parts[0]) == 4:
            year, month = int(parts[0]), int(parts[1])
        elif len(parts) == 2:
            year = self._need_year(text)
            month, day = int(parts[0]), int(parts[1])
        elif len(parts) == 1 and len(parts[0]) == 4:
            year, month = int(parts[0]), None
        elif len(parts) == 1 and len(parts[0]) <= 2:
            year = self._need_year(text)
            month = self._need_month(text)
            day = int(parts[0])
        else:
            raise PatternError(f"not a date: {text!r}", self.pattern)

        try:
            if month is None:
                return date(year, 1, 1), date(year, 12, 31)
            if day is None:
                last = calendar.monthrange(year, month)[1]
                return date(year, month, 1), date(year, month, last)
            single = date(year, month, day)
        except ValueError as exc:
            raise PatternError(f"invalid date {text!r}: {exc}", self.pattern) from exc
        return single, single

    def _need_year(self, text: str) -> int:
        if self._default_year is None:
            raise PatternError(
                f"year missing in {text!r} and the logs span several years",
                self.pattern,
            )
        return self._default_year

    def _need_month(self, text: str) -> int:
        if self._default_month is None:
            raise PatternError(
                f"month missing in {text!r} and the logs span several months",
                self.pattern,
            )
        return self._default_month
