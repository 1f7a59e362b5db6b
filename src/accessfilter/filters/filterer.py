"""Ordered filter chain with per-criterion rejection counts.

Criteria are always evaluated in the same order (date, remote address,
method, path, referer, status) and the chain stops at the first one that
rejects a line. That criterion alone is charged for the rejection, so each
line adds at most one to the counts.

Usage::

    filterer = Filterer(FilterConfig(ip="10.0.*", status="4xx"), first, last)
    kept = [line for line in lines if filterer.accepts(line)]
    for row in filterer.report():
        print(row.field, row.pattern, row.removed_count)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Iterator

from ..config import FilterConfig
from ..models import LogLine
from .base import PatternError
from .date_filter import DateFilter
from .filter import Filter, FilterKind, Predicate
from .method_filter import MethodFilter
from .status_filter import StatusFilter
from .str_filter import StrFilter

logger = logging.getLogger(__name__)


def unique_year_month(first_date: date, last_date: date) -> tuple[int | None, int | None]:
    """Return the year and month shared by both dates, ``None`` where they differ."""
    if first_date.year != last_date.year:
        return None, None
    if first_date.month != last_date.month:
        return first_date.year, None
    return first_date.year, first_date.month


@dataclass
class Filtering:
    """One active criterion: its pattern, its filter and how many lines it removed."""

    pattern: str
    filter: Filter
    removed_count: int = 0

    @property
    def field_name(self) -> str:
        return self.filter.field_name()


@dataclass(frozen=True)
class FilterReport:
    """What the reporting layer gets for each criterion once the stream ends."""

    field: str
    pattern: str
    removed_count: int


class Filterer:
    """Build the active criteria from a FilterConfig and apply them to lines.

    Construction is all-or-nothing: the first bad pattern raises a
    :class:`PatternError` whose ``field`` names the offending criterion.
    """

    def __init__(self, config: FilterConfig, first_date: date, last_date: date) -> None:
        self.first_date = first_date
        self.last_date = last_date
        default_year, default_month = unique_year_month(first_date, last_date)

        builders: list[tuple[FilterKind, str | None, Callable[[str], Predicate]]] = [
            (FilterKind.DATE, config.date, lambda s: DateFilter(s, default_year, default_month)),
            (FilterKind.IP, config.ip, StrFilter),
            (FilterKind.METHOD, config.method, MethodFilter),
            (FilterKind.PATH, config.path, StrFilter),
            (FilterKind.REFERER, config.referer, StrFilter),
            (FilterKind.STATUS, config.status, StatusFilter),
        ]
        self.filterings: list[Filtering] = []
        for kind, pattern, build in builders:
            if pattern is None:
                continue
            try:
                predicate = build(pattern)
            except PatternError as exc:
                exc.field = kind.value
                raise
            self.filterings.append(Filtering(pattern, Filter(kind, predicate)))
            logger.debug("%s filter %r -> %r", kind.value, pattern, predicate)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def accepts(self, line: LogLine) -> bool:
        """Return False at the first criterion rejecting ``line`` and charge it."""
        for filtering in self.filterings:
            if not filtering.filter.accepts(line):
                filtering.removed_count += 1
                return False
        return True

    def filter(self, lines: Iterable[LogLine]) -> Iterator[LogLine]:
        """Yield the lines that pass every criterion."""
        for line in lines:
            if self.accepts(line):
                yield line

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_filters(self) -> bool:
        return bool(self.filterings)

    def date_filter(self) -> DateFilter | None:
        for filtering in self.filterings:
            if filtering.filter.kind is FilterKind.DATE:
                return filtering.filter.predicate  # type: ignore[return-value]
        return None

    def date_window(self) -> tuple[date, date]:
        """Dates actually covered by the output: the date filter clamped to the input."""
        start, end = self.first_date, self.last_date
        date_filter = self.date_filter()
        if date_filter is not None:
            if date_filter.min_date is not None:
                start = max(start, date_filter.min_date)
            if date_filter.max_date is not None:
                end = min(end, date_filter.max_date)
        return start, end

    @property
    def removed_count(self) -> int:
        return sum(f.removed_count for f in self.filterings)

    def report(self) -> list[FilterReport]:
        return [
            FilterReport(f.field_name, f.pattern, f.removed_count)
            for f in self.filterings
        ]

    def merge_counts(self, other: "Filterer") -> None:
        """Add the counts of a Filterer built from the same configuration.

        Lets separate workers each own a Filterer and combine them afterwards.
        """
        mine = [(f.filter.kind, f.pattern) for f in self.filterings]
        theirs = [(f.filter.kind, f.pattern) for f in other.filterings]
        if mine != theirs:
            raise ValueError("cannot merge counts of filterers with different criteria")
        for target, source in zip(self.filterings, other.filterings):
            target.removed_count += source.removed_count

    def __repr__(self) -> str:
        return f"Filterer({len(self.filterings)} filters)"
