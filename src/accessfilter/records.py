"""Read already-parsed access-log records from NDJSON.

Each line is one JSON object::

    {"date": "2024-03-15", "remote_addr": "10.0.0.5", "method": "GET",
     "path": "/index.html", "referer": "-", "status": 200}

``date`` may also be a full ISO datetime; only the day is kept.
"""
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Iterable, Iterator

from .models import LogLine

logger = logging.getLogger(__name__)


class RecordError(ValueError):
    """A JSON object that doesn't describe a LogLine."""


def _to_date(raw: Any) -> date:
    if not isinstance(raw, str):
        raise RecordError(f"date must be a string, got {raw!r}")
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise RecordError(f"bad date {raw!r}") from exc


_REQUIRED = ("date", "remote_addr", "method", "path", "status")


def record_to_line(record: dict[str, Any]) -> LogLine:
    """Build a LogLine from a decoded JSON object."""
    missing = [key for key in _REQUIRED if key not in record]
    if missing:
        raise RecordError(f"missing field(s): {', '.join(missing)}")
    status = record["status"]
    if isinstance(status, bool):
        raise RecordError(f"status must be an integer, got {status!r}")
    try:
        code = int(status)
    except (TypeError, ValueError) as exc:
        raise RecordError(f"status must be an integer, got {status!r}") from exc
    return LogLine(
        date=_to_date(record["date"]),
        remote_addr=str(record["remote_addr"]),
        method=str(record["method"]),
        path=str(record["path"]),
        referer=str(record.get("referer") or "-"),
        status=code,
    )


class RecordReader:
    """Stream LogLines out of NDJSON, skipping blank and malformed lines."""

    def __init__(self) -> None:
        self.skipped = 0

    def parse_line(self, line: str, lineno: int = 0) -> LogLine | None:
        line = line.strip()
        if not line:
            return None
        try:
            record = json.loads(line)
            if not isinstance(record, dict):
                raise RecordError("not a JSON object")
            return record_to_line(record)
        except (json.JSONDecodeError, RecordError) as exc:
            self.skipped += 1
            logger.warning("Skipping record at line %d: %s", lineno, exc)
            return None

    def parse_lines(self, lines: Iterable[str]) -> Iterator[LogLine]:
        for lineno, raw in enumerate(lines, start=1):
            entry = self.parse_line(raw, lineno)
            if entry is not None:
                yield entry

    def parse_file(self, path: str) -> Iterator[LogLine]:
        """Stream-parse an NDJSON file, one line at a time."""
        with open(path, encoding="utf-8", errors="replace") as f:
            yield from self.parse_lines(f)


def date_span(lines: Iterable[LogLine]) -> tuple[date, date] | None:
    """Return the first and last date seen, or None when there are no lines."""
    first: date | None = None
    last: date | None = None
    for line in lines:
        if first is None or line.date < first:
            first = line.date
        if last is None or line.date > last:
            last = line.date
    if first is None or last is None:
        return None
    return first, last
