"""Record type consumed by the filter chain."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LogLine:
    """One already-parsed access-log entry.

    Produced by the parsing collaborator; the filters only read it.
    """

    date: date
    remote_addr: str
    method: str
    path: str
    referer: str
    status: int
