"""HTTP status code matching.

``404``, ``4xx``, ``400-404`` and comma-separated mixes of them, with an
optional leading ``!`` that negates the whole list.
"""
from __future__ import annotations

import re

from .base import PatternError

_CODE_RE = re.compile(r"^[1-5]\d\d$")
_CLASS_RE = re.compile(r"^([1-5])[xX][xX]$")
_RANGE_RE = re.compile(r"^([1-5]\d\d)\s*-\s*([1-5]\d\d)$")


class StatusFilter:
    """Union of inclusive status code ranges."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        body = pattern.strip()
        self.negated = body.startswith("!")
        if self.negated:
            body = body[1:]
        self.ranges: list[tuple[int, int]] = [
            self._parse_item(item.strip()) for item in body.split(",")
        ]

    def _parse_item(self, item: str) -> tuple[int, int]:
        if _CODE_RE.match(item):
            code = int(item)
            return code, code
        m = _CLASS_RE.match(item)
        if m:
            base = int(m.group(1)) * 100
            return base, base + 99
        m = _RANGE_RE.match(item)
        if m:
            low, high = int(m.group(1)), int(m.group(2))
            if low > high:
                raise PatternError(f"range {item!r} goes backwards", self.pattern)
            return low, high
        if not item:
            raise PatternError("empty status item", self.pattern)
        raise PatternError(
            f"{item!r} is not a status code, a class like 4xx or a range like 400-404",
            self.pattern,
        )

    def accepts(self, status: int) -> bool:
        hit = any(low <= status <= high for low, high in self.ranges)
        return hit != self.negated

    matches = accepts

    def __repr__(self) -> str:
        return f"StatusFilter({self.pattern!r})"
