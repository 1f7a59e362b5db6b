"""HTTP method matching."""
from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Methods a server is expected to log; anything else is still matched as-is.
KNOWN_METHODS: frozenset[str] = frozenset(
    {"GET", "HEAD", "POST", "PUT", "DELETE", "CONNECT", "OPTIONS", "TRACE", "PATCH"}
)


class MethodFilter:
    """Set of HTTP method names, compared case-insensitively.

    Never fails: an unknown token such as ``PROPFIND`` is kept and compared
    literally, with a warning. ``!`` in front negates the set.
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        body = pattern.strip()
        self.negated = body.startswith("!")
        if self.negated:
            body = body[1:]
        self.methods: frozenset[str] = frozenset(
            token.strip().upper() for token in body.split(",") if token.strip()
        )
        if not self.methods:
            logger.warning(
                "Method pattern %r names no method: it %s every line",
                pattern, "accepts" if self.negated else "rejects",
            )
        elif self.unknown_methods:
            logger.warning(
                "Method pattern %r has unknown methods %s, matched literally",
                pattern, ", ".join(sorted(self.unknown_methods)),
            )

    @property
    def unknown_methods(self) -> frozenset[str]:
        return self.methods - KNOWN_METHODS

    def contains(self, method: str) -> bool:
        return (method.upper() in self.methods) != self.negated

    matches = contains

    def __repr__(self) -> str:
        return f"MethodFilter({sorted(self.methods)}, negated={self.negated})"
