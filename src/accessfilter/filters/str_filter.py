"""Substring, glob and regex matching for address, path and referer.

Pattern syntax::

    /blog            substring
    10.0.*           glob on the whole value (``*``, ``?``, ``[a-z]``, ``[!0-9]``)
    ~^/api/v\\d+     regular expression, searched anywhere in the value
    /blog|/news      any of the alternatives
    !/blog           negation of everything that follows

A regular expression takes the rest of the pattern, ``|`` included.
"""
from __future__ import annotations

import fnmatch
import re

from .base import PatternError

_GLOB_CHARS = frozenset("*?[]")


def _compile_glob(glob: str, pattern: str) -> re.Pattern[str]:
    """Compile a glob anchored on both ends, rejecting unbalanced brackets."""
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        i += 1
        if c == "[":
            close = glob.find("]", i)
            if close == -1:
                raise PatternError(f"unclosed '[' in {glob!r}", pattern)
            if glob[i:close] in ("", "!"):
                raise PatternError(f"empty character class in {glob!r}", pattern)
            i = close + 1
        elif c == "]":
            raise PatternError(f"unmatched ']' in {glob!r}", pattern)
    return re.compile(fnmatch.translate(glob))


class StrFilter:
    """Matcher for one string field.

    A value is accepted when any alternative hits; a leading ``!`` inverts
    the answer.
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        body = pattern
        self.negated = body.startswith("!")
        if self.negated:
            body = body[1:]
        if not body:
            raise PatternError("empty string pattern", pattern)

        self._substrings: list[str] = []
        self._globs: list[re.Pattern[str]] = []
        self._regexes: list[re.Pattern[str]] = []
        if body.startswith("~"):
            self._add_regex(body[1:])
            return
        for alt in body.split("|"):
            if not alt:
                raise PatternError("empty alternative", pattern)
            if alt.startswith("~"):
                raise PatternError("a regular expression must be the only alternative", pattern)
            if _GLOB_CHARS.intersection(alt):
                self._globs.append(_compile_glob(alt, pattern))
            else:
                self._substrings.append(alt)

    def _add_regex(self, source: str) -> None:
        if not source:
            raise PatternError("empty regular expression", self.pattern)
        try:
            self._regexes.append(re.compile(source))
        except re.error as exc:
            raise PatternError(f"bad regular expression: {exc}", self.pattern) from exc

    def accepts(self, value: str) -> bool:
        """Return True if ``value`` satisfies the (possibly negated) pattern."""
        hit = (
            any(s in value for s in self._substrings)
            or any(g.match(value) for g in self._globs)
            or any(r.search(value) for r in self._regexes)
        )
        return hit != self.negated

    matches = accepts

    def __repr__(self) -> str:
        return f"StrFilter({self.pattern!r})"
