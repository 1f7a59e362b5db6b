"""Filter: one compiled predicate bound to one LogLine field."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from ..models import LogLine
from .date_filter import DateFilter
from .method_filter import MethodFilter
from .status_filter import StatusFilter
from .str_filter import StrFilter

Predicate = Union[DateFilter, StrFilter, MethodFilter, StatusFilter]


class FilterKind(Enum):
    """The six filterable fields, in evaluation order.

    The value is the label shown in diagnostics and reports.
    """

    DATE = "date"
    IP = "remote address"
    METHOD = "method"
    PATH = "path"
    REFERER = "referer"
    STATUS = "status"


_FIELD_GETTERS: dict[FilterKind, Callable[[LogLine], Any]] = {
    FilterKind.DATE: lambda line: line.date,
    FilterKind.IP: lambda line: line.remote_addr,
    FilterKind.METHOD: lambda line: line.method,
    FilterKind.PATH: lambda line: line.path,
    FilterKind.REFERER: lambda line: line.referer,
    FilterKind.STATUS: lambda line: line.status,
}

_PREDICATE_TYPES: dict[FilterKind, type] = {
    FilterKind.DATE: DateFilter,
    FilterKind.IP: StrFilter,
    FilterKind.METHOD: MethodFilter,
    FilterKind.PATH: StrFilter,
    FilterKind.REFERER: StrFilter,
    FilterKind.STATUS: StatusFilter,
}


@dataclass(frozen=True)
class Filter:
    """A predicate tagged with the field it tests."""

    kind: FilterKind
    predicate: Predicate

    def __post_init__(self) -> None:
        expected = _PREDICATE_TYPES[self.kind]
        if not isinstance(self.predicate, expected):
            raise TypeError(
                f"{self.kind.name} filter needs a {expected.__name__}, "
                f"got {type(self.predicate).__name__}"
            )

    def accepts(self, line: LogLine) -> bool:
        return self.predicate.matches(_FIELD_GETTERS[self.kind](line))

    def field_name(self) -> str:
        return self.kind.value
