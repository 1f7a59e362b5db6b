"""Tests for Filtering / Filterer: ordering, short-circuit and counting."""
from __future__ import annotations

from datetime import date

import pytest

from accessfilter.config import FilterConfig
from accessfilter.filters.base import PatternError
from accessfilter.filters.date_filter import DateFilter
from accessfilter.filters.filter import FilterKind
from accessfilter.filters.filterer import FilterReport, Filterer, unique_year_month

MARCH_1 = date(2024, 3, 1)
MARCH_31 = date(2024, 3, 31)


def _counts(filterer: Filterer) -> dict[str, int]:
    return {r.field: r.removed_count for r in filterer.report()}


# ---------------------------------------------------------------------------
# unique_year_month
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("first,last,expected", [
    (date(2024, 3, 1), date(2024, 3, 31), (2024, 3)),
    (date(2024, 3, 1), date(2024, 4, 1), (2024, None)),
    (date(2023, 12, 31), date(2024, 1, 1), (None, None)),
    (date(2023, 3, 1), date(2024, 3, 1), (None, None)),
])
def test_unique_year_month(first: date, last: date, expected: tuple) -> None:
    assert unique_year_month(first, last) == expected


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_no_criteria(self, make_line) -> None:
        filterer = Filterer(FilterConfig(), MARCH_1, MARCH_31)
        assert not filterer.has_filters()
        assert filterer.date_filter() is None
        for line in (make_line(), make_line(status=500), make_line(method="DELETE")):
            assert filterer.accepts(line)
        assert filterer.report() == []
        assert filterer.removed_count == 0

    def test_fixed_order_regardless_of_config_order(self) -> None:
        config = FilterConfig(status="4xx", referer="x", path="/", method="GET", ip="10.", date="2024/03")
        filterer = Filterer(config, MARCH_1, MARCH_31)
        kinds = [f.filter.kind for f in filterer.filterings]
        assert kinds == list(FilterKind)

    def test_only_configured_fields(self) -> None:
        filterer = Filterer(FilterConfig(path="/blog", status="404"), MARCH_1, MARCH_31)
        assert [f.field_name for f in filterer.filterings] == ["path", "status"]
        assert [f.pattern for f in filterer.filterings] == ["/blog", "404"]
        assert all(f.removed_count == 0 for f in filterer.filterings)

    def test_date_filter_accessor(self) -> None:
        filterer = Filterer(FilterConfig(ip="10.", date="15"), MARCH_1, MARCH_31)
        date_filter = filterer.date_filter()
        assert isinstance(date_filter, DateFilter)
        assert date_filter.min_date == date(2024, 3, 15)

    def test_yearless_date_fails_across_years(self) -> None:
        with pytest.raises(PatternError) as info:
            Filterer(FilterConfig(date="03/15"), date(2023, 12, 1), date(2024, 3, 31))
        assert info.value.field == "date"
        assert info.value.pattern == "03/15"

    def test_yearless_date_succeeds_within_a_year(self) -> None:
        filterer = Filterer(FilterConfig(date="03/15"), date(2024, 1, 1), date(2024, 12, 31))
        assert filterer.date_filter().contains(date(2024, 3, 15))

    def test_first_error_wins_and_names_field(self) -> None:
        config = FilterConfig(ip="10.[", status="abc")
        with pytest.raises(PatternError) as info:
            Filterer(config, MARCH_1, MARCH_31)
        assert info.value.field == "remote address"
        assert "remote address" in str(info.value)

    def test_status_error_names_field(self) -> None:
        with pytest.raises(PatternError) as info:
            Filterer(FilterConfig(method="FOO", status="7xx"), MARCH_1, MARCH_31)
        assert info.value.field == "status"

    def test_method_never_fails(self) -> None:
        filterer = Filterer(FilterConfig(method="NOT-A-METHOD"), MARCH_1, MARCH_31)
        assert filterer.has_filters()


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

class TestAccepts:
    def test_single_criterion_counts_rejections(self, make_line) -> None:
        filterer = Filterer(FilterConfig(status="404"), MARCH_1, MARCH_31)
        assert filterer.accepts(make_line(status=404))
        assert not filterer.accepts(make_line(status=200))
        assert not filterer.accepts(make_line(status=500))
        assert _counts(filterer) == {"status": 2}

    def test_short_circuit_charges_first_failure_only(self, make_line) -> None:
        filterer = Filterer(FilterConfig(ip="192.168.*", status="5xx"), MARCH_1, MARCH_31)
        # fails both criteria
        assert not filterer.accepts(make_line(remote_addr="10.0.0.1", status=200))
        assert _counts(filterer) == {"remote address": 1, "status": 0}

    def test_later_criterion_not_evaluated(self, make_line, monkeypatch) -> None:
        filterer = Filterer(FilterConfig(method="POST", path="/api"), MARCH_1, MARCH_31)
        path_filter = filterer.filterings[1].filter.predicate
        calls: list[str] = []
        monkeypatch.setattr(path_filter, "matches", lambda value: calls.append(value) or True)
        filterer.accepts(make_line(method="GET"))
        assert calls == []

    def test_date_criterion(self, make_line) -> None:
        filterer = Filterer(FilterConfig(date="2024-03-15"), MARCH_1, MARCH_31)
        assert filterer.accepts(make_line(date=date(2024, 3, 15)))
        assert not filterer.accepts(make_line(date=date(2024, 3, 16)))
        assert filterer.removed_count == 1

    def test_end_to_end_address_and_status(self, make_line) -> None:
        filterer = Filterer(FilterConfig(ip="10.0.*", status="4xx"), MARCH_1, MARCH_31)
        lines = [
            make_line(remote_addr="10.0.0.5", status=404),
            make_line(remote_addr="10.0.0.5", status=200),
            make_line(remote_addr="192.168.0.1", status=404),
        ]
        accepted = [line for line in lines if filterer.accepts(line)]
        assert accepted == [lines[0]]
        assert _counts(filterer) == {"remote address": 1, "status": 1}

    def test_filter_stream(self, make_line) -> None:
        filterer = Filterer(FilterConfig(method="GET"), MARCH_1, MARCH_31)
        lines = [make_line(method="GET"), make_line(method="POST"), make_line(method="get")]
        assert list(filterer.filter(lines)) == [lines[0], lines[2]]
        assert filterer.removed_count == 1


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------

class TestReporting:
    def test_report_rows(self, make_line) -> None:
        filterer = Filterer(FilterConfig(path="!/static/*", status="!5xx"), MARCH_1, MARCH_31)
        filterer.accepts(make_line(path="/static/app.css"))
        filterer.accepts(make_line(status=503))
        filterer.accepts(make_line(status=502))
        assert filterer.report() == [
            FilterReport("path", "!/static/*", 1),
            FilterReport("status", "!5xx", 2),
        ]

    def test_date_window_without_date_filter(self) -> None:
        filterer = Filterer(FilterConfig(), MARCH_1, MARCH_31)
        assert filterer.date_window() == (MARCH_1, MARCH_31)

    def test_date_window_clamped(self) -> None:
        filterer = Filterer(FilterConfig(date=">=2024/03/10"), MARCH_1, MARCH_31)
        assert filterer.date_window() == (date(2024, 3, 10), MARCH_31)
        filterer = Filterer(FilterConfig(date="2024/02/20..2024/03/05"), MARCH_1, MARCH_31)
        assert filterer.date_window() == (MARCH_1, date(2024, 3, 5))

    def test_merge_counts(self, make_line) -> None:
        config = FilterConfig(method="GET", status="2xx")
        a = Filterer(config, MARCH_1, MARCH_31)
        b = Filterer(config, MARCH_1, MARCH_31)
        a.accepts(make_line(method="POST"))
        b.accepts(make_line(method="POST"))
        b.accepts(make_line(status=404))
        a.merge_counts(b)
        assert _counts(a) == {"method": 2, "status": 1}
        assert _counts(b) == {"method": 1, "status": 1}

    def test_merge_counts_needs_same_criteria(self) -> None:
        a = Filterer(FilterConfig(method="GET"), MARCH_1, MARCH_31)
        b = Filterer(FilterConfig(status="404"), MARCH_1, MARCH_31)
        with pytest.raises(ValueError):
            a.merge_counts(b)

    def test_repr(self) -> None:
        assert "2 filters" in repr(Filterer(FilterConfig(ip="a", path="b"), MARCH_1, MARCH_31))
