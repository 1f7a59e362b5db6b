"""accessfilter command-line entry point.

Commands:
    accessfilter filter <file> [criteria]   Keep the records matching every criterion
    accessfilter check  [criteria]          Validate criteria without reading data
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

import click
from rich.console import Console

from .config import FilterConfig, Settings
from .filters.base import PatternError
from .filters.filterer import Filterer
from .models import LogLine
from .records import RecordReader, date_span
from .report import print_lines_table, print_report_table

console = Console()
err_console = Console(stderr=True)

# ── Helpers ─────────────────────────────────────────────────────────────────

_FILTER_OPTIONS: list[tuple[str, str, str]] = [
    ("--date", "-d", "Date or range: 2024/03/15, 2024/03, 03/15, 2024/03/01..2024/03/10, >2024/03/10."),
    ("--ip", "-i", "Remote address: substring, glob (10.0.*), ~regex, a|b, !negation."),
    ("--method", "-m", "HTTP methods, comma separated: GET,POST or !GET."),
    ("--path", "-p", "Path: substring, glob (/api/*), ~regex, a|b, !negation."),
    ("--referer", "-r", "Referer: substring, glob, ~regex, a|b, !negation."),
    ("--status", "-s", "Status: 404, 4xx, 400-404, comma separated, !negation."),
]


def _filter_options(func: Callable[..., Any]) -> Callable[..., Any]:
    for long_name, short_name, help_text in reversed(_FILTER_OPTIONS):
        func = click.option(long_name, short_name, default=None, help=help_text)(func)
    return func


def _build_filterer(
    settings: Settings,
    first_date: date,
    last_date: date,
    **patterns: str | None,
) -> Filterer:
    config = settings.filter_config().merged(FilterConfig(**patterns))
    try:
        return Filterer(config, first_date, last_date)
    except PatternError as exc:
        raise click.UsageError(str(exc)) from exc


def _line_to_json(line: LogLine) -> str:
    return json.dumps(asdict(line), default=str)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="accessfilter")
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Filter parsed access-log records by date, address, method, path, referer and status."""
    settings = Settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


# ── filter ───────────────────────────────────────────────────────────────────


@main.command(name="filter")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_filter_options
@click.option(
    "--output", "-o", "output_fmt", default="json",
    type=click.Choice(["json", "table"], case_sensitive=False),
    help="How to print the kept records.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max records to print (0 = all).")
@click.option("--quiet", "-q", is_flag=True, help="Don't print the filter report.")
@click.pass_obj
def filter_cmd(
    settings: Settings,
    file: Path,
    output_fmt: str,
    limit: int,
    quiet: bool,
    **patterns: str | None,
) -> None:
    """Keep the records of FILE (NDJSON) that pass every criterion.

    Criteria are checked in the order date, ip, method, path, referer,
    status; a rejected record is charged to the first criterion it fails.

    \b
    Examples:
      accessfilter filter access.ndjson --status 4xx
      accessfilter filter access.ndjson --ip "10.0.*" --method GET,HEAD
      accessfilter filter access.ndjson --date 2024/03 --path "!/static/*" -o table
    """
    reader = RecordReader()
    lines = list(reader.parse_file(str(file)))
    if reader.skipped:
        err_console.print(f"[yellow]Skipped {reader.skipped} malformed records.[/yellow]")

    span = date_span(lines)
    if span is None:
        today = date.today()
        span = (today, today)
    filterer = _build_filterer(settings, span[0], span[1], **patterns)

    kept = list(filterer.filter(lines))

    shown = kept[:limit] if limit else kept
    if output_fmt == "table":
        print_lines_table(console, shown, title=f"{file.name}", max_rows=len(shown))
    else:
        for line in shown:
            click.echo(_line_to_json(line))

    if not quiet:
        print_report_table(
            err_console,
            filterer.report(),
            window=filterer.date_window() if lines else None,
            accepted=len(kept),
        )


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@_filter_options
@click.option(
    "--first-date", type=click.DateTime(formats=["%Y-%m-%d", "%Y/%m/%d"]), default=None,
    help="First date of the logs, used to complete short date patterns (default: today).",
)
@click.option(
    "--last-date", type=click.DateTime(formats=["%Y-%m-%d", "%Y/%m/%d"]), default=None,
    help="Last date of the logs (default: first date).",
)
@click.pass_obj
def check(
    settings: Settings,
    first_date: datetime | None,
    last_date: datetime | None,
    **patterns: str | None,
) -> None:
    """Validate filter patterns and show what would be applied.

    \b
    Examples:
      accessfilter check --status 4xx,500-503
      accessfilter check --date 03/10..03/20 --first-date 2024-01-01 --last-date 2024-12-31
    """
    first = first_date.date() if first_date else date.today()
    last = last_date.date() if last_date else first
    if last < first:
        raise click.UsageError("--last-date is before --first-date")
    filterer = _build_filterer(settings, first, last, **patterns)
    print_report_table(console, filterer.report(), window=filterer.date_window())


if __name__ == "__main__":
    main()
