"""Rich-powered tables for filtered lines and the rejection report."""
from __future__ import annotations

from dataclasses import asdict
from datetime import date

from rich import box
from rich.console import Console
from rich.table import Table

from .filters.filterer import FilterReport
from .models import LogLine

_LINE_COLUMNS = ("date", "remote_addr", "method", "path", "referer", "status")


def _status_style(status: int) -> str:
    if status >= 500:
        return "red"
    if status >= 400:
        return "yellow"
    return ""


def print_lines_table(
    console: Console,
    lines: list[LogLine],
    title: str = "Accepted lines",
    max_rows: int = 100,
) -> None:
    """Render LogLines as a Rich table, coloured by status class.

    Args:
        console:   Where to print.
        lines:     Lines to show.
        title:     Table title shown in the header.
        max_rows:  Hard cap, larger lists are truncated with a notice.
    """
    if not lines:
        console.print("[yellow]No lines to display.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in _LINE_COLUMNS:
        table.add_column(col, overflow="fold", max_width=60)

    for line in lines[:max_rows]:
        row = asdict(line)
        table.add_row(*[str(row[c]) for c in _LINE_COLUMNS], style=_status_style(line.status))

    console.print(table)
    if len(lines) > max_rows:
        console.print(
            f"[dim]... and {len(lines) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_report_table(
    console: Console,
    reports: list[FilterReport],
    window: tuple[date, date] | None = None,
    accepted: int | None = None,
) -> None:
    """Render the per-criterion rejection counts as a Rich table."""
    if not reports:
        console.print("[dim]No filter applied.[/dim]")
        return

    table = Table(title="Filters", box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column("Field")
    table.add_column("Pattern", style="bold")
    table.add_column("Removed", justify="right", style="cyan")

    for rank, report in enumerate(reports, start=1):
        table.add_row(str(rank), report.field, report.pattern, str(report.removed_count))

    console.print(table)
    if window is not None:
        console.print(f"[dim]Date window: {window[0]} .. {window[1]}[/dim]")
    if accepted is not None:
        removed = sum(r.removed_count for r in reports)
        console.print(f"[dim]{accepted} lines kept, {removed} removed[/dim]")
