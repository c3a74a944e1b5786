"""Rich-powered table rendering for columnized log lines."""
from __future__ import annotations

from datetime import datetime

from rich import box
from rich.console import Console
from rich.table import Table

from ..columnizers.models import ColumnizedLine, Priority
from ..columnizers.timestamps import NO_TIMESTAMP

_console = Console()

_SEVERITY_STYLE = {
    "ERROR": "red",
    "FATAL": "bold red",
    "CRITICAL": "bold red",
    "WARN": "yellow",
    "WARNING": "yellow",
    "DEBUG": "dim",
    "TRACE": "dim",
}


def severity_style(level: str) -> str:
    return _SEVERITY_STYLE.get(level.upper(), "")


def format_timestamp(ts: datetime) -> str:
    """Render with millisecond precision; the sentinel renders as ``-``."""
    if ts == NO_TIMESTAMP:
        return "-"
    return ts.strftime("%Y-%m-%d %H:%M:%S,") + f"{ts.microsecond // 1000:03d}"


def print_lines_table(
    lines: list[ColumnizedLine],
    columns: list[str] | None = None,
    title: str = "Log Lines",
    max_width: int = 60,
    console: Console | None = None,
) -> None:
    """Render columnized lines as a Rich table.

    Args:
        lines:     Columnized lines, all from the same columnizer.
        columns:   Column names to display. Defaults to every column of the
                   first line.
        title:     Table title shown in the header.
        max_width: Width cap per column; longer values are folded.
    """
    out = console or _console
    if not lines:
        out.print("[yellow]No lines to display.[/yellow]")
        return

    cols = columns or list(lines[0].names)
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=max_width)

    for line in lines:
        values = line.as_dict()
        style = severity_style(values.get("Severity", ""))
        table.add_row(*[values.get(c, "") for c in cols], style=style)

    out.print(table)


def print_column_names(
    names: list[str],
    keys: dict[int, str] | None = None,
    title: str = "Columns",
    console: Console | None = None,
) -> None:
    """List column names with their 0-based index and tag key, if any."""
    keys = keys or {}
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", justify="right", width=4)
    table.add_column("Column", style="bold")
    table.add_column("Tag key", style="cyan")
    for index, name in enumerate(names):
        table.add_row(str(index), name, keys.get(index, ""))
    (console or _console).print(table)


def print_priorities(
    ranking: list[tuple[str, Priority]],
    title: str = "Match confidence",
    console: Console | None = None,
) -> None:
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Columnizer")
    table.add_column("Priority", style="cyan")
    for name, priority in ranking:
        table.add_row(name, priority.name)
    (console or _console).print(table)


def print_timestamps_table(
    rows: list[tuple[int, datetime, datetime]],
    offset_ms: int,
    title: str = "Timestamps",
    console: Console | None = None,
) -> None:
    """Render (line number, raw timestamp, corrected timestamp) rows."""
    table = Table(title=f"{title} (offset {offset_ms:+d} ms)", box=box.ROUNDED)
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Timestamp")
    table.add_column("Corrected", style="cyan")
    for number, raw, corrected in rows:
        table.add_row(str(number), format_timestamp(raw), format_timestamp(corrected))
    (console or _console).print(table)
