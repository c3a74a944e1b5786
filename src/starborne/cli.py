"""Starborne CLI — entry point.

Commands:
    starborne columns                       List the column layout
    starborne detect     <file>             Match confidence per columnizer
    starborne split      <file>             Columnize and display lines
    starborne timestamps <file>             Raw and offset-corrected timestamps
    starborne shift      <file> -l N -t T   Derive the offset from a time edit
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .columnizers.base import LogLineColumnizer
from .columnizers.models import ColumnizedLine, Priority
from .columnizers.server import DATE_COLUMN, TAG_COLUMNS, TIME_COLUMN, ServerColumnizer
from .columnizers.timestamps import parse_time_of_day, parse_timestamp, shift as shift_instant
from .config import settings
from .output.csv_output import CsvOutput
from .plugins.registry import default_registry
from .visualization.tables import (
    print_column_names,
    print_lines_table,
    print_priorities,
    print_timestamps_table,
    severity_style,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _read_lines(path: Path) -> list[str]:
    with open(path, encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\r\n") for line in f]


def _columnizer_for(path: Path, lines: list[str]) -> LogLineColumnizer:
    """Pick the best columnizer for *path*; fall back to the server one."""
    default_registry.discover()
    columnizer, priority = default_registry.select(path.name, lines[: settings.sample_lines])
    if columnizer is None or priority is Priority.NOT_SUPPORTED:
        err_console.print(
            f"[yellow]{escape(path.name)} is not a recognised log file name; "
            "columnizing as Starborne Server anyway.[/yellow]"
        )
        return ServerColumnizer()
    logger.debug("Using %s (%s) for %s", columnizer.name, priority.name, path)
    return columnizer


def _start_offset(columnizer: LogLineColumnizer, offset: int | None) -> None:
    value = settings.time_offset_ms if offset is None else offset
    columnizer.set_time_offset(value)


def _corrected(columnizer: LogLineColumnizer, line: str):
    return shift_instant(columnizer.timestamp(line), columnizer.get_time_offset())


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="starborne")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """starborne — columnize Starborne Server logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )


# ── columns ──────────────────────────────────────────────────────────────────


@main.command()
def columns() -> None:
    """List the columns produced for every line."""
    columnizer = ServerColumnizer()
    keys = {index: key for index, (key, _) in TAG_COLUMNS.items()}
    print_column_names(columnizer.column_names(), keys, title=columnizer.name, console=console)


# ── detect ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def detect(file: Path) -> None:
    """Show how confident each columnizer is about FILE.

    Only the file name and its first lines are considered.
    """
    default_registry.discover()
    samples = _read_lines(file)[: settings.sample_lines]
    ranking = [(c.name, p) for c, p in default_registry.rank(file.name, samples)]
    print_priorities(ranking, title=f"Match confidence — {file.name}", console=console)


# ── split ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_fmt", default="table",
    type=click.Choice(["table", "stream", "csv", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max lines to display (0 = all).")
@click.option("--columns", "columns_opt", default="", help="Comma-separated column names to include.")
def split(file: Path, output_fmt: str, limit: int, columns_opt: str) -> None:
    """Split every line of FILE into columns.

    \b
    Examples:
      starborne split Prosper.log
      starborne split Prosper.log --columns Time,Severity,Message
      starborne split Prosper.log --output csv > prosper.csv
    """
    raw_lines = _read_lines(file)
    columnizer = _columnizer_for(file, raw_lines)

    names = columnizer.column_names()
    selected = [c.strip() for c in columns_opt.split(",") if c.strip()]
    unknown = [c for c in selected if c not in names]
    if unknown:
        raise click.BadParameter(
            f"Unknown column(s): {', '.join(unknown)}. Choose from: {', '.join(names)}",
            param_hint="--columns",
        )

    if limit:
        raw_lines = raw_lines[:limit]
    lines: list[ColumnizedLine] = [columnizer.split(line) for line in raw_lines]

    if output_fmt == "json":
        for line in lines:
            values = line.as_dict()
            out = {c: values[c] for c in selected} if selected else values
            click.echo(json.dumps(out))
        return

    if output_fmt == "csv":
        click.echo(CsvOutput().render(lines, selected or None), nl=False)
        return

    if output_fmt == "table":
        print_lines_table(
            lines, selected or None, title=file.name, max_width=settings.max_width, console=console
        )
        return

    # stream
    for line in lines:
        values = line.as_dict()
        if not values.get("Date"):
            console.print(escape(line.log_line), highlight=False)
            continue
        level = values.get("Severity", "")
        style = severity_style(level) or "green"
        console.print(
            f"[dim]{escape(values['Date'])} {escape(values['Time'])}[/dim] "
            f"[{style}]{escape(level):8}[/{style}] "
            f"[cyan]{escape(values.get('Host', ''))}[/cyan] {escape(values.get('Message', ''))}",
            highlight=False,
        )


# ── timestamps ───────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--offset", "-O", default=None, type=int, help="Time offset in milliseconds.")
@click.option("--limit", "-n", default=0, type=int, help="Max lines to display (0 = all).")
def timestamps(file: Path, offset: int | None, limit: int) -> None:
    """Print the raw and offset-corrected timestamp of every line of FILE."""
    raw_lines = _read_lines(file)
    columnizer = _columnizer_for(file, raw_lines)
    _start_offset(columnizer, offset)

    if limit:
        raw_lines = raw_lines[:limit]
    rows = [
        (number, columnizer.timestamp(line), _corrected(columnizer, line))
        for number, line in enumerate(raw_lines, start=1)
    ]
    print_timestamps_table(rows, columnizer.get_time_offset(), title=file.name, console=console)


# ── shift ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--line", "-l", "line_no", required=True, type=int, help="1-based line to edit.")
@click.option("--to", "-t", "new_value", required=True, help="New time (HH:mm:ss,fff or full timestamp).")
@click.option("--limit", "-n", default=0, type=int, help="Max lines to display (0 = all).")
def shift(file: Path, line_no: int, new_value: str, limit: int) -> None:
    """Edit the Time of one line and derive the offset for the whole file.

    \b
    Examples:
      starborne shift Prosper.log --line 1 --to 12:00:00,000
      starborne shift Prosper.log -l 3 -t "2024-01-02 12:00:00,000"
    """
    raw_lines = _read_lines(file)
    if not 1 <= line_no <= len(raw_lines):
        raise click.BadParameter(
            f"{file.name} has {len(raw_lines)} line(s)", param_hint="--line"
        )
    if parse_timestamp(new_value) is None and parse_time_of_day(new_value) is None:
        raise click.BadParameter(
            "expected HH:mm:ss,fff or yyyy-MM-dd HH:mm:ss,fff", param_hint="--to"
        )

    columnizer = _columnizer_for(file, raw_lines)
    _start_offset(columnizer, 0)

    target = columnizer.split(raw_lines[line_no - 1])
    old_value = target[TIME_COLUMN].full_value
    if " " in new_value:
        old_value = f"{target[DATE_COLUMN].full_value} {old_value}"
    if parse_timestamp(old_value) is None and parse_time_of_day(old_value) is None:
        raise click.UsageError(f"line {line_no} of {file.name} has no timestamp")
    columnizer.push_value(TIME_COLUMN, new_value, old_value)

    offset = columnizer.get_time_offset()
    err_console.print(
        f"Line {line_no}: {escape(old_value)} → {escape(new_value)} "
        f"[cyan](offset {offset:+d} ms)[/cyan]"
    )

    if limit:
        raw_lines = raw_lines[:limit]
    rows = [
        (number, columnizer.timestamp(line), _corrected(columnizer, line))
        for number, line in enumerate(raw_lines, start=1)
    ]
    print_timestamps_table(rows, offset, title=file.name, console=console)


if __name__ == "__main__":
    main()
