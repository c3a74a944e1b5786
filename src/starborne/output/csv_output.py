"""Render columnized lines as CSV."""
from __future__ import annotations

import csv
import io

from ..columnizers.models import ColumnizedLine


class CsvOutput:
    """Render a list of columnized lines as a CSV string.

    The header row is the column names of the first line; ``columns``
    restricts and orders the output.
    """

    @property
    def name(self) -> str:
        return "csv"

    def render(self, lines: list[ColumnizedLine], columns: list[str] | None = None) -> str:
        if not lines:
            return ""
        fieldnames = columns or list(lines[0].names)
        buf = io.StringIO()
        writer = csv.DictWriter(
            buf, fieldnames=fieldnames, extrasaction="ignore", lineterminator="\n"
        )
        writer.writeheader()
        writer.writerows(line.as_dict() for line in lines)
        return buf.getvalue()
