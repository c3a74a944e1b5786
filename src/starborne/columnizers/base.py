"""Host contract — every columnizer implements this Protocol.

A log viewer drives a columnizer line by line: it asks for the columns of
each displayed line, for the timestamp used to sort and navigate, and
pushes cell edits back so the columnizer can derive a time offset.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol, runtime_checkable

from .models import ColumnizedLine, Priority


@runtime_checkable
class LogLineColumnizer(Protocol):
    """Protocol for line columnizers — duck-typed, no inheritance required."""

    @property
    def name(self) -> str:
        """Human-readable columnizer name shown by the host."""
        ...

    @property
    def description(self) -> str: ...

    def column_count(self) -> int: ...

    def column_names(self) -> list[str]: ...

    def split(self, line: str) -> ColumnizedLine:
        """Split one raw line into ``column_count()`` columns. Never raises."""
        ...

    def timestamp(self, line: str) -> datetime:
        """Return the line's timestamp, or ``datetime.min`` if it has none."""
        ...

    def is_timeshift_implemented(self) -> bool: ...

    def get_time_offset(self) -> int: ...

    def set_time_offset(self, msec_offset: int) -> None: ...

    def push_value(self, column: int, value: str, old_value: str) -> None:
        """Notify the columnizer that the user edited a cell."""
        ...

    def match_confidence(self, file_name: str, samples: Iterable[str]) -> Priority:
        """Report how well this columnizer handles the named file."""
        ...
