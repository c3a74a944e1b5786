"""Starborne Server log columnizer.

Line format::

    2024-01-02 03:04:05,678 [Host=h1][App=game][TID=12][Ctx=..][lvl=INFO]... message text

Lines starting with ``20`` are treated as structured: the first two
space-separated tokens are the date and time, every ``[...]`` group is a
tag (``key=value`` or a bare value) and whatever follows the last ``]`` is
the message. Each tag column is looked up by key prefix first and by its
ordinal slot second. Any other line becomes a single Message column.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Iterable

from .models import Column, ColumnizedLine, Priority
from .timestamps import (
    NO_TIMESTAMP,
    offset_millis,
    parse_time_of_day,
    parse_timestamp,
    shift,
)

logger = logging.getLogger(__name__)

COLUMN_NAMES: tuple[str, ...] = (
    "Date", "Time", "Host", "App", "Thread", "Context", "Severity", "Category",
    "Activity", "PlayerGlobalId", "PlayerId", "EmpireId", "Class", "Message",
)

DATE_COLUMN = 0
TIME_COLUMN = 1
MESSAGE_COLUMN = 13

# column index -> (tag key prefix, 1-based slot in the tag sequence)
TAG_COLUMNS: dict[int, tuple[str, int]] = {
    2: ("Host", 1),
    3: ("App", 2),
    4: ("TID", 3),
    5: ("Ctx", 4),
    6: ("lvl", 5),
    7: ("Cat", 6),
    8: ("Act", 7),
    9: ("PlayerGlobalId", 8),
    10: ("PlayerId", 9),
    11: ("EmpireId", 10),
    12: ("class", 11),
}

SUPPORTED_FILE_NAME = "Prosper.log"


# ── tokenization steps ──────────────────────────────────────────────────────


def is_structured(line: str) -> bool:
    """Crude year check: anything starting with ``20`` is date-prefixed."""
    return line.startswith("20")


def split_date_time(line: str) -> tuple[str, str]:
    """Return the first two space-separated tokens; missing ones are ``""``."""
    parts = line.split(" ", 2)
    date = parts[0]
    time = parts[1] if len(parts) > 1 else ""
    return date, time


def extract_tags(line: str) -> list[str]:
    """Return the text of every ``[...]`` group, in order of appearance."""
    return [seg[seg.index("[") + 1:] for seg in line.split("]") if "[" in seg]


def extract_message(line: str) -> str:
    """Everything after the last ``]``, or the whole line if there is none."""
    return line.split("]")[-1].strip()


def tag_value(tag: str) -> str:
    """``key=value`` yields the trimmed value; a bare tag is returned as is."""
    key, sep, value = tag.partition("=")
    if sep:
        return value.strip()
    return tag


def lookup_by_name(tags: list[str], key: str) -> str:
    """Value of the first tag starting with *key* (case-sensitive)."""
    for tag in tags:
        if tag.startswith(key):
            return tag_value(tag)
    return ""


def lookup_by_position(tags: list[str], position: int) -> str:
    """Value of the tag at 1-based *position*; ``""`` when out of range."""
    if position < 1 or position > len(tags):
        return ""
    return tag_value(tags[position - 1])


def resolve_column(tags: list[str], key: str, position: int) -> str:
    # An empty named value ("[Host=]") falls through to the positional slot.
    return lookup_by_name(tags, key) or lookup_by_position(tags, position)


# ── columnizer ──────────────────────────────────────────────────────────────


class ServerColumnizer:
    """Columnizer for Starborne Server logs (``Prosper.log``).

    Parsing is stateless and safe to call from several threads. The only
    state is the millisecond time offset, written under a lock.
    """

    def __init__(self) -> None:
        self._time_offset = 0
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "Starborne Server Columnizer"

    @property
    def description(self) -> str:
        return (
            "Splits every line into: Date, Time, Host, App, Thread, Context, "
            "Severity, Category, Activity, PlayerGlobalId, PlayerId, EmpireId, "
            "Class and the rest of the log message"
        )

    def column_count(self) -> int:
        return len(COLUMN_NAMES)

    def column_names(self) -> list[str]:
        return list(COLUMN_NAMES)

    # ------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------

    def split(self, line: str) -> ColumnizedLine:
        if is_structured(line):
            values = self._structured_values(line)
        else:
            values = [""] * len(COLUMN_NAMES)
            values[MESSAGE_COLUMN] = line

        result = ColumnizedLine(log_line=line, names=COLUMN_NAMES)
        result.columns = tuple(Column(v, parent=result) for v in values)
        return result

    def _structured_values(self, line: str) -> list[str]:
        date, time = split_date_time(line)
        tags = extract_tags(line)

        values = [""] * len(COLUMN_NAMES)
        values[DATE_COLUMN] = date
        values[TIME_COLUMN] = time
        for index, (key, position) in TAG_COLUMNS.items():
            values[index] = resolve_column(tags, key, position)
        values[MESSAGE_COLUMN] = extract_message(line)
        return values

    # ------------------------------------------------------------------
    # Timestamps
    # ------------------------------------------------------------------

    def timestamp(self, line: str) -> datetime:
        """Parse Date + Time of *line*; :data:`NO_TIMESTAMP` on any failure."""
        cols = self.split(line)
        date = cols[DATE_COLUMN].full_value
        time = cols[TIME_COLUMN].full_value
        if not date or not time:
            return NO_TIMESTAMP

        parsed = parse_timestamp(f"{date} {time}")
        if parsed is None:
            logger.debug("No timestamp in %r", f"{date} {time}")
            return NO_TIMESTAMP
        return parsed

    def corrected_timestamp(self, line: str) -> datetime:
        """Timestamp of *line* shifted by the current offset."""
        return shift(self.timestamp(line), self.get_time_offset())

    # ------------------------------------------------------------------
    # Time offset
    # ------------------------------------------------------------------

    def is_timeshift_implemented(self) -> bool:
        return True

    def get_time_offset(self) -> int:
        return self._time_offset

    def set_time_offset(self, msec_offset: int) -> None:
        with self._lock:
            self._time_offset = int(msec_offset)
        logger.debug("Time offset set to %d ms", msec_offset)

    def push_value(self, column: int, value: str, old_value: str) -> None:
        """Derive the offset from an edit of the Time column.

        Both values are parsed as full ``yyyy-MM-dd HH:mm:ss,fff``
        timestamps, or, failing that, both as bare ``HH:mm:ss,fff``. If
        neither works the edit is ignored and the offset is kept.
        """
        if column != TIME_COLUMN:
            return

        new = parse_timestamp(value)
        old = parse_timestamp(old_value)
        if new is None or old is None:
            new = parse_time_of_day(value)
            old = parse_time_of_day(old_value)
        if new is None or old is None:
            logger.debug("Ignoring time edit %r -> %r", old_value, value)
            return

        self.set_time_offset(offset_millis(new, old))

    # ------------------------------------------------------------------
    # Format detection
    # ------------------------------------------------------------------

    def match_confidence(self, file_name: str, samples: Iterable[str]) -> Priority:
        # Sample lines are not inspected; the file name alone decides.
        if file_name == SUPPORTED_FILE_NAME:
            return Priority.PERFECTLY_SUPPORTED
        return Priority.NOT_SUPPORTED
