"""Timestamp parsing for Starborne Server logs.

The log producer writes ``yyyy-MM-dd HH:mm:ss,fff`` (always three
millisecond digits, comma separator). ``datetime.strptime`` is lenient
about field widths, so the text shape is checked first.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta

# Documented form of the wire format, as the producer spells it
TIMESTAMP_FORMAT = "yyyy-MM-dd HH:mm:ss,fff"

_STRPTIME_FORMAT = "%Y-%m-%d %H:%M:%S,%f"
_TIME_OF_DAY_FORMAT = "%H:%M:%S,%f"

_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3}")
_TIME_OF_DAY_RE = re.compile(r"\d{2}:\d{2}:\d{2},\d{3}")

# Returned instead of raising when a line carries no usable timestamp
NO_TIMESTAMP = datetime.min

_ONE_MS = timedelta(milliseconds=1)


def parse_timestamp(text: str) -> datetime | None:
    """Parse ``yyyy-MM-dd HH:mm:ss,fff``; ``None`` if the text does not match."""
    if not _TIMESTAMP_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, _STRPTIME_FORMAT)
    except ValueError:
        # right shape, impossible value (month 13, Feb 30, ...)
        return None


def parse_time_of_day(text: str) -> datetime | None:
    """Parse a bare ``HH:mm:ss,fff`` cell value, anchored on 1900-01-01."""
    if not _TIME_OF_DAY_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, _TIME_OF_DAY_FORMAT)
    except ValueError:
        return None


def offset_millis(new: datetime, old: datetime) -> int:
    """Whole milliseconds from *old* to *new* (negative if *new* is earlier)."""
    return (new - old) // _ONE_MS


def shift(instant: datetime, offset_ms: int) -> datetime:
    """Apply a millisecond offset. The sentinel and out-of-range results stay put."""
    if instant == NO_TIMESTAMP or not offset_ms:
        return instant
    try:
        return instant + timedelta(milliseconds=offset_ms)
    except OverflowError:
        return instant
