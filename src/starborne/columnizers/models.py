"""Result types shared by every columnizer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Priority(IntEnum):
    """How well a columnizer claims to understand a given file."""

    NOT_SUPPORTED = 0
    CAN_SUPPORT = 1
    WELL_SUPPORTED = 2
    PERFECTLY_SUPPORTED = 3


@dataclass(frozen=True)
class Column:
    """One extracted field of a line."""

    full_value: str
    parent: ColumnizedLine | None = field(default=None, repr=False, compare=False)

    @property
    def display_value(self) -> str:
        return self.full_value


@dataclass
class ColumnizedLine:
    """The columns produced for one raw log line.

    ``columns`` always has exactly as many entries as the producing
    columnizer's ``column_names()``; ``names`` carries those names so the
    line can be indexed by name.
    """

    log_line: str
    columns: tuple[Column, ...] = ()
    names: tuple[str, ...] = field(default=(), repr=False)

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, key: int | str) -> Column:
        if isinstance(key, str):
            return self.columns[self.names.index(key)]
        return self.columns[key]

    def values(self) -> list[str]:
        return [c.full_value for c in self.columns]

    def as_dict(self) -> dict[str, str]:
        return dict(zip(self.names, self.values()))
