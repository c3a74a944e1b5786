"""Shared pytest fixtures for starborne tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from starborne.columnizers.server import ServerColumnizer


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary log files."""

    def _make(lines: list[str], name: str = "Prosper.log") -> Path:
        p = tmp_path / name
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def columnizer() -> ServerColumnizer:
    return ServerColumnizer()


@pytest.fixture()
def server_lines() -> list[str]:
    return [
        "2024-01-02 03:04:05,678 [Host=web01][App=galaxy][TID=12][Ctx=login][lvl=INFO]"
        "[Cat=auth][Act=signin][PlayerGlobalId=g-77][PlayerId=77][EmpireId=5][class=AuthService] player signed in",
        "2024-01-02 03:04:06,678 [Host=web01][App=galaxy][TID=13][Ctx=battle][lvl=ERROR]"
        "[Cat=combat][Act=resolve][PlayerGlobalId=g-78][PlayerId=78][EmpireId=6][class=BattleResolver] fleet lost",
        "   at Starborne.BattleResolver.Resolve()",
        "2024-01-02 03:04:07,000 [Host=web02][App=galaxy][lvl=WARN] queue backlog",
    ]
