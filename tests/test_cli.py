"""Tests for the starborne CLI."""
from __future__ import annotations

import csv
import io
import json

import pytest
from click.testing import CliRunner

from starborne.cli import main


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def test_columns(runner: CliRunner) -> None:
    result = runner.invoke(main, ["columns"])
    assert result.exit_code == 0
    assert "PlayerGlobalId" in result.output
    assert "TID" in result.output


def test_detect(runner: CliRunner, tmp_log_file, server_lines) -> None:
    path = tmp_log_file(server_lines)
    result = runner.invoke(main, ["detect", str(path)])
    assert result.exit_code == 0
    assert "PERFECTLY_SUPPORTED" in result.output


class TestSplit:
    def test_json(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["split", str(path), "--output", "json"])
        assert result.exit_code == 0
        rows = [json.loads(line) for line in result.output.splitlines()]
        assert len(rows) == 4
        assert rows[0]["Host"] == "web01"
        assert rows[2]["Message"] == "   at Starborne.BattleResolver.Resolve()"

    def test_json_selected_columns_and_limit(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(
            main, ["split", str(path), "-o", "json", "--columns", "Severity,Class", "-n", "2"]
        )
        assert result.exit_code == 0
        rows = [json.loads(line) for line in result.output.splitlines()]
        assert rows == [
            {"Severity": "INFO", "Class": "AuthService"},
            {"Severity": "ERROR", "Class": "BattleResolver"},
        ]

    def test_csv(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["split", str(path), "-o", "csv"])
        assert result.exit_code == 0
        rows = list(csv.reader(io.StringIO(result.output)))
        assert rows[0][0] == "Date"
        assert len(rows) == 5

    def test_stream(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["split", str(path), "-o", "stream"])
        assert result.exit_code == 0
        assert "fleet lost" in result.output
        assert "[Host=web01]" not in result.output

    def test_unknown_column(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["split", str(path), "--columns", "Nope"])
        assert result.exit_code != 0
        assert "Unknown column" in result.output

    def test_unsupported_file_name_warns(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines, name="server.log")
        result = runner.invoke(main, ["split", str(path), "-o", "json"])
        assert result.exit_code == 0
        assert "not a recognised log file name" in result.output

    def test_missing_file(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["split", "does-not-exist.log"])
        assert result.exit_code != 0


class TestTimestamps:
    def test_offset_applied(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["timestamps", str(path), "--offset", "1000"])
        assert result.exit_code == 0
        assert "+1000 ms" in result.output
        assert "2024-01-02 03:04:06,678" in result.output
        assert "2024-01-02 03:04:08,000" in result.output


class TestShift:
    def test_time_of_day_edit(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["shift", str(path), "--line", "1", "--to", "03:04:06,678"])
        assert result.exit_code == 0
        assert "+1000 ms" in result.output

    def test_full_timestamp_edit(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(
            main, ["shift", str(path), "-l", "2", "-t", "2024-01-02 03:04:05,678"]
        )
        assert result.exit_code == 0
        assert "-1000 ms" in result.output

    def test_line_out_of_range(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["shift", str(path), "-l", "99", "-t", "03:04:06,678"])
        assert result.exit_code != 0

    def test_bad_time(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["shift", str(path), "-l", "1", "-t", "noon"])
        assert result.exit_code != 0

    def test_line_without_timestamp(self, runner: CliRunner, tmp_log_file, server_lines) -> None:
        path = tmp_log_file(server_lines)
        result = runner.invoke(main, ["shift", str(path), "-l", "3", "-t", "03:04:06,678"])
        assert result.exit_code != 0
        assert "has no timestamp" in result.output
