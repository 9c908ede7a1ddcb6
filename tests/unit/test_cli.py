"""Tests for the command-line entry point."""

from __future__ import annotations

import sqlite3

import pytest

from sqlsh.cli import build_parser, main


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("SQLSH_SETTINGS_PATH", str(tmp_path / "settings.json"))


class TestMain:
    def test_command_prints_results(self, capsys):
        """-c runs the request and exits successfully."""
        assert main([":memory:", "-c", "SELECT 41 + 1 AS answer;"]) == 0

        output = capsys.readouterr().out
        assert "answer" in output
        assert "42" in output

    def test_command_failure_exits_nonzero(self, capsys):
        assert main([":memory:", "-c", "SELECT * FROM missing;"]) == 1
        assert "no such table: missing" in capsys.readouterr().out

    def test_mode_option(self, capsys):
        assert main([":memory:", "--mode", "csv", "-c", "SELECT 1 AS one;"]) == 0
        assert capsys.readouterr().out == "one\n1\n"

    def test_runs_against_database_file(self, tmp_path, capsys):
        """Changes made with -c are committed to the file."""
        path = tmp_path / "data.db"
        assert main([str(path), "-c", "CREATE TABLE t (x); INSERT INTO t VALUES (7);"]) == 0

        conn = sqlite3.connect(path)
        try:
            assert conn.execute("SELECT x FROM t").fetchall() == [(7,)]
        finally:
            conn.close()

    def test_unopenable_database(self, tmp_path, capsys):
        """A path SQLite cannot open is reported and exits with 1."""
        assert main([str(tmp_path / "missing" / "data.db"), "-c", "SELECT 1;"]) == 1
        assert "cannot open" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("sqlsh ")


class TestParser:
    def test_rejects_unknown_mode(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args([":memory:", "--mode", "json"])

    def test_log_level_is_case_insensitive(self):
        args = build_parser().parse_args([":memory:", "--log-level", "debug"])

        assert args.log_level == "DEBUG"
