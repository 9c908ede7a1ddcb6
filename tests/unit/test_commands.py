"""Tests for dot commands and the request handler."""

from __future__ import annotations

import pytest

from sqlsh.domains.query.app import QueryService
from sqlsh.domains.shell.app import Shell, ShellState, command_names, ready_to_submit, run_command
from sqlsh.domains.shell.ui.output import OutputMode
from sqlsh.shared.core.errors import CommandError


@pytest.fixture
def state(catalog, console):
    return ShellState(catalog=catalog, console=console)


@pytest.fixture
def shell(state, connection):
    return Shell(state, QueryService(connection))


class TestDotCommands:
    def test_tables(self, state):
        """.tables prints one table per line."""
        assert run_command(state, ".tables")
        assert state.console.file.getvalue().splitlines() == ["accounts", "users"]

    def test_schema_for_one_table(self, state):
        """.schema TABLE prints the formatted CREATE statement."""
        run_command(state, ".schema users")
        output = state.console.file.getvalue()

        assert output.startswith("CREATE TABLE users")
        assert "accounts" not in output

    def test_schema_for_all_tables(self, state):
        """.schema without a table prints every table."""
        run_command(state, ".schema")
        output = state.console.file.getvalue()

        assert "CREATE TABLE users" in output
        assert "CREATE TABLE accounts" in output

    def test_schema_unknown_table(self, state):
        with pytest.raises(CommandError, match="table missing does not exist"):
            run_command(state, ".schema missing")

    def test_mode_changes_output_mode(self, state):
        run_command(state, ".mode csv")
        assert state.output_mode is OutputMode.CSV

    def test_mode_without_argument_prints_current(self, state):
        run_command(state, ".mode")
        assert state.console.file.getvalue().strip() == "table"

    def test_mode_rejects_unknown(self, state):
        with pytest.raises(CommandError, match="unknown output mode"):
            run_command(state, ".mode json")

    @pytest.mark.parametrize("line", [".quit", ".exit", ".QUIT"])
    def test_quit(self, state, line):
        """Quit commands ask the shell to stop."""
        assert run_command(state, line) is False

    def test_help_lists_commands(self, state):
        run_command(state, ".help")
        output = state.console.file.getvalue()
        for name in command_names():
            assert name in output

    def test_unknown_command(self, state):
        with pytest.raises(CommandError, match="unknown command .nope"):
            run_command(state, ".nope")


class TestShellHandle:
    def test_prints_query_results(self, shell):
        assert shell.handle("SELECT 41 + 1 AS answer;")
        output = shell.state.console.file.getvalue()

        assert "answer" in output
        assert "42" in output
        assert not shell.failed

    def test_reports_statement_errors(self, shell):
        """Errors are printed and the shell keeps running."""
        assert shell.handle("SELECT * FROM missing;")

        assert "Error: no such table: missing" in shell.state.console.file.getvalue()
        assert shell.failed

    def test_reports_command_errors(self, shell):
        assert shell.handle(".schema missing")

        assert "Error: table missing does not exist" in shell.state.console.file.getvalue()

    def test_quit_stops_the_shell(self, shell):
        assert shell.handle(".quit") is False

    def test_blank_request(self, shell):
        assert shell.handle("   ")
        assert shell.state.console.file.getvalue() == ""

    def test_uses_current_output_mode(self, shell):
        shell.state.output_mode = OutputMode.SQL
        shell.handle("SELECT 1, 'a';")

        assert shell.state.console.file.getvalue().strip() == "INSERT INTO tbl VALUES(1, 'a');"

    def test_results_before_an_error_are_printed(self, shell):
        shell.state.output_mode = OutputMode.CSV
        shell.handle("SELECT 1 AS one; SELECT * FROM missing;")
        output = shell.state.console.file.getvalue()

        assert output.startswith("one\n1\n")
        assert "Error: no such table: missing" in output


class TestReadyToSubmit:
    @pytest.mark.parametrize("text", ["", "  ", ".tables", "SELECT 1;", "SELECT 1;\n"])
    def test_submits(self, text):
        assert ready_to_submit(text)

    @pytest.mark.parametrize("text", ["SELECT 1", "SELECT 'a;", "CREATE TRIGGER t AFTER INSERT ON x BEGIN SELECT 1;"])
    def test_continues_editing(self, text):
        assert not ready_to_submit(text)
