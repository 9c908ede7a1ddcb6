"""Dot commands of the interactive shell."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import sqlparse
from rich.console import Console
from rich.text import Text

from sqlsh.domains.catalog import SQLiteCatalog
from sqlsh.domains.query.ui.highlight import SqlHighlighter
from sqlsh.domains.shell.ui.output import OutputMode
from sqlsh.shared.core.errors import CommandError


@dataclass
class ShellState:
    """Mutable state dot commands read and change."""

    catalog: SQLiteCatalog
    console: Console
    output_mode: OutputMode = OutputMode.TABLE
    highlighter: SqlHighlighter = field(default_factory=SqlHighlighter)


# Handlers return False to leave the shell
CommandHandler = Callable[[ShellState, str], bool]


def format_sql(sql: str) -> str:
    """Pretty-print a statement for display."""
    return sqlparse.format(sql, reindent=True, keyword_case="upper").strip()


def print_sql(state: ShellState, sql: str) -> None:
    state.console.print(state.highlighter.highlight(format_sql(sql)), soft_wrap=True)


def cmd_tables(state: ShellState, args: str) -> bool:
    for name in state.catalog.list_tables():
        state.console.print(Text(name))
    return True


def cmd_schema(state: ShellState, args: str) -> bool:
    name = args.strip()
    if not name:
        for _table, sql in state.catalog.all_table_sql():
            print_sql(state, sql)
        return True

    sql = state.catalog.table_sql(name)
    if sql is None:
        raise CommandError(f"table {name} does not exist")
    print_sql(state, sql)
    return True


def cmd_mode(state: ShellState, args: str) -> bool:
    value = args.strip()
    if not value:
        state.console.print(Text(state.output_mode.value))
        return True
    try:
        state.output_mode = OutputMode.parse(value)
    except ValueError as e:
        raise CommandError(str(e)) from e
    return True


def cmd_help(state: ShellState, args: str) -> bool:
    width = max(len(usage) for usage, _help in COMMAND_HELP.values())
    for usage, help_text in COMMAND_HELP.values():
        state.console.print(Text(f"{usage.ljust(width)}  {help_text}"))
    return True


def cmd_quit(state: ShellState, args: str) -> bool:
    return False


COMMANDS: dict[str, CommandHandler] = {
    ".tables": cmd_tables,
    ".schema": cmd_schema,
    ".mode": cmd_mode,
    ".help": cmd_help,
    ".quit": cmd_quit,
    ".exit": cmd_quit,
}

COMMAND_HELP: dict[str, tuple[str, str]] = {
    ".tables": (".tables", "List tables"),
    ".schema": (".schema [TABLE]", "Show the CREATE statement of one or all tables"),
    ".mode": (".mode [table|sql|csv|null]", "Show or set the output mode"),
    ".help": (".help", "Show this message"),
    ".quit": (".quit", "Exit the shell"),
    ".exit": (".exit", "Exit the shell"),
}


def command_names() -> dict[str, str]:
    """Dot-command names mapped to their one-line help."""
    return {name: help_text for name, (_usage, help_text) in COMMAND_HELP.items()}


def run_command(state: ShellState, line: str) -> bool:
    """Run one dot-command line.

    Returns:
        False when the shell should exit.

    Raises:
        CommandError: For unknown commands or bad arguments.
    """
    name, _, args = line.strip().partition(" ")
    handler = COMMANDS.get(name.lower())
    if handler is None:
        raise CommandError(f"unknown command {name}, see .help")
    return handler(state, args)
