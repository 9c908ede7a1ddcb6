#!/usr/bin/env python3
"""sqlsh - An interactive SQLite shell with context-aware completion."""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys

from rich.console import Console

from . import __version__


def build_parser() -> argparse.ArgumentParser:
    from sqlsh.domains.shell.ui.output import OutputMode

    parser = argparse.ArgumentParser(
        prog="sqlsh",
        description="An interactive SQLite shell with context-aware completion",
        epilog="Example: sqlsh data.db -c 'SELECT count(*) FROM users'",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("filename", help="SQLite database file (':memory:' for a private in-memory database)")
    parser.add_argument(
        "--mode",
        "-m",
        choices=[mode.value for mode in OutputMode],
        help="Output mode for this session (default: from settings, else table)",
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Path to settings JSON file (overrides ~/.sqlsh/settings.json)",
    )
    parser.add_argument(
        "--command",
        "-c",
        metavar="SQL",
        help="Run SQL or a dot command, print the results and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (default: from settings, else WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.settings:
        os.environ["SQLSH_SETTINGS_PATH"] = str(args.settings)

    from sqlsh.domains.catalog import SQLiteCatalog, open_database
    from sqlsh.domains.query.app import QueryService
    from sqlsh.domains.query.store import HistoryStore, StoreBackedHistory
    from sqlsh.domains.shell.app import Shell, ShellState
    from sqlsh.domains.shell.store.settings import SettingsStore
    from sqlsh.domains.shell.ui.output import OutputMode
    from sqlsh.shared.core.logging import configure_logging, get_logger

    settings = SettingsStore().load_settings()
    configure_logging(level=args.log_level or settings.log_level, destination=settings.log_file)
    logger = get_logger(__name__)

    console = Console()
    try:
        conn = open_database(args.filename)
    except sqlite3.Error as e:
        console.print(f"Error: cannot open {args.filename}: {e}", style="red", markup=False)
        return 1

    catalog = SQLiteCatalog(conn)
    state = ShellState(
        catalog=catalog,
        console=console,
        output_mode=OutputMode.parse(args.mode or settings.output_mode),
    )
    shell = Shell(state, QueryService(conn), pager_threshold=settings.pager_threshold)

    try:
        if args.command is not None:
            shell.handle(args.command)
            return 1 if shell.failed else 0

        database = args.filename if args.filename == ":memory:" else os.path.abspath(args.filename)
        history = StoreBackedHistory(HistoryStore(max_entries=settings.history_limit), database)
        logger.info("shell_started", database=database)
        shell.run(history)
        return 0
    finally:
        catalog.close()


if __name__ == "__main__":
    sys.exit(main())
