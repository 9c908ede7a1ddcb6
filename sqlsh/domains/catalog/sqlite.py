"""SQLite catalog accessor.

Serves the completion engine (table names, plan-only column discovery) and
the dot commands (schema SQL) over the shell's single connection.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from sqlsh.shared.core.errors import CatalogUnavailableError, PlanError
from sqlsh.shared.core.logging import get_logger

from .functions import install_functions

logger = get_logger(__name__)

_TABLES_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name ASC"
_TABLE_SQL = "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?"
_ALL_TABLE_SQL = "SELECT name, sql FROM sqlite_master WHERE type = 'table' AND sql IS NOT NULL ORDER BY name ASC"


def resolve_file_path(path_str: str) -> Path:
    """Resolve a database file path, expanding ~ and making it absolute."""
    return Path(path_str.strip()).expanduser().resolve()


def open_database(filename: str) -> sqlite3.Connection:
    """Open a SQLite database for the shell.

    ``:memory:`` opens a private in-memory database. The connection runs in
    autocommit mode so BEGIN/COMMIT typed by the user are passed through.
    """
    target = filename if filename == ":memory:" else str(resolve_file_path(filename))
    conn = sqlite3.connect(target, isolation_level=None)
    install_functions(conn)
    logger.info("database_opened", path=target)
    return conn


class SQLiteCatalog:
    """Catalog accessor backed by a sqlite3 connection.

    Nothing here mutates persisted state: planning wraps the fragment in a
    row-less SELECT so only read-only statements are ever accepted.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def _ensure_open(self) -> None:
        try:
            self._conn.total_changes  # noqa: B018 - raises once the connection is closed
        except sqlite3.ProgrammingError as err:
            raise CatalogUnavailableError(str(err)) from err

    def list_tables(self) -> list[str]:
        """List table names from sqlite_master, sorted by name."""
        self._ensure_open()
        try:
            rows = self._conn.execute(_TABLES_SQL).fetchall()
        except sqlite3.Error as err:
            raise CatalogUnavailableError(str(err)) from err
        # sqlite_master names are unique
        return [name for (name,) in rows]

    def plan_columns(self, fragment: str) -> list[str]:
        """Learn the output column names of a query without reading any rows.

        Raises:
            PlanError: If SQLite rejects the fragment.
            CatalogUnavailableError: If the connection is closed.
        """
        self._ensure_open()
        sql = fragment.strip().rstrip(";").strip()
        if not sql:
            raise PlanError(fragment, "empty fragment")

        # Newlines keep a trailing line comment from swallowing the closing paren
        wrapped = f"SELECT * FROM (\n{sql}\n) LIMIT 0"
        try:
            cursor = self._conn.execute(wrapped)
        except (sqlite3.Error, sqlite3.Warning, ValueError) as err:
            raise PlanError(fragment, str(err)) from err
        try:
            return [column[0] for column in cursor.description or ()]
        finally:
            cursor.close()

    def table_sql(self, name: str) -> str | None:
        """Get the CREATE statement of a table, or None if it does not exist."""
        self._ensure_open()
        try:
            row = self._conn.execute(_TABLE_SQL, (name,)).fetchone()
        except sqlite3.Error as err:
            raise CatalogUnavailableError(str(err)) from err
        if row is None:
            return None
        return row[0]

    def all_table_sql(self) -> list[tuple[str, str]]:
        """Get (name, CREATE statement) for every table."""
        self._ensure_open()
        try:
            return [(name, sql) for name, sql in self._conn.execute(_ALL_TABLE_SQL).fetchall()]
        except sqlite3.Error as err:
            raise CatalogUnavailableError(str(err)) from err

    def close(self) -> None:
        self._conn.close()
