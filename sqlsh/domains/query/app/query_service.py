"""Query execution service for sqlsh.

Runs single statements on the shell connection and shapes the outcome into
result objects the output modes and the multi-statement executor share.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from sqlsh.shared.core.errors import QueryError
from sqlsh.shared.core.logging import get_logger

logger = get_logger(__name__)

BIND_PARAMETERS_MESSAGE = "cannot run queries that require bind parameters"


@dataclass
class QueryResult:
    """Result of a statement that returns rows."""

    columns: list[str]
    rows: list[tuple]
    row_count: int


@dataclass
class NonQueryResult:
    """Result of a statement without a result set (INSERT, UPDATE, DDL, ...)."""

    rows_affected: int


def _is_binding_error(err: sqlite3.Error) -> bool:
    return isinstance(err, sqlite3.ProgrammingError) and "binding" in str(err).lower()


class QueryService:
    """Executes statements against a sqlite3 connection.

    Whether a statement returns rows is decided by SQLite itself: a cursor
    with a description produced a result set.

    Args:
        conn: Open sqlite3 connection.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def execute(self, statement: str) -> QueryResult | NonQueryResult:
        """Execute one statement.

        Raises:
            QueryError: If SQLite rejects the statement, or it has unbound
                parameters.
        """
        try:
            cursor = self._conn.execute(statement)
        except sqlite3.Error as err:
            if _is_binding_error(err):
                raise QueryError(statement, BIND_PARAMETERS_MESSAGE) from err
            logger.info("statement_failed", statement=statement, error=str(err))
            raise QueryError(statement, str(err)) from err
        except (sqlite3.Warning, ValueError) as err:
            raise QueryError(statement, str(err)) from err

        try:
            if cursor.description is None:
                return NonQueryResult(rows_affected=max(cursor.rowcount, 0))
            columns = [column[0] for column in cursor.description]
            try:
                rows = cursor.fetchall()
            except sqlite3.Error as err:
                raise QueryError(statement, str(err)) from err
            return QueryResult(columns=columns, rows=rows, row_count=len(rows))
        finally:
            cursor.close()
