"""Multi-statement query execution for sqlsh.

This module provides:
- Statement splitting that follows SQLite's own tokenizer
- Multi-statement execution with stop-on-error
- Result collection from multiple statements
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlsh.shared.core.errors import QueryError

if TYPE_CHECKING:
    from sqlsh.shared.core.protocols import StatementExecutorProtocol

    from .query_service import NonQueryResult, QueryResult


def split_statements(sql: str) -> list[str]:
    """Split SQL into individual statements.

    A statement ends at a semicolon only where SQLite would end it, so
    semicolons inside string literals, quoted identifiers, comments and
    trigger bodies are preserved. Text after the last terminator becomes a
    final statement without a semicolon.

    Args:
        sql: SQL containing one or more statements.

    Returns:
        List of individual SQL statements without their terminating semicolon.
    """
    if not sql or not sql.strip():
        return []

    statements: list[str] = []
    start = 0
    for index, char in enumerate(sql):
        if char != ";":
            continue
        candidate = sql[start : index + 1]
        if sqlite3.complete_statement(candidate):
            stmt = candidate[:-1].strip()
            if stmt:
                statements.append(stmt)
            start = index + 1

    rest = sql[start:].strip()
    if rest:
        statements.append(rest)
    return statements


def is_complete(sql: str) -> bool:
    """Whether the text ends with a complete SQL statement."""
    return bool(sql.strip()) and sqlite3.complete_statement(sql)


@dataclass
class StatementResult:
    """Result from executing a single statement."""

    statement: str
    result: QueryResult | NonQueryResult | None
    success: bool
    error: str | None = None


@dataclass
class MultiStatementResult:
    """Result from executing multiple statements."""

    results: list[StatementResult] = field(default_factory=list)
    completed: bool = True
    error_index: int | None = None

    @property
    def has_error(self) -> bool:
        """Whether any statement failed."""
        return self.error_index is not None

    @property
    def successful_count(self) -> int:
        """Number of statements that executed successfully."""
        return sum(1 for r in self.results if r.success)

    @property
    def error(self) -> str | None:
        """Message of the failed statement, if any."""
        if self.error_index is None:
            return None
        return self.results[self.error_index].error

    @property
    def query_results(self) -> list[QueryResult]:
        """Get all QueryResult objects from successful statements."""
        from .query_service import QueryResult

        return [r.result for r in self.results if r.success and isinstance(r.result, QueryResult)]


class MultiStatementExecutor:
    """Executes multiple SQL statements with stop-on-error behavior.

    Usage:
        executor = MultiStatementExecutor(query_service)
        result = executor.execute("INSERT INTO t VALUES (1); SELECT * FROM t")
        for stmt_result in result.results:
            print(stmt_result.statement, stmt_result.success)
    """

    def __init__(self, query_executor: StatementExecutorProtocol) -> None:
        """Initialize the executor.

        Args:
            query_executor: An executor with an `execute(sql)` method that returns
                           QueryResult or NonQueryResult and raises QueryError.
        """
        self._executor = query_executor

    def execute(self, sql: str) -> MultiStatementResult:
        """Execute statements sequentially, stopping on the first error."""
        statements = split_statements(sql)

        results: list[StatementResult] = []
        for i, statement in enumerate(statements):
            try:
                result = self._executor.execute(statement)
            except QueryError as e:
                results.append(StatementResult(statement=statement, result=None, success=False, error=str(e)))
                return MultiStatementResult(results=results, completed=False, error_index=i)

            results.append(StatementResult(statement=statement, result=result, success=True))

        return MultiStatementResult(results=results, completed=True, error_index=None)
