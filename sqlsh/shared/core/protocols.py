"""Protocols for dependency injection in sqlsh services.

These Protocol classes let the completion engine and the shell depend on
behaviour rather than on the concrete SQLite catalog and stores, which keeps
them easy to test.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CatalogProtocol(Protocol):
    """Protocol for the catalog accessor used by completion.

    Implementations must never mutate persisted state from these methods.
    """

    def list_tables(self) -> list[str]:
        """List persisted table names.

        Returns:
            Distinct table names in lexicographic order.

        Raises:
            CatalogUnavailableError: If the engine cannot be reached.
        """
        ...

    def plan_columns(self, fragment: str) -> list[str]:
        """Plan a SELECT-shaped fragment without executing it.

        Args:
            fragment: SQL text that forms a complete query.

        Returns:
            Output column names in order.

        Raises:
            PlanError: If the fragment cannot be planned.
            CatalogUnavailableError: If the engine cannot be reached.
        """
        ...


@runtime_checkable
class StatementExecutorProtocol(Protocol):
    """Protocol for executing one SQL statement."""

    def execute(self, statement: str) -> Any:
        """Execute a single statement.

        Returns:
            QueryResult or NonQueryResult.

        Raises:
            QueryError: If the statement fails.
        """
        ...


@runtime_checkable
class HistoryStoreProtocol(Protocol):
    """Protocol for query history storage."""

    def save_query(self, database: str, query: str) -> None:
        """Save a query to history.

        Args:
            database: Key of the database the query ran against.
            query: The SQL query string.
        """
        ...

    def load_queries(self, database: str) -> list[str]:
        """Load query texts for a database, most recent first."""
        ...

