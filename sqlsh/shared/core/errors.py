"""Custom exceptions for sqlsh."""

from __future__ import annotations


class SqlshError(Exception):
    """Base class for errors reported to the shell user."""


class SqlParseError(SqlshError):
    """Exception raised when the parser produces no tree at all."""


class CatalogError(SqlshError):
    """Exception raised by the catalog accessor."""


class CatalogUnavailableError(CatalogError):
    """Exception raised when the database connection cannot serve catalog requests."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Catalog unavailable: {reason}")


class PlanError(CatalogError):
    """Exception raised when a SQL fragment cannot be planned."""

    def __init__(self, fragment: str, reason: str):
        self.fragment = fragment
        self.reason = reason
        super().__init__(reason)


class QueryError(SqlshError):
    """Exception raised when a statement fails to execute."""

    def __init__(self, statement: str, reason: str):
        self.statement = statement
        self.reason = reason
        super().__init__(reason)


class CommandError(SqlshError):
    """Exception raised for invalid dot-command usage."""
