"""Statement execution."""

from .multi_statement import (
    MultiStatementExecutor,
    MultiStatementResult,
    StatementResult,
    is_complete,
    split_statements,
)
from .query_service import NonQueryResult, QueryResult, QueryService

__all__ = [
    "MultiStatementExecutor",
    "MultiStatementResult",
    "NonQueryResult",
    "QueryResult",
    "QueryService",
    "StatementResult",
    "is_complete",
    "split_statements",
]
