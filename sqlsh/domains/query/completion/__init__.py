"""Context-sensitive SQL completion."""

from .completion import CompletionEngine, StatementScope, classify, find_context_node, find_statement
from .core import (
    STATEMENT_KEYWORDS,
    CompletionCandidate,
    CompletionContext,
    match_case,
    starts_with,
)
from .names import QueryNames, resolve_names

__all__ = [
    "STATEMENT_KEYWORDS",
    "CompletionCandidate",
    "CompletionContext",
    "CompletionEngine",
    "QueryNames",
    "StatementScope",
    "classify",
    "find_context_node",
    "find_statement",
    "match_case",
    "resolve_names",
    "starts_with",
]
