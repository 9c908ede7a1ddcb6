"""Terminal-facing pieces of the query domain."""

from .highlight import SqlHighlighter, SqlLexer, highlight_spans, is_dot_command
from .prompt import SqlAutoSuggest, SqlCompleter

__all__ = [
    "SqlAutoSuggest",
    "SqlCompleter",
    "SqlHighlighter",
    "SqlLexer",
    "highlight_spans",
    "is_dot_command",
]
