"""Grammar bindings for the SQL parser.

Node kinds are owned by the tree-sitter-sql grammar; the names used by the
completion engine and the highlighter are collected here so the rest of the
code never spells a grammar string directly.
"""

from __future__ import annotations

from functools import lru_cache

import tree_sitter_sql
from tree_sitter import Language, Parser, Query

from sqlsh.shared.core.logging import get_logger

logger = get_logger(__name__)

# Container kinds
STATEMENT_LIST = "program"
STATEMENT = "statement"
ERROR = "ERROR"

# Leaf and reference kinds
IDENTIFIER = "identifier"
TABLE_REFERENCE = "object_reference"
STATEMENT_SEPARATOR = ";"
COMMENT_KINDS = frozenset({"comment", "marginalia"})
LITERAL = "literal"
KEYWORD_PREFIX = "keyword_"
KEYWORD_AS = "keyword_as"

# Keywords after which the next token names a table
TABLE_KEYWORDS = frozenset({"keyword_from", "keyword_join", "keyword_into", "keyword_update"})

# Statement-inside-statement-list patterns. Each pattern compiles on its own so
# a grammar release without transaction blocks still yields plain statements.
STATEMENT_PATTERNS = (
    "(program (statement) @statement)",
    "(program (transaction (statement) @statement))",
    "(program (block (statement) @statement))",
)

# CTE name, optional column list, body and the whole definition
CTE_PATTERN = "(cte . (identifier) @name (statement) @body) @definition"

# `table [AS] alias` inside a table reference
ALIAS_PATTERN = "(relation (object_reference) @table (identifier) @alias)"


@lru_cache(maxsize=1)
def get_language() -> Language:
    """Get the tree-sitter Language for SQL."""
    return Language(tree_sitter_sql.language())


def new_parser() -> Parser:
    """Create a parser bound to the SQL language."""
    return Parser(get_language())


@lru_cache(maxsize=None)
def compile_query(pattern: str) -> Query | None:
    """Compile and cache a query pattern.

    Returns None when the installed grammar cannot compile the pattern
    (e.g. a node kind it does not define).
    """
    try:
        return Query(get_language(), pattern)
    except ValueError as err:
        logger.debug("query_compile_failed", pattern=pattern, error=str(err))
        return None
