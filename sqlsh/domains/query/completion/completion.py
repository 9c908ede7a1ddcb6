"""Main SQL completion engine.

Locates the syntax node under the cursor, classifies what is being typed and
builds prefix-filtered replacements from statement keywords, catalog tables,
and the CTEs and aliases of the statement being edited.
"""

from __future__ import annotations

from typing import NamedTuple

from tree_sitter import Node

from sqlsh.domains.query.parsing import ParsedSql, parse_sql
from sqlsh.domains.query.parsing.grammar import (
    ERROR,
    IDENTIFIER,
    STATEMENT,
    STATEMENT_LIST,
    STATEMENT_SEPARATOR,
    TABLE_KEYWORDS,
    TABLE_REFERENCE,
)
from sqlsh.shared.core.errors import CatalogError, SqlParseError
from sqlsh.shared.core.logging import get_logger
from sqlsh.shared.core.protocols import CatalogProtocol

from .core import STATEMENT_KEYWORDS, CompletionCandidate, CompletionContext, filter_prefixed, match_case
from .names import QueryNames, resolve_names

logger = get_logger(__name__)

# Bytes scanned leftwards from the cursor to find the token being typed
MAX_LOOKBEHIND = 5

_WHITESPACE = b" \t\r\n\f\v"
_TABLE_KEYWORD_TEXTS = frozenset(kind.removeprefix("keyword_") for kind in TABLE_KEYWORDS)


def find_context_node(parsed: ParsedSql, cursor: int) -> Node | None:
    """Find the node the user is typing at ``cursor``.

    The cursor often sits just past a token, so a few bytes to the left are
    tried, closest first. The statement list itself never counts.
    """
    for offset in range(min(MAX_LOOKBEHIND, cursor)):
        node = parsed.node_at(cursor - offset)
        if node is not None and node.type != STATEMENT_LIST:
            return node
    return None


def _at_statement_list(node: Node) -> bool:
    parent = node.parent
    return parent is None or parent.type == STATEMENT_LIST


def _opens_statement(node: Node) -> bool:
    prev = node.prev_sibling
    return prev is None or prev.type == STATEMENT_SEPARATOR


def _normalize(node: Node) -> Node:
    """Treat a token that is the first child of a top-level error as the error itself."""
    parent = node.parent
    if (
        node.type != ERROR
        and node.prev_sibling is None
        and parent is not None
        and parent.type == ERROR
        and _at_statement_list(parent)
    ):
        return parent
    return node


def classify(node: Node) -> CompletionContext:
    """Classify the context node by its kind, parent kind and previous sibling."""
    node = _normalize(node)
    if node.type == ERROR and _at_statement_list(node) and _opens_statement(node):
        return CompletionContext.STATEMENT_START
    parent = node.parent
    if (
        node.type == IDENTIFIER
        and node.prev_sibling is None
        and parent is not None
        and parent.type == TABLE_REFERENCE
    ):
        return CompletionContext.TABLE
    return CompletionContext.NONE


def _follows_table_keyword(parsed: ParsedSql, cursor: int) -> bool:
    """True when only whitespace separates the cursor from FROM/JOIN/INTO/UPDATE."""
    source = parsed.source
    end = cursor
    while end > 0 and source[end - 1] in _WHITESPACE:
        end -= 1
    if end == cursor or end == 0:
        return False
    leaf = parsed.root.descendant_for_byte_range(end - 1, end)
    if leaf is None or leaf.end_byte != end:
        return False
    if leaf.type in TABLE_KEYWORDS:
        return True
    # Keywords inside error recovery may surface as plain words
    return leaf.child_count == 0 and parsed.text(leaf).lower() in _TABLE_KEYWORD_TEXTS


def _top_level_nodes(parsed: ParsedSql) -> list[Node]:
    nodes = parsed.statements()
    seen = {(n.start_byte, n.end_byte) for n in nodes}
    for child in parsed.root.children:
        if child.type in (STATEMENT, ERROR) and (child.start_byte, child.end_byte) not in seen:
            seen.add((child.start_byte, child.end_byte))
            nodes.append(child)
    nodes.sort(key=lambda n: n.start_byte)
    return nodes


def _last_separator_before(parsed: ParsedSql, node: Node, cursor: int) -> int:
    """Byte just after the last top-level ``;`` child of ``node`` before the cursor."""
    since = node.start_byte
    for child in node.children:
        if child.start_byte >= cursor:
            break
        if child.type == STATEMENT_SEPARATOR:
            since = child.end_byte
    return since


class StatementScope(NamedTuple):
    """Where to look for the names of the statement being edited.

    Matches inside ``node`` count when they start in ``[since, until)``;
    ``until`` of None means the end of ``node``.
    """

    node: Node
    since: int
    until: int | None = None


def _separated(parsed: ParsedSql, start: int, end: int) -> bool:
    return STATEMENT_SEPARATOR.encode() in parsed.source[start:end]


def _scope(parsed: ParsedSql, nodes: list[Node], index: int, cursor: int) -> StatementScope:
    """Scope for ``nodes[index]``, joining a trailing error to the statement it continues.

    Typing ``SELECT * FROM t JOIN `` leaves ``JOIN`` in an ERROR sibling after
    the parsed statement; the names live in that statement.
    """
    node = nodes[index]
    first = index
    while (
        nodes[first].type == ERROR
        and first > 0
        and not _separated(parsed, nodes[first - 1].end_byte, nodes[first].start_byte)
    ):
        first -= 1
    if first == index:
        return StatementScope(node, _last_separator_before(parsed, node, cursor))
    start = nodes[first]
    return StatementScope(parsed.root, _last_separator_before(parsed, start, cursor), node.end_byte)


def find_statement(parsed: ParsedSql, cursor: int) -> StatementScope | None:
    """Find the statement being edited.

    Prefers the top-level statement whose range holds the cursor. Falls back to
    the last statement starting before the cursor when no ``;`` closes it
    first. Returns None when the cursor belongs to no statement.
    """
    nodes = _top_level_nodes(parsed)
    for index, node in enumerate(nodes):
        if node.start_byte < cursor <= node.end_byte:
            return _scope(parsed, nodes, index, cursor)

    before = [index for index, n in enumerate(nodes) if n.start_byte < cursor]
    if before:
        index = before[-1]
        if not _separated(parsed, nodes[index].end_byte, cursor):
            return _scope(parsed, nodes, index, cursor)

    root = parsed.root
    if root.type == ERROR:
        return StatementScope(root, _last_separator_before(parsed, root, cursor))
    return None


class CompletionEngine:
    """Context-sensitive completion over a catalog.

    Every request reparses the whole source and rebuilds names from scratch,
    so no state is carried between calls.

    Usage:
        engine = CompletionEngine(catalog)
        engine.complete("SELECT * FROM u", 15)
        engine.hint("SEL", 3)
    """

    def __init__(self, catalog: CatalogProtocol):
        self._catalog = catalog

    def complete(self, source: str, cursor: int) -> list[CompletionCandidate]:
        """Candidates for the token at byte offset ``cursor``.

        Returns an empty list when the text cannot be parsed, the catalog is
        unavailable, or the cursor is in a position nothing is offered for.
        """
        try:
            parsed = parse_sql(source)
        except SqlParseError as err:
            logger.debug("completion_parse_failed", error=str(err))
            return []

        if cursor <= 0 or cursor > len(parsed.source):
            return []

        try:
            return self._complete(parsed, cursor)
        except CatalogError as err:
            logger.warning("completion_catalog_unavailable", error=str(err))
            return []

    def _complete(self, parsed: ParsedSql, cursor: int) -> list[CompletionCandidate]:
        if _follows_table_keyword(parsed, cursor):
            return self._table_candidates(parsed, cursor, replace_from=cursor, typed="")

        node = find_context_node(parsed, cursor)
        if node is None:
            return []

        context = classify(node)
        if context == CompletionContext.STATEMENT_START:
            node = _normalize(node)
            typed = parsed.slice(node.start_byte, min(node.end_byte, cursor))
            return [
                CompletionCandidate(node.start_byte, f"{match_case(keyword, typed)} ")
                for keyword in filter_prefixed(list(STATEMENT_KEYWORDS), typed)
            ]
        if context == CompletionContext.TABLE:
            typed = parsed.slice(node.start_byte, min(node.end_byte, cursor))
            return self._table_candidates(parsed, cursor, replace_from=node.start_byte, typed=typed)
        return []

    def _table_candidates(
        self,
        parsed: ParsedSql,
        cursor: int,
        *,
        replace_from: int,
        typed: str,
    ) -> list[CompletionCandidate]:
        names = self.names_at(parsed, cursor)
        items = [*self._catalog.list_tables(), *names.names()]
        return [CompletionCandidate(replace_from, f"{item} ") for item in filter_prefixed(items, typed)]

    def names_at(self, parsed: ParsedSql, cursor: int) -> QueryNames:
        """CTEs and aliases of the statement holding the cursor."""
        scope = find_statement(parsed, cursor)
        if scope is None:
            return QueryNames()
        return resolve_names(parsed, scope.node, self._catalog, since=scope.since, until=scope.until)

    def hint(self, source: str, cursor: int) -> str | None:
        """Inline hint: the first candidate minus what is already typed."""
        candidates = self.complete(source, cursor)
        if not candidates:
            return None
        first = candidates[0]
        typed_len = cursor - first.replace_from
        text = first.text.encode("utf-8")
        if typed_len > len(text):
            return None
        remainder = text[typed_len:].decode("utf-8", errors="ignore")
        return remainder or None
