"""Parsed SQL source and syntax-tree helpers."""

from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node, QueryCursor, Tree

from sqlsh.shared.core.errors import SqlParseError

from .grammar import STATEMENT_PATTERNS, compile_query, new_parser


@dataclass(frozen=True)
class ParsedSql:
    """A syntax tree together with the exact source snapshot it was built from.

    All offsets are UTF-8 byte offsets into ``source``.
    """

    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        """Source text covered by a node."""
        return self.slice(node.start_byte, node.end_byte)

    def slice(self, start: int, end: int) -> str:
        """Decode a byte range of the source."""
        return self.source[start:end].decode("utf-8", errors="replace")

    def node_at(self, position: int) -> Node | None:
        """Smallest node covering a single byte position."""
        if position < 0 or position > len(self.source):
            return None
        return self.root.descendant_for_byte_range(position, position)

    def matches(self, pattern: str, node: Node | None = None) -> list[dict[str, Node]]:
        """Run a structural query and return captures grouped by match.

        Each match maps capture name to the first node captured under it.
        Matches come back ordered by the start of their earliest capture.
        """
        query = compile_query(pattern)
        if query is None:
            return []

        cursor = QueryCursor(query)
        raw_matches = cursor.matches(node if node is not None else self.root)

        results: list[dict[str, Node]] = []
        for _pattern_idx, captures_dict in raw_matches:
            match: dict[str, Node] = {}
            for capture_name, nodes in captures_dict.items():
                if nodes:
                    match[capture_name] = nodes[0]
            if match:
                results.append(match)

        results.sort(key=lambda m: min(n.start_byte for n in m.values()))
        return results

    def statements(self) -> list[Node]:
        """Top-level statement nodes in source order.

        Statements that parsed with internal errors are included.
        """
        seen: set[tuple[int, int]] = set()
        nodes: list[Node] = []
        for pattern in STATEMENT_PATTERNS:
            for match in self.matches(pattern):
                stmt = match["statement"]
                key = (stmt.start_byte, stmt.end_byte)
                if key not in seen:
                    seen.add(key)
                    nodes.append(stmt)
        nodes.sort(key=lambda n: n.start_byte)
        return nodes


def parse_sql(sql: str) -> ParsedSql:
    """Parse SQL text into a ParsedSql.

    Raises:
        SqlParseError: If the parser returned no tree.
    """
    source = sql.encode("utf-8")
    tree = new_parser().parse(source)
    if tree is None:
        raise SqlParseError("parser returned no tree")
    return ParsedSql(source=source, tree=tree)


def byte_offset(text: str, char_offset: int) -> int:
    """Convert a character offset in ``text`` to a UTF-8 byte offset."""
    return len(text[:char_offset].encode("utf-8"))


def char_offset(text: str, byte_offset: int) -> int:
    """Convert a UTF-8 byte offset in ``text`` to a character offset."""
    return len(text.encode("utf-8")[:byte_offset].decode("utf-8", errors="ignore"))
