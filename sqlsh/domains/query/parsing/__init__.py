"""SQL parsing on top of tree-sitter."""

from .tree import ParsedSql, byte_offset, char_offset, parse_sql

__all__ = [
    "ParsedSql",
    "byte_offset",
    "char_offset",
    "parse_sql",
]
