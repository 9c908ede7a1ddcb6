"""Syntax highlighting for SQL from the tree-sitter parse.

Leaves of the syntax tree are classified into a handful of token classes.
The same classification drives the rich ``Text`` used for printed SQL and the
prompt_toolkit lexer used for the input line.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import NamedTuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from rich.text import Text
from tree_sitter import Node

from sqlsh.domains.query.parsing import parse_sql
from sqlsh.domains.query.parsing.grammar import COMMENT_KINDS, KEYWORD_PREFIX, LITERAL
from sqlsh.shared.core.errors import SqlParseError

KEYWORD = "keyword"
NUMBER = "number"
STRING = "string"
COMMENT = "comment"
PARAMETER = "parameter"

RICH_STYLES = {
    KEYWORD: "bold blue",
    NUMBER: "bold yellow",
    STRING: "bold magenta",
    COMMENT: "bold green",
    PARAMETER: "magenta",
}

PROMPT_STYLES = {
    KEYWORD: "bold ansiblue",
    NUMBER: "bold ansiyellow",
    STRING: "bold ansimagenta",
    COMMENT: "bold ansigreen",
    PARAMETER: "ansimagenta",
}

_PARAMETER_PREFIXES = ("?", ":", "@", "$")


class Span(NamedTuple):
    """A highlighted range in character offsets."""

    start: int
    end: int
    token: str


def _classify(node: Node, text: str) -> str | None:
    kind = node.type
    if kind.startswith(KEYWORD_PREFIX):
        return KEYWORD
    if kind in COMMENT_KINDS:
        return COMMENT
    if kind == LITERAL:
        if text[:1] in ("'", "x", "X"):
            return STRING
        if text[:1].isdigit() or text[:1] in (".", "-", "+"):
            return NUMBER
        return None
    if kind == PARAMETER or (node.child_count == 0 and text.startswith(_PARAMETER_PREFIXES) and len(text) > 1):
        return PARAMETER
    if kind == "?":
        return PARAMETER
    return None


def _walk(node: Node) -> Iterator[Node]:
    """Yield tokens: leaves plus literal and comment nodes as a whole."""
    if node.child_count == 0 or node.type == LITERAL or node.type in COMMENT_KINDS:
        yield node
        return
    for child in node.children:
        yield from _walk(child)


def is_dot_command(text: str) -> bool:
    return text.startswith(".")


def highlight_spans(sql: str) -> list[Span]:
    """Classify the tokens of ``sql``.

    Returns spans in character offsets, in source order. Dot commands and
    text the parser cannot handle produce no spans.
    """
    if not sql or is_dot_command(sql):
        return []
    try:
        parsed = parse_sql(sql)
    except SqlParseError:
        return []

    source = parsed.source
    spans: list[Span] = []
    # Byte offsets only grow, so decode incrementally
    last_byte = 0
    last_char = 0
    for node in _walk(parsed.root):
        if node.end_byte <= node.start_byte:
            continue
        token = _classify(node, parsed.text(node))
        if token is None:
            continue
        start = last_char + len(source[last_byte : node.start_byte].decode("utf-8", errors="ignore"))
        end = start + len(source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore"))
        last_byte, last_char = node.end_byte, end
        spans.append(Span(start, end, token))
    return spans


class SqlHighlighter:
    """Render SQL as rich ``Text`` with token styles."""

    def __init__(self, styles: dict[str, str] | None = None):
        self.styles = styles or RICH_STYLES

    def highlight(self, sql: str) -> Text:
        text = Text(sql)
        for span in highlight_spans(sql):
            text.stylize(self.styles[span.token], span.start, span.end)
        return text


class SqlLexer(Lexer):
    """prompt_toolkit lexer for the input buffer.

    The whole document is parsed once per call; tokens crossing a newline
    (block comments, multi-line strings) are split per line.
    """

    def __init__(self, styles: dict[str, str] | None = None):
        self.styles = styles or PROMPT_STYLES

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        text = document.text
        lines = document.lines
        spans = highlight_spans(text)

        styled: list[StyleAndTextTuples] = []
        offset = 0
        span_index = 0
        for line in lines:
            line_start, line_end = offset, offset + len(line)
            fragments: StyleAndTextTuples = []
            position = line_start
            while span_index < len(spans) and spans[span_index].start < line_end:
                span = spans[span_index]
                start = max(span.start, line_start)
                end = min(span.end, line_end)
                if start > position:
                    fragments.append(("", text[position:start]))
                if end > start:
                    fragments.append((self.styles[span.token], text[start:end]))
                    position = end
                if span.end > line_end:
                    break
                span_index += 1
            if position < line_end:
                fragments.append(("", text[position:line_end]))
            styled.append(fragments)
            offset = line_end + 1

        def get_line(lineno: int) -> StyleAndTextTuples:
            try:
                return styled[lineno]
            except IndexError:
                return []

        return get_line
