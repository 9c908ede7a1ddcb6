"""Core SQL completion utilities.

Shared vocabulary for the completion engine: statement keywords, the context
kinds the engine can detect, the candidate type, and the prefix/case rules.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple


class CompletionContext(Enum):
    """What the user is typing at the cursor."""

    STATEMENT_START = auto()
    TABLE = auto()
    NONE = auto()


class CompletionCandidate(NamedTuple):
    """A replacement for ``source[replace_from:cursor]`` (byte offsets)."""

    replace_from: int
    text: str


# Keywords that may open a statement, in canonical case
STATEMENT_KEYWORDS = (
    "SELECT",
    "DELETE",
    "CREATE",
    "DROP",
    "ATTACH",
    "DETACH",
    "EXPLAIN",
    "PRAGMA",
    "WITH",
    "UPDATE",
    "ALTER",
    "BEGIN",
    "END",
    "COMMIT",
    "ROLLBACK",
)

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)


def ascii_lower(text: str) -> str:
    """Lowercase ASCII letters only, leaving every other character alone."""
    return text.translate(_ASCII_FOLD)


def is_ascii_lowercase(text: str) -> bool:
    """True if every character is an ASCII lowercase letter."""
    return all("a" <= c <= "z" for c in text)


def starts_with(item: str, typed: str) -> bool:
    """Case-insensitive prefix test.

    A typed text longer than the item never matches.
    """
    return len(typed) <= len(item) and ascii_lower(item[: len(typed)]) == ascii_lower(typed)


def match_case(item: str, typed: str) -> str:
    """Lowercase a keyword when the user typed in lowercase, else keep it canonical.

    ALL-CAPS and Title-Case input both get the canonical form.
    """
    if is_ascii_lowercase(typed):
        return ascii_lower(item)
    return item


def filter_prefixed(items: list[str], typed: str) -> list[str]:
    """Keep items that start with the typed text, dropping repeats.

    The first occurrence of each item keeps its position.
    """
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        if starts_with(item, typed):
            result.append(item)
    return result
