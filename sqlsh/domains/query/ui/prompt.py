"""prompt_toolkit adapters for the completion engine.

prompt_toolkit works in character offsets while the engine works in UTF-8
byte offsets; conversion happens here and nowhere else.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from sqlsh.domains.query.completion import CompletionEngine
from sqlsh.domains.query.parsing import byte_offset, char_offset

from .highlight import is_dot_command


class SqlCompleter(Completer):
    """Tab completer for the shell input.

    SQL goes through the completion engine. A line starting with ``.`` completes
    dot-command names instead.
    """

    def __init__(self, engine: CompletionEngine, commands: Mapping[str, str] | None = None):
        """
        Args:
            engine: Completion engine bound to the open database.
            commands: Dot-command names (with the leading dot) mapped to help text.
        """
        self.engine = engine
        self.commands = dict(commands or {})

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        text = document.text
        if is_dot_command(text):
            yield from self._complete_command(document.text_before_cursor)
            return

        cursor = document.cursor_position
        candidates = self.engine.complete(text, byte_offset(text, cursor))
        for candidate in candidates:
            start = char_offset(text, candidate.replace_from)
            yield Completion(candidate.text, start_position=start - cursor)

    def _complete_command(self, before_cursor: str) -> Iterable[Completion]:
        if " " in before_cursor:
            return
        prefix = before_cursor.lower()
        for name, help_text in self.commands.items():
            if name.startswith(prefix):
                yield Completion(name, start_position=-len(before_cursor), display_meta=help_text)


class SqlAutoSuggest(AutoSuggest):
    """Ghost-text hint showing the rest of the first completion."""

    def __init__(self, engine: CompletionEngine):
        self.engine = engine

    def get_suggestion(self, buffer: Buffer, document: Document) -> Suggestion | None:
        text = document.text
        if not text or is_dot_command(text):
            return None
        hint = self.engine.hint(text, byte_offset(text, document.cursor_position))
        if hint is None:
            return None
        return Suggestion(hint)
