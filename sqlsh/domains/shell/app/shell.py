"""Interactive read-eval-print loop."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.application import get_app
from prompt_toolkit.filters import Condition
from prompt_toolkit.history import History, InMemoryHistory
from rich.text import Text

from sqlsh.domains.query.app import MultiStatementExecutor, QueryResult, QueryService, is_complete
from sqlsh.domains.query.completion import CompletionEngine
from sqlsh.domains.query.ui import SqlAutoSuggest, SqlCompleter, SqlLexer, is_dot_command
from sqlsh.domains.shell.ui.output import create_output
from sqlsh.shared.core.errors import SqlshError
from sqlsh.shared.core.logging import get_logger

from .commands import ShellState, command_names, run_command

logger = get_logger(__name__)

PROMPT = ">> "


def ready_to_submit(text: str) -> bool:
    """Enter submits an empty buffer, a dot command, or complete SQL."""
    stripped = text.strip()
    return not stripped or is_dot_command(stripped) or is_complete(text)


class Shell:
    """Runs requests against one database and prints their results.

    Errors of a request are printed and never end the session.
    """

    def __init__(
        self,
        state: ShellState,
        query_service: QueryService,
        *,
        pager_threshold: int = 100,
    ):
        self.state = state
        self.query_service = query_service
        self.executor = MultiStatementExecutor(query_service)
        self.pager_threshold = pager_threshold
        self.failed = False

    def report_error(self, message: str) -> None:
        self.failed = True
        self.state.console.print(Text(f"Error: {message}", style="red"))

    def handle(self, request: str) -> bool:
        """Run one submitted request.

        Returns:
            False when the request asked to leave the shell.
        """
        text = request.strip()
        if not text:
            return True

        if is_dot_command(text):
            try:
                return run_command(self.state, text)
            except SqlshError as e:
                self.report_error(str(e))
                return True

        result = self.executor.execute(text)
        output = create_output(
            self.state.output_mode,
            self.state.console,
            pager_threshold=self.pager_threshold,
            highlighter=self.state.highlighter,
        )
        for stmt_result in result.results:
            if stmt_result.success and isinstance(stmt_result.result, QueryResult):
                output.write(stmt_result.result)
        if result.has_error:
            self.report_error(result.error or "statement failed")
        return True

    def create_session(self, history: History | None = None) -> PromptSession:
        engine = CompletionEngine(self.state.catalog)
        return PromptSession(
            message=PROMPT,
            lexer=SqlLexer(),
            completer=SqlCompleter(engine, command_names()),
            auto_suggest=SqlAutoSuggest(engine),
            history=history or InMemoryHistory(),
            multiline=Condition(lambda: not ready_to_submit(get_app().current_buffer.text)),
            complete_while_typing=False,
        )

    def run(self, history: History | None = None) -> None:
        """Prompt until Ctrl-C, Ctrl-D or ``.quit``."""
        session = self.create_session(history)
        while True:
            try:
                request = session.prompt()
            except (KeyboardInterrupt, EOFError):
                break
            if not self.handle(request):
                break
        logger.debug("shell_closed")
