"""Result output modes for the shell."""

from __future__ import annotations

import csv
from enum import Enum

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqlsh.domains.query.app.query_service import QueryResult
from sqlsh.domains.query.ui.highlight import SqlHighlighter

DEFAULT_SQL_TABLE_NAME = "tbl"


class OutputMode(Enum):
    TABLE = "table"
    SQL = "sql"
    CSV = "csv"
    NULL = "null"

    @classmethod
    def parse(cls, value: str) -> OutputMode:
        """Parse a mode name, case-insensitively.

        Raises:
            ValueError: If the name is not a known mode.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ", ".join(mode.value for mode in cls)
            raise ValueError(f"unknown output mode '{value}' (expected one of: {names})") from None


def format_value(value: object) -> str:
    """Display form of a SQLite value."""
    if value is None:
        return "NULL"
    if isinstance(value, bytes):
        return " ".join(f"{byte:02x}" for byte in value)
    return str(value)


def sql_literal(value: object) -> str:
    """SQL literal form of a SQLite value."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, bytes):
        return f"X'{value.hex()}'"
    text = str(value).replace("'", "''")
    return f"'{text}'"


class ResultOutput:
    """Base class for output modes."""

    def write(self, result: QueryResult) -> None:
        raise NotImplementedError


class NullOutput(ResultOutput):
    """Discard rows. Useful to time statements or run them for side effects."""

    def write(self, result: QueryResult) -> None:
        return None


class TableOutput(ResultOutput):
    """Box-drawn table, piped through the pager when it is long."""

    def __init__(self, console: Console, pager_threshold: int = 100):
        self.console = console
        self.pager_threshold = pager_threshold

    def build_table(self, result: QueryResult) -> Table:
        table = Table(box=box.SQUARE, header_style="bold", show_lines=False)
        for column in result.columns:
            table.add_column(Text(column), overflow="fold")
        for row in result.rows:
            table.add_row(*(self._cell(value) for value in row))
        return table

    @staticmethod
    def _cell(value: object) -> Text:
        if value is None:
            return Text("NULL", style="bright_black")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return Text(str(value), style="yellow")
        return Text(format_value(value))

    def write(self, result: QueryResult) -> None:
        table = self.build_table(result)
        if result.row_count > self.pager_threshold:
            with self.console.pager(styles=True):
                self.console.print(table)
        else:
            self.console.print(table)


class SqlOutput(ResultOutput):
    """One highlighted ``INSERT INTO tbl VALUES(...);`` line per row."""

    def __init__(
        self,
        console: Console,
        highlighter: SqlHighlighter | None = None,
        table_name: str = DEFAULT_SQL_TABLE_NAME,
    ):
        self.console = console
        self.highlighter = highlighter or SqlHighlighter()
        self.table_name = table_name

    def render_row(self, row: tuple) -> str:
        values = ", ".join(sql_literal(value) for value in row)
        return f"INSERT INTO {self.table_name} VALUES({values});"

    def write(self, result: QueryResult) -> None:
        for row in result.rows:
            self.console.print(self.highlighter.highlight(self.render_row(row)), soft_wrap=True)


class CsvOutput(ResultOutput):
    """CSV with a header row. NULL becomes an empty field."""

    def __init__(self, console: Console):
        self.console = console

    def write(self, result: QueryResult) -> None:
        writer = csv.writer(self.console.file, lineterminator="\n")
        writer.writerow(result.columns)
        for row in result.rows:
            writer.writerow("" if value is None else format_value(value) for value in row)


def create_output(
    mode: OutputMode,
    console: Console,
    *,
    pager_threshold: int = 100,
    highlighter: SqlHighlighter | None = None,
) -> ResultOutput:
    """Create the writer for an output mode."""
    if mode is OutputMode.TABLE:
        return TableOutput(console, pager_threshold=pager_threshold)
    if mode is OutputMode.SQL:
        return SqlOutput(console, highlighter=highlighter)
    if mode is OutputMode.CSV:
        return CsvOutput(console)
    return NullOutput()
