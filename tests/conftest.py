"""Pytest fixtures for sqlsh tests."""

from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path

import pytest

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="sqlsh-test-config-"))
os.environ.setdefault("SQLSH_CONFIG_DIR", str(_TEST_CONFIG_DIR))


class RecordingCatalog:
    """In-memory catalog double that records what it was asked to plan."""

    def __init__(self, tables=None, columns=None, unavailable=False):
        self.tables = list(tables or [])
        self.columns = dict(columns or {})
        self.unavailable = unavailable
        self.planned: list[str] = []

    def list_tables(self) -> list[str]:
        from sqlsh.shared.core.errors import CatalogUnavailableError

        if self.unavailable:
            raise CatalogUnavailableError("closed")
        return list(self.tables)

    def plan_columns(self, fragment: str) -> list[str]:
        from sqlsh.shared.core.errors import CatalogUnavailableError, PlanError

        self.planned.append(fragment)
        if self.unavailable:
            raise CatalogUnavailableError("closed")
        if fragment not in self.columns:
            raise PlanError(fragment, "no such table")
        return list(self.columns[fragment])


@pytest.fixture
def recording_catalog():
    return RecordingCatalog


@pytest.fixture
def connection():
    """In-memory database with the shell's SQL functions installed."""
    from sqlsh.domains.catalog import open_database

    conn = open_database(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def catalog(connection):
    """SQLite catalog over an in-memory database with two tables."""
    from sqlsh.domains.catalog import SQLiteCatalog

    connection.executescript(
        """
        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, email TEXT);
        CREATE TABLE accounts (id INTEGER PRIMARY KEY, user_id INTEGER, balance REAL);
        """
    )
    return SQLiteCatalog(connection)


@pytest.fixture
def console():
    """Rich console writing plain text to a buffer."""
    from rich.console import Console

    return Console(file=io.StringIO(), force_terminal=False, color_system=None, width=120)


@pytest.fixture
def tmp_store_dir(tmp_path):
    return tmp_path / "config"
