"""Tests for the SQLite catalog accessor and shell SQL functions."""

from __future__ import annotations

import pytest

from sqlsh.domains.catalog.functions import fmt_byte_size
from sqlsh.shared.core.errors import CatalogUnavailableError, PlanError


class TestListTables:
    def test_lists_tables_sorted(self, catalog):
        """Tables come back ordered by name."""
        assert catalog.list_tables() == ["accounts", "users"]

    def test_sees_new_tables_immediately(self, catalog, connection):
        """The table list is never cached."""
        connection.execute("CREATE TABLE audit (id INTEGER)")
        assert catalog.list_tables() == ["accounts", "audit", "users"]

    def test_excludes_views_and_indexes(self, catalog, connection):
        """Only tables are listed."""
        connection.execute("CREATE VIEW rich_users AS SELECT * FROM users")
        connection.execute("CREATE INDEX users_name ON users(name)")
        assert catalog.list_tables() == ["accounts", "users"]

    def test_closed_connection(self, catalog, connection):
        """A closed connection reports the catalog unavailable."""
        connection.close()
        with pytest.raises(CatalogUnavailableError):
            catalog.list_tables()


class TestPlanColumns:
    def test_reports_column_names(self, catalog):
        """Column names are reported in projection order."""
        assert catalog.plan_columns("SELECT name, id FROM users") == ["name", "id"]

    def test_reads_no_rows(self, catalog, connection):
        """Planning works without fetching any data."""
        connection.execute("INSERT INTO users (name) VALUES ('ada')")
        assert catalog.plan_columns("SELECT * FROM users") == ["id", "name", "email"]

    def test_accepts_with_clause(self, catalog):
        """Fragments may carry a WITH prefix."""
        assert catalog.plan_columns("WITH a AS (SELECT 1 AS x) SELECT x, x AS y FROM a") == ["x", "y"]

    def test_strips_trailing_semicolon(self, catalog):
        """A trailing terminator is ignored."""
        assert catalog.plan_columns("SELECT 1 AS one;") == ["one"]

    def test_trailing_line_comment(self, catalog):
        """A trailing line comment does not break the wrapper."""
        assert catalog.plan_columns("SELECT 1 AS one -- note") == ["one"]

    def test_unknown_table_is_a_plan_error(self, catalog):
        """Fragments SQLite cannot prepare raise PlanError."""
        with pytest.raises(PlanError) as exc_info:
            catalog.plan_columns("SELECT * FROM missing")
        assert "missing" in str(exc_info.value)

    def test_never_runs_side_effects(self, catalog, connection):
        """A data-modifying fragment is rejected and changes nothing."""
        connection.execute("INSERT INTO users (name) VALUES ('ada')")
        with pytest.raises(PlanError):
            catalog.plan_columns("DELETE FROM users")
        assert connection.execute("SELECT count(*) FROM users").fetchone()[0] == 1

    def test_empty_fragment(self, catalog):
        """An empty fragment cannot be planned."""
        with pytest.raises(PlanError):
            catalog.plan_columns("  ;")

    def test_closed_connection(self, catalog, connection):
        """A closed connection is not a plan error."""
        connection.close()
        with pytest.raises(CatalogUnavailableError):
            catalog.plan_columns("SELECT 1")


class TestTableSql:
    def test_returns_create_statement(self, catalog):
        """The stored CREATE statement is returned."""
        assert catalog.table_sql("users").startswith("CREATE TABLE users")

    def test_unknown_table(self, catalog):
        """Unknown tables give None."""
        assert catalog.table_sql("missing") is None

    def test_all_table_sql(self, catalog):
        """Every table's CREATE statement is listed by name."""
        names = [name for name, _sql in catalog.all_table_sql()]
        assert names == ["accounts", "users"]


class TestFmtByteSize:
    @pytest.mark.parametrize(
        "value,expected",
        [(0, "0 bytes"), (1, "1 byte"), (1500, "1.5 kB"), (2_000_000, "2.0 MB")],
    )
    def test_formats_decimal_units(self, value, expected):
        """Byte counts use decimal (1000-based) units."""
        assert fmt_byte_size(value) == expected

    def test_null_passes_through(self):
        """NULL stays NULL."""
        assert fmt_byte_size(None) is None

    def test_installed_on_connection(self, connection):
        """The shell connection exposes fmt_byte_size to SQL."""
        assert connection.execute("SELECT fmt_byte_size(1500)").fetchone()[0] == "1.5 kB"
