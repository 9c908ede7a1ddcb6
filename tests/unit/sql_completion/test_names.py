"""Tests for CTE and alias resolution."""

from __future__ import annotations

from sqlsh.domains.query.completion import resolve_names
from sqlsh.domains.query.parsing import parse_sql


def resolve(sql, catalog):
    parsed = parse_sql(sql)
    statement = parsed.statements()[0]
    return resolve_names(parsed, statement, catalog)


class TestCteResolution:
    """CTEs resolve left to right against the catalog planner."""

    SQL = "WITH a AS (SELECT 1 AS x), b AS (SELECT x FROM a) SELECT * FROM b"

    def test_trial_fragments_accumulate_previous_definitions(self, recording_catalog):
        """Each CTE body is planned behind the definitions before it."""
        catalog = recording_catalog()
        resolve(self.SQL, catalog)

        assert catalog.planned == [
            "SELECT 1 AS x",
            "WITH a AS (SELECT 1 AS x) SELECT x FROM a",
        ]

    def test_columns_come_from_the_planner(self, recording_catalog):
        """Planned column names are recorded per CTE, in declaration order."""
        catalog = recording_catalog(
            columns={
                "SELECT 1 AS x": ["x"],
                "WITH a AS (SELECT 1 AS x) SELECT x FROM a": ["x"],
            }
        )
        names = resolve(self.SQL, catalog)

        assert list(names.ctes) == ["a", "b"]
        assert names.ctes == {"a": ["x"], "b": ["x"]}

    def test_plan_failure_does_not_stop_resolution(self, recording_catalog):
        """A CTE that fails to plan gets no columns and later CTEs still resolve."""
        catalog = recording_catalog(columns={"WITH a AS (SELECT 1 AS x) SELECT x FROM a": ["x"]})
        names = resolve(self.SQL, catalog)

        assert names.ctes == {"a": [], "b": ["x"]}

    def test_unavailable_catalog_gives_empty_columns(self, recording_catalog):
        """Catalog failures never escape the resolver."""
        names = resolve(self.SQL, recording_catalog(unavailable=True))

        assert names.ctes == {"a": [], "b": []}

    def test_explicit_column_list_skips_planning(self, recording_catalog):
        """Declared column names are used as-is."""
        catalog = recording_catalog()
        names = resolve("WITH a(p, q) AS (SELECT 1, 2) SELECT * FROM a", catalog)

        assert names.ctes == {"a": ["p", "q"]}
        assert catalog.planned == []

    def test_resolves_against_sqlite(self, catalog):
        """The SQLite planner reports the CTE's projected columns."""
        names = resolve("WITH t AS (SELECT id, name FROM users) SELECT * FROM t", catalog)

        assert names.ctes == {"t": ["id", "name"]}

    def test_cte_with_unknown_table_resolves_empty(self, catalog):
        """A CTE over a table that does not exist gets an empty column list."""
        names = resolve("WITH t AS (SELECT * FROM missing) SELECT * FROM t", catalog)

        assert names.ctes == {"t": []}


class TestAliasResolution:
    """Aliases map to the literal table text."""

    def test_aliases_with_and_without_as(self, recording_catalog):
        """Both `table AS alias` and `table alias` are recorded."""
        sql = "SELECT * FROM users AS u JOIN accounts a ON a.user_id = u.id"
        names = resolve(sql, recording_catalog())

        assert names.aliases == {"u": "users", "a": "accounts"}

    def test_table_without_alias(self, recording_catalog):
        """Anonymous table references are not aliases."""
        names = resolve("SELECT * FROM users", recording_catalog())

        assert names.aliases == {}

    def test_alias_of_a_cte(self, recording_catalog):
        """An alias may point at a CTE."""
        sql = "WITH t AS (SELECT 1 AS x) SELECT * FROM t AS alias_t"
        names = resolve(sql, recording_catalog())

        assert names.aliases == {"alias_t": "t"}
        assert "t" in names.ctes

    def test_names_lists_ctes_then_aliases(self, recording_catalog):
        """CTE names come before alias names."""
        sql = "WITH t AS (SELECT 1 AS x) SELECT * FROM t AS z"
        names = resolve(sql, recording_catalog())

        assert names.names() == ["t", "z"]


class TestResolutionBounds:
    """Names can be resolved over a byte range of a wider node."""

    SQL = "SELECT * FROM users AS p; WITH t AS (SELECT 1 AS x) SELECT * FROM t AS q; SELECT * FROM accounts AS r"

    def test_only_matches_inside_the_range_count(self, recording_catalog):
        """Names before ``since`` and from ``until`` on are ignored."""
        parsed = parse_sql(self.SQL)
        since = self.SQL.index("WITH")
        until = self.SQL.index("; SELECT * FROM accounts")
        names = resolve_names(parsed, parsed.root, recording_catalog(), since=since, until=until)

        assert list(names.ctes) == ["t"]
        assert names.aliases == {"q": "t"}

    def test_unbounded_range_covers_the_node(self, recording_catalog):
        parsed = parse_sql(self.SQL)
        names = resolve_names(parsed, parsed.root, recording_catalog())

        assert names.aliases == {"p": "users", "q": "t", "r": "accounts"}
