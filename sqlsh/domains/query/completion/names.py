"""Statement-scoped name resolution for CTEs and table aliases."""

from __future__ import annotations

from dataclasses import dataclass, field

from tree_sitter import Node

from sqlsh.domains.query.parsing import ParsedSql
from sqlsh.domains.query.parsing.grammar import ALIAS_PATTERN, CTE_PATTERN, IDENTIFIER, KEYWORD_AS
from sqlsh.shared.core.errors import CatalogError
from sqlsh.shared.core.logging import get_logger
from sqlsh.shared.core.protocols import CatalogProtocol

logger = get_logger(__name__)


@dataclass
class QueryNames:
    """Names a single statement defines for itself.

    ``ctes`` keeps declaration order and maps each CTE name, as written, to its
    column names (empty when they could not be resolved). ``aliases`` maps an
    alias to the table or CTE text it stands for.
    """

    ctes: dict[str, list[str]] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    def names(self) -> list[str]:
        """CTE names followed by alias names."""
        return [*self.ctes, *self.aliases]


def _declared_columns(definition: Node, parsed: ParsedSql) -> list[str] | None:
    """Column names of ``name(a, b) AS (...)``, or None without a column list."""
    columns: list[str] = []
    for child in definition.children[1:]:
        if child.type == KEYWORD_AS:
            break
        if child.type == IDENTIFIER:
            columns.append(parsed.text(child))
    return columns or None


def _plan(catalog: CatalogProtocol, fragment: str) -> list[str]:
    try:
        return list(catalog.plan_columns(fragment))
    except CatalogError as err:
        logger.debug("cte_plan_failed", fragment=fragment, error=str(err))
        return []


def resolve_names(
    parsed: ParsedSql,
    statement: Node,
    catalog: CatalogProtocol,
    *,
    since: int = 0,
    until: int | None = None,
) -> QueryNames:
    """Collect the CTEs and aliases declared inside ``statement``.

    CTEs resolve left to right: each body is planned behind the definitions
    that precede it, so ``b AS (SELECT x FROM a)`` sees ``a``. A CTE that fails
    to plan gets an empty column list and later CTEs still resolve.
    Only matches starting in ``[since, until)`` count, so a wider node such as
    the whole program can be searched for one statement's names.

    Never raises on catalog failures.
    """
    names = QueryNames()

    previous: list[str] = []
    last_end = since
    for match in parsed.matches(CTE_PATTERN, statement):
        name_node = match.get("name")
        body_node = match.get("body")
        definition = match.get("definition")
        if name_node is None or body_node is None or definition is None:
            continue
        # CTEs nested in another CTE's body are local to it
        if definition.start_byte < last_end:
            continue
        if until is not None and definition.start_byte >= until:
            break
        last_end = definition.end_byte

        body = parsed.text(body_node)
        if previous:
            fragment = f"WITH {', '.join(previous)} {body}"
        else:
            fragment = body

        columns = _declared_columns(definition, parsed)
        if columns is None:
            columns = _plan(catalog, fragment)

        names.ctes[parsed.text(name_node)] = columns
        previous.append(parsed.text(definition))

    for match in parsed.matches(ALIAS_PATTERN, statement):
        table_node = match.get("table")
        alias_node = match.get("alias")
        if table_node is None or alias_node is None:
            continue
        if table_node.end_byte > alias_node.start_byte or table_node.start_byte < since:
            continue
        if until is not None and alias_node.start_byte >= until:
            continue
        names.aliases[parsed.text(alias_node)] = parsed.text(table_node)

    return names
