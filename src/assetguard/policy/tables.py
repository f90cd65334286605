"""Table extraction: positional (regex) and CTE-aware (sqlglot scopes)."""

from __future__ import annotations

import re

from sqlglot import exp
from sqlglot.optimizer.scope import traverse_scope

# The identifier right after FROM/JOIN, optionally behind an opening quote.
_TABLE_AFTER_KEYWORD = re.compile(r"\b(?:FROM|JOIN)\s+[`\"\[]?(\w+)", re.IGNORECASE)


def extract_positional_tables(sql: str) -> list[tuple[str, int, int]]:
    """Return (lowercased name, start, end) for every identifier after FROM/JOIN.

    Purely positional: a subquery or CTE alias is reported like a real table,
    and only the first table of a comma-separated FROM list is seen.
    """
    return [
        (m.group(1).lower(), m.start(1), m.end(1))
        for m in _TABLE_AFTER_KEYWORD.finditer(sql)
    ]


def extract_tables(statement: exp.Expression) -> list[str]:
    """Extract all physical table names referenced by a parsed statement.

    Resolves CTEs and returns real tables only. Handles JOIN, comma joins and
    subqueries. Returns a sorted list of lowercased names, schema-qualified
    (schema.table) when the query qualifies them.
    """
    cte_names: set[str] = set()
    source_tables: set[str] = set()

    try:
        scopes = list(traverse_scope(statement))
    except Exception:
        # Scope analysis can fail on shapes it does not model.
        return _walk_tables(statement)

    if not scopes:
        return _walk_tables(statement)

    # Pass 1: collect CTE names
    for scope in scopes:
        if scope.is_cte:
            cte_names.add(scope.expression.parent.alias.lower())

    # Pass 2: collect real tables from all scopes
    for scope in scopes:
        for table in scope.tables:
            if table.name.lower() not in cte_names:
                source_tables.add(_qualified_name(table))

    return sorted(source_tables)


def _walk_tables(statement: exp.Expression) -> list[str]:
    tables: set[str] = set()
    for node in statement.walk():
        if isinstance(node, exp.Table) and node.name:
            tables.add(_qualified_name(node))
    return sorted(tables)


def _qualified_name(table: exp.Table) -> str:
    if table.db:
        return f"{table.db}.{table.name}".lower()
    return table.name.lower()
