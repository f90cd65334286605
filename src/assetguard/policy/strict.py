"""AST checks layered on top of the textual policy (strict mode).

Only ever rejects more: a candidate reaches these checks after every
textual check already passed.
"""

from __future__ import annotations

import enum

import sqlglot
from sqlglot import exp

from assetguard.diagnostics import Diagnostic, codes
from assetguard.policy.tables import extract_tables
from assetguard.schema import SchemaDescriptor

_QUERIES = (exp.Select, exp.Union, exp.Intersect, exp.Except)
_WRITES = (exp.Insert, exp.Update, exp.Delete, exp.Merge)
_SCHEMA_CHANGES = (exp.Create, exp.Drop, exp.Alter, exp.TruncateTable)


class StatementKind(enum.Enum):
    READ = "read"
    WRITE = "write"    # INSERT/UPDATE/DELETE/MERGE, also inside a CTE
    SCHEMA = "schema"  # CREATE/DROP/ALTER/TRUNCATE and SELECT INTO
    OTHER = "other"    # raw commands, GRANT, COPY, anything unrecognised


def classify(statement: exp.Expression) -> StatementKind:
    """Only a query with nothing nested that writes or materializes is READ."""
    if isinstance(statement, _WRITES):
        return StatementKind.WRITE
    if isinstance(statement, _SCHEMA_CHANGES):
        return StatementKind.SCHEMA
    if not isinstance(statement, _QUERIES):
        return StatementKind.OTHER
    # WITH d AS (DELETE ... RETURNING *) SELECT * FROM d
    if any(isinstance(cte.this, _WRITES) for cte in statement.find_all(exp.CTE)):
        return StatementKind.WRITE
    if isinstance(statement, exp.Select) and statement.find(exp.Into) is not None:
        return StatementKind.SCHEMA
    return StatementKind.READ


def parse_candidate(
    sql: str, *, dialect: str | None = None,
) -> tuple[exp.Expression | None, Diagnostic | None]:
    """Parse exactly one statement, or explain why not."""
    try:
        statements = sqlglot.parse(sql, dialect=dialect)
    except sqlglot.errors.SqlglotError as e:
        return None, Diagnostic.error(codes.SYNTAX_ERROR, f"SQL syntax error: {e}")

    # Trailing semicolons parse as None.
    statements = [s for s in statements if s is not None]
    if not statements:
        return None, Diagnostic.error(codes.EMPTY_OR_INVALID_INPUT, "query invalid")
    if len(statements) > 1:
        return None, Diagnostic.error(
            codes.MULTIPLE_STATEMENTS, "multiple statements are not allowed",
        )
    return statements[0], None


def check_read_only(statement: exp.Expression) -> Diagnostic | None:
    kind = classify(statement)
    if kind == StatementKind.READ:
        return None
    return (
        Diagnostic.error(codes.NOT_SELECT_STATEMENT, "only SELECT queries are allowed")
        .note(f"statement classified as {kind.value}")
    )


def check_scope_tables(statement: exp.Expression, allowed: frozenset[str]) -> Diagnostic | None:
    """Every physical table, wherever it appears, must be allowed and unqualified."""
    for name in extract_tables(statement):
        if name not in allowed:
            return Diagnostic.error(codes.DISALLOWED_TABLE, f"table '{name}' is not allowed")
    return None


def check_column_refs(statement: exp.Expression, restricted: frozenset[str]) -> Diagnostic | None:
    for column in statement.find_all(exp.Column):
        name = column.name.lower()
        if name in restricted:
            return Diagnostic.error(
                codes.RESTRICTED_COLUMN, f"access to column '{name}' is not allowed",
            )
    return None


def check_statement(statement: exp.Expression, schema: SchemaDescriptor) -> Diagnostic | None:
    for diag in (
        check_read_only(statement),
        check_scope_tables(statement, schema.allowed_tables),
        check_column_refs(statement, schema.restricted_columns),
    ):
        if diag is not None:
            return diag
    return None


def has_outer_limit(statement: exp.Expression) -> bool:
    """True if the top-level query (not a subquery) carries a LIMIT."""
    return statement.args.get("limit") is not None
