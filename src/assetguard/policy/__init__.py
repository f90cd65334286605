"""Query guard: validate, sanitize, return a GuardResult."""

from __future__ import annotations

from assetguard.diagnostics import GuardResult
from assetguard.policy.sanitize import MAX_LIMIT, sanitize
from assetguard.policy.strict import check_statement, has_outer_limit, parse_candidate
from assetguard.policy.tables import extract_positional_tables
from assetguard.policy.validate import validate
from assetguard.schema import ASSET_SCHEMA, SchemaDescriptor


def run_guard(
    sql: object,
    *,
    schema: SchemaDescriptor = ASSET_SCHEMA,
    limit: int = MAX_LIMIT,
    strict: bool = False,
    dialect: str | None = None,
) -> GuardResult:
    """Run the full guard pipeline on a candidate SQL string.

    Steps:
        1. Structural validation (input, SELECT-only, denylist, single
           statement, restricted columns, table allowlist, suspicious
           patterns), first failure rejects
        2. Strict mode only: parse with sqlglot and re-check statement kind,
           tables and columns on the AST
        3. Sanitation (trailing terminators, LIMIT ceiling)
        4. Return GuardResult

    Args:
        sql: The candidate SQL from the generator. Never trusted.
        schema: The registry that decides which tables and columns exist.
        limit: Row ceiling enforced through LIMIT.
        strict: Also run the AST checks.
        dialect: sqlglot dialect for strict parsing (None = generic).

    Returns:
        GuardResult, accepted with the sanitized query or rejected with a reason.
    """
    original = sql if isinstance(sql, str) else None

    # Step 1: Structural validation
    diag = validate(sql, schema)
    if diag is not None:
        return GuardResult.rejected(original, diag)
    assert isinstance(sql, str)

    tables = sorted({name for name, _, _ in extract_positional_tables(sql)})

    # Step 2: AST checks
    force_limit = False
    if strict:
        statement, diag = parse_candidate(sql, dialect=dialect)
        if diag is None:
            assert statement is not None
            diag = check_statement(statement, schema)
        if diag is not None:
            return GuardResult.rejected(sql, diag, tables=tables)
        force_limit = not has_outer_limit(statement)

    # Step 3: Sanitation
    sanitized, diagnostics = sanitize(sql, limit=limit, force_limit=force_limit)

    return GuardResult.accepted(sql, sanitized, diagnostics=diagnostics, tables=tables)


class QueryGuard:
    """Gatekeeper between generated SQL and the database.

    Holds only immutable configuration, so one instance can serve any number
    of concurrent callers.
    """

    def __init__(
        self,
        schema: SchemaDescriptor = ASSET_SCHEMA,
        *,
        limit: int = MAX_LIMIT,
        strict: bool = False,
        dialect: str | None = None,
    ) -> None:
        self._schema = schema
        self._limit = limit
        self._strict = strict
        self._dialect = dialect

    @property
    def schema(self) -> SchemaDescriptor:
        return self._schema

    def validate(self, sql: object) -> GuardResult | None:
        """Structural checks only. Returns the rejection, or None if the query passes."""
        diag = validate(sql, self._schema)
        if diag is None:
            return None
        return GuardResult.rejected(sql if isinstance(sql, str) else None, diag)

    def sanitize(self, sql: str) -> str:
        sanitized, _ = sanitize(sql, limit=self._limit)
        return sanitized

    def process(self, sql: object) -> GuardResult:
        return run_guard(
            sql,
            schema=self._schema,
            limit=self._limit,
            strict=self._strict,
            dialect=self._dialect,
        )


__all__ = ["MAX_LIMIT", "QueryGuard", "run_guard"]
