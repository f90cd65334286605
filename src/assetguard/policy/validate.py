"""Structural validation: textual checks over an untrusted candidate query.

Each check returns a blocking Diagnostic or None. `validate` runs them in
order and stops at the first rejection.
"""

from __future__ import annotations

import re

from assetguard.diagnostics import Diagnostic, Span, codes
from assetguard.policy.denylist import DANGEROUS_TOKENS, SUSPICIOUS_PATTERNS
from assetguard.policy.tables import extract_positional_tables
from assetguard.schema import SchemaDescriptor


def _span_of(token: str, sql: str) -> Span | None:
    m = re.search(re.escape(token), sql, re.IGNORECASE)
    if m is None:
        return None
    return Span(m.start(), m.end())


def check_input(sql: object) -> Diagnostic | None:
    """Reject anything that is not a non-blank string."""
    if not isinstance(sql, str) or not sql.strip():
        return Diagnostic.error(codes.EMPTY_OR_INVALID_INPUT, "query invalid")
    return None


def check_select_only(sql: str, operations: frozenset[str] = frozenset({"SELECT"})) -> Diagnostic | None:
    upper = sql.strip().upper()
    if any(upper.startswith(op) for op in operations):
        return None
    allowed = ", ".join(sorted(operations))
    return (
        Diagnostic.error(codes.NOT_SELECT_STATEMENT, f"only {allowed} queries are allowed")
        .note("the natural-language layer is read-only")
    )


def check_dangerous_tokens(sql: str) -> Diagnostic | None:
    """Reject on the first denylisted token found anywhere in the query."""
    upper = sql.upper()
    for token in DANGEROUS_TOKENS:
        if token in upper:
            diag = Diagnostic.error(
                codes.DANGEROUS_KEYWORD,
                f"query contains a dangerous operation: {token}",
            )
            span = _span_of(token, sql)
            if span is not None:
                diag.span(span)
            return diag
    return None


def check_multiple_statements(sql: str) -> Diagnostic | None:
    """Block SQL containing more than one non-empty `;`-separated fragment."""
    fragments = [s for s in sql.split(";") if s.strip()]
    if len(fragments) <= 1:
        return None

    semi_pos = sql.find(";")
    return (
        Diagnostic.error(codes.MULTIPLE_STATEMENTS, "multiple statements are not allowed")
        .span(Span(semi_pos, semi_pos + 1))
        .note("only single statements are allowed (possible SQL injection)")
    )


def check_restricted_columns(sql: str, restricted: frozenset[str]) -> Diagnostic | None:
    """Reject any whole-word mention of a restricted column.

    Textual: an alias or string literal spelling the name also rejects.
    """
    for col in sorted(restricted):
        m = re.search(rf"\b{re.escape(col)}\b", sql, re.IGNORECASE)
        if m is not None:
            return (
                Diagnostic.error(
                    codes.RESTRICTED_COLUMN,
                    f"access to column '{col}' is not allowed",
                )
                .span(Span(m.start(), m.end()))
            )
    return None


def check_tables(sql: str, allowed: frozenset[str]) -> Diagnostic | None:
    for name, start, end in extract_positional_tables(sql):
        if name not in allowed:
            return (
                Diagnostic.error(codes.DISALLOWED_TABLE, f"table '{name}' is not allowed")
                .span(Span(start, end))
                .note(f"queryable tables: {', '.join(sorted(allowed))}")
            )
    return None


def check_suspicious_patterns(sql: str) -> Diagnostic | None:
    """Reject injection and probing shapes the other checks may not see."""
    for pattern, label in SUSPICIOUS_PATTERNS:
        m = pattern.search(sql)
        if m is not None:
            return (
                Diagnostic.error(codes.SUSPICIOUS_PATTERN, "query contains a suspicious pattern")
                .span(Span(m.start(), m.end()))
                .note(label)
            )
    return None


def validate(sql: object, schema: SchemaDescriptor) -> Diagnostic | None:
    """Run every structural check in order. Returns the first rejection."""
    diag = check_input(sql)
    if diag is not None:
        return diag
    assert isinstance(sql, str)

    checks = (
        lambda: check_select_only(sql, schema.allowed_operations),
        lambda: check_dangerous_tokens(sql),
        lambda: check_multiple_statements(sql),
        lambda: check_restricted_columns(sql, schema.restricted_columns),
        lambda: check_tables(sql, schema.allowed_tables),
        lambda: check_suspicious_patterns(sql),
    )
    for check in checks:
        diag = check()
        if diag is not None:
            return diag
    return None
