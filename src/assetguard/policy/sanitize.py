"""Sanitation: trailing-terminator removal and the LIMIT ceiling."""

from __future__ import annotations

import re

from assetguard.diagnostics import Diagnostic, codes

MAX_LIMIT = 100

_TRAILING_TERMINATORS = re.compile(r"[\s;]+$")
# bounded only by a numeric LIMIT clause at the very end of the statement
_TRAILING_LIMIT = re.compile(
    r"\bLIMIT\s+\d+(?:\s*,\s*\d+)?(?:\s+OFFSET\s+\d+)?\s*$", re.IGNORECASE
)
# LIMIT n, or MySQL's LIMIT offset, n
_LIMIT_CLAUSE = re.compile(r"\b(LIMIT\s+)(\d+)(?:(\s*,\s*)(\d+))?", re.IGNORECASE)


def strip_terminators(sql: str) -> str:
    return _TRAILING_TERMINATORS.sub("", sql.strip())


def clamp_limits(sql: str, *, limit: int = MAX_LIMIT) -> tuple[str, list[int]]:
    """Rewrite every LIMIT row count above the ceiling to the ceiling.

    Returns the rewritten SQL and the original values that were clamped.
    """
    clamped: list[int] = []

    def _clamp(m: re.Match[str]) -> str:
        if m.group(4) is not None:
            count = int(m.group(4))
            if count <= limit:
                return m.group(0)
            clamped.append(count)
            return f"{m.group(1)}{m.group(2)}{m.group(3)}{limit}"
        count = int(m.group(2))
        if count <= limit:
            return m.group(0)
        clamped.append(count)
        return f"{m.group(1)}{limit}"

    return _LIMIT_CLAUSE.sub(_clamp, sql), clamped


def sanitize(
    sql: str,
    *,
    limit: int = MAX_LIMIT,
    force_limit: bool = False,
) -> tuple[str, list[Diagnostic]]:
    """Prepare a validated query for execution.

    Appends `LIMIT <limit>` unless the statement ends in a numeric
    `LIMIT n`, `LIMIT offset, n` or `LIMIT n OFFSET k` clause (always, with
    force_limit), then clamps oversized limits. A LIMIT inside a literal or a
    subquery does not bound the outer query.
    Applying sanitize to its own output changes nothing.
    """
    diagnostics: list[Diagnostic] = []
    sanitized = strip_terminators(sql)

    if force_limit or _TRAILING_LIMIT.search(sanitized) is None:
        sanitized = f"{sanitized} LIMIT {limit}"
        diagnostics.append(
            Diagnostic.info(codes.LIMIT_INJECTED, f"LIMIT {limit} added to unbounded SELECT")
        )

    sanitized, clamped = clamp_limits(sanitized, limit=limit)
    for value in clamped:
        diagnostics.append(
            Diagnostic.info(codes.LIMIT_CLAMPED, f"LIMIT {value} reduced to {limit}")
            .note(f"at most {limit} rows are returned to the chat layer")
        )

    return sanitized, diagnostics
