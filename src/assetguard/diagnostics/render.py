"""Render guard results for terminal (text) and machine (JSON) output."""

from __future__ import annotations

from assetguard.diagnostics.types import Diagnostic, GuardResult


def render_json(result: GuardResult) -> dict:
    """Render a GuardResult as a JSON-serializable dict."""
    return {
        "ok": result.ok,
        "original_sql": result.original_sql,
        "sanitized_query": result.sanitized_query,
        "reason": result.reason,
        "tables": result.tables,
        "diagnostics": [_diagnostic_to_dict(diag) for diag in result.diagnostics],
    }


def render_text(result: GuardResult) -> str:
    """Render a GuardResult as human-readable text."""
    lines: list[str] = []
    for d in result.diagnostics:
        lines.append(f"{d.level.name.lower()}[{d.code}]: {d.message}")
        for note in d.notes:
            lines.append(f"  = note: {note}")

    if result.ok:
        if lines:
            lines.append("")
        lines.append(f"sanitized SQL: {result.sanitized_query}")

    return "\n".join(lines)


def _diagnostic_to_dict(d: Diagnostic) -> dict:
    out: dict = {
        "level": d.level.name.lower(),
        "code": str(d.code),
        "message": d.message,
        "notes": d.notes,
    }
    if d.spans:
        out["spans"] = [[s.start, s.end] for s in d.spans]
    return out
