"""Shared output formatting for CLI commands."""

from __future__ import annotations

import json

from assetguard.adapters._base import ExecutionResult
from assetguard.diagnostics.render import render_json, render_text
from assetguard.diagnostics.types import GuardResult


def format_result(result: GuardResult, *, output_format: str = "text") -> str:
    if output_format == "json":
        return json.dumps(render_json(result), indent=2)
    return render_text(result)


def format_execution_result(result: ExecutionResult) -> str:
    """Simple tabular text output."""
    lines: list[str] = []
    if result.columns:
        lines.append(" | ".join(result.columns))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.columns))
        for row in result.rows:
            lines.append(" | ".join(str(row.get(c, "")) for c in result.columns))

    duration = f", {result.duration_ms:.0f}ms" if result.duration_ms is not None else ""
    more = ", more rows not shown" if result.truncated else ""
    lines.append(f"\n({result.row_count} rows{duration}{more})")
    return "\n".join(lines)
