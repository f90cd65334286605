"""The `query` command: guard → execute → audit.

Only statements the guard accepts reach the database, and they run in
their sanitized form.
"""

from __future__ import annotations

import asyncio
import json

import click

from assetguard.adapters._base import AdapterError, ConnectionConfig, ExecutionResult
from assetguard.adapters._registry import open_adapter
from assetguard.cli._output import format_execution_result, format_result
from assetguard.cli._shared import candidate_sql, db_option, format_option, parse_db
from assetguard.diagnostics.render import render_json
from assetguard.diagnostics.types import GuardResult
from assetguard.policy import run_guard
from assetguard.querylog import cleanup_old_logs, log_query

AUTO_LABELS = {"tool": "assetguard", "source": "cli"}


def _emit(
    output_format: str,
    result: GuardResult,
    *,
    exec_result: ExecutionResult | None = None,
) -> None:
    if output_format == "json":
        envelope: dict[str, object] = {"decision": "allow" if result.ok else "deny"}
        envelope.update(render_json(result))
        if exec_result is not None:
            envelope["columns"] = exec_result.columns
            envelope["rows"] = exec_result.rows
            envelope["row_count"] = exec_result.row_count
            envelope["truncated"] = exec_result.truncated
            envelope["duration_ms"] = exec_result.duration_ms
        click.echo(json.dumps(envelope, indent=2, default=str))
        return

    output = format_result(result, output_format="text")
    if output:
        click.echo(output)
    if exec_result is not None:
        click.echo(format_execution_result(exec_result))


async def _run_query(
    sql: str,
    config: ConnectionConfig,
    *,
    strict: bool,
    output_format: str,
) -> int:
    """Guard, then execute. Returns exit code."""
    # DatabaseType values double as sqlglot dialect names.
    result = run_guard(sql, strict=strict, dialect=config.db_type.value)
    audit = {
        "sql": sql,
        "db": config.name,
        "tables": result.tables,
        "diagnostics": result.codes,
        "labels": AUTO_LABELS,
    }

    if not result.ok:
        _emit(output_format, result)
        log_query(effective_sql=None, blocked=True, reason=result.reason, **audit)
        return 1

    async with open_adapter(config) as adapter:
        try:
            exec_result = await adapter.execute(result.sanitized_query, labels=AUTO_LABELS)
        except AdapterError as e:
            log_query(effective_sql=result.sanitized_query, reason=str(e), **audit)
            raise

    _emit(output_format, result, exec_result=exec_result)
    log_query(
        effective_sql=result.sanitized_query,
        row_count=exec_result.row_count,
        duration_ms=exec_result.duration_ms,
        **audit,
    )
    return 0


@click.command()
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin instead of argument.")
@db_option
@click.option("--strict", is_flag=True, help="Also parse the query and check the AST.")
@format_option(default="json")
def query(
    sql: str | None,
    from_stdin: bool,
    db: str,
    strict: bool,
    output_format: str,
) -> None:
    """Execute SQL only if the guard accepts it, with the row ceiling applied."""
    cleanup_old_logs()
    sql = candidate_sql(sql, from_stdin)

    try:
        config = parse_db(db)
    except click.BadParameter as e:
        click.echo(f"error: {e.format_message()}", err=True)
        raise SystemExit(1) from e

    try:
        exit_code = asyncio.run(
            _run_query(sql, config, strict=strict, output_format=output_format)
        )
    except AdapterError as e:
        if output_format == "json":
            click.echo(json.dumps({"decision": "deny", "ok": False, "error": str(e)}, indent=2))
        else:
            click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from e

    if exit_code != 0:
        raise SystemExit(exit_code)
