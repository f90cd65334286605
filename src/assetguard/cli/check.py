"""The `check` command: run SQL through the guard without executing."""

from __future__ import annotations

import click

from assetguard.cli._output import format_result
from assetguard.cli._shared import candidate_sql, format_option
from assetguard.policy import run_guard


@click.command()
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin instead of argument.")
@click.option("--strict", is_flag=True, help="Also parse the query and check the AST.")
@click.option("--dialect", default=None, help="SQL dialect for --strict (mysql, postgres, ...).")
@format_option()
def check(
    sql: str | None,
    from_stdin: bool,
    strict: bool,
    dialect: str | None,
    output_format: str,
) -> None:
    """Check SQL against the guard without executing it. Exit code 1 on rejection."""
    sql = candidate_sql(sql, from_stdin)
    result = run_guard(sql, strict=strict, dialect=dialect)
    output = format_result(result, output_format=output_format)
    if output:
        click.echo(output)
    if not result.ok:
        raise SystemExit(1)
