"""The `schema` command group: show the registry and check it against a database."""

from __future__ import annotations

import asyncio
import json

import click

from assetguard.adapters._base import AdapterError, ConnectionConfig, LiveSchema
from assetguard.adapters._registry import open_adapter
from assetguard.cli._shared import db_option, format_option, parse_db
from assetguard.schema import ASSET_SCHEMA
from assetguard.schema.verify import verify_schema


@click.group("schema")
def schema() -> None:
    """Inspect what the natural-language layer can see."""


@schema.command("describe")
@format_option()
def describe_cmd(output_format: str) -> None:
    """Print the schema text given to the SQL generator."""
    if output_format == "json":
        click.echo(json.dumps({
            "allowed_tables": sorted(ASSET_SCHEMA.allowed_tables),
            "allowed_operations": sorted(ASSET_SCHEMA.allowed_operations),
            "description": ASSET_SCHEMA.describe(),
        }, indent=2))
    else:
        click.echo(ASSET_SCHEMA.describe(), nl=False)


async def _read_catalog(config: ConnectionConfig) -> LiveSchema:
    async with open_adapter(config) as adapter:
        return await adapter.catalog()


@schema.command("verify")
@db_option
@format_option()
def verify(db: str, output_format: str) -> None:
    """Check that every registered table and visible column exists in the database."""
    config = parse_db(db)

    try:
        live = asyncio.run(_read_catalog(config))
    except AdapterError as e:
        if output_format == "json":
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.echo(f"error: {e}", err=True)
        raise SystemExit(1) from None

    drift = verify_schema(ASSET_SCHEMA, live)
    if output_format == "json":
        click.echo(json.dumps({
            "ok": drift.ok,
            "missing_tables": drift.missing_tables,
            "missing_columns": drift.missing_columns,
        }, indent=2))
    else:
        for name in drift.missing_tables:
            click.echo(f"missing table: {name}")
        for name in drift.missing_columns:
            click.echo(f"missing column: {name}")
        if drift.ok:
            click.echo("schema registry matches the database")

    if not drift.ok:
        raise SystemExit(1)
