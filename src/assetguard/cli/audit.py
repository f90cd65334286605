"""The `audit` command: review guard decisions from the audit log."""

from __future__ import annotations

import json

import click

from assetguard.cli._shared import format_option
from assetguard.querylog import read_entries


@click.command()
@click.option("--day", default=None, help="Day to show (YYYY-MM-DD). Defaults to today.")
@click.option("--blocked", is_flag=True, help="Only show rejected queries.")
@format_option()
def audit(day: str | None, blocked: bool, output_format: str) -> None:
    """Show guard decisions recorded for the current project."""
    entries = read_entries(day=day)
    if blocked:
        entries = [e for e in entries if e.get("blocked")]

    if output_format == "json":
        click.echo(json.dumps(entries, indent=2))
        return

    if not entries:
        click.echo("No entries.")
        return
    for e in entries:
        verdict = "BLOCKED" if e.get("blocked") else "allowed"
        who = e.get("user") or (e.get("labels") or {}).get("source") or "-"
        click.echo(f"{e['ts']}  {verdict:<7}  {who}  {e.get('sql')}")
        if e.get("reason"):
            click.echo(f"    reason: {e['reason']}")
