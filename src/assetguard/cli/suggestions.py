"""The `suggestions` command: example questions for the chat layer."""

from __future__ import annotations

import json

import click

from assetguard.chat.prompts import SUGGESTIONS
from assetguard.cli._shared import format_option


@click.command()
@format_option()
def suggestions(output_format: str) -> None:
    """List example questions the chat layer answers well."""
    if output_format == "json":
        click.echo(json.dumps(list(SUGGESTIONS), indent=2))
        return
    for s in SUGGESTIONS:
        click.echo(f"- {s}")
