"""CLI entry point."""

from __future__ import annotations

import click

from assetguard.cli.audit import audit
from assetguard.cli.check import check
from assetguard.cli.connect import connect
from assetguard.cli.query import query
from assetguard.cli.schema import schema
from assetguard.cli.suggestions import suggestions


@click.group()
@click.version_option(package_name="assetguard")
def main() -> None:
    """assetguard: guarded natural-language querying for the IT asset database."""


main.add_command(audit)
main.add_command(check)
main.add_command(connect)
main.add_command(query)
main.add_command(schema)
main.add_command(suggestions)
