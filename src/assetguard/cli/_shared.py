"""Argument and option helpers for commands that take candidate SQL or a database."""

from __future__ import annotations

import sys
from collections.abc import Iterable

import click

from assetguard.adapters._base import ConnectionConfig, DatabaseType
from assetguard.connections import get_connection

# The one parameter each engine cannot open an asset database without.
REQUIRED_PARAM = {
    DatabaseType.DUCKDB: "path",
    DatabaseType.POSTGRES: "dsn",
}

_DB_HINT = "'--db'"


def candidate_sql(sql: str | None, from_stdin: bool) -> str:
    """The candidate query, from the SQL argument or from piped stdin but not both."""
    if not from_stdin:
        if not sql:
            raise click.UsageError("Missing argument 'SQL'. Provide SQL or use --from-stdin.")
        return sql
    if sql:
        raise click.UsageError("Provide SQL as an argument or --from-stdin, not both.")
    if sys.stdin.isatty():
        raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
    piped = sys.stdin.read().strip()
    if not piped:
        raise click.UsageError("--from-stdin: stdin was empty.")
    return piped


def engine(name: str, *, param_hint: str | None = None) -> DatabaseType:
    try:
        return DatabaseType(name)
    except ValueError as e:
        valid = ", ".join(t.value for t in DatabaseType)
        raise click.BadParameter(
            f"Unknown database type '{name}'. Valid: {valid}", param_hint=param_hint
        ) from e


def split_params(
    pairs: Iterable[str], db_type: DatabaseType, *, param_hint: str | None = None
) -> dict[str, str]:
    """Parse `key=value` pairs and insist on the engine's required parameter."""
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint=param_hint)
        params[key.strip()] = value.strip()

    required = REQUIRED_PARAM[db_type]
    if not params.get(required):
        raise click.BadParameter(
            f"{db_type.value} connections need '{required}=...'", param_hint=param_hint
        )
    return params


def parse_db(value: str) -> ConnectionConfig:
    """Resolve --db: a saved connection name first, then an inline 'type:key=val,...' spec."""
    saved = get_connection(value)
    if saved is not None:
        return saved

    type_name, sep, spec = value.partition(":")
    if not sep:
        raise click.BadParameter(
            f"Connection '{value}' not found in ~/.assetguard/connections.toml "
            f"and not in 'type:key=val' format.\n"
            f"  Add it: assetguard connect add {value} <type> <param>=<val>",
            param_hint=_DB_HINT,
        )
    db_type = engine(type_name, param_hint=_DB_HINT)
    pairs = [p for p in spec.split(",") if p.strip()]
    return ConnectionConfig(
        name=type_name,
        db_type=db_type,
        params=split_params(pairs, db_type, param_hint=_DB_HINT),
    )


def db_option(fn):
    return click.option(
        "--db",
        required=True,
        envvar="ASSETGUARD_DB",
        metavar="NAME|TYPE:KEY=VAL",
        help="Saved connection name or inline spec, e.g. duckdb:path=assets.duckdb.",
    )(fn)


def format_option(default: str = "text"):
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(["json", "text"]),
        default=default,
        help="Output format.",
    )
