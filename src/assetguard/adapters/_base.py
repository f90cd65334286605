"""Read-only execution of guarded SELECTs.

Adapters only ever run statements the guard accepted. Sessions are opened
read-only on every engine, and no result carries more rows than the guard's
ceiling even if a statement reaches the adapter unbounded.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from assetguard.policy.sanitize import MAX_LIMIT

# One row per column of the session's default schema. Valid on DuckDB and PostgreSQL.
CATALOG_SQL = (
    "SELECT table_name, column_name "
    "FROM information_schema.columns "
    "WHERE table_schema = current_schema() "
    "ORDER BY table_name, ordinal_position"
)


class DatabaseType(enum.Enum):
    """Supported engines. Values double as sqlglot dialect names."""

    POSTGRES = "postgres"
    DUCKDB = "duckdb"


@dataclass
class ConnectionConfig:
    name: str
    db_type: DatabaseType
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class ExecutionResult:
    """Rows returned for one guarded SELECT.

    `truncated` is set when the engine had more rows than the adapter was
    allowed to hand back.
    """

    columns: list[str]
    rows: list[dict[str, object]]
    row_count: int
    duration_ms: float | None = None
    truncated: bool = False


@dataclass(frozen=True)
class LiveSchema:
    """Table and column names the database actually has, lowercased."""

    tables: dict[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> LiveSchema:
        found: dict[str, set[str]] = {}
        for table, column in rows:
            found.setdefault(table.lower(), set()).add(column.lower())
        return cls({name: frozenset(columns) for name, columns in found.items()})

    def has_table(self, name: str) -> bool:
        return name.lower() in self.tables

    def columns(self, table: str) -> frozenset[str]:
        return self.tables.get(table.lower(), frozenset())


class AdapterError(Exception):
    """Connection, execution or catalog failure, with the driver error chained."""


def label_sql(sql: str, labels: dict[str, str] | None) -> str:
    """Prefix `sql` with a `/* assetguard: k=v */` comment visible in server logs."""
    if not labels:
        return sql
    pairs = ", ".join(f"{k}={v}" for k, v in labels.items()).replace("*/", "")
    return f"/* assetguard: {pairs} */ {sql}"


def build_result(
    columns: Sequence[str],
    fetched: Sequence[Sequence[object]],
    *,
    max_rows: int,
    started: float,
) -> ExecutionResult:
    """Turn at most `max_rows + 1` fetched tuples into a capped ExecutionResult."""
    rows = [dict(zip(columns, row, strict=True)) for row in fetched[:max_rows]]
    return ExecutionResult(
        columns=list(columns),
        rows=rows,
        row_count=len(rows),
        duration_ms=(time.monotonic() - started) * 1000,
        truncated=len(fetched) > max_rows,
    )


@runtime_checkable
class DatabaseAdapter(Protocol):
    async def connect(self, config: ConnectionConfig) -> None: ...
    async def close(self) -> None: ...
    async def execute(
        self,
        sql: str,
        *,
        labels: dict[str, str] | None = None,
        max_rows: int = MAX_LIMIT,
    ) -> ExecutionResult: ...
    async def catalog(self) -> LiveSchema: ...
