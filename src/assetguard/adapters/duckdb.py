"""DuckDB adapter: asset database files opened read-only."""

from __future__ import annotations

import time

import duckdb as _duckdb

from assetguard.adapters._base import (
    CATALOG_SQL,
    AdapterError,
    ConnectionConfig,
    ExecutionResult,
    LiveSchema,
    build_result,
    label_sql,
)
from assetguard.policy.sanitize import MAX_LIMIT

_MEMORY = ":memory:"


class DuckDBAdapter:
    """In-process DuckDB. A file is always attached read-only; `:memory:` is for scratch use."""

    def __init__(self) -> None:
        self._conn: _duckdb.DuckDBPyConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        path = config.params.get("path", _MEMORY)
        try:
            self._conn = _duckdb.connect(path, read_only=path != _MEMORY)
        except _duckdb.Error as e:
            raise AdapterError(f"DuckDB could not open {path}: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _session(self) -> _duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._conn

    async def execute(
        self,
        sql: str,
        *,
        labels: dict[str, str] | None = None,
        max_rows: int = MAX_LIMIT,
    ) -> ExecutionResult:
        conn = self._session()
        started = time.monotonic()
        try:
            cursor = conn.execute(label_sql(sql, labels))
            if cursor.description is None:
                return build_result([], [], max_rows=max_rows, started=started)
            columns = [desc[0] for desc in cursor.description]
            fetched = cursor.fetchmany(max_rows + 1)
        except _duckdb.Error as e:
            raise AdapterError(f"DuckDB execution failed: {e}") from e
        return build_result(columns, fetched, max_rows=max_rows, started=started)

    async def catalog(self) -> LiveSchema:
        try:
            rows = self._session().execute(CATALOG_SQL).fetchall()
        except _duckdb.Error as e:
            raise AdapterError(f"DuckDB catalog read failed: {e}") from e
        return LiveSchema.from_rows(rows)
