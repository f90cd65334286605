"""PostgreSQL adapter: read-only sessions through psycopg's async API."""

from __future__ import annotations

import time

import psycopg

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

# Every transaction on the session is read-only; the server refuses writes.
_SESSION_OPTIONS = "-c default_transaction_read_only=on -c statement_timeout=30000"


class PostgresAdapter:
    def __init__(self) -> None:
        self._conn: psycopg.AsyncConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        dsn = config.params.get("dsn")
        if not dsn:
            raise AdapterError("PostgreSQL requires 'dsn' in connection params")
        try:
            self._conn = await psycopg.AsyncConnection.connect(
                dsn,
                autocommit=True,
                application_name="assetguard",
                options=_SESSION_OPTIONS,
            )
        except psycopg.Error as e:
            raise AdapterError(f"PostgreSQL connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    def _session(self) -> psycopg.AsyncConnection:
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
            async with conn.cursor() as cur:
                await cur.execute(label_sql(sql, labels))
                if cur.description is None:
                    return build_result([], [], max_rows=max_rows, started=started)
                columns = [desc.name for desc in cur.description]
                fetched = await cur.fetchmany(max_rows + 1)
        except psycopg.Error as e:
            raise AdapterError(f"PostgreSQL execution failed: {e}") from e
        return build_result(columns, fetched, max_rows=max_rows, started=started)

    async def catalog(self) -> LiveSchema:
        try:
            async with self._session().cursor() as cur:
                await cur.execute(CATALOG_SQL)
                rows = await cur.fetchall()
        except psycopg.Error as e:
            raise AdapterError(f"PostgreSQL catalog read failed: {e}") from e
        return LiveSchema.from_rows(rows)
