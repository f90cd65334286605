"""Adapter lookup by database type; driver modules load on first use."""

from __future__ import annotations

import contextlib
import importlib
from collections.abc import AsyncIterator

from assetguard.adapters._base import AdapterError, ConnectionConfig, DatabaseAdapter, DatabaseType

# db type -> (module, class, pip extra)
_ADAPTERS: dict[DatabaseType, tuple[str, str, str]] = {
    DatabaseType.POSTGRES: ("assetguard.adapters.postgres", "PostgresAdapter", "postgres"),
    DatabaseType.DUCKDB: ("assetguard.adapters.duckdb", "DuckDBAdapter", "duckdb"),
}


def get_adapter(db_type: DatabaseType) -> type[DatabaseAdapter]:
    """Return the adapter class for a database type.

    Raises AdapterError with an install hint if the driver is not installed.
    """
    entry = _ADAPTERS.get(db_type)
    if entry is None:
        raise AdapterError(f"No adapter registered for {db_type.value}")

    module_path, class_name, extra = entry
    try:
        mod = importlib.import_module(module_path)
    except ImportError as e:
        raise AdapterError(
            f"Missing driver for {db_type.value}. "
            f"Install with: pip install 'assetguard[{extra}]'"
        ) from e
    return getattr(mod, class_name)


@contextlib.asynccontextmanager
async def open_adapter(config: ConnectionConfig) -> AsyncIterator[DatabaseAdapter]:
    """Connected adapter for `config`, closed on exit."""
    adapter = get_adapter(config.db_type)()
    await adapter.connect(config)
    try:
        yield adapter
    finally:
        await adapter.close()
