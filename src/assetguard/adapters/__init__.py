"""Database adapters implementing the DatabaseAdapter protocol."""

from assetguard.adapters._base import (
    AdapterError,
    ConnectionConfig,
    DatabaseAdapter,
    DatabaseType,
    ExecutionResult,
    LiveSchema,
)

__all__ = [
    "AdapterError",
    "ConnectionConfig",
    "DatabaseAdapter",
    "DatabaseType",
    "ExecutionResult",
    "LiveSchema",
]
