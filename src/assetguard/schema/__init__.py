"""Schema registry: what the natural-language layer may see and touch."""

from assetguard.schema._types import ColumnSpec, Relationship, SchemaDescriptor, TableSpec
from assetguard.schema.assets import ASSET_SCHEMA
from assetguard.schema.describe import describe

__all__ = [
    "ASSET_SCHEMA",
    "ColumnSpec",
    "Relationship",
    "SchemaDescriptor",
    "TableSpec",
    "describe",
]
