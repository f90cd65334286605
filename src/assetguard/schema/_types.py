"""Value types for the schema registry."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type: str
    description: str
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class TableSpec:
    name: str
    description: str
    columns: tuple[ColumnSpec, ...]
    # Defined in the database but never shown to the natural-language layer.
    restricted_columns: frozenset[str] = frozenset()

    def column(self, name: str) -> ColumnSpec | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None


@dataclass(frozen=True)
class Relationship:
    source: str  # table.column
    target: str  # table.column
    cardinality: str = "many-to-one"


@dataclass(frozen=True)
class SchemaDescriptor:
    """Everything the natural-language layer may see and touch.

    Built once at import time and shared read-only by every request.
    """

    tables: tuple[TableSpec, ...]
    relationships: tuple[Relationship, ...] = ()
    allowed_tables: frozenset[str] = frozenset()
    restricted_columns: frozenset[str] = frozenset()
    allowed_operations: frozenset[str] = field(default_factory=lambda: frozenset({"SELECT"}))

    def table(self, name: str) -> TableSpec | None:
        name = name.lower()
        for spec in self.tables:
            if spec.name == name:
                return spec
        return None

    def is_restricted(self, table: TableSpec, column: str) -> bool:
        """Column is hidden by the table's own list or by the global list."""
        col = column.lower()
        return col in table.restricted_columns or col in self.restricted_columns

    def visible_columns(self, table: TableSpec) -> list[ColumnSpec]:
        return [c for c in table.columns if not self.is_restricted(table, c.name)]

    def describe(self) -> str:
        from assetguard.schema.describe import describe

        return describe(self)
