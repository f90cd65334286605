"""Compare the registry against a live database catalog."""

from __future__ import annotations

from dataclasses import dataclass, field

from assetguard.adapters._base import LiveSchema
from assetguard.schema._types import SchemaDescriptor


@dataclass
class SchemaDrift:
    missing_tables: list[str] = field(default_factory=list)
    missing_columns: list[str] = field(default_factory=list)  # table.column

    @property
    def ok(self) -> bool:
        return not self.missing_tables and not self.missing_columns


def verify_schema(schema: SchemaDescriptor, live: LiveSchema) -> SchemaDrift:
    """Report registry tables and visible columns the database does not have.

    Restricted columns are not checked: the registry only needs to know
    their names, not that they exist.
    """
    drift = SchemaDrift()
    for table in schema.tables:
        if not live.has_table(table.name):
            drift.missing_tables.append(table.name)
            continue
        for col in schema.visible_columns(table):
            if col.name.lower() not in live.columns(table.name):
                drift.missing_columns.append(f"{table.name}.{col.name}")
    return drift
