"""Render the schema registry as grounding text for a SQL generator."""

from __future__ import annotations

from assetguard.schema._types import ColumnSpec, SchemaDescriptor


def _column_line(col: ColumnSpec) -> str:
    line = f"  - {col.name} ({col.type})"
    if col.values:
        line += f" [values: {', '.join(col.values)}]"
    return f"{line}: {col.description}"


def describe(schema: SchemaDescriptor) -> str:
    """Render every table, visible column and relationship as plain text.

    Restricted columns are skipped whether they are listed on the table or
    in the schema-wide restricted set.
    """
    lines: list[str] = ["DATABASE SCHEMA:", ""]

    for table in schema.tables:
        lines.append(f"TABLE: {table.name}")
        lines.append(f"Description: {table.description}")
        lines.append("Columns:")
        lines.extend(_column_line(col) for col in schema.visible_columns(table))
        lines.append("")

    lines.append("RELATIONSHIPS:")
    for rel in schema.relationships:
        lines.append(f"  - {rel.source} -> {rel.target} ({rel.cardinality})")

    return "\n".join(lines) + "\n"
