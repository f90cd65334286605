"""Stable, searchable guard code registry.

Ranges:
- G00xx  Input (empty, unparseable)
- G01xx  Statement kind
- G02xx  Injection and denylist checks
- G03xx  Schema access control
- G06xx  Sanitation (info-level)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"G{self.value:04d}"


# Input
EMPTY_OR_INVALID_INPUT = DiagnosticCode(1)
SYNTAX_ERROR = DiagnosticCode(2)

# Statement kind (G01xx)
NOT_SELECT_STATEMENT = DiagnosticCode(101)

# Injection and denylist (G02xx)
DANGEROUS_KEYWORD = DiagnosticCode(201)
MULTIPLE_STATEMENTS = DiagnosticCode(202)
SUSPICIOUS_PATTERN = DiagnosticCode(203)

# Schema access control (G03xx)
RESTRICTED_COLUMN = DiagnosticCode(301)
DISALLOWED_TABLE = DiagnosticCode(302)

# Sanitation (G06xx)
LIMIT_INJECTED = DiagnosticCode(601)
LIMIT_CLAMPED = DiagnosticCode(602)
