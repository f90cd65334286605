"""Diagnostic system: codes, guard results and rendering."""

from assetguard.diagnostics.codes import DiagnosticCode
from assetguard.diagnostics.types import Diagnostic, GuardResult, Level, Span

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "GuardResult",
    "Level",
    "Span",
]
