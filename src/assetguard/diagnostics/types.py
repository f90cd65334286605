"""Diagnostics and the guard's result value.

Every check in the guard produces a Diagnostic or nothing. A rejection is
an ERROR diagnostic; sanitation rewrites are INFO diagnostics. The guard
never raises for well-typed input: the outcome is always a GuardResult.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from assetguard.diagnostics.codes import DiagnosticCode


class Level(enum.IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def slice(self, sql: str) -> str:
        return sql[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    spans: list[Span] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    # -- Builder classmethods ---------------------------------------------------

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.ERROR, code=code, message=message)

    @classmethod
    def warning(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.WARNING, code=code, message=message)

    @classmethod
    def info(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.INFO, code=code, message=message)

    # -- Builder chain methods --------------------------------------------------

    def span(self, span: Span) -> Diagnostic:
        self.spans.append(span)
        return self

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    @property
    def is_blocking(self) -> bool:
        return self.level == Level.ERROR


@dataclass
class GuardResult:
    """Outcome of one guard call: accepted with a sanitized query, or rejected."""

    ok: bool
    original_sql: str | None
    sanitized_query: str | None = None
    reason: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)

    @classmethod
    def accepted(
        cls,
        original_sql: str,
        sanitized_query: str,
        *,
        diagnostics: list[Diagnostic] | None = None,
        tables: list[str] | None = None,
    ) -> GuardResult:
        return cls(
            ok=True,
            original_sql=original_sql,
            sanitized_query=sanitized_query,
            diagnostics=diagnostics or [],
            tables=tables or [],
        )

    @classmethod
    def rejected(
        cls,
        original_sql: str | None,
        diagnostic: Diagnostic,
        *,
        tables: list[str] | None = None,
    ) -> GuardResult:
        return cls(
            ok=False,
            original_sql=original_sql,
            reason=diagnostic.message,
            diagnostics=[diagnostic],
            tables=tables or [],
        )

    @property
    def rejection(self) -> Diagnostic | None:
        for d in self.diagnostics:
            if d.is_blocking:
                return d
        return None

    @property
    def effective_sql(self) -> str | None:
        return self.sanitized_query if self.ok else None

    @property
    def codes(self) -> list[str]:
        return [str(d.code) for d in self.diagnostics]
