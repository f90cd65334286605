"""Value types and errors for the chat layer."""

from __future__ import annotations

from dataclasses import dataclass, field


class ChatError(Exception):
    """A chat request that cannot be served. `status` mirrors the HTTP code."""

    status = 500


class MessageRejected(ChatError):
    status = 400


class RateLimitExceeded(ChatError):
    status = 429

    def __init__(self, reset_in: int) -> None:
        super().__init__(f"too many requests, try again in {reset_in} seconds")
        self.reset_in = reset_in


class GeneratorNotConfigured(ChatError):
    status = 503


class GenerationError(Exception):
    """Raised by SQL generators when the model call or its output fails."""


@dataclass(frozen=True)
class GeneratedQuery:
    can_answer: bool
    sql_query: str | None = None
    explanation: str = ""
    expected_result_type: str = "table"


@dataclass
class ChatReply:
    kind: str  # "database", "general" or "error"
    message: str
    query: str | None = None
    result_count: int | None = None
    explanation: str | None = None
    reason: str | None = None
    remaining: int | None = None
    diagnostics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        d: dict = {"type": self.kind, "message": self.message, "query": self.query}
        if self.result_count is not None:
            d["resultCount"] = self.result_count
        if self.explanation is not None:
            d["explanation"] = self.explanation
        if self.reason is not None:
            d["reason"] = self.reason
        return d
