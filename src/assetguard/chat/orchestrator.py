"""Chat pipeline: question → generated SQL → guard → execute → narrated answer."""

from __future__ import annotations

import json

from assetguard.adapters._base import AdapterError, DatabaseAdapter
from assetguard.chat._types import (
    ChatReply,
    GeneratedQuery,
    GenerationError,
    GeneratorNotConfigured,
    MessageRejected,
    RateLimitExceeded,
)
from assetguard.chat.generator import TextGenerator, parse_generation
from assetguard.chat.prompts import build_answer_prompt, build_general_prompt, build_sql_prompt
from assetguard.chat.ratelimit import RateLimiter, SlidingWindowRateLimiter
from assetguard.policy import QueryGuard
from assetguard.querylog import cleanup_old_logs, log_query

MAX_MESSAGE_LENGTH = 1000
AUTO_LABELS = {"tool": "assetguard", "source": "chat"}

_EXECUTION_FAILED = (
    "Sorry, something went wrong while fetching the data. "
    "Please try a different question."
)


class ChatOrchestrator:
    """Serves one chat question at a time for any number of users.

    The adapter must already be connected; the orchestrator never opens or
    closes it. Every guard decision is written to the audit log, and audit
    files past the retention window are removed on construction.
    """

    def __init__(
        self,
        generator: TextGenerator,
        adapter: DatabaseAdapter,
        *,
        guard: QueryGuard | None = None,
        rate_limiter: RateLimiter | None = None,
        max_message_length: int = MAX_MESSAGE_LENGTH,
        db_name: str | None = None,
    ) -> None:
        self._generator = generator
        self._adapter = adapter
        self._guard = guard or QueryGuard()
        self._limiter = rate_limiter or SlidingWindowRateLimiter()
        self._max_length = max_message_length
        self._db_name = db_name
        cleanup_old_logs()

    def _check_message(self, message: object) -> str:
        if not isinstance(message, str) or not message.strip():
            raise MessageRejected("message must not be empty")
        if len(message) > self._max_length:
            raise MessageRejected(
                f"message is too long (at most {self._max_length} characters)"
            )
        return message

    async def _general(self, message: str, remaining: int, *, reason: str | None = None) -> ChatReply:
        answer = await self._generator.complete(build_general_prompt(message))
        return ChatReply(kind="general", message=answer, reason=reason, remaining=remaining)

    async def ask(self, user_id: str, message: object) -> ChatReply:
        """Answer one question.

        Raises MessageRejected, RateLimitExceeded or GeneratorNotConfigured
        when the request cannot be served at all, and GenerationError when even
        the general-chat fallback fails. Everything else ends in a ChatReply,
        including guard rejections and database failures.
        """
        question = self._check_message(message)

        decision = self._limiter.hit(str(user_id))
        if not decision.allowed:
            raise RateLimitExceeded(decision.reset_in)
        remaining = decision.remaining

        if not self._generator.is_configured():
            raise GeneratorNotConfigured("the AI service is not configured")

        # Step 1: Generate SQL
        try:
            raw = await self._generator.complete(
                build_sql_prompt(question, self._guard.schema)
            )
            plan = parse_generation(raw)
        except GenerationError:
            return await self._general(question, remaining)

        if not plan.can_answer:
            return await self._general(question, remaining, reason=plan.explanation)

        # Step 2: Guard
        result = self._guard.process(plan.sql_query)
        if not result.ok:
            log_query(
                sql=plan.sql_query,
                effective_sql=None,
                db=self._db_name,
                user=str(user_id),
                tables=result.tables,
                blocked=True,
                diagnostics=result.codes,
                reason=result.reason,
                labels=AUTO_LABELS,
            )
            return ChatReply(
                kind="error",
                message=f"Sorry, I can't process that request. {result.reason}",
                reason=result.reason,
                remaining=remaining,
                diagnostics=result.codes,
            )

        # Step 3: Execute
        try:
            exec_result = await self._adapter.execute(result.sanitized_query, labels=AUTO_LABELS)
        except AdapterError as e:
            log_query(
                sql=plan.sql_query,
                effective_sql=result.sanitized_query,
                db=self._db_name,
                user=str(user_id),
                tables=result.tables,
                blocked=False,
                diagnostics=result.codes,
                reason=str(e),
                labels=AUTO_LABELS,
            )
            return ChatReply(kind="error", message=_EXECUTION_FAILED, remaining=remaining)

        log_query(
            sql=plan.sql_query,
            effective_sql=result.sanitized_query,
            db=self._db_name,
            user=str(user_id),
            tables=result.tables,
            blocked=False,
            diagnostics=result.codes,
            row_count=exec_result.row_count,
            duration_ms=exec_result.duration_ms,
            labels=AUTO_LABELS,
        )

        # Step 4: Narrate
        answer = await self._narrate(question, exec_result.rows, plan)

        return ChatReply(
            kind="database",
            message=answer,
            query=result.sanitized_query,
            result_count=exec_result.row_count,
            explanation=plan.explanation,
            remaining=remaining,
            diagnostics=result.codes,
        )

    async def _narrate(
        self, question: str, rows: list[dict[str, object]], plan: GeneratedQuery
    ) -> str:
        try:
            return await self._generator.complete(build_answer_prompt(question, rows, plan))
        except GenerationError:
            return "Query results:\n" + json.dumps(rows, indent=2, default=str)

    def status(self, user_id: str) -> dict:
        """Service status for a user. Does not count as a request."""
        decision = self._limiter.peek(str(user_id))
        return {
            "configured": self._generator.is_configured(),
            "rateLimit": {
                "remaining": decision.remaining,
                "maxPerWindow": self._limiter.max_requests,
            },
        }
