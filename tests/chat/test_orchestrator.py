"""Test the chat pipeline end to end with scripted generators."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime, timedelta

import pytest

from assetguard.adapters._base import AdapterError, ConnectionConfig, DatabaseType, ExecutionResult
from assetguard.adapters.duckdb import DuckDBAdapter
from assetguard.chat import (
    ChatOrchestrator,
    GenerationError,
    GeneratorNotConfigured,
    MessageRejected,
    RateLimitExceeded,
    SlidingWindowRateLimiter,
)
from assetguard.policy import QueryGuard
from assetguard.querylog import _log_dir, read_entries


class ScriptedGenerator:
    """Returns queued replies in order; queued exceptions are raised."""

    def __init__(self, *replies: object, configured: bool = True) -> None:
        self.replies = list(replies)
        self.prompts: list[str] = []
        self.configured = configured

    def is_configured(self) -> bool:
        return self.configured

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class RecordingAdapter:
    """A connected adapter that records what it was asked to run."""

    def __init__(self, rows: list[dict] | None = None, *, fail: bool = False) -> None:
        self.rows = rows or []
        self.fail = fail
        self.executed: list[str] = []

    async def execute(self, sql: str, *, labels: dict[str, str] | None = None) -> ExecutionResult:
        self.executed.append(sql)
        if self.fail:
            raise AdapterError("connection reset")
        columns = list(self.rows[0]) if self.rows else []
        return ExecutionResult(
            columns=columns, rows=self.rows, row_count=len(self.rows), duration_ms=1.0
        )


def _plan(sql: str | None, *, can_answer: bool = True, explanation: str = "counts assets") -> str:
    return json.dumps({
        "can_answer": can_answer,
        "sql_query": sql,
        "explanation": explanation,
        "expected_result_type": "single_value",
    })


def _ask(orchestrator: ChatOrchestrator, message: object, user: str = "7"):
    return asyncio.run(orchestrator.ask(user, message))


class TestDatabaseAnswers:
    def test_answer_flow(self) -> None:
        generator = ScriptedGenerator(
            _plan("SELECT COUNT(*) AS total FROM assets;"), "There are 3 assets."
        )
        adapter = RecordingAdapter([{"total": 3}])
        reply = _ask(ChatOrchestrator(generator, adapter), "How many assets are there?")

        assert reply.kind == "database"
        assert reply.message == "There are 3 assets."
        assert reply.query == "SELECT COUNT(*) AS total FROM assets LIMIT 100"
        assert reply.result_count == 1
        assert reply.explanation == "counts assets"
        assert reply.remaining == 14
        assert adapter.executed == ["SELECT COUNT(*) AS total FROM assets LIMIT 100"]

        assert "TABLE: assets" in generator.prompts[0]
        assert 'QUESTION: "How many assets are there?"' in generator.prompts[0]
        assert '"total": 3' in generator.prompts[1]

    def test_accepted_query_is_audited(self) -> None:
        generator = ScriptedGenerator(_plan("SELECT name FROM vendors"), "No vendors yet.")
        _ask(ChatOrchestrator(generator, RecordingAdapter(), db_name="inventory"), "Vendors?")

        [entry] = read_entries()
        assert entry["blocked"] is False
        assert entry["user"] == "7"
        assert entry["db"] == "inventory"
        assert entry["effective_sql"] == "SELECT name FROM vendors LIMIT 100"
        assert entry["row_count"] == 0
        assert entry["labels"] == {"tool": "assetguard", "source": "chat"}

    def test_narration_failure_falls_back_to_raw_rows(self) -> None:
        generator = ScriptedGenerator(
            _plan("SELECT name FROM assets"), GenerationError("quota exhausted")
        )
        adapter = RecordingAdapter([{"name": "ThinkPad X1"}])
        reply = _ask(ChatOrchestrator(generator, adapter), "List assets")

        assert reply.kind == "database"
        assert reply.message.startswith("Query results:\n")
        assert "ThinkPad X1" in reply.message

    def test_against_duckdb(self, asset_db) -> None:
        generator = ScriptedGenerator(
            _plan("SELECT name FROM assets WHERE status = 'maintenance'"),
            "One asset is under repair: MacBook Air.",
        )

        async def _run():
            adapter = DuckDBAdapter()
            await adapter.connect(
                ConnectionConfig("assets", DatabaseType.DUCKDB, {"path": asset_db})
            )
            try:
                return await ChatOrchestrator(generator, adapter).ask("7", "What is in repair?")
            finally:
                await adapter.close()

        reply = asyncio.run(_run())
        assert reply.kind == "database"
        assert reply.result_count == 1
        assert "MacBook Air" in generator.prompts[1]


class TestGuardedRejections:
    def test_restricted_column_never_executes(self) -> None:
        generator = ScriptedGenerator(_plan("SELECT email, password FROM users"))
        adapter = RecordingAdapter()
        reply = _ask(ChatOrchestrator(generator, adapter), "Show user passwords")

        assert reply.kind == "error"
        assert reply.message == (
            "Sorry, I can't process that request. access to column 'password' is not allowed"
        )
        assert reply.diagnostics == ["G0301"]
        assert adapter.executed == []
        assert len(generator.prompts) == 1

        [entry] = read_entries()
        assert entry["blocked"] is True
        assert entry["effective_sql"] is None
        assert entry["reason"] == "access to column 'password' is not allowed"

    def test_write_statement(self) -> None:
        generator = ScriptedGenerator(_plan("UPDATE assets SET status = 'disposed'"))
        adapter = RecordingAdapter()
        reply = _ask(ChatOrchestrator(generator, adapter), "Dispose everything")
        assert reply.reason == "only SELECT queries are allowed"
        assert adapter.executed == []

    def test_injected_guard(self) -> None:
        generator = ScriptedGenerator(_plan("SELECT * FROM assets, secrets"))
        orchestrator = ChatOrchestrator(
            generator, RecordingAdapter(), guard=QueryGuard(strict=True)
        )
        assert _ask(orchestrator, "Join secrets").reason == "table 'secrets' is not allowed"

    def test_execution_failure(self) -> None:
        generator = ScriptedGenerator(_plan("SELECT name FROM assets"))
        reply = _ask(ChatOrchestrator(generator, RecordingAdapter(fail=True)), "List assets")

        assert reply.kind == "error"
        assert "connection reset" not in reply.message
        [entry] = read_entries()
        assert entry["blocked"] is False
        assert entry["reason"] == "connection reset"


class TestGeneralChat:
    def test_cannot_answer(self) -> None:
        generator = ScriptedGenerator(
            _plan(None, can_answer=False, explanation="not about assets"), "Hello! Ask me about assets."
        )
        reply = _ask(ChatOrchestrator(generator, RecordingAdapter()), "Hi")
        assert reply.kind == "general"
        assert reply.message == "Hello! Ask me about assets."
        assert reply.reason == "not about assets"
        assert 'MESSAGE: "Hi"' in generator.prompts[1]

    def test_unparseable_plan(self) -> None:
        generator = ScriptedGenerator("I think you want the asset list.", "Try asking about assets.")
        adapter = RecordingAdapter()
        reply = _ask(ChatOrchestrator(generator, adapter), "Hi")
        assert reply.kind == "general"
        assert reply.reason is None
        assert adapter.executed == []
        assert read_entries() == []

    def test_failed_plan_call(self) -> None:
        generator = ScriptedGenerator(GenerationError("timeout"), "Hello.")
        assert _ask(ChatOrchestrator(generator, RecordingAdapter()), "Hi").kind == "general"


class TestRequestChecks:
    @pytest.mark.parametrize("message", ["", "   ", None, 12])
    def test_empty_message(self, message: object) -> None:
        orchestrator = ChatOrchestrator(ScriptedGenerator(), RecordingAdapter())
        with pytest.raises(MessageRejected) as exc:
            _ask(orchestrator, message)
        assert exc.value.status == 400
        assert orchestrator.status("7")["rateLimit"]["remaining"] == 15

    def test_message_too_long(self) -> None:
        orchestrator = ChatOrchestrator(ScriptedGenerator(), RecordingAdapter())
        with pytest.raises(MessageRejected, match="too long"):
            _ask(orchestrator, "x" * 1001)

    def test_custom_length(self) -> None:
        generator = ScriptedGenerator(_plan(None, can_answer=False), "ok")
        orchestrator = ChatOrchestrator(generator, RecordingAdapter(), max_message_length=5)
        with pytest.raises(MessageRejected):
            _ask(orchestrator, "123456")
        assert _ask(orchestrator, "12345").kind == "general"

    def test_rate_limited(self, clock) -> None:
        generator = ScriptedGenerator(_plan(None, can_answer=False), "hello")
        limiter = SlidingWindowRateLimiter(1, 60, clock=clock)
        orchestrator = ChatOrchestrator(generator, RecordingAdapter(), rate_limiter=limiter)

        assert _ask(orchestrator, "hi").remaining == 0
        with pytest.raises(RateLimitExceeded) as exc:
            _ask(orchestrator, "hi again")
        assert exc.value.status == 429
        assert exc.value.reset_in == 60
        assert str(exc.value) == "too many requests, try again in 60 seconds"
        assert len(generator.prompts) == 2

        # Limits are per user.
        generator.replies = [_plan(None, can_answer=False), "hello"]
        assert _ask(orchestrator, "hi", user="8").kind == "general"

    def test_not_configured(self) -> None:
        orchestrator = ChatOrchestrator(ScriptedGenerator(configured=False), RecordingAdapter())
        with pytest.raises(GeneratorNotConfigured) as exc:
            _ask(orchestrator, "How many assets?")
        assert exc.value.status == 503


class TestStatusAndReply:
    def test_status(self) -> None:
        generator = ScriptedGenerator(_plan(None, can_answer=False), "hello")
        orchestrator = ChatOrchestrator(generator, RecordingAdapter())
        assert orchestrator.status("7") == {
            "configured": True,
            "rateLimit": {"remaining": 15, "maxPerWindow": 15},
        }
        _ask(orchestrator, "hi")
        assert orchestrator.status("7")["rateLimit"]["remaining"] == 14
        assert orchestrator.status("7")["rateLimit"]["remaining"] == 14

    def test_reply_dict(self) -> None:
        generator = ScriptedGenerator(_plan("SELECT COUNT(*) AS total FROM assets"), "Three.")
        reply = _ask(ChatOrchestrator(generator, RecordingAdapter([{"total": 3}])), "Count")
        assert reply.to_dict() == {
            "type": "database",
            "message": "Three.",
            "query": "SELECT COUNT(*) AS total FROM assets LIMIT 100",
            "resultCount": 1,
            "explanation": "counts assets",
        }


class TestAuditRetention:
    def test_old_audit_files_removed_on_construction(self) -> None:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True)
        old = (datetime.now(UTC) - timedelta(days=45)).strftime("%Y-%m-%d")
        recent = (datetime.now(UTC) - timedelta(days=2)).strftime("%Y-%m-%d")
        (log_dir / f"{old}.jsonl").write_text("{}\n")
        (log_dir / f"{recent}.jsonl").write_text("{}\n")

        ChatOrchestrator(ScriptedGenerator(), RecordingAdapter())

        assert not (log_dir / f"{old}.jsonl").exists()
        assert (log_dir / f"{recent}.jsonl").exists()
