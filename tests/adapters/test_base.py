"""Test the engine-independent adapter helpers."""

import time

from assetguard.adapters._base import LiveSchema, build_result, label_sql


class TestLabelSql:
    def test_no_labels(self) -> None:
        assert label_sql("SELECT 1", None) == "SELECT 1"
        assert label_sql("SELECT 1", {}) == "SELECT 1"

    def test_comment_prefix(self) -> None:
        sql = label_sql("SELECT 1", {"tool": "assetguard", "source": "chat"})
        assert sql == "/* assetguard: tool=assetguard, source=chat */ SELECT 1"

    def test_comment_cannot_be_closed_early(self) -> None:
        sql = label_sql("SELECT 1", {"user": "x */ DROP TABLE assets /*"})
        assert sql.count("*/") == 1
        assert sql.endswith("*/ SELECT 1")


class TestBuildResult:
    def test_rows_as_dicts(self) -> None:
        result = build_result(
            ["id", "name"], [(1, "a"), (2, "b")], max_rows=5, started=time.monotonic()
        )
        assert result.rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        assert result.row_count == 2
        assert not result.truncated
        assert result.duration_ms >= 0

    def test_extra_row_marks_truncation(self) -> None:
        fetched = [(i,) for i in range(4)]
        result = build_result(["n"], fetched, max_rows=3, started=time.monotonic())
        assert result.row_count == 3
        assert result.truncated

    def test_no_result_set(self) -> None:
        result = build_result([], [], max_rows=100, started=time.monotonic())
        assert result.columns == []
        assert result.row_count == 0


class TestLiveSchema:
    def test_from_rows_lowercases(self) -> None:
        live = LiveSchema.from_rows([("Assets", "ID"), ("Assets", "Name"), ("users", "email")])
        assert live.tables == {
            "assets": frozenset({"id", "name"}),
            "users": frozenset({"email"}),
        }

    def test_lookup_is_case_insensitive(self) -> None:
        live = LiveSchema.from_rows([("assets", "id")])
        assert live.has_table("ASSETS")
        assert live.columns("Assets") == frozenset({"id"})

    def test_unknown_table(self) -> None:
        live = LiveSchema()
        assert not live.has_table("assets")
        assert live.columns("assets") == frozenset()
