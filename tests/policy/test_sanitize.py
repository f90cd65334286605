"""Test sanitation: terminators, LIMIT injection and clamping."""

import pytest

from assetguard.diagnostics import codes
from assetguard.policy.sanitize import MAX_LIMIT, clamp_limits, sanitize, strip_terminators


class TestStripTerminators:
    @pytest.mark.parametrize(
        "sql",
        ["SELECT 1", "SELECT 1;", "SELECT 1 ; ;\n", "  SELECT 1;;  "],
    )
    def test_stripped(self, sql: str) -> None:
        assert strip_terminators(sql) == "SELECT 1"

    def test_inner_semicolon_kept(self) -> None:
        assert strip_terminators("SELECT ';' AS s;") == "SELECT ';' AS s"


class TestClampLimits:
    def test_clamps_above_ceiling(self) -> None:
        assert clamp_limits("SELECT 1 LIMIT 500") == ("SELECT 1 LIMIT 100", [500])

    def test_keeps_small(self) -> None:
        assert clamp_limits("SELECT 1 LIMIT 7") == ("SELECT 1 LIMIT 7", [])

    def test_offset_count_form(self) -> None:
        sql, clamped = clamp_limits("SELECT * FROM assets LIMIT 20, 1000")
        assert sql == "SELECT * FROM assets LIMIT 20, 100"
        assert clamped == [1000]

    def test_offset_count_form_small(self) -> None:
        sql, clamped = clamp_limits("SELECT * FROM assets LIMIT 500, 10")
        assert sql == "SELECT * FROM assets LIMIT 500, 10"
        assert clamped == []

    def test_every_limit_clamped(self) -> None:
        sql = "SELECT * FROM (SELECT * FROM assets LIMIT 900) s LIMIT 300"
        out, clamped = clamp_limits(sql)
        assert out == "SELECT * FROM (SELECT * FROM assets LIMIT 100) s LIMIT 100"
        assert clamped == [900, 300]

    def test_lowercase_keyword_preserved(self) -> None:
        assert clamp_limits("select 1 limit 1000")[0] == "select 1 limit 100"

    def test_custom_ceiling(self) -> None:
        assert clamp_limits("SELECT 1 LIMIT 11", limit=10)[0] == "SELECT 1 LIMIT 10"


class TestSanitize:
    def test_appends_limit(self) -> None:
        sql, diags = sanitize("SELECT * FROM assets;")
        assert sql == f"SELECT * FROM assets LIMIT {MAX_LIMIT}"
        assert [d.code for d in diags] == [codes.LIMIT_INJECTED]
        assert not any(d.is_blocking for d in diags)

    def test_existing_limit_not_duplicated(self) -> None:
        sql, diags = sanitize("SELECT * FROM assets limit 3")
        assert sql == "SELECT * FROM assets limit 3"
        assert diags == []

    def test_limit_substring_is_not_a_limit(self) -> None:
        sql, _ = sanitize("SELECT credit_limits FROM vendors")
        assert sql.endswith(" LIMIT 100")

    def test_clamp_reported(self) -> None:
        _, diags = sanitize("SELECT * FROM assets LIMIT 5000")
        assert [d.code for d in diags] == [codes.LIMIT_CLAMPED]
        assert "5000" in diags[0].message

    def test_force_limit(self) -> None:
        sql, _ = sanitize(
            "SELECT * FROM assets WHERE id IN (SELECT asset_id FROM transactions LIMIT 5)",
            force_limit=True,
        )
        assert sql.endswith("LIMIT 5) LIMIT 100")

    def test_non_numeric_limit_does_not_bound(self) -> None:
        sql, diags = sanitize("SELECT * FROM assets LIMIT ALL")
        assert sql == "SELECT * FROM assets LIMIT ALL LIMIT 100"
        assert [d.code for d in diags] == [codes.LIMIT_INJECTED]

    def test_limit_offset_kept(self) -> None:
        sql, diags = sanitize("SELECT * FROM assets LIMIT 10 OFFSET 5")
        assert sql == "SELECT * FROM assets LIMIT 10 OFFSET 5"
        assert diags == []

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM assets WHERE notes = 'no limit'",
            "SELECT * FROM assets WHERE notes LIKE '%limit%'",
            "SELECT * FROM assets WHERE id IN (SELECT assigned_to FROM assets LIMIT 5)",
        ],
    )
    def test_limit_outside_trailing_clause_still_bounded(self, sql: str) -> None:
        out, diags = sanitize(sql)
        assert out == f"{sql} LIMIT 100"
        assert [d.code for d in diags] == [codes.LIMIT_INJECTED]

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM assets",
            "SELECT * FROM assets LIMIT 9999;",
            "SELECT * FROM assets LIMIT 10, 9999",
            "SELECT * FROM assets WHERE notes = 'no limit'",
        ],
    )
    def test_idempotent(self, sql: str) -> None:
        once, _ = sanitize(sql)
        twice, diags = sanitize(once)
        assert twice == once
        assert diags == []
