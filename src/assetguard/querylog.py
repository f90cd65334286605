"""Guard audit log: daily JSONL files per project, with retention cleanup."""

from __future__ import annotations

import contextlib
import json
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30
_LOG_ROOT = Path.home() / ".assetguard" / "logs"


def _project_slug() -> str:
    """Encode cwd into a directory-safe slug."""
    cwd = os.getcwd()
    return cwd.replace("/", "-").lstrip("-")


def _log_dir() -> Path:
    return _LOG_ROOT / _project_slug()


def _today_file() -> Path:
    today = datetime.now(UTC).strftime("%Y-%m-%d")
    return _log_dir() / f"{today}.jsonl"


def log_query(
    *,
    sql: str | None,
    effective_sql: str | None,
    db: str | None = None,
    user: str | None = None,
    tables: list[str] | None = None,
    blocked: bool = False,
    diagnostics: list[str] | None = None,
    reason: str | None = None,
    row_count: int | None = None,
    duration_ms: float | None = None,
    labels: dict[str, str] | None = None,
) -> None:
    """Append one guard decision to today's JSONL file."""
    entry = {
        "ts": datetime.now(UTC).isoformat(),
        "db": db,
        "user": user,
        "sql": sql,
        "effective_sql": effective_sql,
        "tables": tables or [],
        "blocked": blocked,
        "diagnostics": diagnostics or [],
        "reason": reason,
        "row_count": row_count,
        "duration_ms": duration_ms,
        "labels": labels,
    }

    log_file = _today_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "a") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def cleanup_old_logs(*, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete log files older than retention_days. Returns count of deleted files."""
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    log_dir = _log_dir()
    if not log_dir.exists():
        return 0

    for log_file in log_dir.glob("*.jsonl"):
        # Parse date from filename (YYYY-MM-DD.jsonl)
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").replace(tzinfo=UTC)
        except ValueError:
            continue
        if file_date < cutoff:
            log_file.unlink()
            deleted += 1

    # Remove the project directory once it is empty
    with contextlib.suppress(OSError):
        log_dir.rmdir()

    return deleted


def read_entries(*, day: str | None = None) -> list[dict]:
    """Return the entries logged on `day` (YYYY-MM-DD, default today), oldest first."""
    log_file = _today_file() if day is None else _log_dir() / f"{day}.jsonl"
    if not log_file.exists():
        return []
    with open(log_file) as f:
        return [json.loads(line) for line in f if line.strip()]
