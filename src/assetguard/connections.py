"""Named database connections kept in ~/.assetguard/connections.toml.

Each table in the file is one connection:

    [inventory]
    type = "postgres"
    dsn = "postgresql://reader:secret@db:5432/inventory"
"""

from __future__ import annotations

import os
import re
import stat
import tomllib
from pathlib import Path

from assetguard.adapters._base import ConnectionConfig, DatabaseType

_CONNECTIONS_FILE = Path.home() / ".assetguard" / "connections.toml"

_DSN_PASSWORD = re.compile(r"(://[^:/@]+:)[^@]+(@)")


def mask_secrets(value: str) -> str:
    """Hide the password part of a DSN-style string."""
    return _DSN_PASSWORD.sub(r"\1****\2", value)


def _toml_string(v: str) -> str:
    escaped = v.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _read() -> dict[str, dict]:
    if not _CONNECTIONS_FILE.exists():
        return {}
    return tomllib.loads(_CONNECTIONS_FILE.read_text())


def _write(data: dict[str, dict]) -> None:
    """Write the file readable by the owner only; DSNs carry credentials."""
    out: list[str] = []
    for name, entry in data.items():
        out.append(f"[{name}]")
        out.extend(f"{k} = {_toml_string(str(v))}" for k, v in entry.items())
        out.append("")

    _CONNECTIONS_FILE.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    _CONNECTIONS_FILE.write_text("\n".join(out))
    os.chmod(_CONNECTIONS_FILE, stat.S_IRUSR | stat.S_IWUSR)


def _to_config(name: str, entry: dict) -> ConnectionConfig | None:
    try:
        db_type = DatabaseType(entry.get("type"))
    except ValueError:
        return None
    params = {k: str(v) for k, v in entry.items() if k != "type"}
    return ConnectionConfig(name=name, db_type=db_type, params=params)


def list_connections() -> list[ConnectionConfig]:
    """All usable connections, in file order. Entries with unknown types are skipped."""
    configs = (_to_config(name, entry) for name, entry in _read().items())
    return [c for c in configs if c is not None]


def get_connection(name: str) -> ConnectionConfig | None:
    entry = _read().get(name)
    if entry is None:
        return None
    return _to_config(name, entry)


def save_connection(name: str, db_type: DatabaseType, params: dict[str, str]) -> Path:
    data = _read()
    data[name] = {"type": db_type.value, **params}
    _write(data)
    return _CONNECTIONS_FILE


def remove_connection(name: str) -> bool:
    """Remove a named connection. Returns False if it did not exist."""
    data = _read()
    if data.pop(name, None) is None:
        return False
    if data:
        _write(data)
    else:
        _CONNECTIONS_FILE.unlink(missing_ok=True)
    return True
