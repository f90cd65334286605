"""Shared fixtures and markers."""

from __future__ import annotations

import os

import pytest

ASSET_DDL = [
    "CREATE TABLE categories (id INTEGER PRIMARY KEY, uuid VARCHAR, name VARCHAR, "
    "description VARCHAR, createdAt TIMESTAMP, updatedAt TIMESTAMP)",
    "CREATE TABLE locations (id INTEGER PRIMARY KEY, uuid VARCHAR, name VARCHAR, "
    "building VARCHAR, \"floor\" VARCHAR, room VARCHAR, description VARCHAR, "
    "createdAt TIMESTAMP, updatedAt TIMESTAMP)",
    "CREATE TABLE vendors (id INTEGER PRIMARY KEY, uuid VARCHAR, name VARCHAR, "
    "contact_person VARCHAR, email VARCHAR, phone VARCHAR, address VARCHAR, "
    "description VARCHAR, createdAt TIMESTAMP, updatedAt TIMESTAMP)",
    "CREATE TABLE users (id INTEGER PRIMARY KEY, uuid VARCHAR, name VARCHAR, email VARCHAR, "
    "password VARCHAR, \"role\" VARCHAR, department VARCHAR, phone VARCHAR, "
    "is_active BOOLEAN, refresh_token VARCHAR, createdAt TIMESTAMP, updatedAt TIMESTAMP)",
    "CREATE TABLE assets (id INTEGER PRIMARY KEY, uuid VARCHAR, asset_code VARCHAR, "
    "name VARCHAR, description VARCHAR, category_id INTEGER, location_id INTEGER, "
    "vendor_id INTEGER, brand VARCHAR, model VARCHAR, serial_number VARCHAR, "
    "purchase_date DATE, purchase_price DECIMAL(15,2), warranty_expired DATE, "
    "status VARCHAR, \"condition\" VARCHAR, assigned_to INTEGER, notes VARCHAR, "
    "image VARCHAR, createdAt TIMESTAMP, updatedAt TIMESTAMP)",
    "CREATE TABLE transactions (id INTEGER PRIMARY KEY, uuid VARCHAR, asset_id INTEGER, "
    "user_id INTEGER, \"type\" VARCHAR, assigned_to INTEGER, transaction_date DATE, "
    "return_date DATE, notes VARCHAR, createdAt TIMESTAMP, updatedAt TIMESTAMP)",
]

ASSET_ROWS = [
    "INSERT INTO categories (id, name) VALUES (1, 'Laptop'), (2, 'Monitor')",
    "INSERT INTO locations (id, name, building) VALUES (1, 'IT Room', 'Building A')",
    "INSERT INTO users (id, name, email, password, \"role\", is_active) VALUES "
    "(1, 'Dewi', 'dewi@example.com', 'hash', 'admin', true)",
    "INSERT INTO assets (id, asset_code, name, category_id, location_id, status, "
    "purchase_price, assigned_to) VALUES "
    "(1, 'AST-000001', 'ThinkPad X1', 1, 1, 'in_use', 25000000, 1), "
    "(2, 'AST-000002', 'Dell U2720Q', 2, 1, 'available', 8000000, NULL), "
    "(3, 'AST-000003', 'MacBook Air', 1, 1, 'maintenance', 18000000, NULL)",
]


def pytest_configure(config):
    config.addinivalue_line("markers", "postgres: requires running PostgreSQL container")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("ASSETGUARD_TEST_POSTGRES"):
        return

    skip_pg = pytest.mark.skip(reason="Postgres not available (set ASSETGUARD_TEST_POSTGRES=1)")
    for item in items:
        if "postgres" in item.keywords:
            item.add_marker(skip_pg)


@pytest.fixture(autouse=True)
def _isolate_home(tmp_path, monkeypatch):
    """Keep the audit log and connections file out of the real home directory."""
    monkeypatch.setattr("assetguard.querylog._LOG_ROOT", tmp_path / "logs")
    monkeypatch.setattr(
        "assetguard.connections._CONNECTIONS_FILE", tmp_path / "connections.toml"
    )
    monkeypatch.delenv("ASSETGUARD_DB", raising=False)


@pytest.fixture
def asset_db(tmp_path) -> str:
    """A DuckDB file with the asset tables and a few rows. Returns its path."""
    import duckdb

    path = str(tmp_path / "assets.duckdb")
    conn = duckdb.connect(path)
    for stmt in ASSET_DDL + ASSET_ROWS:
        conn.execute(stmt)
    conn.close()
    return path
