"""Tests for database schema creation."""

from freshb4.db.schema import _SCHEMA_VERSION, ensure_schema


def test_creates_tables(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    tables = {
        row["name"]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    }
    assert {"pantry_items", "schema_version"} <= tables
    conn.close()


def test_creates_indexes(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    indexes = {
        row["name"]
        for row in conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
    }
    assert {"idx_pantry_added", "idx_pantry_expiry"} <= indexes
    conn.close()


def test_records_version(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_idempotent(tmp_path):
    path = tmp_path / "test.db"
    ensure_schema(path).close()
    conn = ensure_schema(path)
    rows = conn.execute("SELECT version FROM schema_version").fetchall()
    assert len(rows) == 1
    conn.close()


def test_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "dir" / "test.db"
    ensure_schema(path).close()
    assert path.exists()


def test_wal_mode(tmp_path):
    conn = ensure_schema(tmp_path / "test.db")
    mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
    assert mode == "wal"
    conn.close()


def test_in_memory():
    conn = ensure_schema(":memory:")
    conn.execute(
        "INSERT INTO pantry_items (id, name, expiry_date, added_date) "
        "VALUES ('a', 'Milk', '2025-01-01', '2025-01-01')"
    )
    row = conn.execute("SELECT category, notes FROM pantry_items").fetchone()
    assert row["category"] == "Other"
    assert row["notes"] == ""
    conn.close()
