"""Tests for the connection manager (F1)."""

import sqlite3

import pytest

from registrar.db.database import (
    ConnectionManager,
    DatabaseUnavailableError,
    foreign_keys_enabled,
    transaction,
)
from registrar.db.schema import create_schema


class TestConnectionManager:
    """Tests for ConnectionManager open/close."""

    def test_open_returns_connection(self, manager):
        """open() connects and marks the manager open."""
        conn = manager.open()
        assert isinstance(conn, sqlite3.Connection)
        assert manager.is_open

    def test_open_reuses_existing_handle(self, manager):
        """A second open() returns the same connection."""
        first = manager.open()
        second = manager.open()
        assert first is second

    def test_foreign_keys_enabled(self, manager):
        """Referential integrity is switched on for new connections."""
        conn = manager.open()
        assert foreign_keys_enabled(conn)

    def test_foreign_keys_can_be_disabled(self):
        """foreign_keys=False leaves SQLite's default (off)."""
        mgr = ConnectionManager(":memory:", foreign_keys=False)
        try:
            assert not foreign_keys_enabled(mgr.open())
        finally:
            mgr.close()

    def test_refuses_store_without_foreign_keys(self, manager, monkeypatch):
        """If the pragma does not take effect, open() fails instead of running unchecked."""
        monkeypatch.setattr(
            "registrar.db.database.foreign_keys_enabled", lambda conn: False
        )

        with pytest.raises(DatabaseUnavailableError, match="foreign key enforcement"):
            manager.open()
        assert not manager.is_open

    def test_rows_are_addressable_by_name(self, manager):
        """Rows come back as sqlite3.Row."""
        row = manager.open().execute("SELECT 1 AS answer").fetchone()
        assert row["answer"] == 1

    def test_close_releases_handle(self, manager):
        """close() drops the connection."""
        conn = manager.open()
        manager.close()

        assert not manager.is_open
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_close_when_not_open(self, manager):
        """close() on a never-opened manager is a no-op."""
        manager.close()
        manager.close()
        assert not manager.is_open

    def test_reopen_after_close(self, manager):
        """open() after close() gives a fresh connection."""
        first = manager.open()
        manager.close()
        second = manager.open()
        assert second is not first
        assert manager.is_open

    def test_context_manager(self):
        """with-block opens and closes the store."""
        mgr = ConnectionManager(":memory:")
        with mgr as conn:
            assert conn.execute("SELECT 1").fetchone()[0] == 1
            assert mgr.is_open
        assert not mgr.is_open

    def test_file_database(self, tmp_path):
        """A file path persists data across managers."""
        path = str(tmp_path / "school.db")

        with ConnectionManager(path) as conn:
            create_schema(conn)
            conn.execute("INSERT INTO student (student_id, name) VALUES (11, 'John')")
            conn.commit()

        with ConnectionManager(path) as conn:
            rows = conn.execute("SELECT name FROM student").fetchall()
        assert [r["name"] for r in rows] == ["John"]

    def test_unreachable_database_raises(self, tmp_path):
        """A path that cannot be opened raises DatabaseUnavailableError."""
        missing = tmp_path / "no-such-dir" / "school.db"
        mgr = ConnectionManager(str(missing))

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            mgr.open()

        assert exc_info.value.database == str(missing)
        assert "cannot open database" in str(exc_info.value)
        assert not mgr.is_open


class TestTransaction:
    """Tests for the transaction() context manager."""

    def test_commits_on_success(self, empty_conn):
        """Statements inside the block are committed."""
        with transaction(empty_conn):
            empty_conn.execute("INSERT INTO student (student_id, name) VALUES (11, 'John')")

        empty_conn.rollback()
        count = empty_conn.execute("SELECT COUNT(*) FROM student").fetchone()[0]
        assert count == 1

    def test_rolls_back_on_error(self, empty_conn):
        """An exception undoes every statement in the block and propagates."""
        with pytest.raises(sqlite3.IntegrityError):
            with transaction(empty_conn):
                empty_conn.execute("INSERT INTO student (student_id, name) VALUES (11, 'John')")
                empty_conn.execute("INSERT INTO student (student_id, name) VALUES (11, 'Dup')")

        count = empty_conn.execute("SELECT COUNT(*) FROM student").fetchone()[0]
        assert count == 0
