"""SQLite connection and transaction management.

One connection per process, opened lazily and handed explicitly to every
operation. Foreign key enforcement is off by default in SQLite and has to be
switched on per connection.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location (non-persistent)
DEFAULT_DB_PATH = ":memory:"


class DatabaseUnavailableError(RuntimeError):
    """Raised when a connection to the store cannot be established."""

    def __init__(self, database: str, reason: str):
        self.database = database
        self.reason = reason
        super().__init__(f"cannot open database '{database}': {reason}")


class ConnectionManager:
    """Owns the single connection to the embedded store.

    Example:
        manager = ConnectionManager()
        conn = manager.open()
        ...
        manager.close()

    or as a context manager:

        with ConnectionManager("school.db") as conn:
            conn.execute("SELECT * FROM student")
    """

    def __init__(self, database: str = DEFAULT_DB_PATH, foreign_keys: bool = True):
        self.database = database
        self.foreign_keys = foreign_keys
        self._conn: sqlite3.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> sqlite3.Connection:
        """Return the open connection, connecting first if needed.

        Raises:
            DatabaseUnavailableError: If the store cannot be opened or does
                not enforce foreign keys when asked to.
        """
        if self._conn is not None:
            return self._conn

        try:
            conn = sqlite3.connect(self.database)
            conn.row_factory = sqlite3.Row
            if self.foreign_keys:
                conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            logger.error("database.open_failed", database=self.database, error=str(e))
            raise DatabaseUnavailableError(self.database, str(e)) from e

        if self.foreign_keys and not foreign_keys_enabled(conn):
            conn.close()
            logger.error("database.open_failed", database=self.database, error="no foreign key support")
            raise DatabaseUnavailableError(self.database, "foreign key enforcement is not available")

        self._conn = conn
        logger.info(
            "database.opened", database=self.database, foreign_keys=self.foreign_keys
        )
        return conn

    def close(self) -> None:
        """Release the connection. No-op if it is not open."""
        if self._conn is None:
            return

        self._conn.close()
        self._conn = None
        logger.info("database.closed", database=self.database)

    def __enter__(self) -> sqlite3.Connection:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Run a block of statements as one unit.

    Commits when the block finishes, rolls back and re-raises otherwise.

    Example:
        with transaction(conn):
            conn.execute("INSERT INTO take VALUES (?, ?, ?)", (...))
            conn.execute("UPDATE course SET ...", (...))
    """
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def foreign_keys_enabled(conn: sqlite3.Connection) -> bool:
    """Check whether the connection enforces foreign keys."""
    row = conn.execute("PRAGMA foreign_keys").fetchone()
    return bool(row[0])
