"""SQLite post store.

A single ``posts`` table in a file-backed database. Every call opens its own
connection and runs one statement, so concurrency control is left to the
SQLite engine. Listing is most-recent-first by ``rowid``.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from typing import Iterator

from app.adapters.storage.base import AbstractPostStore
from app.core.errors import StorageAppError
from app.models.post import Post

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS posts (
    "id" TEXT NOT NULL PRIMARY KEY,
    "title" TEXT,
    "content" TEXT
)
"""

SELECT_ALL_SQL = "SELECT id, title, content FROM posts ORDER BY rowid DESC"

INSERT_SQL = "INSERT INTO posts (id, title, content) VALUES (?, ?, ?)"


class SQLitePostStore(AbstractPostStore):
    """Post store persisted in a single SQLite file."""

    backend = "sqlite"

    def __init__(self, database_path: str, *, timeout_seconds: float = 5.0) -> None:
        if not database_path:
            raise ValueError("database_path must be a non-empty string")
        if database_path == ":memory:":
            # Each connection would see its own empty database
            raise ValueError("use the memory backend instead of an in-memory SQLite database")
        self._database_path = database_path
        self._timeout = timeout_seconds

    @property
    def database_path(self) -> str:
        return self._database_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        # No connection pool: every call opens its own connection and closes it on exit
        with closing(sqlite3.connect(self._database_path, timeout=self._timeout)) as conn:
            yield conn

    def _fail(self, operation: str, exc: sqlite3.Error) -> StorageAppError:
        logger.error(
            f"storage.{operation}_failed",
            extra={
                "backend": self.backend,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )
        return StorageAppError(
            code=f"storage_{operation}_failed",
            message=f"SQLite {operation} failed: {exc}",
            details={"backend": self.backend, "operation": operation},
        )

    def initialize(self) -> None:
        """Create the posts table if it does not exist."""
        try:
            with self._connect() as conn, conn:
                conn.execute(CREATE_TABLE_SQL)
        except sqlite3.Error as exc:
            raise self._fail("schema", exc) from exc

        logger.info(
            "storage.schema_ready",
            extra={"backend": self.backend, "database_path": self._database_path},
        )

    def list(self) -> list[Post]:
        try:
            with self._connect() as conn:
                rows = conn.execute(SELECT_ALL_SQL).fetchall()
        except sqlite3.Error as exc:
            raise self._fail("query", exc) from exc

        return [Post(id=row[0], title=row[1], content=row[2]) for row in rows]

    def create(self, post: Post) -> None:
        try:
            # Connection as context manager commits on success, rolls back on error
            with self._connect() as conn, conn:
                conn.execute(INSERT_SQL, (post.id, post.title, post.content))
        except sqlite3.Error as exc:
            raise self._fail("insert", exc) from exc
