"""SQLite-backed blob store."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path

from focuscoach.exceptions import BlobStoreError
from focuscoach.repositories.blob_store import BlobStore

logger = logging.getLogger(__name__)


class SqliteBlobStore(BlobStore):
    """Keeps every blob as a row of a single ``blobs`` table.

    Provides:
    - One connection per store, WAL journal mode
    - Owner-only permissions on a newly created database file
    - Upsert writes, committed immediately
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not self.db_path.exists()

        self._connection = sqlite3.connect(
            str(self.db_path),
            check_same_thread=False,
            timeout=30.0,
        )
        self._connection.execute("PRAGMA journal_mode = WAL")
        if is_new_database:
            os.chmod(self.db_path, 0o600)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        self._connection.execute(
            """
            CREATE TABLE IF NOT EXISTS blobs (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._connection.commit()
        logger.debug("Blob schema ensured at %s", self.db_path)

    def get(self, key: str) -> str | None:
        try:
            row = self._connection.execute(
                "SELECT value FROM blobs WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise BlobStoreError(key, str(e)) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self._connection.execute(
                """
                INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now().isoformat()),
            )
            self._connection.commit()
        except sqlite3.Error as e:
            raise BlobStoreError(key, str(e)) from e

    def delete(self, key: str) -> None:
        try:
            self._connection.execute("DELETE FROM blobs WHERE key = ?", (key,))
            self._connection.commit()
        except sqlite3.Error as e:
            raise BlobStoreError(key, str(e)) from e

    def keys(self) -> list[str]:
        try:
            rows = self._connection.execute("SELECT key FROM blobs ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise BlobStoreError("*", str(e)) from e
        return [row[0] for row in rows]

    @property
    def storage_type(self) -> str:
        return "sqlite"

    def close(self) -> None:
        self._connection.close()
        logger.debug("Closed blob database %s", self.db_path)
