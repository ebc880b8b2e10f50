"""SQLite key-value adapter.

Implements the core KeyValuePort using a simple SQLite database.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any

LOGGER = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """Thin SQLite wrapper that satisfies the KeyValuePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - kv: one JSON document per logical key
        """

        with self._connect() as conn:
            # kv keeps each logical key (known signatures, favourites,
            # ignored ids, filter flag) as a single JSON document.
            # Fields:
            # - key: logical key (PRIMARY KEY)
            # - value: JSON text
            # - updated_at: timestamp of the last write, for debugging
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

    def get(self, key: str) -> Any:
        """Return the decoded value for a key, or None if absent or corrupt."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv WHERE key = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            LOGGER.warning("Corrupt JSON stored under %s; treating as empty", key)
            return None

    def set(self, key: str, value: Any) -> None:
        """Upsert the JSON-encoded value for a key."""

        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, json.dumps(value), now.isoformat()),
            )

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))

