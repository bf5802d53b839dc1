"""SQLite-backed persistent store with JSON-encoded values."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from lockin.exceptions import StoreReadError, StoreWriteError
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
)
"""


class SQLiteStore(BaseStore):
    """Each record is one row; every write commits on its own."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        if str(db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(str(db_path))
            self._conn.execute(_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreWriteError(f"Cannot open store at {db_path}: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        try:
            row = self._conn.execute(
                "SELECT value FROM records WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed reading {key!r}: {e}") from e
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StoreReadError(f"Corrupt record {key!r}: {e}") from e

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreWriteError(f"Value for {key!r} is not JSON-serializable: {e}") from e
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO records (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, payload),
                )
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed writing {key!r}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            with self._conn:
                self._conn.execute("DELETE FROM records WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed removing {key!r}: {e}") from e

    def clear(self) -> None:
        try:
            with self._conn:
                self._conn.execute("DELETE FROM records")
        except sqlite3.Error as e:
            raise StoreWriteError(f"Failed clearing store: {e}") from e
        logger.info("Cleared store at %s", self.db_path)

    def keys(self) -> list[str]:
        try:
            rows = self._conn.execute("SELECT key FROM records ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StoreReadError(f"Failed listing keys: {e}") from e
        return [row[0] for row in rows]
