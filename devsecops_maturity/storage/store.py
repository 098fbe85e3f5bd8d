"""
Key-value backing stores for project data.
Values are JSON-serializable trees stored under fixed string keys.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger("devsecops_maturity.storage")


class PersistenceError(Exception):
    """Raised when the backing store cannot be read or written."""
    pass


class KeyValueStore(ABC):
    """Abstract key-value persistence collaborator."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for key, or None if absent."""
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: Any):
        """Store value under key, replacing any previous value."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str):
        raise NotImplementedError


class SQLiteStore(KeyValueStore):
    """
    Persistent store backed by SQLite.
    Features:
      - One row per key, JSON text payload
      - Connection-per-call, no long-lived handles
      - Every failure surfaces as PersistenceError
    """

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create data directory {self.db_path.parent}: {e}") from e
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _init_db(self):
        """Initialize the store schema."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_entries (
                        key TEXT PRIMARY KEY,
                        data TEXT NOT NULL,
                        updated_at REAL NOT NULL
                    )
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot initialize store at {self.db_path}: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT data FROM kv_entries WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Read failed for key {key}: {e}") from e

        if row is None:
            logger.debug(f"Store miss for key: {key}")
            return None

        logger.debug(f"Store hit for key: {key}")
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt JSON stored under key {key}: {e}") from e

    def put(self, key: str, value: Any):
        try:
            data_json = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for key {key} is not JSON-serializable: {e}") from e

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO kv_entries (key, data, updated_at)
                    VALUES (?, ?, ?)
                    """,
                    (key, data_json, time.time()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Write failed for key {key}: {e}") from e
        logger.debug(f"Stored {len(data_json)} bytes under key: {key}")

    def delete(self, key: str):
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv_entries WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Delete failed for key {key}: {e}") from e


class MemoryStore(KeyValueStore):
    """In-process store. Values are kept as JSON text, so reads never alias writes."""

    def __init__(self):
        self._entries: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._entries.get(key)
        return json.loads(raw) if raw is not None else None

    def put(self, key: str, value: Any):
        try:
            self._entries[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for key {key} is not JSON-serializable: {e}") from e

    def delete(self, key: str):
        self._entries.pop(key, None)
