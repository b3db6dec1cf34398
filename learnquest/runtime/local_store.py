"""
LocalFallbackStore - Best-effort local copy of the quest snapshot.

Used when no LMS is present, and as a parallel backup when one is.
The snapshot is stored as a single JSON blob in a fixed key of a
key-value storage. Reads never raise; writes never raise.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional, Protocol

from learnquest.config import DEFAULT_STORAGE_DB, STORAGE_KEY


logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Minimal string key-value storage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage (tests, ephemeral sessions)."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SqliteStorage:
    """
    Key-value storage in a SQLite file (default: ~/.learnquest/storage.db).

    Each method opens its own connection.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize storage.

        Args:
            db_path: Path to the storage database
        """
        self.db_path = Path(db_path or DEFAULT_STORAGE_DB)
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def get_item(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                """INSERT INTO kv_store (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, value)
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()


class LocalFallbackStore:
    """Snapshot payload in a fixed storage slot."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> Optional[dict[str, Any]]:
        """
        Read the saved payload.

        Returns:
            Payload dict, or None if missing, unreadable, or malformed
        """
        try:
            raw = self.storage.get_item(self.key)
        except Exception as e:
            logger.warning(f"Local storage read failed: {e}")
            return None
        if not raw:
            return None
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed local data under {self.key!r}")
            return None
        return payload if isinstance(payload, dict) else None

    def save(self, payload: dict[str, Any]) -> bool:
        """
        Write the payload. Failures (quota, read-only disk, ...) are logged
        and reported as False, never raised.
        """
        try:
            self.storage.set_item(self.key, json.dumps(payload))
        except Exception as e:
            logger.warning(f"Local storage write failed: {e}")
            return False
        return True

    def clear(self) -> bool:
        try:
            self.storage.remove_item(self.key)
        except Exception as e:
            logger.warning(f"Local storage clear failed: {e}")
            return False
        return True
