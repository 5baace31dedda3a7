"""
Key/value storage for the persisted progress record.

The progress store keeps its whole record as one serialized blob under a
fixed key. Two backends share the same three-method interface:
- SqliteStorage: durable, in ~/.cpattrainer/progress.db by default
- MemoryStorage: in-process, for tests and throwaway sessions
"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol


# Exceptions a backend may raise. ProgressStore catches exactly these, so a
# backend must translate any other failure into one of them.
STORAGE_ERRORS = (sqlite3.Error, OSError)


class Storage(Protocol):
    """
    Three-method key/value interface used by ProgressStore.

    Implementations signal an unavailable or broken backend by raising one
    of STORAGE_ERRORS.
    """

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items


class SqliteStorage:
    """
    Store serialized values in a SQLite key/value table.

    Each call opens its own connection, so the file can be inspected or
    replaced between calls.
    """

    def __init__(self, db_path: str | Path):
        """
        Initialize storage. Nothing touches the disk until the first call;
        the file and table are created then.

        Args:
            db_path: Path to progress.db
        """
        self.db_path = Path(db_path)
        self._initialized = False

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection, creating the schema on first use."""
        if not self._initialized:
            self._ensure_database()
            self._initialized = True
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def get_item(self, key: str) -> Optional[str]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT value FROM storage WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._get_connection()
        try:
            now = datetime.now(timezone.utc).isoformat()
            conn.execute(
                """INSERT INTO storage (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     value = excluded.value,
                     updated_at = excluded.updated_at""",
                (key, value, now)
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str) -> None:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM storage WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
