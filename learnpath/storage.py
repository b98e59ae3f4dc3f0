"""
LocalStorage - Client-side key/value persistence in ~/.learnpath/storage.db.

Holds what a browser would keep in localStorage:
- Auth token
- Signed-in user record
"""

import json
import sqlite3
from pathlib import Path
from typing import Any, Optional

from learnpath.config import DEFAULT_STORAGE_DB


TOKEN_KEY = "token"
USER_KEY = "user"


class LocalStorage:
    """
    Key/value store backed by SQLite. Values are stored as JSON.

    Each method opens its own connection, so one instance can be shared
    across Streamlit reruns.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize storage.

        Args:
            db_path: Path to storage.db (default: ~/.learnpath/storage.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_STORAGE_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS items (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def get_item(self, key: str) -> Optional[Any]:
        """Get a stored value, or None if missing."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT value FROM items WHERE key = ?", (key,))
            row = cursor.fetchone()
            return json.loads(row["value"]) if row else None
        finally:
            conn.close()

    def set_item(self, key: str, value: Any):
        """Store a JSON-serialisable value under key."""
        conn = self._get_connection()
        try:
            conn.execute(
                """INSERT INTO items (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, json.dumps(value)),
            )
            conn.commit()
        finally:
            conn.close()

    def remove_item(self, key: str):
        """Delete key if present."""
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM items WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def clear(self):
        """Delete every stored item."""
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM items")
            conn.commit()
        finally:
            conn.close()
