"""
SQLite-backed key/value store standing in for per-browser local storage.
"""

import json
import logging
import sqlite3
from typing import Optional

from .config import STORAGE_DB_PATH

logger = logging.getLogger(__name__)


def init_storage(path: str = STORAGE_DB_PATH) -> sqlite3.Connection:
    """Connect to the storage DB and create the table if needed."""
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS local_storage(
            client_id TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            PRIMARY KEY (client_id, key)
        )
    """)

    conn.commit()
    return conn


class LocalStorage:
    """String-keyed entries scoped to one browser client."""

    def __init__(self, conn: sqlite3.Connection, client_id: str = "default"):
        self.conn = conn
        self.client_id = client_id

    def get_item(self, key: str) -> Optional[str]:
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT value FROM local_storage WHERE client_id = ? AND key = ?",
            (self.client_id, key)
        )
        row = cursor.fetchone()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            INSERT INTO local_storage (client_id, key, value) VALUES (?, ?, ?)
            ON CONFLICT(client_id, key) DO UPDATE SET value = excluded.value
        """, (self.client_id, key, value))
        self.conn.commit()

    def remove_item(self, key: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute(
            "DELETE FROM local_storage WHERE client_id = ? AND key = ?",
            (self.client_id, key)
        )
        self.conn.commit()

    def get_json(self, key: str) -> Optional[dict]:
        """Read a JSON object; absent or malformed entries count as no data."""
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed JSON stored under %s", key)
            return None
        return data if isinstance(data, dict) else None

    def set_json(self, key: str, data: dict) -> None:
        self.set_item(key, json.dumps(data, ensure_ascii=False))
