"""String key/value store backed by the SQLite metadata table.

This is the only persistence contract the rate layer relies on: string
get/set per key. Typed helpers stay thin and resilient; a missing key
returns the caller's default.
"""

from __future__ import annotations

from pathlib import Path
import sqlite3
from typing import Optional

from .schema import BASIC_UTC_NOW, init_db

_TRUTHY = ("1", "true", "True", "yes", "on")


class KeyValueStore:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        init_db(self.db_path)

    # ------------------------------------------------------------------
    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT value FROM metadata WHERE key=?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO metadata(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
                f"updated_at=({BASIC_UTC_NOW})",
                (key, value),
            )

    def get_bool(self, key: str, default: bool = False) -> bool:
        val = self.get(key)
        if val is None:
            return default
        return val in _TRUTHY

    def set_bool(self, key: str, value: bool) -> None:
        self.set(key, "1" if value else "0")
