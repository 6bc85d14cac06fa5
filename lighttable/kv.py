from __future__ import annotations

import datetime as dt
import logging
import sqlite3
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from . import db

logger = logging.getLogger(__name__)

WRITE_CHECK_PREFIX = "__lighttable_write_check__:"


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self, prefix: str = "") -> list[str]: ...


class MemoryKeyValueStore:
    """Process-local store, mostly for tests and dry runs."""

    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self.items if key.startswith(prefix))


class SqliteKeyValueStore:
    def __init__(
        self,
        db_path: Path | str = db.DEFAULT_DB_PATH,
        *,
        check_same_thread: bool = True,
    ):
        self.db_path = Path(db_path).expanduser()
        self.conn = db.connect(self.db_path, check_same_thread=check_same_thread)
        db.initialize_schema(self.conn)

    def get_item(self, key: str) -> str | None:
        row = self.conn.execute("SELECT value FROM kv_items WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        now = dt.datetime.now(dt.UTC).isoformat()
        self.conn.execute(
            """
            INSERT INTO kv_items(key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value, now),
        )
        self.conn.commit()

    def remove_item(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv_items WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self, prefix: str = "") -> list[str]:
        rows = self.conn.execute(
            "SELECT key FROM kv_items WHERE substr(key, 1, ?) = ? ORDER BY key",
            (len(prefix), prefix),
        ).fetchall()
        return [str(row["key"]) for row in rows]

    def close(self) -> None:
        self.conn.close()


def storage_available(kv: KeyValueStore) -> bool:
    """Check once that the store accepts writes before relying on it."""
    try:
        # A fresh key per call, so stored data is never touched.
        check_key = f"{WRITE_CHECK_PREFIX}{uuid4().hex}"
        while kv.get_item(check_key) is not None:
            check_key = f"{WRITE_CHECK_PREFIX}{uuid4().hex}"
        kv.set_item(check_key, "1")
        kv.remove_item(check_key)
    except (sqlite3.Error, OSError) as exc:
        logger.warning("key-value store unavailable", exc_info=exc)
        return False
    return True
