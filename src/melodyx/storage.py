"""Key/value storage backends behind the progress store."""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from melodyx.config import DEFAULT_DB_PATH


class StorageError(Exception):
    """Raised when the backing store cannot complete an operation."""


@runtime_checkable
class StorageBackend(Protocol):
    """Asynchronous key -> string store.

    ``set_item_blocking`` is the escape hatch used when the app is about
    to be suspended and there is no event loop turn left to await a write.
    """

    async def get_item(self, key: str) -> str | None: ...
    async def set_item(self, key: str, value: str) -> None: ...
    async def remove_item(self, key: str) -> None: ...
    def set_item_blocking(self, key: str, value: str) -> None: ...


class SQLiteBackend:
    """Durable backend: a single ``kv`` table in a local SQLite file."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        if str(db_path) != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self.set_item_blocking, key, value)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    def set_item_blocking(self, key: str, value: str) -> None:
        try:
            with self._lock:
                self.conn.execute(
                    """INSERT INTO kv (key, value) VALUES (?, ?)
                       ON CONFLICT(key) DO UPDATE
                       SET value = excluded.value, updated_at = CURRENT_TIMESTAMP""",
                    (key, value),
                )
                self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc

    def keys(self) -> list[str]:
        with self._lock:
            cur = self.conn.execute("SELECT key FROM kv ORDER BY key")
            return [row[0] for row in cur.fetchall()]

    def _get(self, key: str) -> str | None:
        try:
            with self._lock:
                cur = self.conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
                row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc
        return row[0] if row else None

    def _remove(self, key: str) -> None:
        try:
            with self._lock:
                self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to remove {key}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self.conn.close()


class MemoryBackend:
    """Process-local backend. ``delay`` simulates slow storage I/O."""

    def __init__(self, items: dict[str, str] | None = None, delay: float = 0.0) -> None:
        self.items: dict[str, str] = dict(items or {})
        self.delay = delay
        self.write_count = 0

    async def get_item(self, key: str) -> str | None:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.set_item_blocking(key, value)

    async def remove_item(self, key: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.items.pop(key, None)

    def set_item_blocking(self, key: str, value: str) -> None:
        self.items[key] = value
        self.write_count += 1
