"""Durable key/value backends used for session persistence."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Dict, List, Optional, Protocol

from config.settings import settings
from interview_session.errors import QuotaExceededError, StorageError, StorageUnavailableError

from .migrate import migrate
from .sqlite import get_conn


class KeyValueStore(Protocol):  # Minimal string key/value storage protocol
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


def _entry_size(key: str, value: str) -> int:
    return len(key) + len(value)


def _check_quota(quota_bytes: Optional[int], used: int, key: str, value: str) -> None:
    if quota_bytes is None:
        return
    needed = used + _entry_size(key, value)
    if needed > quota_bytes:
        raise QuotaExceededError(
            f"Storage quota exceeded: writing '{key}' needs {needed} of {quota_bytes} available characters"
        )


def _translate(exc: Exception, action: str) -> StorageError:
    if isinstance(exc, UnicodeError):
        return StorageUnavailableError(f"Storage could not encode text to {action}: {exc}")
    text = str(exc).lower()
    if "full" in text:
        return QuotaExceededError(f"Storage quota exceeded while trying to {action}")
    return StorageUnavailableError(f"Storage is unavailable, could not {action}: {exc}")


class SQLiteKeyValueStore:  # SQLite-backed key/value storage
    def __init__(self, db_path: Optional[str] = None, *, quota_bytes: Optional[int] = None) -> None:
        self._db_path = db_path
        self._quota_bytes = quota_bytes
        self._ensure_schema()

    @property
    def db_path(self) -> str:
        return self._db_path or settings.DB_PATH

    def _ensure_schema(self) -> None:  # Create the kv table if missing
        try:
            migrate(self.db_path)
        except (sqlite3.Error, OSError) as exc:
            raise StorageUnavailableError(f"Storage is unavailable at {self.db_path}: {exc}") from exc

    def get_item(self, key: str) -> Optional[str]:
        try:
            with get_conn(self.db_path) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except (sqlite3.Error, UnicodeError) as exc:
            raise _translate(exc, f"read '{key}'") from exc
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        now = dt.datetime.now(dt.timezone.utc).isoformat()
        try:
            with get_conn(self.db_path) as conn:
                used = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) FROM kv_store WHERE key != ?",
                    (key,),
                ).fetchone()[0]
                _check_quota(self._quota_bytes, int(used), key, value)
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                    (key, value, now),
                )
        except (sqlite3.Error, UnicodeError) as exc:
            raise _translate(exc, f"write '{key}'") from exc

    def remove_item(self, key: str) -> None:
        try:
            with get_conn(self.db_path) as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        except (sqlite3.Error, UnicodeError) as exc:
            raise _translate(exc, f"remove '{key}'") from exc

    def keys(self) -> List[str]:
        try:
            with get_conn(self.db_path) as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except (sqlite3.Error, UnicodeError) as exc:
            raise _translate(exc, "list keys") from exc
        return [row[0] for row in rows]


class MemoryKeyValueStore:
    """In-process key/value storage.

    Used for headless runs and tests. Shares the quota semantics of the
    SQLite backend but nothing survives the process.
    """

    def __init__(self, *, quota_bytes: Optional[int] = None) -> None:
        self._items: Dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        used = sum(_entry_size(k, v) for k, v in self._items.items() if k != key)
        _check_quota(self._quota_bytes, used, key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._items)


def default_backend() -> SQLiteKeyValueStore:
    """Build the SQLite backend configured through ``settings``."""

    return SQLiteKeyValueStore(settings.DB_PATH, quota_bytes=settings.STORAGE_QUOTA_BYTES)


__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SQLiteKeyValueStore", "default_backend"]
