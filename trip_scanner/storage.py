from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Dict, Generic, Optional, Protocol, TypeVar, Union

DB_FILE = "trip_scanner.db"

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ────────────────────────────────────────────────────────────────
# Result type
# ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Failed:
    reason: str


Result = Union[Ok[T], Failed]


# ────────────────────────────────────────────────────────────────
# Backends
# ────────────────────────────────────────────────────────────────


class KeyValueStore(Protocol):
    """Host-provided string store. Implementations may raise on I/O errors."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used by tests and short-lived sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SQLiteKeyValueStore:
    """Key-value table in a SQLite file; each call opens its own connection."""

    def __init__(self, db_path: str = DB_FILE) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute(
            "CREATE TABLE IF NOT EXISTS kv_store "
            "(key TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )
        return conn

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key=?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (key, value),
            )

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM kv_store WHERE key=?", (key,))


# ────────────────────────────────────────────────────────────────
# Best-effort access
# ────────────────────────────────────────────────────────────────


def _failure(action: str, key: str, exc: Exception) -> Failed:
    return Failed(f"{action} {key!r} failed: {type(exc).__name__}: {exc}")


def read_payload(backend: KeyValueStore, key: str) -> Result[Optional[str]]:
    """Read *key*; a missing key is ``Ok(None)``."""
    try:
        return Ok(backend.get(key))
    except Exception as exc:
        return _failure("read", key, exc)


def write_payload(backend: KeyValueStore, key: str, payload: str) -> Result[None]:
    logger.debug("Writing %d bytes to %r", len(payload), key)
    try:
        backend.set(key, payload)
    except Exception as exc:
        return _failure("write", key, exc)
    return Ok(None)


def delete_payload(backend: KeyValueStore, key: str) -> Result[None]:
    try:
        backend.delete(key)
    except Exception as exc:
        return _failure("delete", key, exc)
    return Ok(None)


__all__ = [
    "DB_FILE",
    "Ok",
    "Failed",
    "Result",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "read_payload",
    "write_payload",
    "delete_payload",
]
