"""
SQLite storage backend.

Uses the standard library sqlite3 module with one connection per
provider, shared across threads behind a lock.
WAL mode enabled so several processes can read the same file.

Several suites may live in one database file: every row is keyed
by (suite, key) and a provider only ever touches its own suite.
"""

from __future__ import annotations

import logging
import sqlite3
import struct
import threading
import time
from pathlib import Path
from typing import Any

from prefkit.core.errors import StorageError
from prefkit.core.types import StoredValue, ValueKind
from prefkit.store.base import StorageProvider

logger = logging.getLogger(__name__)


class SQLiteStorage(StorageProvider):
    """
    SQLite-based key-value storage for one suite.

    Usage:
        storage = SQLiteStorage("~/.prefkit/settings.db", suite="standard")

        storage.set("username", StoredValue.text("Alex"))
        value = storage.get("username")  # StoredValue(kind=TEXT, value="Alex")

    The connection is opened lazily on first use; initialize() may be
    called explicitly to surface errors early.
    """

    def __init__(self, db_path: str | Path, suite: str = "standard") -> None:
        self.suite = suite
        self._db_path = Path(db_path).expanduser()
        self._db: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def initialize(self) -> None:
        """Open the database and create tables."""
        with self._lock:
            if self._db is not None:
                return
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                db = sqlite3.connect(str(self._db_path), check_same_thread=False)
                db.execute("PRAGMA journal_mode=WAL")
                db.execute("PRAGMA synchronous=NORMAL")
                db.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        suite      TEXT NOT NULL,
                        key        TEXT NOT NULL,
                        kind       TEXT NOT NULL,
                        value      BLOB,
                        updated_at REAL NOT NULL,
                        PRIMARY KEY (suite, key)
                    )
                    """
                )
                db.commit()
            except Exception as e:
                raise StorageError(
                    f"Failed to initialize SQLite at {self._db_path}: {e}",
                    suite=self.suite,
                ) from e
            self._db = db
            logger.debug(f"SQLite storage initialized at {self._db_path} (suite={self.suite})")

    def _ensure_db(self) -> sqlite3.Connection:
        if self._db is None:
            self.initialize()
        return self._db  # type: ignore[return-value]

    def get(self, key: str) -> StoredValue | None:
        with self._lock:
            db = self._ensure_db()
            try:
                row = db.execute(
                    "SELECT kind, value FROM kv WHERE suite = ? AND key = ?",
                    (self.suite, key),
                ).fetchone()
            except Exception as e:
                raise StorageError(
                    f"Failed to get key '{key}': {e}", suite=self.suite, key=key
                ) from e
        if row is None:
            return None
        return _decode(key, row[0], row[1])

    def set(self, key: str, value: StoredValue) -> None:
        with self._lock:
            db = self._ensure_db()
            try:
                db.execute(
                    """
                    INSERT INTO kv (suite, key, kind, value, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(suite, key) DO UPDATE SET
                        kind = excluded.kind,
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.suite, key, value.kind.value, _encode(value), time.time()),
                )
                db.commit()
            except Exception as e:
                raise StorageError(
                    f"Failed to set key '{key}': {e}", suite=self.suite, key=key
                ) from e

    def delete(self, key: str) -> bool:
        with self._lock:
            db = self._ensure_db()
            try:
                cursor = db.execute(
                    "DELETE FROM kv WHERE suite = ? AND key = ?", (self.suite, key)
                )
                db.commit()
                return cursor.rowcount > 0
            except Exception as e:
                raise StorageError(
                    f"Failed to delete key '{key}': {e}", suite=self.suite, key=key
                ) from e

    def list_keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            db = self._ensure_db()
            try:
                if prefix:
                    rows = db.execute(
                        "SELECT key FROM kv WHERE suite = ? AND substr(key, 1, ?) = ? ORDER BY key",
                        (self.suite, len(prefix), prefix),
                    ).fetchall()
                else:
                    rows = db.execute(
                        "SELECT key FROM kv WHERE suite = ? ORDER BY key", (self.suite,)
                    ).fetchall()
            except Exception as e:
                raise StorageError(
                    f"Failed to list keys with prefix '{prefix}': {e}", suite=self.suite
                ) from e
        return [row[0] for row in rows]

    def exists(self, key: str) -> bool:
        with self._lock:
            db = self._ensure_db()
            try:
                row = db.execute(
                    "SELECT 1 FROM kv WHERE suite = ? AND key = ?", (self.suite, key)
                ).fetchone()
            except Exception as e:
                raise StorageError(
                    f"Failed to check key '{key}': {e}", suite=self.suite, key=key
                ) from e
        return row is not None

    def close(self) -> None:
        with self._lock:
            if self._db:
                self._db.close()
                self._db = None
                logger.debug(f"SQLite storage closed (suite={self.suite})")


# ━━━ Row Encoding ━━━

_FLOAT_KINDS = (ValueKind.DOUBLE, ValueKind.FLOAT)


def _encode(value: StoredValue) -> Any:
    """Map a StoredValue onto a native SQLite storage class."""
    if value.kind is ValueKind.BOOL:
        return int(value.value)
    if value.kind is ValueKind.BYTES:
        return sqlite3.Binary(value.value)  # type: ignore[arg-type]
    if value.kind in _FLOAT_KINDS:
        # packed binary64; SQLite turns a NaN REAL into NULL
        return sqlite3.Binary(struct.pack("<d", value.value))
    return value.value


def _decode(key: str, kind: str, raw: Any) -> StoredValue | None:
    """
    Rebuild a StoredValue from a row.

    A row with an unknown kind or an unreadable payload yields None.
    The row still counts for exists() and list_keys().
    """
    try:
        value_kind = ValueKind(kind)
        if value_kind is ValueKind.BOOL and isinstance(raw, int):
            raw = bool(raw)
        elif value_kind in _FLOAT_KINDS and isinstance(raw, bytes):
            (raw,) = struct.unpack("<d", raw)
        return StoredValue.of(raw, value_kind)
    except (ValueError, TypeError, struct.error) as e:
        logger.warning(f"Unreadable row for key '{key}' (kind={kind!r}): {e}")
        return None
