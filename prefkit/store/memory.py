"""
In-memory storage backend — for testing.

Simple dict-based storage. Data lost when process exits.
"""

from __future__ import annotations

import threading

from prefkit.core.types import StoredValue
from prefkit.store.base import StorageProvider


class InMemoryStorage(StorageProvider):
    """
    In-memory key-value store for testing.

    Usage:
        storage = InMemoryStorage()
        storage.set("key", StoredValue.text("value"))
        assert storage.get("key") == StoredValue.text("value")
    """

    def __init__(self, suite: str = "standard") -> None:
        self.suite = suite
        self._data: dict[str, StoredValue] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> StoredValue | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: StoredValue) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def list_keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            return [k for k in self._data if k.startswith(prefix)]

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def close(self) -> None:
        with self._lock:
            self._data.clear()
