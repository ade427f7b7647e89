"""
SettingsManager — suite-wide administration by raw key.

Works on whatever is stored, independent of any TypedSetting's
declared kind. Bound to one store for its lifetime.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from prefkit.core.types import StoredValue, ValueKind
from prefkit.settings.setting import validate_key
from prefkit.store.base import StorageProvider
from prefkit.store.suites import default_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SettingsManager:
    """
    Bulk operations over one suite.

    Usage:
        manager = SettingsManager(store)
        manager.set_value("x", "k1")
        manager.has_key("k1")                  # True
        manager.get_value("k2", default=0)     # 0
        manager.clear_all_settings()

    clear_all_settings() is enumerate-then-delete and not atomic: a key
    written by another thread after enumeration survives the clear.
    """

    def __init__(self, store: StorageProvider | None = None) -> None:
        self._store = store if store is not None else default_store()

    @property
    def store(self) -> StorageProvider:
        return self._store

    def set_value(self, value: Any, key: str, kind: ValueKind | None = None) -> None:
        """
        Store a value under key, replacing anything there.

        Raises:
            InvalidKeyError: If key is empty
            UnsupportedValueError: If value is not a supported primitive
        """
        validate_key(key)
        self._store.set(key, StoredValue.of(value, kind))

    def get_value(self, key: str, default: T, kind: ValueKind | None = None) -> T:
        """
        Read key, falling back to default when absent or of another kind.

        The expected kind is inferred from default unless given.
        """
        expected = kind or ValueKind.infer(default)
        stored = self._store.get(key)
        if stored is None or not stored.is_kind(expected):
            return default
        return stored.value  # type: ignore[return-value]

    def get_raw(self, key: str) -> StoredValue | None:
        """The stored variant as-is, or None."""
        return self._store.get(key)

    def has_key(self, key: str) -> bool:
        return self._store.exists(key)

    def remove_setting(self, key: str) -> None:
        """Remove key. No-op if absent."""
        self._store.delete(key)

    def clear_all_settings(self) -> int:
        """
        Remove every key in the bound suite.

        Returns:
            Number of keys actually removed. Keys that disappeared
            between enumeration and deletion are not counted.
        """
        removed = 0
        for key in self._store.list_keys():
            if self._store.delete(key):
                removed += 1
        logger.debug(f"Cleared {removed} settings from suite '{self._store.suite}'")
        return removed

    @property
    def all_keys(self) -> list[str]:
        """Snapshot of the keys currently in the suite."""
        return self._store.list_keys()
