"""
Storage Provider interface.

Synchronous key-value store holding tagged StoredValues.
One provider instance serves exactly one suite.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from prefkit.core.types import StoredValue

if TYPE_CHECKING:
    from prefkit.settings.manager import SettingsManager


class StorageProvider(ABC):
    """
    Abstract base class for storage backends.

    Keys are flat, non-empty strings: "userAge", "themeColor"
    Values are StoredValue variants; the provider must hand back
    the same kind it was given.

    Failure mode: every operation either succeeds or raises
    StorageError. delete() on a missing key is not a failure.

    Implementations:
        SQLiteStorage — file-based, default
        InMemoryStorage — for testing
    """

    suite: str

    @abstractmethod
    def get(self, key: str) -> StoredValue | None:
        """Get a value by key. Returns None if not found."""
        ...

    @abstractmethod
    def set(self, key: str, value: StoredValue) -> None:
        """Set a value. Overwrites if exists."""
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns True if existed."""
        ...

    @abstractmethod
    def list_keys(self, prefix: str = "") -> list[str]:
        """List all keys matching a prefix."""
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a key exists."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the storage backend."""
        ...

    @property
    def settings_manager(self) -> SettingsManager:
        """A SettingsManager bound to this store."""
        from prefkit.settings.manager import SettingsManager

        return SettingsManager(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(suite={self.suite!r})"
