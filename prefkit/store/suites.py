"""
Suite registry — named store instances and the implicit default.

A suite is one independent key-value namespace. Suites are
registered by NAME; unregistered names are opened on demand
from the storage config.

    registry = SuiteRegistry()
    standard = registry.get()                       # default suite
    premium = registry.get("com.example.premium")   # opened lazily

The process-wide registry behind default_store() is created on
first use from PrefkitConfig.load().
"""

from __future__ import annotations

import logging
import threading

from prefkit.core.config import PrefkitConfig
from prefkit.core.errors import RegistryError, SuiteNotFoundError
from prefkit.store.base import StorageProvider
from prefkit.store.memory import InMemoryStorage
from prefkit.store.sqlite import SQLiteStorage

logger = logging.getLogger(__name__)


def open_store(config: PrefkitConfig, suite: str) -> StorageProvider:
    """Build a provider for one suite on the configured backend."""
    if not suite:
        raise SuiteNotFoundError("Suite name must be a non-empty string")
    backend = config.storage.backend
    if backend == "memory":
        return InMemoryStorage(suite=suite)
    if backend == "sqlite":
        return SQLiteStorage(config.storage.get_db_path(), suite=suite)
    raise SuiteNotFoundError(f"Unknown storage backend '{backend}'")


class SuiteRegistry:
    """
    Name → StorageProvider locator.

    Default selection:
        When name is not specified:
        1. If a default was set with set_default(), use it
        2. Otherwise, use config.storage.default_suite

    Opening is lazy and happens at most once per name; later
    get() calls return the same provider instance.
    """

    def __init__(
        self,
        config: PrefkitConfig | None = None,
        auto_open: bool = True,
    ) -> None:
        self._config = config or PrefkitConfig()
        self._auto_open = auto_open
        self._stores: dict[str, StorageProvider] = {}
        self._default: str | None = None
        self._lock = threading.RLock()

    @property
    def default_name(self) -> str:
        return self._default or self._config.storage.default_suite

    def register(self, name: str, store: StorageProvider) -> None:
        """
        Register a store under a suite name.

        If a store with the same name exists, it's replaced (not closed).
        """
        if not name:
            raise RegistryError("Suite name must be a non-empty string")
        with self._lock:
            self._stores[name] = store
        logger.debug(f"Registered suite '{name}' -> {store!r}")

    def get(self, name: str | None = None) -> StorageProvider:
        """
        Get the store for a suite, opening it if needed.

        Raises:
            SuiteNotFoundError: If the suite is unknown and auto_open is off
        """
        name = name or self.default_name
        with self._lock:
            store = self._stores.get(name)
            if store is not None:
                return store

            if not self._auto_open:
                available = ", ".join(self._stores) or "none"
                raise SuiteNotFoundError(
                    f"Suite '{name}' is not registered. Available: {available}"
                )

            store = open_store(self._config, name)
            self._stores[name] = store
            logger.debug(f"Opened suite '{name}' -> {store!r}")
            return store

    def has(self, name: str) -> bool:
        """Check if a suite is registered (opened suites included)."""
        return name in self._stores

    def names(self) -> list[str]:
        """List registered suite names."""
        return list(self._stores)

    def set_default(self, name: str) -> None:
        """Set the default suite."""
        if not self.has(name) and not self._auto_open:
            raise RegistryError(f"Cannot set default: suite '{name}' not registered")
        self._default = name

    def remove(self, name: str) -> None:
        """
        Close and drop a suite.

        Whether stored data survives is up to the backend: SQLite keeps
        its rows, an in-memory store discards them on close.
        """
        with self._lock:
            store = self._stores.pop(name, None)
            if self._default == name:
                self._default = None
        if store is not None:
            store.close()
            logger.debug(f"Removed suite '{name}'")

    def close_all(self) -> None:
        """Close every registered suite."""
        with self._lock:
            stores = list(self._stores.values())
            self._stores.clear()
            self._default = None
        for store in stores:
            store.close()


# ━━━ Process-wide Default ━━━

_default_registry: SuiteRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> SuiteRegistry:
    """Get (creating on first call) the process-wide suite registry."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = SuiteRegistry(PrefkitConfig.load())
        return _default_registry


def default_store() -> StorageProvider:
    """The implicit store used when none is passed to a setting."""
    return default_registry().get()


def set_default_registry(registry: SuiteRegistry | None) -> None:
    """Replace the process-wide registry without closing the old one."""
    global _default_registry
    with _default_lock:
        _default_registry = registry


def reset_default_registry() -> None:
    """Close and drop the process-wide registry. Used in testing."""
    global _default_registry
    with _default_lock:
        registry, _default_registry = _default_registry, None
    if registry is not None:
        registry.close_all()
