"""Shared test fixtures for prefkit."""

import os

import pytest
from prefkit.core.config import PrefkitConfig, StorageConfig
from prefkit.store.memory import InMemoryStorage
from prefkit.store.sqlite import SQLiteStorage
from prefkit.store.suites import SuiteRegistry, reset_default_registry, set_default_registry


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop any PREFKIT_* variables from the developer environment."""
    for var in [v for v in os.environ if v.startswith("PREFKIT_")]:
        monkeypatch.delenv(var)


@pytest.fixture(autouse=True)
def isolated_default_registry():
    """Point the implicit default store at memory so tests never touch ~/.prefkit."""
    registry = SuiteRegistry(PrefkitConfig(storage=StorageConfig(backend="memory")))
    set_default_registry(registry)
    yield registry
    reset_default_registry()


@pytest.fixture
def store():
    """A fresh in-memory store for the default suite."""
    storage = InMemoryStorage()
    yield storage
    storage.close()


@pytest.fixture
def premium_store():
    """A second, independent in-memory suite."""
    storage = InMemoryStorage(suite="com.example.premium")
    yield storage
    storage.close()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "settings.db"


@pytest.fixture
def sqlite_store(db_path):
    """A fresh SQLite store for the default suite."""
    storage = SQLiteStorage(db_path)
    yield storage
    storage.close()
