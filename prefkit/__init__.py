"""
prefkit — typed key-value settings over a persistent store.

Public API:
    from prefkit import IntSetting, SettingsManager, InMemoryStorage
"""

__version__ = "0.1.0"

# Core
from prefkit.core.config import PrefkitConfig
from prefkit.core.errors import (
    PrefkitError,
    ConfigError,
    StorageError,
    SettingError,
    InvalidKeyError,
    UnsupportedValueError,
)
from prefkit.core.types import StoredValue, ValueKind

# Store
from prefkit.store.base import StorageProvider
from prefkit.store.memory import InMemoryStorage
from prefkit.store.sqlite import SQLiteStorage
from prefkit.store.suites import SuiteRegistry, default_registry, default_store

# Settings
from prefkit.settings.setting import (
    TypedSetting,
    BoolSetting,
    StringSetting,
    IntSetting,
    DoubleSetting,
    FloatSetting,
    DataSetting,
)
from prefkit.settings.manager import SettingsManager

__all__ = [
    # Core
    "PrefkitConfig",
    "PrefkitError",
    "ConfigError",
    "StorageError",
    "SettingError",
    "InvalidKeyError",
    "UnsupportedValueError",
    "StoredValue",
    "ValueKind",
    # Store
    "StorageProvider",
    "InMemoryStorage",
    "SQLiteStorage",
    "SuiteRegistry",
    "default_registry",
    "default_store",
    # Settings
    "TypedSetting",
    "BoolSetting",
    "StringSetting",
    "IntSetting",
    "DoubleSetting",
    "FloatSetting",
    "DataSetting",
    "SettingsManager",
]
