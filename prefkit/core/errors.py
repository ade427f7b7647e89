"""
prefkit exception hierarchy.

Every error in the package inherits from PrefkitError.
Each layer has its own error class for targeted catching.

Type mismatches and absent keys are never errors: the accessor
layer resolves both to the caller's default.

Usage:
    try:
        store.set("theme", StoredValue.text("dark"))
    except StorageError as e:
        # Backend failure (disk, corruption, closed connection)
    except PrefkitError as e:
        # Any prefkit error
"""


class PrefkitError(Exception):
    """Base exception for all prefkit errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ━━━ Layer 0: Core Errors ━━━


class ConfigError(PrefkitError):
    """Configuration is invalid, missing, or malformed."""

    pass


class RegistryError(PrefkitError):
    """Suite lookup or registration conflict."""

    pass


class SuiteNotFoundError(RegistryError):
    """Requested suite is not registered and cannot be opened."""

    pass


# ━━━ Layer 1: Storage Errors ━━━


class StorageError(PrefkitError):
    """Storage backend failure — database errors, corruption, etc."""

    def __init__(
        self,
        message: str,
        suite: str = "",
        key: str = "",
        details: dict | None = None,
    ):
        self.suite = suite
        self.key = key
        super().__init__(message, details)


# ━━━ Layer 2: Setting Errors ━━━


class SettingError(PrefkitError):
    """A setting was declared or written with invalid arguments."""

    def __init__(self, message: str, key: str = "", details: dict | None = None):
        self.key = key
        super().__init__(message, details)


class InvalidKeyError(SettingError, ValueError):
    """Key is empty or not a string."""

    pass


class UnsupportedValueError(SettingError, TypeError):
    """Value is not one of the supported kinds, or not the declared kind."""

    pass
