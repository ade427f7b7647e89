"""
TypedSetting — a typed handle on one key in one suite.

A setting binds (key, default, kind) to a store. Every call
round-trips to the store; nothing is cached. Reading a value of
another kind, or no value at all, returns the default.

Usage as a plain object:
    user_age = IntSetting("userAge")
    user_age.set(25)
    user_age.get()            # 25
    user_age.reset()
    user_age.has_stored_value  # False

Usage as a class attribute:
    class AccountPrefs:
        is_logged_in = BoolSetting("isLoggedIn")
        username = StringSetting("username")

    prefs = AccountPrefs()
    prefs.username = "alex"
    AccountPrefs.username.reset()
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar, overload

from prefkit.core.errors import InvalidKeyError, UnsupportedValueError
from prefkit.core.types import StoredValue, ValueKind, coerce
from prefkit.store.base import StorageProvider
from prefkit.store.suites import default_store

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_key(key: Any) -> str:
    """Reject keys that are not non-empty strings."""
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"Setting key must be a non-empty string, got {key!r}")
    return key


class TypedSetting(Generic[T]):
    """
    Type-safe, default-falling-back access to one key.

    The kind is inferred from the default unless given explicitly:
    bool → BOOL, str → TEXT, int → INT, float → DOUBLE, bytes → BYTES.
    Single precision needs kind=ValueKind.FLOAT (or FloatSetting).

    Raises at construction:
        InvalidKeyError: If key is empty or not a string
        UnsupportedValueError: If default is not a valid value of the kind
    """

    value_kind: ClassVar[ValueKind | None] = None

    def __init__(
        self,
        key: str,
        default: T,
        store: StorageProvider | None = None,
        kind: ValueKind | None = None,
    ) -> None:
        self._key = validate_key(key)
        self._kind = kind or self.value_kind or ValueKind.infer(default)
        try:
            self._default: T = coerce(self._kind, default)  # type: ignore[assignment]
        except UnsupportedValueError as e:
            raise UnsupportedValueError(
                f"Default for setting '{key}': {e.message}", key=key
            ) from e
        self._store = store if store is not None else default_store()

    # ━━━ Binding ━━━

    @property
    def key(self) -> str:
        return self._key

    @property
    def default(self) -> T:
        return self._default

    @property
    def kind(self) -> ValueKind:
        return self._kind

    @property
    def store(self) -> StorageProvider:
        return self._store

    # ━━━ Operations ━━━

    def get(self) -> T:
        """The stored value if present and of this kind, else the default."""
        stored = self._store.get(self._key)
        if stored is None:
            return self._default
        if not stored.is_kind(self._kind):
            logger.debug(
                f"Setting '{self._key}' holds {stored.kind.value}, "
                f"expected {self._kind.value}; using default"
            )
            return self._default
        return stored.value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        """Write a value, replacing whatever is stored."""
        try:
            stored = StoredValue.of(value, self._kind)
        except UnsupportedValueError as e:
            raise UnsupportedValueError(
                f"Setting '{self._key}': {e.message}", key=self._key
            ) from e
        self._store.set(self._key, stored)

    def reset(self) -> None:
        """Remove the stored value. No-op if nothing is stored."""
        self._store.delete(self._key)

    @property
    def has_stored_value(self) -> bool:
        """True if the store holds any value for the key, of any kind."""
        return self._store.exists(self._key)

    # ━━━ Descriptor Protocol ━━━

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> TypedSetting[T]: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.get()

    def __set__(self, instance: object, value: T) -> None:
        self.set(value)

    def __delete__(self, instance: object) -> None:
        self.reset()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(key={self._key!r}, default={self._default!r}, "
            f"kind={self._kind.value}, suite={self._store.suite!r})"
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Fixed-kind Settings
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class BoolSetting(TypedSetting[bool]):
    value_kind = ValueKind.BOOL

    def __init__(self, key: str, default: bool = False, store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)


class StringSetting(TypedSetting[str]):
    value_kind = ValueKind.TEXT

    def __init__(self, key: str, default: str = "", store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)


class IntSetting(TypedSetting[int]):
    value_kind = ValueKind.INT

    def __init__(self, key: str, default: int = 0, store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)


class DoubleSetting(TypedSetting[float]):
    value_kind = ValueKind.DOUBLE

    def __init__(self, key: str, default: float = 0.0, store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)


class FloatSetting(TypedSetting[float]):
    """Single-precision float; values are rounded to binary32 on write."""

    value_kind = ValueKind.FLOAT

    def __init__(self, key: str, default: float = 0.0, store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)


class DataSetting(TypedSetting[bytes]):
    value_kind = ValueKind.BYTES

    def __init__(self, key: str, default: bytes = b"", store: StorageProvider | None = None) -> None:
        super().__init__(key, default, store)
