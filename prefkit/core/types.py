"""
prefkit shared types — the tagged value variant at the store boundary.

Stores never see raw Python objects: every value crosses the
StorageProvider interface as a StoredValue carrying its ValueKind.
The accessor layer compares kinds; nothing relies on isinstance
checks against whatever a backend happens to return.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from prefkit.core.errors import UnsupportedValueError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

Primitive = Union[bool, str, int, float, bytes]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Enums
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class ValueKind(str, Enum):
    """The closed set of kinds a setting can hold."""

    BOOL = "bool"
    TEXT = "text"
    INT = "int"  # signed 64-bit
    DOUBLE = "double"  # IEEE-754 binary64
    FLOAT = "float"  # IEEE-754 binary32
    BYTES = "bytes"

    @classmethod
    def infer(cls, value: Any) -> ValueKind:
        """
        Infer the kind of a Python value.

        bool is checked before int since bool subclasses int.
        Python floats map to DOUBLE; single precision must be
        requested explicitly.

        Raises:
            UnsupportedValueError: If the value is not a supported primitive
        """
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.DOUBLE
        if isinstance(value, str):
            return cls.TEXT
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls.BYTES
        raise UnsupportedValueError(
            f"Unsupported value type '{type(value).__name__}'. "
            f"Supported: {', '.join(k.value for k in cls)}"
        )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Stored Value
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True, slots=True)
class StoredValue:
    """A value as held by a store, tagged with its kind."""

    kind: ValueKind
    value: Primitive

    @staticmethod
    def of(value: Any, kind: ValueKind | None = None) -> StoredValue:
        """
        Wrap a Python value, validating it against the kind.

        When kind is None it is inferred from the value.

        Raises:
            UnsupportedValueError: If the value cannot be held as that kind
        """
        if kind is None:
            kind = ValueKind.infer(value)
        return StoredValue(kind=kind, value=coerce(kind, value))

    @staticmethod
    def boolean(value: bool) -> StoredValue:
        return StoredValue.of(value, ValueKind.BOOL)

    @staticmethod
    def text(value: str) -> StoredValue:
        return StoredValue.of(value, ValueKind.TEXT)

    @staticmethod
    def integer(value: int) -> StoredValue:
        return StoredValue.of(value, ValueKind.INT)

    @staticmethod
    def double(value: float) -> StoredValue:
        return StoredValue.of(value, ValueKind.DOUBLE)

    @staticmethod
    def single(value: float) -> StoredValue:
        return StoredValue.of(value, ValueKind.FLOAT)

    @staticmethod
    def data(value: bytes) -> StoredValue:
        return StoredValue.of(value, ValueKind.BYTES)

    def is_kind(self, kind: ValueKind) -> bool:
        return self.kind is kind


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE-754 single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def coerce(kind: ValueKind, value: Any) -> Primitive:
    """
    Normalize a Python value into the canonical form for a kind.

    Ints are accepted for DOUBLE and FLOAT. bool is never accepted
    as a number. TEXT must be encodable as UTF-8, so lone surrogates
    are rejected.

    Raises:
        UnsupportedValueError: If the value does not fit the kind
    """
    if kind is ValueKind.BOOL and isinstance(value, bool):
        return value
    if kind is ValueKind.TEXT and isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise UnsupportedValueError(f"Text is not valid UTF-8: {e}") from e
        return value
    if kind is ValueKind.INT and isinstance(value, int) and not isinstance(value, bool):
        if not INT64_MIN <= value <= INT64_MAX:
            raise UnsupportedValueError(
                f"Integer {value} is outside the signed 64-bit range"
            )
        return value
    if kind in (ValueKind.DOUBLE, ValueKind.FLOAT) and isinstance(value, (int, float)):
        if isinstance(value, bool):
            raise UnsupportedValueError(f"Expected {kind.value}, got bool")
        if kind is ValueKind.FLOAT:
            try:
                return to_float32(float(value))
            except OverflowError as e:
                raise UnsupportedValueError(
                    f"{value} does not fit in single precision"
                ) from e
        return float(value)
    if kind is ValueKind.BYTES and isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise UnsupportedValueError(
        f"Expected {kind.value}, got {type(value).__name__}"
    )
