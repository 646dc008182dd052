"""Indexers that turn objects and lookup arguments into index keys."""

from __future__ import annotations

import binascii
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

_MISSING = object()
_INT_SIZES = (1, 2, 4, 8)


class IndexerError(ValueError):
    """Raised when an index key cannot be built."""


class Indexer(ABC):
    """Builds exact index keys from lookup arguments."""

    @abstractmethod
    def from_args(self, *args: Any) -> bytes:
        """Return the exact index key for the given arguments."""


class SingleIndexer(Indexer):
    """An indexer producing at most one key per object."""

    @abstractmethod
    def from_object(self, obj: Any) -> bytes | None:
        """Return the object's index key, or None if it has no value."""


class MultiIndexer(Indexer):
    """An indexer producing any number of keys per object."""

    @abstractmethod
    def from_object(self, obj: Any) -> list[bytes] | None:
        """Return the object's index keys, or None if it has no values."""


class PrefixIndexer(ABC):
    """An indexer that supports prefix lookups."""

    @abstractmethod
    def prefix_from_args(self, *args: Any) -> bytes:
        """Return a key prefix matching all keys that start with the arguments."""


def _field_value(obj: Any, name: str) -> Any:
    value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        raise IndexerError(f"field {name!r} for {obj!r} is invalid")
    return value


def _single_arg(args: tuple[Any, ...]) -> Any:
    if len(args) != 1:
        raise IndexerError("must provide only a single argument")
    return args[0]


def _require_str(arg: Any) -> str:
    if not isinstance(arg, str):
        raise IndexerError(f"argument must be a string: {arg!r}")
    return arg


def _terminated(text: str, lowercase: bool) -> bytes:
    if lowercase:
        text = text.lower()
    return text.encode() + b"\x00"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_size(size: int) -> None:
    if size not in _INT_SIZES:
        raise ValueError(f"unsupported int size: {size}")


def _encode_int(value: int, size: int) -> bytes:
    # Biasing by the sign bit makes byte order match numeric order.
    bits = size * 8
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise IndexerError(f"{value} does not fit in a {bits}-bit int")
    return (value - low).to_bytes(size, "big")


def _encode_uint(value: int, size: int) -> bytes:
    bits = size * 8
    if not 0 <= value < (1 << bits):
        raise IndexerError(f"{value} does not fit in a {bits}-bit uint")
    return value.to_bytes(size, "big")


def _from_bool_args(args: tuple[Any, ...]) -> bytes:
    arg = _single_arg(args)
    if not isinstance(arg, bool):
        raise IndexerError(f"argument must be a boolean type: {arg!r}")
    return b"\x01" if arg else b"\x00"


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    try:
        zero = type(value)()
    except Exception:
        return False
    try:
        return bool(value == zero)
    except Exception:
        return False


def _parse_uuid(text: str, enforce_length: bool) -> bytes:
    length = len(text)
    if enforce_length and length != 36:
        raise IndexerError("UUID must be 36 characters")
    if length > 36:
        raise IndexerError(f"invalid UUID length; UUID have 36 characters, got {length}")
    hyphens = text.count("-")
    if hyphens > 4:
        raise IndexerError(f'UUID should have maximum of 4 "-"; got {hyphens}')
    sanitized = text.replace("-", "")
    if len(sanitized) % 2:
        raise IndexerError("input (without hyphens) must be even length")
    try:
        return binascii.unhexlify(sanitized)
    except (binascii.Error, ValueError) as exc:
        raise IndexerError(f"invalid UUID: {exc}") from exc


@dataclass(frozen=True)
class StringFieldIndex(SingleIndexer, PrefixIndexer):
    """Indexes a string attribute; ``None`` and empty strings are not indexed."""

    field: str
    lowercase: bool = False

    def from_object(self, obj: Any) -> bytes | None:
        value = _field_value(obj, self.field)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise IndexerError(f"field {self.field!r} is not a string")
        return _terminated(value, self.lowercase)

    def from_args(self, *args: Any) -> bytes:
        return _terminated(_require_str(_single_arg(args)), self.lowercase)

    def prefix_from_args(self, *args: Any) -> bytes:
        return self.from_args(*args)[:-1]


@dataclass(frozen=True)
class StringSliceFieldIndex(MultiIndexer, PrefixIndexer):
    """Indexes every non-empty string in a list attribute."""

    field: str
    lowercase: bool = False

    def from_object(self, obj: Any) -> list[bytes] | None:
        value = _field_value(obj, self.field)
        if value is None:
            value = []
        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or not all(
            isinstance(item, str) for item in value
        ):
            raise IndexerError(f"field {self.field!r} is not a string slice")
        keys = [_terminated(item, self.lowercase) for item in value if item]
        return keys or None

    def from_args(self, *args: Any) -> bytes:
        return _terminated(_require_str(_single_arg(args)), self.lowercase)

    def prefix_from_args(self, *args: Any) -> bytes:
        return self.from_args(*args)[:-1]


@dataclass(frozen=True)
class StringMapFieldIndex(MultiIndexer):
    """Indexes each key/value pair of a string-to-string mapping attribute.

    Only key/value keys are produced, so a lookup by key alone never matches.
    """

    field: str
    lowercase: bool = False

    def from_object(self, obj: Any) -> list[bytes] | None:
        value = _field_value(obj, self.field)
        if value is None:
            value = {}
        if not isinstance(value, Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        ):
            raise IndexerError(f"field {self.field!r} is not a map of strings to strings")
        keys = [
            _terminated(key, self.lowercase) + _terminated(val, self.lowercase)
            for key, val in value.items()
            if key
        ]
        return keys or None

    def from_args(self, *args: Any) -> bytes:
        if not 1 <= len(args) <= 2:
            raise IndexerError("must provide one or two arguments")
        out = _terminated(_require_str(args[0]), self.lowercase)
        if len(args) == 2:
            out += _terminated(_require_str(args[1]), self.lowercase)
        return out


@dataclass(frozen=True)
class IntFieldIndex(SingleIndexer):
    """Indexes a signed integer attribute of ``size`` bytes, order-preserving."""

    field: str
    size: int = 8

    def __post_init__(self) -> None:
        _check_size(self.size)

    def from_object(self, obj: Any) -> bytes:
        value = _field_value(obj, self.field)
        if not _is_int(value):
            raise IndexerError(
                f"field {self.field!r} is of type {type(value).__name__}; want an int"
            )
        return _encode_int(value, self.size)

    def from_args(self, *args: Any) -> bytes:
        arg = _single_arg(args)
        if arg is None:
            raise IndexerError("None is invalid")
        if not _is_int(arg):
            raise IndexerError(f"arg is of type {type(arg).__name__}; want an int")
        return _encode_int(arg, self.size)


@dataclass(frozen=True)
class UintFieldIndex(SingleIndexer):
    """Indexes an unsigned integer attribute of ``size`` bytes, big-endian."""

    field: str
    size: int = 8

    def __post_init__(self) -> None:
        _check_size(self.size)

    def from_object(self, obj: Any) -> bytes:
        value = _field_value(obj, self.field)
        if not _is_int(value):
            raise IndexerError(
                f"field {self.field!r} is of type {type(value).__name__}; want a uint"
            )
        return _encode_uint(value, self.size)

    def from_args(self, *args: Any) -> bytes:
        arg = _single_arg(args)
        if arg is None:
            raise IndexerError("None is invalid")
        if not _is_int(arg):
            raise IndexerError(f"arg is of type {type(arg).__name__}; want a uint")
        return _encode_uint(arg, self.size)


@dataclass(frozen=True)
class BoolFieldIndex(SingleIndexer):
    """Indexes a boolean attribute as a single 0 or 1 byte."""

    field: str

    def from_object(self, obj: Any) -> bytes:
        value = _field_value(obj, self.field)
        if not isinstance(value, bool):
            raise IndexerError(
                f"field {self.field!r} is of type {type(value).__name__}; want a bool"
            )
        return b"\x01" if value else b"\x00"

    def from_args(self, *args: Any) -> bytes:
        return _from_bool_args(args)


@dataclass(frozen=True)
class UUIDFieldIndex(SingleIndexer, PrefixIndexer):
    """Indexes a UUID string attribute in its compact 16-byte form."""

    field: str

    def from_object(self, obj: Any) -> bytes | None:
        value = _field_value(obj, self.field)
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise IndexerError(f"field {self.field!r} is not a string")
        return _parse_uuid(value, True)

    def from_args(self, *args: Any) -> bytes:
        arg = _single_arg(args)
        if isinstance(arg, str):
            return _parse_uuid(arg, True)
        if isinstance(arg, (bytes, bytearray)):
            if len(arg) != 16:
                raise IndexerError("byte slice must be 16 characters")
            return bytes(arg)
        raise IndexerError(f"argument must be a string or byte slice: {arg!r}")

    def prefix_from_args(self, *args: Any) -> bytes:
        arg = _single_arg(args)
        if isinstance(arg, str):
            return _parse_uuid(arg, False)
        if isinstance(arg, (bytes, bytearray)):
            return bytes(arg)
        raise IndexerError(f"argument must be a string or byte slice: {arg!r}")


@dataclass(frozen=True)
class FieldSetIndex(SingleIndexer):
    """Indexes whether an attribute is set.

    An attribute is unset when it is ``None`` or equal to the value its
    type builds with no arguments (``""``, ``0``, ``False``, ``[]`` ...).
    """

    field: str

    def from_object(self, obj: Any) -> bytes:
        value = _field_value(obj, self.field)
        return b"\x00" if _is_zero(value) else b"\x01"

    def from_args(self, *args: Any) -> bytes:
        return _from_bool_args(args)


@dataclass(frozen=True)
class ConditionalIndex(SingleIndexer):
    """Indexes the boolean result of a user-supplied predicate."""

    conditional: Callable[[Any], bool]

    def from_object(self, obj: Any) -> bytes:
        try:
            result = self.conditional(obj)
        except Exception as exc:
            raise IndexerError(f"conditional index function failed for {obj!r}: {exc}") from exc
        return b"\x01" if result else b"\x00"

    def from_args(self, *args: Any) -> bytes:
        return _from_bool_args(args)