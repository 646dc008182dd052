"""Indexers that combine several sub-indexers into one key."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from memdb.indexers import (
    Indexer,
    IndexerError,
    MultiIndexer,
    PrefixIndexer,
    SingleIndexer,
    StringMapFieldIndex,
)


@contextmanager
def _sub_index_errors(label: str) -> Iterator[None]:
    try:
        yield
    except IndexerError as exc:
        raise IndexerError(f"{label} error: {exc}") from exc


@dataclass
class CompoundIndex(SingleIndexer, PrefixIndexer):
    """Concatenates the keys of several single-value sub-indexers.

    With ``allow_missing`` the key is built from the sub-indexers up to the
    first one that has no value; otherwise every sub-indexer must produce one.
    Each sub-indexer takes exactly one argument.
    """

    indexes: list[Indexer] = field(default_factory=list)
    allow_missing: bool = False

    def from_object(self, obj: Any) -> bytes | None:
        out = bytearray()
        for i, idx in enumerate(self.indexes):
            if not isinstance(idx, SingleIndexer):
                raise IndexerError(f"sub-index {i} error: sub-index must be a SingleIndexer")
            with _sub_index_errors(f"sub-index {i}"):
                value = idx.from_object(obj)
            if value is None:
                if self.allow_missing:
                    break
                return None
            out += value
        return bytes(out)

    def from_args(self, *args: Any) -> bytes:
        if len(args) != len(self.indexes):
            raise IndexerError("non-equivalent argument count and index fields")
        out = bytearray()
        for i, (idx, arg) in enumerate(zip(self.indexes, args)):
            with _sub_index_errors(f"sub-index {i}"):
                out += idx.from_args(arg)
        return bytes(out)

    def prefix_from_args(self, *args: Any) -> bytes:
        if len(args) > len(self.indexes):
            raise IndexerError("more arguments than index fields")
        out = bytearray()
        last = len(args) - 1
        for i, (idx, arg) in enumerate(zip(self.indexes, args)):
            if i < last:
                with _sub_index_errors(f"sub-index {i}"):
                    out += idx.from_args(arg)
                continue
            if not isinstance(idx, PrefixIndexer):
                raise IndexerError(f"sub-index {i} does not support prefix scanning")
            with _sub_index_errors(f"sub-index {i}"):
                out += idx.prefix_from_args(arg)
        return bytes(out)


@dataclass
class CompoundMultiIndex(MultiIndexer):
    """Combines single- and multi-value sub-indexers into every key combination.

    With ``allow_missing`` the keys stop at the first sub-indexer without a
    value, and every partial prefix is indexed as well, so a lookup may pass
    fewer arguments. A ``StringMapFieldIndex`` always takes two arguments;
    a ``None`` second argument means a key-only lookup. Prefix lookups are
    not supported.
    """

    indexes: list[Indexer] = field(default_factory=list)
    allow_missing: bool = False

    def from_object(self, obj: Any) -> list[bytes] | None:
        levels: list[list[bytes]] = []
        for i, idx in enumerate(self.indexes):
            values: list[bytes] | None
            if isinstance(idx, SingleIndexer):
                with _sub_index_errors(f"single sub-index {i}"):
                    value = idx.from_object(obj)
                values = None if value is None else [value]
            elif isinstance(idx, MultiIndexer):
                with _sub_index_errors(f"multi sub-index {i}"):
                    values = idx.from_object(obj)
            else:
                raise IndexerError(
                    f"sub-index {i} does not satisfy either SingleIndexer or MultiIndexer"
                )
            if values is None:
                if self.allow_missing:
                    break
                return None
            levels.append(values)
        return list(self._expand(levels, b""))

    def _expand(self, levels: list[list[bytes]], prefix: bytes) -> Iterator[bytes]:
        if not levels:
            return
        head, rest = levels[0], levels[1:]
        if not rest:
            for value in head:
                yield prefix + value
            return
        for value in head:
            next_prefix = prefix + value
            if self.allow_missing:
                yield next_prefix
            yield from self._expand(rest, next_prefix)

    def from_args(self, *args: Any) -> bytes:
        string_maps = 0
        consumed = 0
        for idx in self.indexes:
            if consumed >= len(args):
                break
            if isinstance(idx, StringMapFieldIndex):
                if consumed + 1 >= len(args):
                    raise IndexerError("invalid number of arguments")
                string_maps += 1
                consumed += 2
            else:
                consumed += 1

        expected = len(self.indexes) + string_maps
        if self.allow_missing:
            if len(args) > expected:
                raise IndexerError("too many arguments")
        elif len(args) != expected:
            raise IndexerError("number of arguments does not equal number of indexers")

        pending = list(args)
        out = bytearray()
        for i, idx in enumerate(self.indexes):
            if not pending:
                break
            with _sub_index_errors(f"sub-index {i}"):
                if isinstance(idx, StringMapFieldIndex):
                    key, value = pending[0], pending[1]
                    del pending[:2]
                    out += idx.from_args(key) if value is None else idx.from_args(key, value)
                else:
                    out += idx.from_args(pending.pop(0))
        return bytes(out)