import string
import uuid
from dataclasses import dataclass, field

import pytest
from hypothesis import given
from hypothesis import strategies as st

from memdb.compound import CompoundIndex, CompoundMultiIndex
from memdb.indexers import (
    Indexer,
    IndexerError,
    IntFieldIndex,
    StringFieldIndex,
    StringMapFieldIndex,
    StringSliceFieldIndex,
    UUIDFieldIndex,
)

UUID_TEXT = "20d8c509-3940-4e1a-9b2c-0f1e2d3c4b5a"
UUID_BYTES = uuid.UUID(UUID_TEXT).bytes


@dataclass
class Record:
    id: str = ""
    foo: str = ""
    baz: str = ""
    empty: str = ""
    bar: int = 0
    qux: list = field(default_factory=list)
    qux_empty: list = field(default_factory=list)
    zod: dict = field(default_factory=dict)


class PlainIndexer(Indexer):
    def from_args(self, *args):
        return b"x"


def sample_object():
    return Record(
        id="my-cool-obj",
        foo="Testing",
        baz="yep",
        bar=42,
        qux=["Test", "Test2"],
        zod={"Role": "Server"},
    )


def test_compound_from_object_all_fields():
    indexer = CompoundIndex(
        [StringFieldIndex("id"), StringFieldIndex("foo"), StringFieldIndex("baz")]
    )
    assert indexer.from_object(sample_object()) == b"my-cool-obj\x00Testing\x00yep\x00"


def test_compound_from_object_allow_missing():
    indexes = [
        StringFieldIndex("id"),
        StringFieldIndex("foo", lowercase=True),
        StringFieldIndex("empty"),
    ]
    missing = CompoundIndex(indexes, allow_missing=True)
    assert missing.from_object(sample_object()) == b"my-cool-obj\x00testing\x00"

    strict = CompoundIndex(indexes, allow_missing=False)
    assert strict.from_object(sample_object()) is None


def test_compound_from_object_wraps_errors():
    indexer = CompoundIndex([StringFieldIndex("id"), StringFieldIndex("na")])
    with pytest.raises(IndexerError, match="sub-index 1 error"):
        indexer.from_object(sample_object())


def test_compound_from_object_requires_single_indexers():
    indexer = CompoundIndex([StringSliceFieldIndex("qux")])
    with pytest.raises(IndexerError, match="must be a SingleIndexer"):
        indexer.from_object(sample_object())


def test_compound_from_args():
    indexer = CompoundIndex(
        [StringFieldIndex("id"), StringFieldIndex("foo"), StringFieldIndex("baz")]
    )
    with pytest.raises(IndexerError):
        indexer.from_args()
    with pytest.raises(IndexerError, match="sub-index 0"):
        indexer.from_args(42, 42, 42)
    assert indexer.from_args("foo", "bar", "baz") == b"foo\x00bar\x00baz\x00"


def test_compound_prefix_from_args():
    indexer = CompoundIndex(
        [UUIDFieldIndex("id"), StringFieldIndex("foo"), StringFieldIndex("baz")]
    )
    assert indexer.prefix_from_args() == b""

    val = indexer.prefix_from_args(UUID_TEXT, "foo")
    assert val[:16] == UUID_BYTES
    assert val[16:] == b"foo"

    val = indexer.prefix_from_args(UUID_TEXT, "foo", "ba")
    assert val[:16] == UUID_BYTES
    assert val[16:] == b"foo\x00ba"

    with pytest.raises(IndexerError, match="more arguments"):
        indexer.prefix_from_args(UUID_TEXT, "foo", "bar", "nope")


def test_compound_prefix_requires_prefix_indexer():
    indexer = CompoundIndex([StringFieldIndex("foo"), IntFieldIndex("bar")])
    assert indexer.prefix_from_args("a") == b"a"
    with pytest.raises(IndexerError, match="does not support prefix scanning"):
        indexer.prefix_from_args("a", 1)


def test_compound_multi_from_object():
    obj = Record(
        id="obj1-uuid",
        foo="Foo1",
        baz="yep",
        qux=["Test", "Test2"],
        qux_empty=["Qux", "Qux2"],
    )
    indexer = CompoundMultiIndex(
        [StringFieldIndex("foo"), StringSliceFieldIndex("qux"), StringSliceFieldIndex("qux_empty")]
    )
    assert indexer.from_object(obj) == [
        b"Foo1\x00Test\x00Qux\x00",
        b"Foo1\x00Test\x00Qux2\x00",
        b"Foo1\x00Test2\x00Qux\x00",
        b"Foo1\x00Test2\x00Qux2\x00",
    ]


def test_compound_multi_from_object_allow_missing_adds_prefixes():
    obj = Record(foo="Foo1", qux=["a", "b"])
    indexer = CompoundMultiIndex(
        [StringFieldIndex("foo"), StringSliceFieldIndex("qux"), StringSliceFieldIndex("qux_empty")],
        allow_missing=True,
    )
    assert indexer.from_object(obj) == [b"Foo1\x00", b"Foo1\x00a\x00", b"Foo1\x00b\x00"]


def test_compound_multi_from_object_missing_not_allowed():
    obj = Record(foo="Foo1", qux=["a"])
    indexer = CompoundMultiIndex([StringFieldIndex("foo"), StringSliceFieldIndex("qux_empty")])
    assert indexer.from_object(obj) is None


def test_compound_multi_from_object_errors():
    obj = sample_object()
    with pytest.raises(IndexerError, match="single sub-index 0 error"):
        CompoundMultiIndex([StringFieldIndex("na")]).from_object(obj)
    with pytest.raises(IndexerError, match="multi sub-index 1 error"):
        CompoundMultiIndex([StringFieldIndex("foo"), StringSliceFieldIndex("na")]).from_object(obj)
    with pytest.raises(IndexerError, match="does not satisfy"):
        CompoundMultiIndex([PlainIndexer()]).from_object(obj)


PERMUTATIONS = [
    ["foo", "qux", "qux_empty"],
    ["foo", "qux_empty", "qux"],
    ["qux_empty", "qux", "foo"],
    ["qux_empty", "foo", "qux"],
    ["qux", "qux_empty", "foo"],
    ["qux", "foo", "qux_empty"],
]


def _indexer_for(fields):
    return CompoundMultiIndex(
        [StringFieldIndex(name) if name == "foo" else StringSliceFieldIndex(name) for name in fields],
        allow_missing=True,
    )


_words = st.text(alphabet=string.ascii_letters + string.digits, max_size=6)


@given(
    foo=_words,
    qux=st.lists(_words, unique=True, max_size=4),
    qux_empty=st.lists(_words, unique=True, max_size=4),
)
def test_compound_multi_keys_are_unique(foo, qux, qux_empty):
    obj = Record(foo=foo, qux=qux, qux_empty=qux_empty)
    for fields in PERMUTATIONS:
        vals = _indexer_for(fields).from_object(obj)
        assert vals is not None
        assert len(set(vals)) == len(vals)


def test_compound_multi_from_args_with_string_map():
    indexer = CompoundMultiIndex([StringFieldIndex("foo"), StringMapFieldIndex("zod")])
    assert indexer.from_args("a", "Role", "Server") == b"a\x00Role\x00Server\x00"
    assert indexer.from_args("a", "Role", None) == b"a\x00Role\x00"
    with pytest.raises(IndexerError, match="invalid number of arguments"):
        indexer.from_args("a", "Role")
    with pytest.raises(IndexerError, match="does not equal"):
        indexer.from_args("a")


def test_compound_multi_from_args_allow_missing():
    indexer = CompoundMultiIndex(
        [StringFieldIndex("foo"), StringMapFieldIndex("zod")], allow_missing=True
    )
    assert indexer.from_args("a") == b"a\x00"
    assert indexer.from_args() == b""
    with pytest.raises(IndexerError, match="too many arguments"):
        indexer.from_args("a", "b", "c", "d")


def test_compound_multi_from_args_wraps_errors():
    indexer = CompoundMultiIndex([StringFieldIndex("foo"), StringMapFieldIndex("zod")])
    with pytest.raises(IndexerError, match="sub-index 0 error"):
        indexer.from_args(42, "Role", "Server")