# memdb

Building blocks for an in-memory object database: indexers that turn Python
objects and lookup arguments into sortable byte keys, schema definitions with
validation, change records, and a filtering iterator.

## Installation

```
pip install .
```

Install the test extras with `pip install .[test]`, then run the suite with `pytest`.

## Indexers (`memdb.indexers`)

Each indexer reads one attribute of an object (via `getattr`) and builds key
bytes for it. `from_object(obj)` returns the key, or `None` when the object has
no value for the index; multi-value indexers return a list of keys or `None`.
`from_args(*args)` builds the same key from lookup arguments, and indexers that
support prefix lookups also have `prefix_from_args(*args)`. A missing attribute,
a value of the wrong type or wrong arguments raise `IndexerError` (a subclass of
`ValueError`).

```python
from memdb.indexers import IntFieldIndex, StringFieldIndex, StringSliceFieldIndex

class Person:
    def __init__(self, id, name, age, tags):
        self.id, self.name, self.age, self.tags = id, name, age, tags

p = Person("p-1", "Alice", 30, ["admin", "", "ops"])

StringFieldIndex("name", lowercase=True).from_object(p)  # b"alice\x00"
StringFieldIndex("name").prefix_from_args("Al")          # b"Al"
StringSliceFieldIndex("tags").from_object(p)             # [b"admin\x00", b"ops\x00"]
IntFieldIndex("age").from_args(30)                       # b"\x80\x00\x00\x00\x00\x00\x00\x1e"
```

The indexers:

- `StringFieldIndex(field, lowercase=False)` – a string attribute, NUL-terminated.
  `None` and `""` produce no key. Supports prefix lookups.
- `StringSliceFieldIndex(field, lowercase=False)` – one key per non-empty string
  in a list or tuple attribute. Supports prefix lookups.
- `StringMapFieldIndex(field, lowercase=False)` – one `key\0value\0` entry per
  pair of a string-to-string mapping (empty keys are skipped). `from_args` takes
  one or two arguments, but since only key/value entries are indexed, a lookup
  by key alone never matches.
- `IntFieldIndex(field, size=8)` – a signed integer in `size` bytes (1, 2, 4 or
  8), biased so that byte order matches numeric order. Values out of range raise
  `IndexerError`; an unsupported `size` raises `ValueError`.
- `UintFieldIndex(field, size=8)` – an unsigned integer in `size` big-endian bytes.
- `BoolFieldIndex(field)` – a `bool` attribute as `b"\x00"` or `b"\x01"`.
- `UUIDFieldIndex(field)` – a 36-character UUID string stored as its 16 raw
  bytes. `from_args` takes the string or the 16 bytes; `prefix_from_args` also
  accepts a partial UUID of even hex length, or any bytes.
- `FieldSetIndex(field)` – `b"\x01"` if the attribute is set, `b"\x00"` if it is
  `None` or equal to its type's empty value (`""`, `0`, `False`, `[]`, ...).
- `ConditionalIndex(conditional)` – the truth of `conditional(obj)` as one byte;
  an exception from the function is raised as `IndexerError`.

`BoolFieldIndex`, `FieldSetIndex` and `ConditionalIndex` take a single `bool`
in `from_args`.

The abstract bases `Indexer`, `SingleIndexer`, `MultiIndexer` and
`PrefixIndexer` can be subclassed to write your own indexers.

## Compound indexers (`memdb.compound`)

```python
from memdb.compound import CompoundIndex
from memdb.indexers import StringFieldIndex

idx = CompoundIndex([StringFieldIndex("id"), StringFieldIndex("name")])
idx.from_object(p)                # b"p-1\x00Alice\x00"
idx.prefix_from_args("p-1", "A")  # b"p-1\x00A"
```

- `CompoundIndex(indexes, allow_missing=False)` concatenates single-value
  sub-indexers. Without `allow_missing` every sub-indexer must produce a value;
  with it the key stops at the first one that does not. `prefix_from_args`
  requires the last given sub-indexer to support prefix lookups.
- `CompoundMultiIndex(indexes, allow_missing=False)` mixes single- and
  multi-value sub-indexers and produces every combination of their keys. With
  `allow_missing`, each partial prefix is indexed too, so lookups may pass fewer
  arguments. A `StringMapFieldIndex` sub-indexer always takes two arguments;
  `None` as the second one means a key-only lookup. No prefix lookups.

## Schemas (`memdb.schema`)

```python
from memdb.indexers import StringFieldIndex
from memdb.schema import DBSchema, IndexSchema, TableSchema

schema = DBSchema(tables={
    "people": TableSchema(name="people", indexes={
        "id": IndexSchema(name="id", unique=True, indexer=StringFieldIndex("id")),
        "name": IndexSchema(name="name", indexer=StringFieldIndex("name")),
    }),
})
schema.validate()  # raises SchemaError when the schema is invalid
```

Dictionary keys must match the `name` of each table and index. Every table needs
a unique `id` index backed by a single-value indexer, and every index needs a
single- or multi-value indexer. `IndexSchema` also has an `allow_missing` flag.

## Changes and filtering

`memdb.changes.Change(table, before=None, after=None)` records a mutation of one
object, with `created()`, `updated()` and `deleted()` telling which kind it is.

`memdb.filter.FilterIterator(iterable, filter_func)` wraps any iterable and
skips every item for which `filter_func` returns true:

```python
from memdb.filter import FilterIterator

list(FilterIterator(["a", "medium", "very-long"], lambda s: len(s) > 6))  # ["a", "medium"]
```

## What this package does not do

There is no database engine here: no tables that store objects, no
transactions, snapshots or watches, and nothing that inserts, looks up or
deletes objects. The package builds and validates the pieces such an engine is
made from, the index keys, the schema and the change records, and leaves
storing and querying objects to the caller.