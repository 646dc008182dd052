"""Schema definitions for databases, tables and indexes."""

from __future__ import annotations

from dataclasses import dataclass, field

from memdb.indexers import Indexer, MultiIndexer, SingleIndexer


class SchemaError(ValueError):
    """Raised when a schema is invalid."""


@dataclass
class IndexSchema:
    """How a table is queried through one index.

    ``allow_missing`` skips objects for which the indexer produces no value.
    """

    name: str = ""
    indexer: Indexer | None = None
    unique: bool = False
    allow_missing: bool = False

    def validate(self) -> None:
        """Raise SchemaError if the index schema is invalid."""
        if not self.name:
            raise SchemaError("missing index name")
        if self.indexer is None:
            raise SchemaError(f"missing index function for '{self.name}'")
        if not isinstance(self.indexer, (SingleIndexer, MultiIndexer)):
            raise SchemaError(
                f"indexer for '{self.name}' must be a SingleIndexer or MultiIndexer"
            )


@dataclass
class TableSchema:
    """A table and its indexes, keyed by index name; an ``id`` index is required."""

    name: str = ""
    indexes: dict[str, IndexSchema] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise SchemaError if the table schema is invalid."""
        if not self.name:
            raise SchemaError("missing table name")
        if not self.indexes:
            raise SchemaError(f"missing table indexes for '{self.name}'")
        primary = self.indexes.get("id")
        if primary is None:
            raise SchemaError("must have id index")
        if not primary.unique:
            raise SchemaError("id index must be unique")
        if not isinstance(primary.indexer, SingleIndexer):
            raise SchemaError("id index must be a SingleIndexer")
        for name, index in self.indexes.items():
            if name != index.name:
                raise SchemaError(f"index name mis-match for '{name}'")
            try:
                index.validate()
            except SchemaError as exc:
                raise SchemaError(f'index "{name}": {exc}') from exc


@dataclass
class DBSchema:
    """The tables of a database, keyed by table name."""

    tables: dict[str, TableSchema] = field(default_factory=dict)

    def validate(self) -> None:
        """Raise SchemaError if the database schema is invalid."""
        if not self.tables:
            raise SchemaError("schema has no tables defined")
        for name, table in self.tables.items():
            if name != table.name:
                raise SchemaError(f"table name mis-match for '{name}'")
            try:
                table.validate()
            except SchemaError as exc:
                raise SchemaError(f'table "{name}": {exc}') from exc