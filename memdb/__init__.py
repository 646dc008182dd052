"""Indexers, compound indexers, schemas, change records and a filtering iterator for an in-memory object database."""

__version__ = "0.1.0"

__all__ = ["changes", "compound", "filter", "indexers", "schema"]