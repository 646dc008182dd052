"""Records of mutations made to tables during a transaction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Change:
    """A mutation of one object in a table.

    ``before`` is ``None`` for an insert and ``after`` is ``None`` for a
    delete. ``primary_key`` holds the raw primary index value so repeated
    updates of the same object in one transaction can be collapsed.
    """

    table: str
    before: Any = None
    after: Any = None
    primary_key: bytes = field(default=b"", repr=False)

    def created(self) -> bool:
        """Return True if the change describes a newly inserted object."""
        return self.before is None and self.after is not None

    def updated(self) -> bool:
        """Return True if the change describes an existing object being updated."""
        return self.before is not None and self.after is not None

    def deleted(self) -> bool:
        """Return True if the change describes an existing object being deleted."""
        return self.before is not None and self.after is None


Changes = list[Change]