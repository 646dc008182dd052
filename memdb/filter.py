"""Iterator wrapper that drops results matching a predicate."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any


class FilterIterator:
    """Yields the results of an iterable for which ``filter_func`` is false.

    ``filter_func`` returns True for results that should be filtered out.
    """

    def __init__(self, iterable: Iterable[Any], filter_func: Callable[[Any], bool]) -> None:
        self._iter = iter(iterable)
        self._filter = filter_func

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        while True:
            value = next(self._iter)
            if not self._filter(value):
                return value