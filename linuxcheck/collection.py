"""A small counter of hashable string keys that remembers insertion order."""

from __future__ import annotations

from typing import Iterator


class Counter:
    """Counts occurrences of string keys.

    ``elements`` is the number of insertions, ``unique`` the number of
    distinct keys.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self.elements = 0

    @property
    def unique(self) -> int:
        return len(self._counts)

    def put(self, key: str, increment: int = 1) -> int:
        """Add ``increment`` to the count of ``key`` and return the new count."""
        count = self._counts.get(key, 0) + increment
        self._counts[key] = count
        self.elements += 1
        return count

    def lookup(self, key: str) -> int | None:
        """Return the count of ``key``, or None if it was never inserted."""
        return self._counts.get(key)

    def keys(self) -> list[str]:
        """Return the distinct keys in the order they were first inserted."""
        return list(self._counts)

    def items(self) -> list[tuple[str, int]]:
        """Return (key, count) pairs in insertion order."""
        return list(self._counts.items())

    def __len__(self) -> int:
        return self.unique

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)