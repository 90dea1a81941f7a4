"""Stable slot table.

A StableSlotTable stores the values sharing one name. Each value sits in
a numbered slot; the slot number is the externally visible index and
never shifts while the slot stays occupied. Removing a value leaves a
tombstone behind. Inserting reuses the lowest-numbered tombstone, or
appends a new slot when there is none.
"""

from collections.abc import Iterator
from typing import Generic, TypeVar

from filedb.core.errors import IndexOutOfBoundsError, NoMatchingIdError

V = TypeVar("V")


class StableSlotTable(Generic[V]):
    """Ordered slots of values (or tombstones) for one shared key.

    ``None`` marks a tombstone, so values themselves must not be None.

    Attributes:
        key: Shared name all values of this table are stored under.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self._slots: list[V | None] = []

    def __len__(self) -> int:
        """Number of occupied slots."""
        return sum(1 for value in self._slots if value is not None)

    def __repr__(self) -> str:
        return f"StableSlotTable(key={self.key!r}, slots={self._slots!r})"

    @property
    def slot_count(self) -> int:
        """Number of slots, tombstones included."""
        return len(self._slots)

    def is_empty(self) -> bool:
        """Whether every slot is a tombstone."""
        return all(value is None for value in self._slots)

    def insert(self, value: V) -> int:
        """Store a value and return the index it was assigned.

        Args:
            value: Value to store.

        Returns:
            Lowest tombstoned index if any exists, else the next new index.
        """
        if value is None:
            msg = "Cannot store None in a slot table"
            raise ValueError(msg)

        for index, current in enumerate(self._slots):
            if current is None:
                self._slots[index] = value
                return index

        self._slots.append(value)
        return len(self._slots) - 1

    def remove(self, index: int) -> V:
        """Tombstone a slot and return the value it held.

        Raises:
            IndexOutOfBoundsError: If the index was never assigned.
            NoMatchingIdError: If the slot is already a tombstone.
        """
        value = self.require(index)
        self._slots[index] = None
        return value

    def get(self, index: int) -> V | None:
        """Return the value at ``index``, or None for tombstones and unknown indices."""
        if 0 <= index < len(self._slots):
            return self._slots[index]
        return None

    def set(self, index: int, value: V) -> None:
        """Replace the value of an occupied slot in place.

        Raises:
            IndexOutOfBoundsError: If the index was never assigned.
            NoMatchingIdError: If the slot is a tombstone.
        """
        if value is None:
            msg = "Cannot store None in a slot table"
            raise ValueError(msg)
        self.require(index)
        self._slots[index] = value

    def occupied_entries(self) -> Iterator[tuple[int, V]]:
        """Yield ``(index, value)`` for occupied slots in slot order."""
        for index, value in enumerate(self._slots):
            if value is not None:
                yield index, value

    def free_indices(self) -> Iterator[int]:
        """Yield the indices the next inserts would receive, in order.

        Tombstones come first (lowest first), followed by fresh indices
        past the end. The iterator is infinite.
        """
        for index, value in enumerate(self._slots):
            if value is None:
                yield index
        index = len(self._slots)
        while True:
            yield index
            index += 1

    def require(self, index: int) -> V:
        """Return the value at ``index``, raising if it is not occupied.

        Raises:
            IndexOutOfBoundsError: If the index was never assigned.
            NoMatchingIdError: If the slot is a tombstone.
        """
        if index < 0 or index >= len(self._slots):
            raise IndexOutOfBoundsError(self.key, index, len(self._slots))
        value = self._slots[index]
        if value is None:
            raise NoMatchingIdError(f"{self.key}#{index}")
        return value
