"""Path index.

The PathIndex owns one StableSlotTable per shared name and translates
identifiers to paths and back. Paths are stored relative to the database
root so moving the whole database only rewrites the root prefix.
"""

import logging
from collections.abc import Iterator
from itertools import count
from pathlib import Path

from filedb.core.errors import (
    IdAlreadyExistsError,
    NoMatchingIdError,
    RootIdUnsupportedError,
)
from filedb.core.slots import StableSlotTable
from filedb.models.ids import ROOT_ID, ItemId

logger = logging.getLogger(__name__)

ROOT_RELATIVE = Path()


class PathIndex:
    """Mapping from identifiers to database-relative paths.

    Not thread-safe: callers sharing one index across threads must guard
    it with a single lock.

    Attributes:
        root: Absolute path of the database root directory.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self._tables: dict[str, StableSlotTable[Path]] = {}
        self._by_path: dict[Path, ItemId] = {}

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, ItemId):
            return False
        if item.is_root:
            return True
        table = self._tables.get(item.name)
        return table is not None and table.get(item.index) is not None

    def rebase(self, root: Path) -> None:
        """Point the index at a new root; relative entries stay valid."""
        logger.debug("Rebasing index from %s to %s", self.root, root)
        self.root = root

    def clear(self) -> None:
        """Drop every entry."""
        self._tables.clear()
        self._by_path.clear()

    # -- lookups ----------------------------------------------------------

    def relative(self, item: ItemId) -> Path:
        """Return the database-relative path of an identifier.

        The root sentinel resolves to the empty relative path.

        Raises:
            NoMatchingIdError: If the name is unknown or the slot is a tombstone.
            IndexOutOfBoundsError: If the index was never assigned for the name.
        """
        if item.is_root:
            return ROOT_RELATIVE
        table = self._tables.get(item.name)
        if table is None:
            raise NoMatchingIdError(item)
        return table.require(item.index)

    def resolve(self, item: ItemId) -> Path:
        """Return the absolute path of an identifier."""
        if item.is_root:
            return self.root
        return self.root / self.relative(item)

    def to_relative(self, path: Path) -> Path | None:
        """Convert an absolute or relative path to a database-relative one.

        Returns:
            Relative path, or None if an absolute path lies outside the root.
        """
        if not path.is_absolute():
            return path
        try:
            return path.relative_to(self.root)
        except ValueError:
            return None

    def reverse_lookup(self, path: Path) -> ItemId | None:
        """Find the identifier stored for a path.

        Args:
            path: Absolute path under the root, or a database-relative path.

        Returns:
            The identifier (the root sentinel for the root itself), or None.
        """
        relative = self.to_relative(path)
        if relative is None:
            return None
        if relative == ROOT_RELATIVE:
            return ROOT_ID
        return self._by_path.get(relative)

    def contains_path(self, path: Path) -> bool:
        """Whether a path (absolute or relative) is indexed or is the root."""
        return self.reverse_lookup(path) is not None

    def entries(self) -> Iterator[tuple[ItemId, Path]]:
        """Yield ``(identifier, relative path)`` in table order."""
        for name, table in list(self._tables.items()):
            for index, path in table.occupied_entries():
                yield ItemId(name, index), path

    def descendants(self, relative: Path) -> list[tuple[ItemId, Path]]:
        """Return every indexed entry strictly below a relative directory path."""
        if relative == ROOT_RELATIVE:
            return list(self.entries())
        return [
            (item, path)
            for item, path in self.entries()
            if path != relative and path.is_relative_to(relative)
        ]

    def ids_by_name(self, name: str) -> list[ItemId]:
        """Return every identifier stored under a name, in slot order."""
        table = self._tables.get(name)
        if table is None:
            return []
        return [ItemId(name, index) for index, _ in table.occupied_entries()]

    def paths_by_name(self, name: str) -> list[Path]:
        """Return every relative path stored under a name, in slot order."""
        table = self._tables.get(name)
        if table is None:
            return []
        return [path for _, path in table.occupied_entries()]

    def ids_by_index(self, index: int) -> list[ItemId]:
        """Return every identifier whose slot index equals ``index``."""
        return [
            ItemId(name, index)
            for name, table in self._tables.items()
            if table.get(index) is not None
        ]

    def next_indices(self, name: str) -> Iterator[int]:
        """Yield the indices upcoming registrations under ``name`` would receive."""
        table = self._tables.get(name)
        if table is None:
            return count()
        return table.free_indices()

    # -- mutations --------------------------------------------------------

    def register(self, name: str, relative: Path) -> ItemId:
        """Store a relative path under a name and return its new identifier.

        Raises:
            RootIdUnsupportedError: If ``name`` is the root sentinel name.
            IdAlreadyExistsError: If the path is already indexed.
        """
        if not name:
            raise RootIdUnsupportedError()
        if relative in self._by_path:
            raise IdAlreadyExistsError(name, relative)

        table = self._tables.get(name)
        if table is None:
            table = StableSlotTable[Path](name)
            self._tables[name] = table

        item = ItemId(name, table.insert(relative))
        self._by_path[relative] = item
        logger.debug("Registered %s -> %s", item, relative)
        return item

    def unregister(self, item: ItemId) -> Path:
        """Tombstone an identifier's slot and return the path it held.

        Raises:
            RootIdUnsupportedError: For the root sentinel.
            NoMatchingIdError: If the identifier is not occupied.
            IndexOutOfBoundsError: If the index was never assigned.
        """
        if item.is_root:
            raise RootIdUnsupportedError()
        table = self._tables.get(item.name)
        if table is None:
            raise NoMatchingIdError(item)

        path = table.remove(item.index)
        del self._by_path[path]
        if table.is_empty():
            del self._tables[item.name]
        logger.debug("Unregistered %s (%s)", item, path)
        return path

    def unregister_descendants(self, relative: Path) -> list[tuple[ItemId, Path]]:
        """Unregister every entry strictly below a relative directory path."""
        removed = self.descendants(relative)
        for item, _ in removed:
            self.unregister(item)
        return removed

    def update_path(self, item: ItemId, relative: Path) -> None:
        """Point an existing identifier at a new relative path.

        Raises:
            RootIdUnsupportedError: For the root sentinel.
            NoMatchingIdError: If the identifier is not occupied.
            IdAlreadyExistsError: If another identifier already holds the path.
        """
        if item.is_root:
            raise RootIdUnsupportedError()
        owner = self._by_path.get(relative)
        if owner is not None and owner != item:
            raise IdAlreadyExistsError(item.name, relative)

        old = self.relative(item)
        self._tables[item.name].set(item.index, relative)
        del self._by_path[old]
        self._by_path[relative] = item

    def move_descendants(self, old: Path, new: Path) -> int:
        """Rewrite the prefix of every entry below ``old`` to ``new``.

        Returns:
            Number of entries updated.
        """
        moved = self.descendants(old)
        # Clear first so intermediate states never collide in the reverse map
        for _, path in moved:
            del self._by_path[path]
        for item, path in moved:
            updated = new / path.relative_to(old)
            self._tables[item.name].set(item.index, updated)
            self._by_path[updated] = item
        return len(moved)
