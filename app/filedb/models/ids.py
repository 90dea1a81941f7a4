"""Item identifiers.

An ItemId names one slot in one per-name table of the path index.
Several items may share a name (e.g. ``notes.txt`` in two folders);
the index picks which one is meant.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class ItemId:
    """Identifier of a tracked file or directory.

    Attributes:
        name: Shared name key (the item's file or directory name).
        index: Zero-based slot index among items sharing ``name``.
            ``0`` is the default when a caller does not disambiguate.

    The root sentinel (empty name, index 0) names the database root
    itself. It never occupies a slot in any table.
    """

    name: str
    index: int = 0

    def __post_init__(self) -> None:
        """Validate identifier data after initialization."""
        if self.index < 0:
            msg = f"Index must be non-negative, got {self.index}"
            raise ValueError(msg)

    @classmethod
    def id(cls, name: str) -> ItemId:
        """Create an identifier for the first item named ``name``."""
        return cls(name, 0)

    @classmethod
    def with_index(cls, name: str, index: int) -> ItemId:
        """Create an identifier for a specific duplicate of ``name``."""
        return cls(name, index)

    @classmethod
    def database_id(cls) -> ItemId:
        """Return the root sentinel identifier."""
        return ROOT_ID

    @property
    def is_root(self) -> bool:
        """Whether this identifier is the root sentinel."""
        return self.name == ""

    def __str__(self) -> str:
        if self.is_root:
            return "<root>"
        return f"{self.name}#{self.index}"


ROOT_ID = ItemId("", 0)
