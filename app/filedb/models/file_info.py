"""File metadata models.

FileSize normalizes a raw byte count into the largest decimal unit
(powers of 1000) that keeps the value at or above one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

_UNIT_FACTOR = 1000


class FileSizeUnit(IntEnum):
    """Decimal size units, ordered by magnitude."""

    BYTE = 0
    KILOBYTE = 1
    MEGABYTE = 2
    GIGABYTE = 3
    TERABYTE = 4
    PETABYTE = 5


@dataclass(frozen=True, slots=True)
class FileSize:
    """File size value paired with a unit.

    Attributes:
        size: Integer size expressed in ``unit`` (truncated).
        unit: Unit the size is expressed in.
    """

    size: int = 0
    unit: FileSizeUnit = FileSizeUnit.BYTE

    @classmethod
    def from_bytes(cls, num_bytes: int) -> FileSize:
        """Build a FileSize from raw bytes using automatic unit selection.

        Args:
            num_bytes: Raw byte count.

        Returns:
            FileSize in the largest unit where the value is at least 1
            (bytes for anything below 1000, petabytes at most).
        """
        if num_bytes < 0:
            msg = f"Size cannot be negative, got {num_bytes}"
            raise ValueError(msg)

        unit = FileSizeUnit.BYTE
        while unit < FileSizeUnit.PETABYTE and num_bytes >= _UNIT_FACTOR ** (unit + 1):
            unit = FileSizeUnit(unit + 1)
        return cls(num_bytes // _UNIT_FACTOR**unit, unit)

    def as_unit(self, unit: FileSizeUnit) -> FileSize:
        """Return a copy of this size converted to another unit.

        Converting to a smaller unit multiplies, converting to a larger
        unit truncates.
        """
        difference = self.unit - unit
        if difference > 0:
            return FileSize(self.size * _UNIT_FACTOR**difference, unit)
        if difference < 0:
            return FileSize(self.size // _UNIT_FACTOR**-difference, unit)
        return FileSize(self.size, unit)

    def unit_as_string(self) -> str:
        """Human-readable unit name, pluralized unless the size is exactly 1."""
        name = self.unit.name.capitalize()
        return name if self.size == 1 else f"{name}s"

    def __str__(self) -> str:
        return f"{self.size} {self.unit_as_string()}"


@dataclass(frozen=True, slots=True)
class FileInformation:
    """Metadata of a tracked file or directory.

    Timestamps are Unix seconds; ``*_since_*`` values are ages in seconds
    relative to when the information was read. Any of them is None when
    the platform does not report it.

    Attributes:
        name: File stem for files, full name for directories.
        extension: File extension without the dot, None for directories.
        size: Normalized size as reported by the OS.
        is_dir: Whether the entry is a directory.
        unix_created: Creation time.
        time_since_created: Age since creation.
        unix_last_opened: Last access time.
        time_since_last_opened: Age since last access.
        unix_last_modified: Last modification time.
        time_since_last_modified: Age since last modification.
    """

    name: str | None
    extension: str | None
    size: FileSize
    is_dir: bool = False
    unix_created: int | None = None
    time_since_created: int | None = None
    unix_last_opened: int | None = None
    time_since_last_opened: int | None = None
    unix_last_modified: int | None = None
    time_since_last_modified: int | None = None
