"""Exception hierarchy for filedb.

Every failure raised by the library derives from DatabaseError so callers
can catch one type. Filesystem and codec failures keep the original
exception chained as ``__cause__``.
"""

from pathlib import Path


class DatabaseError(Exception):
    """Base exception for all database errors."""


class NoMatchingIdError(DatabaseError):
    """Raised when an identifier does not resolve to an occupied slot."""

    def __init__(self, item: object) -> None:
        super().__init__(f"ID '{item}' doesn't point to a known path")
        self.item = item


class IndexOutOfBoundsError(DatabaseError):
    """Raised when an index exceeds the slot count of its name table."""

    def __init__(self, name: str, index: int, length: int) -> None:
        super().__init__(f"Index {index} out of bounds for ID '{name}' (len: {length})")
        self.name = name
        self.index = index
        self.length = length


class IdAlreadyExistsError(DatabaseError):
    """Raised when the target name or path is already occupied."""

    def __init__(self, name: str, path: Path | None = None) -> None:
        detail = f" at '{path}'" if path is not None else ""
        super().__init__(f"ID '{name}' already exists{detail}")
        self.name = name
        self.path = path


class RootIdUnsupportedError(DatabaseError):
    """Raised when the root sentinel is passed where a concrete item is required."""

    def __init__(self) -> None:
        super().__init__("Root database ID cannot be used for this operation")


class InvalidNameError(DatabaseError):
    """Raised when an item name cannot be a single path component."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid item name: '{name}'")
        self.name = name


class PathNotDirectoryError(DatabaseError):
    """Raised when a directory was expected at a path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Path '{path}' doesn't point to a directory")
        self.path = path


class PathNotFileError(DatabaseError):
    """Raised when a file was expected at a path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Path '{path}' doesn't point to a file")
        self.path = path


class DirectoryNotEmptyError(DatabaseError):
    """Raised when deleting a non-empty directory without force."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Directory '{path}' is not empty (use force to delete recursively)")
        self.path = path


class IdenticalSourceDestinationError(DatabaseError):
    """Raised when source and destination resolve to the same path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Source and destination are identical: '{path}'")
        self.path = path


class DestinationInsideSourceError(DatabaseError):
    """Raised when a directory would be moved into its own subtree."""

    def __init__(self, source: Path, destination: Path) -> None:
        super().__init__(f"Destination '{destination}' is inside source '{source}'")
        self.source = source
        self.destination = destination


class ExportDestinationInsideDatabaseError(DatabaseError):
    """Raised when an export destination lies inside, or would replace, the database root."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Export destination overlaps the database: '{path}'")
        self.path = path


class ImportSourceInsideDatabaseError(DatabaseError):
    """Raised when an import source lies inside, or contains, the database root."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Import source overlaps the database: '{path}'")
        self.path = path


class DatabaseIOError(DatabaseError):
    """Raised when an underlying filesystem call fails."""

    def __init__(self, action: str, path: Path, error: OSError) -> None:
        super().__init__(f"Failed to {action} '{path}': {error.strerror or error}")
        self.action = action
        self.path = path
        self.errno = error.errno


class CodecError(DatabaseError):
    """Base exception for content encode/decode failures."""


class JsonCodecError(CodecError):
    """Raised when JSON serialization or deserialization fails."""


class BinaryCodecError(CodecError):
    """Raised when binary (msgpack) serialization or deserialization fails."""


class PathStepOverflowError(DatabaseError):
    """Raised when more path segments are trimmed than the path has."""

    def __init__(self, steps: int, depth: int) -> None:
        super().__init__(f"Steps '{steps}' greater than path length '{depth}'")
        self.steps = steps
        self.depth = depth


class NoClosestDirError(DatabaseError):
    """Raised when no ancestor directory matches the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Directory '{name}' not found along path to executable")
        self.name = name
