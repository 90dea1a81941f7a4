"""Option enums accepted by DatabaseManager operations."""

from enum import Enum


class ScanPolicy(str, Enum):
    """How ``scan_for_changes`` treats entries found on disk but not indexed.

    Tracked entries missing from disk are evicted under every policy.

    Attributes:
        DETECT_ONLY: Report untracked entries, leave the index unchanged.
        ADD_NEW: Report untracked entries and register them.
        REMOVE_NEW: Delete untracked entries from disk, never index them.
    """

    DETECT_ONLY = "detect_only"
    ADD_NEW = "add_new"
    REMOVE_NEW = "remove_new"


class TransferMode(str, Enum):
    """Whether import/export copies the source or moves it.

    Attributes:
        COPY: Leave the source in place.
        MOVE: Remove the source once the destination is written.
    """

    COPY = "copy"
    MOVE = "move"


class ItemKind(str, Enum):
    """Kind of entry ``write_new`` creates.

    Attributes:
        FILE: Empty regular file.
        DIRECTORY: Empty directory.
    """

    FILE = "file"
    DIRECTORY = "directory"
