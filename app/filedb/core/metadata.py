"""Metadata provider for tracked paths.

Reads OS stat information for a resolved path and normalizes it into a
FileInformation. Timestamps the platform does not report are None.
"""

import os
import time
from pathlib import Path

from filedb.models.file_info import FileInformation, FileSize


def _unix_seconds(value: float | None) -> int | None:
    if value is None or value < 0:
        return None
    return int(value)


def _seconds_since(value: float | None, now: float) -> int | None:
    if value is None or value > now:
        return None
    return int(now - value)


def read_file_information(path: Path) -> FileInformation:
    """Read metadata for a file or directory.

    Args:
        path: Absolute path of an existing entry.

    Returns:
        FileInformation describing the entry.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    stat = path.stat()
    is_dir = path.is_dir()
    now = time.time()

    # st_birthtime exists on macOS/BSD and on Windows with Python 3.12+
    created: float | None = getattr(stat, "st_birthtime", None)
    if created is None and os.name == "nt":
        created = stat.st_ctime

    if is_dir:
        name: str | None = path.name or None
        extension = None
    else:
        name = path.stem or None
        extension = path.suffix[1:] or None

    return FileInformation(
        name=name,
        extension=extension,
        size=FileSize.from_bytes(stat.st_size),
        is_dir=is_dir,
        unix_created=_unix_seconds(created),
        time_since_created=_seconds_since(created, now),
        unix_last_opened=_unix_seconds(stat.st_atime),
        time_since_last_opened=_seconds_since(stat.st_atime, now),
        unix_last_modified=_unix_seconds(stat.st_mtime),
        time_since_last_modified=_seconds_since(stat.st_mtime, now),
    )
