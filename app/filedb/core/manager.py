"""Database manager.

DatabaseManager is the single entry point for mutating a database. Every
mutating call validates identifiers against the PathIndex first, then
performs the filesystem side effect, and only updates the index once
that side effect succeeded. A failed filesystem call leaves the index in
its pre-call state.
"""

import errno
import logging
import os
import shutil
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import IO, Any, BinaryIO

from filedb.core.codecs import decode_binary, decode_json, encode_binary, encode_json
from filedb.core.errors import (
    DatabaseIOError,
    DestinationInsideSourceError,
    DirectoryNotEmptyError,
    ExportDestinationInsideDatabaseError,
    IdAlreadyExistsError,
    IdenticalSourceDestinationError,
    ImportSourceInsideDatabaseError,
    InvalidNameError,
    NoMatchingIdError,
    PathNotDirectoryError,
    PathNotFileError,
    RootIdUnsupportedError,
)
from filedb.core.index import PathIndex
from filedb.core.metadata import read_file_information
from filedb.core.scan import Reconciler, path_exists
from filedb.models.file_info import FileInformation
from filedb.models.ids import ROOT_ID, ItemId
from filedb.models.options import ItemKind, ScanPolicy, TransferMode
from filedb.models.scan_report import ScanReport

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


@contextmanager
def _fs_call(action: str, path: Path) -> Iterator[None]:
    """Translate OSError raised inside the block into DatabaseIOError."""
    try:
        yield
    except OSError as e:
        raise DatabaseIOError(action, path, e) from e


def _missing(path: Path) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))


def _copy_entry(source: Path, destination: Path) -> None:
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination, follow_symlinks=False)


def _remove_entry(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class DatabaseManager:
    """Manages one database directory and the index over its contents.

    Opening an existing directory rebuilds the index from disk with a
    recursive ADD_NEW scan; a missing directory is created empty. The
    index itself is never persisted.

    Not thread-safe: guard a shared manager with a single lock.

    Example:
        >>> manager = DatabaseManager(base_dir, "database")
        >>> notes = manager.write_new(ItemId.id("notes.txt"))
        >>> manager.overwrite_existing(notes, b"hello")
        5

    Args:
        path: Parent directory of the database.
        name: Name of the database directory inside ``path``.
    """

    def __init__(self, path: Path | str, name: str = "database") -> None:
        if not name or Path(name).name != name:
            raise InvalidNameError(name)

        root = Path(path).expanduser().resolve() / name
        self._index = PathIndex(root)
        self._reconciler = Reconciler(self._index)

        if path_exists(root):
            if not root.is_dir():
                raise PathNotDirectoryError(root)
            report = self._reconciler.scan(ROOT_ID, ScanPolicy.ADD_NEW, recursive=True)
            logger.info("Opened database %s (%d items indexed)", root, len(report.added))
        else:
            with _fs_call("create database directory", root):
                root.mkdir()
            logger.info("Created database %s", root)

    @classmethod
    def open(cls, root: Path | str) -> "DatabaseManager":
        """Open (or create) the database whose root directory is ``root``."""
        root = Path(root).expanduser().resolve()
        return cls(root.parent, root.name)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"DatabaseManager(root={str(self.root)!r}, items={len(self._index)})"

    @property
    def root(self) -> Path:
        """Absolute path of the database root directory."""
        return self._index.root

    @property
    def index(self) -> PathIndex:
        """The path index owned by this manager."""
        return self._index

    # =========================================================================
    # Read queries
    # =========================================================================

    def locate_absolute(self, item: ItemId) -> Path:
        """Return the absolute path of an item (the root for the root sentinel)."""
        return self._index.resolve(item)

    def locate_relative(self, item: ItemId) -> Path:
        """Return the database-relative path of an item (empty for the root)."""
        return self._index.relative(item)

    def get_all(self, sorted: bool = False) -> list[ItemId]:
        """Return every tracked identifier.

        Args:
            sorted: Order by relative path instead of table order.
        """
        return self._ids(self._index.entries(), sorted)

    def get_by_parent(self, parent: ItemId = ROOT_ID, sorted: bool = False) -> list[ItemId]:
        """Return tracked items that are direct children of ``parent``.

        Raises:
            PathNotDirectoryError: If ``parent`` is not a directory.
        """
        self._require_directory(parent)
        parent_relative = self._index.relative(parent)
        children = (
            (item, path) for item, path in self._index.entries() if path.parent == parent_relative
        )
        return self._ids(children, sorted)

    def get_parent(self, item: ItemId) -> ItemId:
        """Return the identifier of an item's parent directory.

        Top-level items return the root sentinel.

        Raises:
            RootIdUnsupportedError: For the root sentinel itself.
            NoMatchingIdError: If the parent directory is not indexed.
        """
        relative = self._require_item(item)
        parent = self._index.reverse_lookup(relative.parent)
        if parent is None:
            raise NoMatchingIdError(relative.parent)
        return parent

    def get_ids_by_name(self, name: str, sorted: bool = False) -> list[ItemId]:
        """Return every identifier sharing ``name`` (empty for unknown names)."""
        items = self._index.ids_by_name(name)
        if sorted:
            items.sort(key=self._index.relative)
        return items

    def get_ids_by_index(self, index: int, sorted: bool = False) -> list[ItemId]:
        """Return every identifier whose slot index equals ``index``."""
        items = self._index.ids_by_index(index)
        if sorted:
            items.sort(key=self._index.relative)
        return items

    def get_paths_for_name(self, name: str) -> list[Path]:
        """Return the relative paths stored under ``name``, in slot order."""
        return self._index.paths_by_name(name)

    def get_file_information(self, item: ItemId) -> FileInformation:
        """Read OS metadata for an item."""
        path = self._index.resolve(item)
        with _fs_call("read metadata of", path):
            return read_file_information(path)

    # =========================================================================
    # Content
    # =========================================================================

    def read_existing(self, item: ItemId) -> bytes:
        """Read the raw bytes of a tracked file.

        Raises:
            PathNotFileError: If the item is a directory.
            DatabaseIOError: If reading fails.
        """
        path = self._index.resolve(item)
        if path.is_dir():
            raise PathNotFileError(path)
        with _fs_call("read", path):
            return path.read_bytes()

    def overwrite_existing(self, item: ItemId, data: bytes) -> int:
        """Replace the contents of a tracked file atomically.

        Returns:
            Number of bytes written.
        """
        payload = bytes(data)

        def write(f: IO[bytes]) -> int:
            f.write(payload)
            return len(payload)

        return self._overwrite_atomic(self._index.resolve(item), write)

    def overwrite_existing_from_reader(self, item: ItemId, reader: BinaryIO) -> int:
        """Stream a binary reader into a tracked file atomically.

        The reader is consumed in chunks until EOF.

        Returns:
            Number of bytes written.
        """

        def write(f: IO[bytes]) -> int:
            written = 0
            while chunk := reader.read(_CHUNK_SIZE):
                f.write(chunk)
                written += len(chunk)
            return written

        return self._overwrite_atomic(self._index.resolve(item), write)

    def read_existing_json(self, item: ItemId) -> Any:
        """Read a tracked file and decode it as JSON."""
        return decode_json(self.read_existing(item))

    def overwrite_existing_json(self, item: ItemId, value: Any) -> int:
        """Encode a value as JSON and overwrite a tracked file with it."""
        return self.overwrite_existing(item, encode_json(value))

    def read_existing_binary(self, item: ItemId) -> Any:
        """Read a tracked file and decode it as MessagePack."""
        return decode_binary(self.read_existing(item))

    def overwrite_existing_binary(self, item: ItemId, value: Any) -> int:
        """Encode a value as MessagePack and overwrite a tracked file with it."""
        return self.overwrite_existing(item, encode_binary(value))

    # =========================================================================
    # Mutations
    # =========================================================================

    def write_new(
        self,
        item: ItemId,
        parent: ItemId = ROOT_ID,
        kind: ItemKind | None = None,
    ) -> ItemId:
        """Create an empty file or directory under ``parent`` and index it.

        Without an explicit ``kind``, a name with an extension
        (``notes.txt``) creates a file and any other name a directory.
        ``item.index`` is ignored; the new item receives the lowest free
        index for its name.

        Returns:
            Identifier assigned to the new item.

        Raises:
            RootIdUnsupportedError: If ``item`` is the root sentinel.
            PathNotDirectoryError: If ``parent`` is not a directory.
            IdAlreadyExistsError: If the target path exists or is indexed.
        """
        if item.is_root:
            raise RootIdUnsupportedError()
        self._validate_name(item.name)
        self._require_directory(parent)

        relative = self._index.relative(parent) / item.name
        self._require_free(item.name, relative)

        if kind is None:
            kind = ItemKind.FILE if Path(item.name).suffix else ItemKind.DIRECTORY

        target = self.root / relative
        with _fs_call(f"create {kind.value}", target):
            if kind == ItemKind.DIRECTORY:
                target.mkdir()
            else:
                target.touch(exist_ok=False)

        created = self._index.register(item.name, relative)
        logger.info("Created %s %s at %s", kind.value, created, relative)
        return created

    def rename(self, item: ItemId, new_name: str) -> ItemId:
        """Rename an item inside its parent directory.

        The old identifier is released and the item is registered under
        ``new_name`` with a fresh index. Indexed descendants of a renamed
        directory keep their identifiers.

        Returns:
            The item's new identifier.

        Raises:
            IdAlreadyExistsError: If the sibling path is taken.
        """
        relative = self._require_item(item)
        self._validate_name(new_name)

        new_relative = relative.with_name(new_name)
        if new_relative == relative:
            raise IdenticalSourceDestinationError(self.root / relative)
        self._require_free(new_name, new_relative)

        source = self.root / relative
        with _fs_call("rename", source):
            source.rename(self.root / new_relative)

        self._index.unregister(item)
        self._index.move_descendants(relative, new_relative)
        renamed = self._index.register(new_name, new_relative)
        logger.info("Renamed %s to %s", item, renamed)
        return renamed

    def migrate_item(self, item: ItemId, to_parent: ItemId) -> ItemId:
        """Move an item into another directory, keeping its identifier.

        Returns:
            The (unchanged) identifier of the moved item.

        Raises:
            PathNotDirectoryError: If ``to_parent`` is not a directory.
            IdAlreadyExistsError: If the destination path is taken.
            DestinationInsideSourceError: If a directory would move into itself.
        """
        relative = self._require_item(item)
        self._require_directory(to_parent)

        new_relative = self._index.relative(to_parent) / relative.name
        source = self.root / relative
        destination = self.root / new_relative
        if new_relative == relative:
            raise IdenticalSourceDestinationError(destination)
        if new_relative.is_relative_to(relative):
            raise DestinationInsideSourceError(source, destination)
        self._require_free(relative.name, new_relative)

        with _fs_call("move", source):
            shutil.move(source, destination)

        self._index.update_path(item, new_relative)
        self._index.move_descendants(relative, new_relative)
        logger.info("Moved %s from %s to %s", item, relative, new_relative)
        return item

    def duplicate_item(self, item: ItemId, to_parent: ItemId, new_name: str) -> ItemId:
        """Copy an item (recursively for directories) under a new name.

        Every copied entry is indexed; directories contribute their
        whole copied subtree.

        Returns:
            Identifier of the copy.

        Raises:
            IdAlreadyExistsError: If the destination path is taken.
        """
        relative = self._require_item(item)
        self._validate_name(new_name)
        self._require_directory(to_parent)

        new_relative = self._index.relative(to_parent) / new_name
        source = self.root / relative
        destination = self.root / new_relative
        self._require_free(new_name, new_relative)
        if source.is_dir() and new_relative.is_relative_to(relative):
            raise DestinationInsideSourceError(source, destination)

        with _fs_call("copy", source):
            _copy_entry(source, destination)

        duplicate = self._register_tree(new_relative)
        logger.info("Duplicated %s as %s", item, duplicate)
        return duplicate

    def delete(self, item: ItemId, force: bool = False) -> None:
        """Delete a tracked file or directory.

        Directories are only removed recursively when ``force`` is set.
        Every indexed descendant of a deleted directory is unregistered.

        Raises:
            RootIdUnsupportedError: For the root sentinel (see ``destroy``).
            DirectoryNotEmptyError: If a non-empty directory is deleted
                without ``force``.
            DatabaseIOError: If the filesystem call fails.
        """
        relative = self._require_item(item)
        target = self.root / relative

        if target.is_dir() and not target.is_symlink():
            self._delete_directory(target, force)
        else:
            with _fs_call("delete", target):
                target.unlink()

        descendants = self._index.unregister_descendants(relative)
        self._index.unregister(item)
        logger.info("Deleted %s (%d indexed descendants)", item, len(descendants))

    def destroy(self, force: bool = True) -> None:
        """Delete the database root directory and empty the index."""
        self._delete_directory(self.root, force)
        self._index.clear()
        logger.info("Destroyed database %s", self.root)

    def import_item(
        self,
        source: Path | str,
        to_parent: ItemId = ROOT_ID,
        mode: TransferMode = TransferMode.COPY,
    ) -> ItemId:
        """Bring an external file or directory into the database.

        Returns:
            Identifier of the imported item.

        Raises:
            ImportSourceInsideDatabaseError: If ``source`` is inside the root
                or contains it.
            PathNotDirectoryError: If ``to_parent`` is not a directory.
            IdAlreadyExistsError: If the destination path is taken.
            DatabaseIOError: If ``source`` is missing or copying fails.
        """
        source = Path(source).expanduser().absolute()
        resolved = source.resolve()
        if resolved.is_relative_to(self.root) or self.root.is_relative_to(resolved):
            raise ImportSourceInsideDatabaseError(source)
        self._require_directory(to_parent)

        name = source.name
        self._validate_name(name)
        if not path_exists(source):
            raise DatabaseIOError("import", source, _missing(source))

        new_relative = self._index.relative(to_parent) / name
        self._require_free(name, new_relative)

        destination = self.root / new_relative
        with _fs_call("import", source):
            if mode == TransferMode.MOVE:
                shutil.move(source, destination)
            else:
                _copy_entry(source, destination)

        imported = self._register_tree(new_relative)
        logger.info("Imported %s as %s (%s)", source, imported, mode.value)
        return imported

    def export_item(
        self,
        item: ItemId,
        destination_dir: Path | str,
        mode: TransferMode = TransferMode.COPY,
    ) -> Path:
        """Copy or move an item to a directory outside the database.

        An existing entry with the same name in ``destination_dir`` is
        replaced. MOVE additionally unregisters the item and its indexed
        descendants.

        Returns:
            Absolute path of the exported entry.

        Raises:
            ExportDestinationInsideDatabaseError: If the destination is inside the
                root or the exported entry would replace the root or an ancestor.
            PathNotDirectoryError: If ``destination_dir`` exists but is not a directory.
        """
        relative = self._require_item(item)
        destination_dir = Path(destination_dir).expanduser().absolute()
        if destination_dir.resolve().is_relative_to(self.root):
            raise ExportDestinationInsideDatabaseError(destination_dir)
        if path_exists(destination_dir) and not destination_dir.is_dir():
            raise PathNotDirectoryError(destination_dir)

        source = self.root / relative
        destination = destination_dir / source.name
        if self.root.is_relative_to(destination.resolve()):
            raise ExportDestinationInsideDatabaseError(destination)

        with _fs_call("export", destination):
            destination_dir.mkdir(parents=True, exist_ok=True)
            if path_exists(destination):
                logger.warning("Replacing existing export target %s", destination)
                _remove_entry(destination)
            if mode == TransferMode.MOVE:
                shutil.move(source, destination)
            else:
                _copy_entry(source, destination)

        if mode == TransferMode.MOVE:
            self._index.unregister_descendants(relative)
            self._index.unregister(item)
        logger.info("Exported %s to %s (%s)", item, destination, mode.value)
        return destination

    def migrate_database(self, new_parent: Path | str) -> Path:
        """Move the whole database root under ``new_parent``.

        Only the root prefix changes; every identifier stays valid.

        Returns:
            The new absolute root path.

        Raises:
            PathNotDirectoryError: If ``new_parent`` is not a directory.
            DestinationInsideSourceError: If ``new_parent`` is inside the root.
            DatabaseIOError: If the destination exists or the move fails.
        """
        new_parent = Path(new_parent).expanduser().resolve()
        if not new_parent.is_dir():
            raise PathNotDirectoryError(new_parent)

        old_root = self.root
        new_root = new_parent / old_root.name
        if new_root == old_root:
            raise IdenticalSourceDestinationError(new_root)
        if new_parent.is_relative_to(old_root):
            raise DestinationInsideSourceError(old_root, new_parent)
        if path_exists(new_root):
            raise DatabaseIOError(
                "migrate database to",
                new_root,
                FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(new_root)),
            )

        with _fs_call("migrate database to", new_root):
            shutil.move(old_root, new_root)

        self._index.rebase(new_root)
        logger.info("Migrated database from %s to %s", old_root, new_root)
        return new_root

    def scan_for_changes(
        self,
        scan_from: ItemId = ROOT_ID,
        policy: ScanPolicy = ScanPolicy.ADD_NEW,
        recursive: bool = True,
    ) -> ScanReport:
        """Reconcile the index with the disk below ``scan_from``.

        See Reconciler.scan for the algorithm.
        """
        return self._reconciler.scan(scan_from, policy, recursive)

    # =========================================================================
    # Private helpers
    # =========================================================================

    def _require_item(self, item: ItemId) -> Path:
        """Resolve a concrete (non-root) item to its relative path."""
        if item.is_root:
            raise RootIdUnsupportedError()
        return self._index.relative(item)

    def _require_directory(self, item: ItemId) -> Path:
        path = self._index.resolve(item)
        if not path.is_dir():
            raise PathNotDirectoryError(path)
        return path

    def _require_free(self, name: str, relative: Path) -> None:
        if self._index.contains_path(relative) or path_exists(self.root / relative):
            raise IdAlreadyExistsError(name, relative)

    @staticmethod
    def _validate_name(name: str) -> None:
        if not name or name in (".", "..") or Path(name).name != name or "/" in name:
            raise InvalidNameError(name)
        if os.altsep and os.altsep in name:
            raise InvalidNameError(name)

    def _ids(self, entries: Iterator[tuple[ItemId, Path]], sort: bool) -> list[ItemId]:
        pairs = list(entries)
        if sort:
            pairs.sort(key=lambda pair: pair[1])
        return [item for item, _ in pairs]

    def _register_tree(self, relative: Path) -> ItemId:
        """Index an entry that was just written to disk, plus its subtree."""
        top = self._index.register(relative.name, relative)
        absolute = self.root / relative
        if absolute.is_dir() and not absolute.is_symlink():
            for path in sorted(absolute.rglob("*")):
                if path.is_dir() or path.is_file():
                    self._index.register(path.name, path.relative_to(self.root))
        return top

    def _delete_directory(self, path: Path, force: bool) -> None:
        try:
            if force:
                shutil.rmtree(path)
            else:
                path.rmdir()
        except OSError as e:
            if not force and e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise DirectoryNotEmptyError(path) from e
            raise DatabaseIOError("delete directory", path, e) from e

    def _overwrite_atomic(self, path: Path, write: Callable[[IO[bytes]], int]) -> int:
        """Write to a temporary sibling file, then replace ``path`` with it."""
        if path.is_dir():
            raise PathNotFileError(path)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                written = write(f)
                f.flush()
                os.fsync(f.fileno())
            # os.replace() is atomic on POSIX
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise DatabaseIOError("overwrite", path, e) from e
        except Exception:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d bytes to %s", written, path)
        return written
