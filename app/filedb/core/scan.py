"""Reconciliation of the path index against the filesystem.

The Reconciler walks a scope on disk, diffs it against the PathIndex and
applies a ScanPolicy to the discrepancies. Tracked entries that vanished
from disk are always evicted; what happens to untracked entries depends
on the policy.
"""

import logging
import shutil
from collections.abc import Iterator
from pathlib import Path

from filedb.core.errors import DatabaseIOError, PathNotDirectoryError
from filedb.core.index import ROOT_RELATIVE, PathIndex
from filedb.models.ids import ItemId
from filedb.models.options import ScanPolicy
from filedb.models.scan_report import ChangeKind, ExternalChange, ScanReport

logger = logging.getLogger(__name__)


def path_exists(path: Path) -> bool:
    """Whether something (dangling symlinks included) exists at ``path``."""
    return path.exists() or path.is_symlink()


def is_in_scope(path: Path, scope: Path, recursive: bool) -> bool:
    """Whether a relative path falls inside a scan scope.

    Args:
        path: Database-relative path of an entry.
        scope: Database-relative path of the scope directory.
        recursive: If False, only direct children of ``scope`` are in scope.
    """
    if path == scope:
        return False
    if not recursive:
        return path.parent == scope
    return scope == ROOT_RELATIVE or path.is_relative_to(scope)


class Reconciler:
    """Resynchronizes a PathIndex with the real filesystem.

    Args:
        index: Index to reconcile. It is mutated in place.
    """

    def __init__(self, index: PathIndex) -> None:
        self._index = index

    def scan(self, scan_from: ItemId, policy: ScanPolicy, recursive: bool) -> ScanReport:
        """Diff the index against disk below ``scan_from`` and apply ``policy``.

        Steps:
        1. Walk the scope on disk (sorted by name).
        2. Evict every tracked entry in scope whose path no longer exists,
           together with its indexed descendants, then split the walked
           entries into tracked (unchanged) and untracked.
        3. Report, register or delete the untracked entries per policy.

        Args:
            scan_from: Directory item (or the root sentinel) to scan from.
            policy: What to do with untracked entries.
            recursive: Scan the whole subtree instead of direct children only.

        Returns:
            ScanReport describing every discrepancy found.

        Raises:
            NoMatchingIdError: If ``scan_from`` is not indexed.
            PathNotDirectoryError: If ``scan_from`` is not a directory.
            DatabaseIOError: If reading a directory or deleting an entry fails.
        """
        scope_absolute = self._index.resolve(scan_from)
        if not scope_absolute.is_dir():
            raise PathNotDirectoryError(scope_absolute)
        scope = self._index.relative(scan_from)

        logger.debug(
            "Scanning %s (policy=%s, recursive=%s)", scope_absolute, policy.value, recursive
        )

        # A failed walk must leave the index untouched
        on_disk = list(self._walk(scope_absolute, recursive))
        removed = self._evict_missing(scope, recursive)

        untracked: list[Path] = []
        unchanged_count = 0
        for relative in on_disk:
            if self._index.contains_path(relative):
                unchanged_count += 1
            else:
                untracked.append(relative)

        added: list[ExternalChange] = []
        discarded: list[ExternalChange] = []
        if policy == ScanPolicy.DETECT_ONLY:
            added = self._preview(untracked, ChangeKind.ADDED)
        elif policy == ScanPolicy.ADD_NEW:
            for relative in untracked:
                item = self._index.register(relative.name, relative)
                added.append(ExternalChange(ChangeKind.ADDED, item, relative))
        else:
            discarded = self._preview(untracked, ChangeKind.DISCARDED)
            self._discard(untracked)

        report = ScanReport(
            scan_from=scan_from,
            policy=policy,
            recursive=recursive,
            added=added,
            removed=removed,
            discarded=discarded,
            unchanged_count=unchanged_count,
        )
        logger.info(
            "Scan of %s: %d added, %d removed, %d discarded, %d unchanged",
            scope_absolute,
            len(report.added),
            len(report.removed),
            len(report.discarded),
            report.unchanged_count,
        )
        return report

    def _evict_missing(self, scope: Path, recursive: bool) -> list[ExternalChange]:
        """Unregister tracked entries in scope that no longer exist on disk."""
        in_scope = sorted(
            (
                (item, path)
                for item, path in self._index.entries()
                if is_in_scope(path, scope, recursive)
            ),
            key=lambda entry: entry[1],
        )

        removed: list[ExternalChange] = []
        for item, path in in_scope:
            # Already evicted together with a missing ancestor
            if self._index.reverse_lookup(path) != item:
                continue
            if path_exists(self._index.root / path):
                continue

            self._index.unregister(item)
            removed.append(ExternalChange(ChangeKind.REMOVED, item, path))
            for child, child_path in self._index.unregister_descendants(path):
                removed.append(ExternalChange(ChangeKind.REMOVED, child, child_path))

        return removed

    def _walk(self, directory: Path, recursive: bool) -> Iterator[Path]:
        """Yield database-relative paths of files and directories, parents first.

        Entries are visited in sorted order so identifier assignment does
        not depend on the platform's directory enumeration order. Symlinked
        directories are reported but not descended into.
        """
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise DatabaseIOError("read directory", directory, e) from e

        for entry in entries:
            if not (entry.is_dir() or entry.is_file()):
                logger.debug("Skipping special or dangling entry: %s", entry)
                continue

            yield entry.relative_to(self._index.root)

            if recursive and entry.is_dir() and not entry.is_symlink():
                yield from self._walk(entry, recursive)

    def _preview(self, untracked: list[Path], kind: ChangeKind) -> list[ExternalChange]:
        """Build changes carrying the identifiers ADD_NEW would assign."""
        upcoming: dict[str, Iterator[int]] = {}
        changes: list[ExternalChange] = []
        for relative in untracked:
            name = relative.name
            if name not in upcoming:
                upcoming[name] = self._index.next_indices(name)
            changes.append(ExternalChange(kind, ItemId(name, next(upcoming[name])), relative))
        return changes

    def _discard(self, untracked: list[Path]) -> None:
        """Delete untracked entries from disk, deepest first."""
        for relative in sorted(untracked, key=lambda path: len(path.parts), reverse=True):
            absolute = self._index.root / relative
            if not path_exists(absolute):
                continue
            try:
                if absolute.is_dir() and not absolute.is_symlink():
                    shutil.rmtree(absolute)
                else:
                    absolute.unlink()
            except OSError as e:
                raise DatabaseIOError("delete untracked entry", absolute, e) from e
            logger.info("Deleted untracked entry %s", absolute)
