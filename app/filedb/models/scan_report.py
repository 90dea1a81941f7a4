"""Reconciliation report models.

This module defines the structures returned by a scan-for-changes pass:
one ExternalChange per discrepancy and a ScanReport summarizing the pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from filedb.models.ids import ItemId
from filedb.models.options import ScanPolicy


class ChangeKind(str, Enum):
    """Kind of discrepancy found between the index and the disk.

    Attributes:
        ADDED: Entry exists on disk but was not indexed.
        REMOVED: Indexed entry no longer exists on disk.
        DISCARDED: Untracked entry that was deleted from disk (REMOVE_NEW).
    """

    ADDED = "added"
    REMOVED = "removed"
    DISCARDED = "discarded"


@dataclass(frozen=True, slots=True)
class ExternalChange:
    """A single file or directory change found by a scan.

    Attributes:
        kind: What happened to the entry.
        id: Identifier the entry had (REMOVED), received or would receive
            (ADDED). DISCARDED entries are never indexed and carry the
            identifier they would have received.
        path: Path relative to the database root.
    """

    kind: ChangeKind
    id: ItemId
    path: Path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "kind": self.kind.value,
            "name": self.id.name,
            "index": self.id.index,
            "path": self.path.as_posix(),
        }


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Summary of one scan-for-changes pass.

    Attributes:
        scan_from: Identifier the scan was rooted at.
        policy: Policy applied to untracked entries.
        recursive: Whether the whole subtree was scanned.
        added: Untracked entries reported (DETECT_ONLY, ADD_NEW).
        removed: Tracked entries evicted because they vanished from disk.
        discarded: Untracked entries deleted from disk (REMOVE_NEW).
        unchanged_count: Entries in scope that matched an index entry.
    """

    scan_from: ItemId
    policy: ScanPolicy
    recursive: bool
    added: list[ExternalChange] = field(default_factory=list)
    removed: list[ExternalChange] = field(default_factory=list)
    discarded: list[ExternalChange] = field(default_factory=list)
    unchanged_count: int = 0

    @property
    def total_changed_count(self) -> int:
        """Number of changes, discarded entries included."""
        return len(self.added) + len(self.removed) + len(self.discarded)

    @property
    def has_changes(self) -> bool:
        """Whether the scan found any discrepancy."""
        return self.total_changed_count > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "scan_from": str(self.scan_from),
            "policy": self.policy.value,
            "recursive": self.recursive,
            "added": [c.to_dict() for c in self.added],
            "removed": [c.to_dict() for c in self.removed],
            "discarded": [c.to_dict() for c in self.discarded],
            "unchanged_count": self.unchanged_count,
            "total_changed_count": self.total_changed_count,
        }
