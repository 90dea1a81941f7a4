"""Unit tests for PathIndex."""

from itertools import islice
from pathlib import Path

import pytest
from filedb.core.errors import (
    IdAlreadyExistsError,
    IndexOutOfBoundsError,
    NoMatchingIdError,
    RootIdUnsupportedError,
)
from filedb.core.index import PathIndex
from filedb.models.ids import ROOT_ID, ItemId


@pytest.fixture
def index(tmp_path: Path) -> PathIndex:
    """Index with docs/, docs/a.txt, docs/sub/, docs/sub/a.txt and a.txt."""
    idx = PathIndex(tmp_path / "db")
    idx.register("docs", Path("docs"))
    idx.register("a.txt", Path("docs/a.txt"))
    idx.register("sub", Path("docs/sub"))
    idx.register("a.txt", Path("docs/sub/a.txt"))
    idx.register("a.txt", Path("a.txt"))
    return idx


class TestLookups:
    """Tests for forward and reverse lookups."""

    def test_shared_names_get_consecutive_indices(self, index: PathIndex) -> None:
        assert index.ids_by_name("a.txt") == [
            ItemId("a.txt", 0),
            ItemId("a.txt", 1),
            ItemId("a.txt", 2),
        ]
        assert index.relative(ItemId("a.txt", 1)) == Path("docs/sub/a.txt")

    def test_root_resolves_to_root(self, index: PathIndex) -> None:
        assert index.resolve(ROOT_ID) == index.root
        assert index.relative(ROOT_ID) == Path()
        assert index.reverse_lookup(index.root) == ROOT_ID

    def test_reverse_lookup_absolute_and_relative(self, index: PathIndex) -> None:
        assert index.reverse_lookup(Path("docs/sub")) == ItemId("sub", 0)
        assert index.reverse_lookup(index.root / "docs/sub") == ItemId("sub", 0)
        assert index.reverse_lookup(Path("/elsewhere/docs")) is None

    def test_unknown_name(self, index: PathIndex) -> None:
        with pytest.raises(NoMatchingIdError):
            index.relative(ItemId("missing", 0))
        assert index.ids_by_name("missing") == []

    def test_index_past_slot_count(self, index: PathIndex) -> None:
        with pytest.raises(IndexOutOfBoundsError):
            index.relative(ItemId("a.txt", 3))

    def test_ids_by_index(self, index: PathIndex) -> None:
        assert sorted(index.ids_by_index(0)) == [
            ItemId("a.txt", 0),
            ItemId("docs", 0),
            ItemId("sub", 0),
        ]
        assert index.ids_by_index(2) == [ItemId("a.txt", 2)]

    def test_contains(self, index: PathIndex) -> None:
        assert ItemId("docs", 0) in index
        assert ROOT_ID in index
        assert ItemId("docs", 1) not in index
        assert "docs" not in index


class TestMutations:
    """Tests for register, unregister and path rewrites."""

    def test_register_duplicate_path_rejected(self, index: PathIndex) -> None:
        with pytest.raises(IdAlreadyExistsError):
            index.register("a.txt", Path("a.txt"))
        assert len(index) == 5

    def test_register_root_name_rejected(self, index: PathIndex) -> None:
        with pytest.raises(RootIdUnsupportedError):
            index.register("", Path("x"))

    def test_unregister_keeps_siblings_stable(self, index: PathIndex) -> None:
        index.unregister(ItemId("a.txt", 0))

        assert index.relative(ItemId("a.txt", 1)) == Path("docs/sub/a.txt")
        assert index.relative(ItemId("a.txt", 2)) == Path("a.txt")
        assert index.reverse_lookup(Path("docs/a.txt")) is None
        assert index.register("a.txt", Path("new/a.txt")) == ItemId("a.txt", 0)

    def test_unregister_last_entry_forgets_name(self, index: PathIndex) -> None:
        index.unregister(ItemId("sub", 0))

        assert index.ids_by_name("sub") == []
        assert list(islice(index.next_indices("sub"), 2)) == [0, 1]

    def test_unregister_descendants(self, index: PathIndex) -> None:
        removed = index.unregister_descendants(Path("docs"))

        assert {item for item, _ in removed} == {
            ItemId("a.txt", 0),
            ItemId("sub", 0),
            ItemId("a.txt", 1),
        }
        assert ItemId("docs", 0) in index
        assert ItemId("a.txt", 2) in index

    def test_move_descendants_rewrites_prefix(self, index: PathIndex) -> None:
        index.update_path(ItemId("docs", 0), Path("archive"))
        moved = index.move_descendants(Path("docs"), Path("archive"))

        assert moved == 3
        assert index.relative(ItemId("a.txt", 1)) == Path("archive/sub/a.txt")
        assert index.reverse_lookup(Path("archive/sub")) == ItemId("sub", 0)
        assert index.reverse_lookup(Path("docs/sub")) is None

    def test_update_path_collision(self, index: PathIndex) -> None:
        with pytest.raises(IdAlreadyExistsError):
            index.update_path(ItemId("a.txt", 2), Path("docs/a.txt"))

    def test_rebase_keeps_relative_paths(self, index: PathIndex, tmp_path: Path) -> None:
        index.rebase(tmp_path / "moved")

        assert index.resolve(ItemId("sub", 0)) == tmp_path / "moved" / "docs" / "sub"
