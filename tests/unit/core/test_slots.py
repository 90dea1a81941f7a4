"""Unit tests for StableSlotTable."""

from itertools import islice

import pytest
from filedb.core.errors import IndexOutOfBoundsError, NoMatchingIdError
from filedb.core.slots import StableSlotTable


@pytest.fixture
def table() -> StableSlotTable[str]:
    """Table with three occupied slots: a, b, c."""
    t = StableSlotTable[str]("notes.txt")
    for value in ("a", "b", "c"):
        t.insert(value)
    return t


class TestInsertRemove:
    """Tests for slot assignment and tombstones."""

    def test_insert_appends_in_order(self, table: StableSlotTable[str]) -> None:
        assert list(table.occupied_entries()) == [(0, "a"), (1, "b"), (2, "c")]
        assert len(table) == 3

    def test_remove_keeps_other_indices(self, table: StableSlotTable[str]) -> None:
        assert table.remove(1) == "b"

        assert table.get(0) == "a"
        assert table.get(2) == "c"
        assert len(table) == 2
        assert table.slot_count == 3

    def test_insert_reuses_lowest_tombstone(self, table: StableSlotTable[str]) -> None:
        table.remove(2)
        table.remove(0)

        assert table.insert("x") == 0
        assert table.insert("y") == 2
        assert table.insert("z") == 3

    def test_insert_none_rejected(self, table: StableSlotTable[str]) -> None:
        with pytest.raises(ValueError):
            table.insert(None)  # type: ignore[arg-type]

    def test_is_empty_after_removing_everything(self, table: StableSlotTable[str]) -> None:
        for index in range(3):
            table.remove(index)
        assert table.is_empty()
        assert len(table) == 0


class TestRequire:
    """Tests for lookups that must hit an occupied slot."""

    def test_out_of_bounds(self, table: StableSlotTable[str]) -> None:
        with pytest.raises(IndexOutOfBoundsError) as exc_info:
            table.require(3)
        assert exc_info.value.length == 3
        assert exc_info.value.name == "notes.txt"

    def test_tombstone(self, table: StableSlotTable[str]) -> None:
        table.remove(1)
        with pytest.raises(NoMatchingIdError):
            table.require(1)

    def test_remove_twice(self, table: StableSlotTable[str]) -> None:
        table.remove(0)
        with pytest.raises(NoMatchingIdError):
            table.remove(0)

    def test_set_replaces_in_place(self, table: StableSlotTable[str]) -> None:
        table.set(1, "B")
        assert table.require(1) == "B"

    def test_get_is_lenient(self, table: StableSlotTable[str]) -> None:
        assert table.get(99) is None
        assert table.get(-1) is None


class TestFreeIndices:
    """Tests for free index preview."""

    def test_tombstones_first_then_fresh(self, table: StableSlotTable[str]) -> None:
        table.remove(1)
        assert list(islice(table.free_indices(), 3)) == [1, 3, 4]

    def test_preview_matches_inserts(self, table: StableSlotTable[str]) -> None:
        table.remove(0)
        table.remove(2)
        preview = list(islice(table.free_indices(), 3))

        assert [table.insert(v) for v in ("p", "q", "r")] == preview
