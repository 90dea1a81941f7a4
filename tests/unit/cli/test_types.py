"""Unit tests for shared CLI helpers."""

from pathlib import Path

import pytest
import typer
from filedb.cli.types import handle_errors, to_item
from filedb.core.errors import NoMatchingIdError
from filedb.models.ids import ROOT_ID, ItemId


class TestToItem:
    """Tests for to_item."""

    def test_no_name_means_root(self) -> None:
        assert to_item(None) == ROOT_ID
        assert to_item("", 3) == ROOT_ID

    def test_named_item(self) -> None:
        assert to_item("docs", 2) == ItemId("docs", 2)


class TestHandleErrors:
    """Tests for handle_errors."""

    def test_database_error_exits_with_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info, handle_errors():
            raise NoMatchingIdError(ItemId("x", 0))

        assert exc_info.value.exit_code == 1
        assert "x#0" in capsys.readouterr().err

    def test_other_errors_propagate(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError), handle_errors():
            (tmp_path / "missing").read_text()
