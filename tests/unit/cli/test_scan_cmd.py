"""Unit tests for the scan command."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from filedb.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def _flat(text: str) -> str:
    """Collapse Rich line wrapping so messages can be matched as one line."""
    return " ".join(text.split())


@pytest.fixture(autouse=True)
def _isolated_config(xdg_home: Path) -> None:
    """Keep the user's real config out of CLI runs."""


@pytest.fixture
def db(tmp_path: Path) -> Path:
    """Database with notes/a.txt on disk."""
    root = tmp_path / "db"
    (root / "notes").mkdir(parents=True)
    (root / "notes" / "a.txt").write_text("")
    return root


def _scan(db: Path, *args: str):
    return runner.invoke(app, ["--root", str(db), "scan", *args])


class TestScanCommand:
    """Tests for a single filedb scan."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["scan", "--help"])
        assert result.exit_code == 0
        assert "--policy" in result.stdout
        assert "--watch" in result.stdout

    def test_freshly_opened_database_is_clean(self, db: Path) -> None:
        result = _scan(db)

        assert result.exit_code == 0
        assert "No changes found (2 item(s) checked)" in result.stdout

    def test_json_report(self, db: Path) -> None:
        result = _scan(db, "--policy", "detect_only", "--format", "json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["policy"] == "detect_only"
        assert data["recursive"] is True
        assert data["unchanged_count"] == 2
        assert data["total_changed_count"] == 0

    def test_scope_and_non_recursive(self, db: Path) -> None:
        result = _scan(db, "notes", "--no-recursive", "--format", "json")

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["scan_from"] == "notes#0"
        assert data["recursive"] is False
        assert data["unchanged_count"] == 1

    def test_policy_from_config(self, db: Path) -> None:
        init = runner.invoke(app, ["config", "init", "--policy", "detect_only"])
        assert init.exit_code == 0

        result = _scan(db, "--format", "json")

        assert json.loads(result.stdout)["policy"] == "detect_only"

    def test_scope_is_a_file(self, db: Path) -> None:
        result = _scan(db, "a.txt")

        assert result.exit_code == 1
        assert "doesn't point to a directory" in _flat(result.output)


class TestWatchMode:
    """Tests for filedb scan --watch."""

    def test_reports_changes_between_rounds(self, db: Path) -> None:
        def create_file(_: float) -> None:
            (db / "notes" / "new.txt").write_text("")

        with patch("filedb.cli.commands.scan.time.sleep", side_effect=create_file):
            result = _scan(db, "--watch", "--rounds", "1")

        assert result.exit_code == 0
        assert "new.txt" in result.stdout
        assert "+1" in result.stdout

    def test_remove_new_deletes_strays(self, db: Path) -> None:
        stray = db / "stray.txt"

        with patch(
            "filedb.cli.commands.scan.time.sleep",
            side_effect=lambda _: stray.write_text(""),
        ):
            result = _scan(db, "-w", "--rounds", "2", "--policy", "remove_new")

        assert result.exit_code == 0
        assert not stray.exists()
        assert "Deleted 1 untracked item(s)" in _flat(result.output)

    def test_quiet_rounds_without_changes(self, db: Path) -> None:
        with patch("filedb.cli.commands.scan.time.sleep") as sleep:
            result = _scan(db, "--watch", "--rounds", "3", "--interval", "0.5")

        assert result.exit_code == 0
        assert sleep.call_count == 3
        sleep.assert_called_with(0.5)
        assert "No changes found" not in result.stdout

    def test_interrupt_stops_cleanly(self, db: Path) -> None:
        with patch("filedb.cli.commands.scan.time.sleep", side_effect=KeyboardInterrupt):
            result = _scan(db, "--watch")

        assert result.exit_code == 0
        assert "Stopped watching" in result.stdout
