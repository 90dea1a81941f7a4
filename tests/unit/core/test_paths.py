"""Unit tests for path helpers.

Tests for GenPath and the XDG-compliant application paths.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from filedb.core.errors import NoClosestDirError, PathStepOverflowError
from filedb.core.paths import (
    APP_NAME,
    GenPath,
    get_config_dir,
    get_config_path,
    get_default_root_parent,
    get_theme_path,
)


class TestGenPathFromWorkingDir:
    """Tests for GenPath.from_working_dir."""

    def test_zero_steps_returns_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert GenPath.from_working_dir() == Path.cwd()

    def test_trims_trailing_segments(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert GenPath.from_working_dir(2) == Path.cwd().parent.parent

    def test_too_many_steps_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        depth = len(Path.cwd().parents)

        with pytest.raises(PathStepOverflowError) as exc_info:
            GenPath.from_working_dir(depth)

        assert exc_info.value.steps == depth
        assert exc_info.value.depth == depth


class TestGenPathFromExe:
    """Tests for GenPath.from_exe and from_closest_match."""

    def test_from_exe_returns_program_directory(self, tmp_path: Path) -> None:
        program = tmp_path / "bin" / "tool"

        with patch("filedb.core.paths.sys.argv", [str(program)]):
            assert GenPath.from_exe() == program.parent.resolve()
            assert GenPath.from_exe(1) == tmp_path.resolve()

    def test_closest_match_finds_ancestor(self, tmp_path: Path) -> None:
        program = tmp_path / "project" / "bin" / "tool"
        program.parent.mkdir(parents=True)

        with patch("filedb.core.paths.sys.argv", [str(program)]):
            assert GenPath.from_closest_match("project") == (tmp_path / "project").resolve()

    def test_closest_match_finds_sibling_child(self, tmp_path: Path) -> None:
        program = tmp_path / "bin" / "tool"
        program.parent.mkdir()
        (tmp_path / "assets").mkdir()

        with patch("filedb.core.paths.sys.argv", [str(program)]):
            assert GenPath.from_closest_match("assets") == (tmp_path / "assets").resolve()

    def test_closest_match_ignores_files(self, tmp_path: Path) -> None:
        program = tmp_path / "bin" / "tool"
        program.parent.mkdir()
        (tmp_path / "not-a-dir-8f3a").write_text("")

        with (
            patch("filedb.core.paths.sys.argv", [str(program)]),
            pytest.raises(NoClosestDirError),
        ):
            GenPath.from_closest_match("not-a-dir-8f3a")


class TestXdgPaths:
    """Tests for the XDG path functions."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns default path when XDG_CONFIG_HOME not set."""
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_CONFIG_HOME", None)

            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}):
            assert get_config_path() == tmp_path / APP_NAME / "config.toml"
            assert get_theme_path() == tmp_path / APP_NAME / "theme.toml"

    def test_default_root_parent_uses_state_dir(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            assert get_default_root_parent() == tmp_path / APP_NAME

    def test_default_root_parent_without_xdg(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            os.environ.pop("XDG_STATE_HOME", None)

            result = get_default_root_parent()

        assert result == Path.home() / ".local" / "state" / APP_NAME
