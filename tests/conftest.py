"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from filedb.core.manager import DatabaseManager


@pytest.fixture
def manager(tmp_path: Path) -> DatabaseManager:
    """Empty database at tmp_path/database."""
    return DatabaseManager(tmp_path, "database")


@pytest.fixture
def db_root(manager: DatabaseManager) -> Path:
    """Root directory of the ``manager`` fixture."""
    return manager.root


@pytest.fixture
def populated_tree(tmp_path: Path) -> Path:
    """Database directory created on disk before any manager opens it.

    Layout::

        database/
            notes/
                a.txt
                b.txt
            a.txt
    """
    root = tmp_path / "database"
    (root / "notes").mkdir(parents=True)
    (root / "notes" / "a.txt").write_text("first")
    (root / "notes" / "b.txt").write_text("second")
    (root / "a.txt").write_text("top")
    return root


@pytest.fixture
def xdg_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point XDG config and state directories into tmp_path."""
    config_home = tmp_path / "xdg-config"
    state_home = tmp_path / "xdg-state"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_STATE_HOME", str(state_home))
    yield tmp_path
