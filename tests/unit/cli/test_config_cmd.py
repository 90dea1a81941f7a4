"""Unit tests for the config commands."""

import json
from pathlib import Path

from filedb.cli.main import app
from filedb.core.config import load_config
from filedb.models.options import ScanPolicy
from typer.testing import CliRunner

runner = CliRunner()


def _flat(text: str) -> str:
    """Collapse Rich line wrapping so messages can be matched as one line."""
    return " ".join(text.split())


class TestConfigCommands:
    """Tests for filedb config show/init."""

    def test_show_defaults(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "default_policy" in result.stdout
        assert "No config file" in result.stdout

    def test_show_json(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "show", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["name"] == "database"
        assert data["default_policy"] == "add_new"

    def test_init_writes_file(self, xdg_home: Path) -> None:
        parent = xdg_home / "dbs"

        result = runner.invoke(
            app,
            [
                "config",
                "init",
                "--root-parent",
                str(parent),
                "--name",
                "photos",
                "-p",
                "detect_only",
            ],
        )

        assert result.exit_code == 0
        config = load_config(xdg_home / "xdg-config" / "filedb" / "config.toml")
        assert config.root == parent / "photos"
        assert config.default_policy == ScanPolicy.DETECT_ONLY

    def test_init_refuses_overwrite(self, xdg_home: Path) -> None:
        assert runner.invoke(app, ["config", "init"]).exit_code == 0

        result = runner.invoke(app, ["config", "init", "--name", "other"])

        assert result.exit_code == 1
        assert "--force" in _flat(result.output)
        assert runner.invoke(app, ["config", "init", "--force"]).exit_code == 0

    def test_init_invalid_name(self, xdg_home: Path) -> None:
        result = runner.invoke(app, ["config", "init", "--name", "a/b"])

        assert result.exit_code == 1
        assert "Invalid configuration" in _flat(result.output)

    def test_broken_config_reported(self, xdg_home: Path) -> None:
        config_path = xdg_home / "xdg-config" / "filedb" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("name = [")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid TOML" in _flat(result.output)
