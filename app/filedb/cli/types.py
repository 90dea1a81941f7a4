"""Shared helpers for CLI commands.

Resolves the database a command operates on and turns library errors
into user-facing messages with a non-zero exit code.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

import typer

from filedb.core.config import ConfigError, DatabaseConfig, load_config_or_default
from filedb.core.errors import DatabaseError
from filedb.core.manager import DatabaseManager
from filedb.models.ids import ROOT_ID, ItemId
from filedb.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options for listing commands."""

    TABLE = "table"
    JSON = "json"


def to_item(name: str | None, index: int = 0) -> ItemId:
    """Build an identifier from CLI arguments; no name means the root."""
    if not name:
        return ROOT_ID
    return ItemId(name, index)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print DatabaseError messages and exit with code 1."""
    try:
        yield
    except DatabaseError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_config(ctx: typer.Context) -> DatabaseConfig:
    """Load the configuration once per invocation and cache it on the context.

    Raises:
        typer.Exit: If the config file exists but is invalid.
    """
    ctx.ensure_object(dict)
    config = ctx.obj.get("config")
    if config is None:
        try:
            config = load_config_or_default()
        except ConfigError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        ctx.obj["config"] = config
    return config


def open_manager(ctx: typer.Context) -> DatabaseManager:
    """Open the database selected by ``--root`` or by the configuration.

    Raises:
        typer.Exit: If the database cannot be opened.
    """
    ctx.ensure_object(dict)
    root: Path | None = ctx.obj.get("root")

    with handle_errors():
        if root is not None:
            return DatabaseManager.open(root)

        config = get_config(ctx)
        parent = config.root_parent.expanduser()
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print_error(f"Cannot create database parent directory {parent}: {e}")
            raise typer.Exit(code=1) from e
        return DatabaseManager(parent, config.name)
