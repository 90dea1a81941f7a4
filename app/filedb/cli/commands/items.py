"""Item commands.

Provides commands to list, create, rename, move, duplicate, delete and
inspect tracked files and directories.
"""

import json
from datetime import UTC, datetime
from typing import Annotated

import typer
from rich.table import Table

from filedb.cli.types import OutputFormat, get_config, handle_errors, open_manager, to_item
from filedb.core.manager import DatabaseManager
from filedb.models.ids import ItemId
from filedb.models.options import ItemKind
from filedb.utils.formatting import (
    console,
    create_item_table,
    format_item_row,
    format_size,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Create, move and inspect tracked items.",
    no_args_is_help=True,
)

IndexOption = Annotated[
    int,
    typer.Option("--index", "-i", min=0, help="Index among items sharing the name."),
]


@app.command("ls")
def list_items(
    ctx: typer.Context,
    parent: Annotated[
        str | None,
        typer.Argument(help="Parent directory name (default: database root)."),
    ] = None,
    index: IndexOption = 0,
    all_items: Annotated[
        bool,
        typer.Option("--all", "-a", help="List every tracked item."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List tracked items under a directory."""
    config = get_config(ctx)
    manager = open_manager(ctx)

    with handle_errors():
        if all_items:
            listed = manager.get_all(sorted=config.sorted_output)
        else:
            listed = manager.get_by_parent(to_item(parent, index), sorted=config.sorted_output)

    if not listed:
        print_info("No tracked items found.")
        return

    if output_format == OutputFormat.JSON:
        _print_json(manager, listed)
        return

    _print_table(manager, listed)
    console.print(f"\n[dim]{len(listed)} item(s)[/dim]")


@app.command()
def new(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the new file or directory.")],
    parent: Annotated[
        str | None,
        typer.Option("--parent", "-p", help="Parent directory name (default: root)."),
    ] = None,
    parent_index: Annotated[
        int,
        typer.Option("--parent-index", min=0, help="Index of the parent directory."),
    ] = 0,
    directory: Annotated[
        bool,
        typer.Option("--dir", help="Create a directory regardless of the name."),
    ] = False,
    file: Annotated[
        bool,
        typer.Option("--file", help="Create a file regardless of the name."),
    ] = False,
) -> None:
    """Create an empty file or directory."""
    if directory and file:
        raise typer.BadParameter("--dir and --file are mutually exclusive")

    kind = ItemKind.DIRECTORY if directory else ItemKind.FILE if file else None
    manager = open_manager(ctx)
    with handle_errors():
        created = manager.write_new(ItemId.id(name), to_item(parent, parent_index), kind)
        path = manager.locate_relative(created)
    print_success(f"Created {created} at {path}")


@app.command()
def rename(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Current name.")],
    new_name: Annotated[str, typer.Argument(help="New name.")],
    index: IndexOption = 0,
) -> None:
    """Rename an item inside its directory."""
    manager = open_manager(ctx)
    with handle_errors():
        renamed = manager.rename(ItemId(name, index), new_name)
    print_success(f"Renamed {name}#{index} to {renamed}")


@app.command("mv")
def move(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Item to move.")],
    to: Annotated[str | None, typer.Argument(help="Destination directory (default: root).")] = None,
    index: IndexOption = 0,
    to_index: Annotated[
        int,
        typer.Option("--to-index", min=0, help="Index of the destination directory."),
    ] = 0,
) -> None:
    """Move an item into another directory."""
    manager = open_manager(ctx)
    with handle_errors():
        moved = manager.migrate_item(ItemId(name, index), to_item(to, to_index))
        path = manager.locate_relative(moved)
    print_success(f"Moved {moved} to {path}")


@app.command("cp")
def duplicate(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Item to duplicate.")],
    new_name: Annotated[str, typer.Argument(help="Name of the copy.")],
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="Destination directory (default: root)."),
    ] = None,
    index: IndexOption = 0,
    to_index: Annotated[
        int,
        typer.Option("--to-index", min=0, help="Index of the destination directory."),
    ] = 0,
) -> None:
    """Duplicate an item (recursively for directories)."""
    manager = open_manager(ctx)
    with handle_errors():
        copy = manager.duplicate_item(ItemId(name, index), to_item(to, to_index), new_name)
        path = manager.locate_relative(copy)
    print_success(f"Duplicated {name}#{index} as {copy} at {path}")


@app.command("rm")
def remove(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Item to delete.")],
    index: IndexOption = 0,
    force: Annotated[
        bool,
        typer.Option("--force", help="Delete non-empty directories recursively."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a file or directory."""
    manager = open_manager(ctx)
    item = ItemId(name, index)

    with handle_errors():
        path = manager.locate_relative(item)

    if force and not yes:
        confirmed = typer.confirm(f"Delete {path} and everything below it?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    with handle_errors():
        manager.delete(item, force=force)
    print_success(f"Deleted {item} ({path})")


@app.command()
def info(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Item to inspect.")],
    index: IndexOption = 0,
) -> None:
    """Show metadata of an item."""
    manager = open_manager(ctx)
    item = ItemId(name, index)
    with handle_errors():
        path = manager.locate_relative(item)
        details = manager.get_file_information(item)
        parent = manager.get_parent(item)

    table = Table(title=str(item), show_header=False, border_style="border")
    table.add_column("Field", style="bold_header")
    table.add_column("Value")
    table.add_row("Path", str(path))
    table.add_row("Parent", str(parent))
    table.add_row("Kind", "directory" if details.is_dir else "file")
    table.add_row("Extension", details.extension or "-")
    table.add_row("Size", format_size(details.size))
    table.add_row("Created", _format_timestamp(details.unix_created))
    table.add_row("Modified", _format_timestamp(details.unix_last_modified))
    table.add_row("Accessed", _format_timestamp(details.unix_last_opened))
    console.print(table)


# === Private helper functions ===


def _print_table(manager: DatabaseManager, listed: list[ItemId]) -> None:
    """Display items as a Rich table."""
    table = create_item_table()
    for item in listed:
        path = manager.locate_relative(item)
        table.add_row(*format_item_row(item, path, manager.locate_absolute(item).is_dir()))

    console.print(table)


def _print_json(manager: DatabaseManager, listed: list[ItemId]) -> None:
    """Display items as JSON."""
    data = [
        {
            "name": item.name,
            "index": item.index,
            "path": manager.locate_relative(item).as_posix(),
            "is_dir": manager.locate_absolute(item).is_dir(),
        }
        for item in listed
    ]
    console.print_json(json.dumps(data))


def _format_timestamp(value: int | None) -> str:
    """Format a Unix timestamp as ISO 8601 (UTC)."""
    if value is None:
        return "-"
    return datetime.fromtimestamp(value, tz=UTC).isoformat(timespec="seconds")
