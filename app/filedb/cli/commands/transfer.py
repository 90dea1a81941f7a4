"""Transfer commands.

Provides commands to import external files into the database, export
tracked items to the outside, and move the whole database elsewhere.
"""

from pathlib import Path
from typing import Annotated

import typer

from filedb.cli.types import handle_errors, open_manager, to_item
from filedb.models.ids import ItemId
from filedb.models.options import TransferMode
from filedb.utils.formatting import print_info, print_success

app = typer.Typer(
    help="Import, export and relocate database content.",
    no_args_is_help=True,
)

MoveOption = Annotated[
    bool,
    typer.Option("--move", "-m", help="Remove the source after transferring."),
]


@app.command("import")
def import_(
    ctx: typer.Context,
    source: Annotated[
        Path,
        typer.Argument(help="File or directory to bring into the database."),
    ],
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="Destination directory (default: root)."),
    ] = None,
    to_index: Annotated[
        int,
        typer.Option("--to-index", min=0, help="Index of the destination directory."),
    ] = 0,
    move: MoveOption = False,
) -> None:
    """Import an external file or directory."""
    mode = TransferMode.MOVE if move else TransferMode.COPY
    manager = open_manager(ctx)
    with handle_errors():
        imported = manager.import_item(source, to_item(to, to_index), mode)
        path = manager.locate_relative(imported)
    print_success(f"Imported {source} as {imported} at {path}")


@app.command()
def export(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Item to export.")],
    destination: Annotated[
        Path,
        typer.Argument(help="Directory to export into (created if missing)."),
    ],
    index: Annotated[
        int,
        typer.Option("--index", "-i", min=0, help="Index among items sharing the name."),
    ] = 0,
    move: MoveOption = False,
) -> None:
    """Export a tracked item to a directory outside the database."""
    mode = TransferMode.MOVE if move else TransferMode.COPY
    item = ItemId(name, index)
    manager = open_manager(ctx)
    with handle_errors():
        exported = manager.export_item(item, destination, mode)
    print_success(f"Exported {item} to {exported}")
    if mode == TransferMode.MOVE:
        print_info(f"{item} is no longer tracked.")


@app.command()
def migrate(
    ctx: typer.Context,
    new_parent: Annotated[
        Path,
        typer.Argument(help="Existing directory the database moves into."),
    ],
) -> None:
    """Move the whole database directory under another parent.

    Identifiers stay valid. Update the configured root_parent (or the
    --root option) afterwards to keep using the moved database.
    """
    manager = open_manager(ctx)
    with handle_errors():
        new_root = manager.migrate_database(new_parent)
    print_success(f"Database moved to {new_root}")
