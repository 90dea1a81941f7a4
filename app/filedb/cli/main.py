"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from filedb import __version__
from filedb.cli.commands import config, items, scan, transfer
from filedb.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="filedb",
    help="ID-addressable file database over a single directory tree.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"filedb version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Database directory (overrides the configured location).",
        ),
    ] = None,
) -> None:
    """filedb - address files and folders by stable (name, index) IDs.

    The index is rebuilt from disk every time a database is opened;
    use [bold]filedb scan[/bold] to pick up changes made by other programs.
    """
    _configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["root"] = root


# Register commands
app.add_typer(items.app, name="items")
app.add_typer(scan.app, name="scan")
app.add_typer(transfer.app, name="transfer")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
