"""Rich console formatting utilities.

Shared consoles, the table layouts used for items and scan reports, and
the one-line message helpers every command prints through.
"""

import sys
from pathlib import PurePath

from rich.console import Console
from rich.table import Table

from filedb.core.theme import get_theme
from filedb.models.file_info import FileSize, FileSizeUnit
from filedb.models.ids import ItemId
from filedb.models.scan_report import ChangeKind, ExternalChange


def _detect_color_system() -> str | None:
    """Use truecolor on interactive terminals, let Rich auto-detect otherwise."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())

_CHANGE_MARKERS: dict[ChangeKind, str] = {
    ChangeKind.ADDED: "+",
    ChangeKind.REMOVED: "-",
    ChangeKind.DISCARDED: "x",
}


def format_size(size: FileSize) -> str:
    """Format a FileSize compactly (e.g. ``12 KB``)."""
    if size.unit == FileSizeUnit.BYTE:
        return f"{size.size} B"
    return f"{size.size} {size.unit.name[0]}B"


def create_item_table(title: str = "Tracked Items") -> Table:
    """Create a table with Name, Index and Path columns."""
    table = Table(title=title, border_style="border", header_style="bold_header")
    table.add_column("Name", no_wrap=True)
    table.add_column("Index", justify="right", width=6)
    table.add_column("Path", style="muted")
    return table


def format_item_row(item: ItemId, path: PurePath, is_dir: bool) -> tuple[str, str, str]:
    """Format an item as a row for create_item_table.

    Directories and files get their own theme style so the two can be
    told apart without a Kind column.
    """
    style = "directory" if is_dir else "file"
    return (f"[{style}]{item.name}[/]", str(item.index), path.as_posix())


def create_change_table(title: str) -> Table:
    """Create a table for the changes of a scan report."""
    table = Table(title=title, border_style="border", header_style="bold_header")
    table.add_column("", width=1)
    table.add_column("Path", no_wrap=True)
    table.add_column("ID", style="muted")
    return table


def format_change_row(change: ExternalChange) -> tuple[str, str, str]:
    """Format a change as (marker, path, id) with the change kind's style."""
    style = change.kind.value
    marker = _CHANGE_MARKERS[change.kind]
    return (f"[{style}]{marker}[/]", change.path.as_posix(), str(change.id))


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
