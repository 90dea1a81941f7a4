"""Configuration commands.

Provides commands to show and initialize ~/.config/filedb/config.toml.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from filedb.cli.types import OutputFormat, get_config
from filedb.core.config import ConfigError, DatabaseConfig, save_config
from filedb.core.paths import get_config_path
from filedb.models.options import ScanPolicy
from filedb.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the filedb configuration.",
    no_args_is_help=True,
)


@app.command()
def show(
    ctx: typer.Context,
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
    """Show the effective configuration."""
    config = get_config(ctx)
    config_path = get_config_path()

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(config.model_dump(mode="json")))
        return

    table = Table(title="filedb configuration", show_header=False, border_style="border")
    table.add_column("Key", style="bold_header")
    table.add_column("Value")
    table.add_row("root_parent", str(config.root_parent))
    table.add_row("name", config.name)
    table.add_row("database root", str(config.root))
    table.add_row("default_policy", config.default_policy.value)
    table.add_row("recursive_scan", str(config.recursive_scan).lower())
    table.add_row("sorted_output", str(config.sorted_output).lower())
    console.print(table)

    if not config_path.exists():
        print_info(f"No config file at {config_path}; showing defaults.")


@app.command()
def init(
    root_parent: Annotated[
        Path | None,
        typer.Option("--root-parent", help="Directory containing the database."),
    ] = None,
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Database directory name."),
    ] = "database",
    policy: Annotated[
        ScanPolicy,
        typer.Option("--policy", "-p", help="Default scan policy.", case_sensitive=False),
    ] = ScanPolicy.ADD_NEW,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the given settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    values: dict[str, object] = {"name": name, "default_policy": policy}
    if root_parent is not None:
        values["root_parent"] = root_parent.expanduser().absolute()

    try:
        config = DatabaseConfig.model_validate(values)
        saved = save_config(config, config_path)
    except ValueError as e:
        print_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
    print_info(f"Database root: {config.root}")
