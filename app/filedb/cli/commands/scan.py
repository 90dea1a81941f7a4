"""Scan command for reconciling the index with the disk.

This module provides the `filedb scan` command, which picks up files
and directories that other programs created or removed inside the
database directory.
"""

import json
import time
from typing import Annotated

import typer

from filedb.cli.types import OutputFormat, get_config, handle_errors, open_manager, to_item
from filedb.models.options import ScanPolicy
from filedb.models.scan_report import ExternalChange, ScanReport
from filedb.utils.formatting import (
    console,
    create_change_table,
    format_change_row,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    name="scan",
    help="Reconcile the index with changes made outside filedb.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def scan(
    ctx: typer.Context,
    scan_from: Annotated[
        str | None,
        typer.Argument(
            metavar="FROM",
            help="Directory to scan (default: database root).",
        ),
    ] = None,
    index: Annotated[
        int,
        typer.Option("--index", "-i", min=0, help="Index of the directory to scan."),
    ] = 0,
    policy: Annotated[
        ScanPolicy | None,
        typer.Option(
            "--policy",
            "-p",
            help="How to treat untracked entries (default from config).",
            case_sensitive=False,
        ),
    ] = None,
    recursive: Annotated[
        bool | None,
        typer.Option(
            "--recursive/--no-recursive",
            help="Descend into subdirectories (default from config).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Keep scanning until interrupted."),
    ] = False,
    interval: Annotated[
        float,
        typer.Option("--interval", min=0.1, help="Seconds between scans in watch mode."),
    ] = 2.0,
    rounds: Annotated[
        int,
        typer.Option("--rounds", min=0, help="Stop watching after N scans (0 = unlimited)."),
    ] = 0,
) -> None:
    """Scan the database directory for external changes.

    Opening the database indexes whatever is on disk, so a single scan
    only catches changes made while filedb runs. Use --watch to keep the
    database open and reconcile it every --interval seconds.

    Tracked entries that vanished from disk are always dropped from the
    index. The policy decides what happens to untracked entries:

    detect_only reports them, add_new also indexes them, remove_new
    deletes them from disk.

    Examples:
        filedb scan                         # Whole database, configured policy
        filedb scan photos --no-recursive   # Only direct children of photos
        filedb scan -w -p remove_new        # Keep the database free of strays
    """
    if ctx.invoked_subcommand is not None:
        return

    config = get_config(ctx)
    effective_policy = policy or config.default_policy
    effective_recursive = config.recursive_scan if recursive is None else recursive
    scope = to_item(scan_from, index)

    manager = open_manager(ctx)

    def run_once() -> ScanReport:
        with handle_errors():
            return manager.scan_for_changes(scope, effective_policy, effective_recursive)

    if not watch:
        _emit(run_once(), output_format, quiet=False)
        return

    print_info(f"Watching {manager.root} every {interval:g}s (Ctrl+C to stop)")
    completed = 0
    try:
        while rounds == 0 or completed < rounds:
            time.sleep(interval)
            _emit(run_once(), output_format, quiet=True)
            completed += 1
    except KeyboardInterrupt:
        print_info("Stopped watching.")


# === Private helper functions ===


def _emit(report: ScanReport, output_format: OutputFormat, quiet: bool) -> None:
    """Print a report; in quiet mode reports without changes are skipped."""
    if quiet and not report.has_changes:
        return
    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(report.to_dict()))
        return
    _print_report(report)


def _print_report(report: ScanReport) -> None:
    """Display a scan report as a table followed by a summary line."""
    if not report.has_changes:
        print_success(f"No changes found ({report.unchanged_count} item(s) checked).")
        return

    changes: list[ExternalChange] = [*report.added, *report.removed, *report.discarded]
    changes.sort(key=lambda change: change.path)

    table = create_change_table(f"Changes below {report.scan_from}")
    for change in changes:
        table.add_row(*format_change_row(change))

    console.print(table)
    console.print()

    if report.policy == ScanPolicy.DETECT_ONLY and report.added:
        print_info(f"{len(report.added)} untracked item(s) left unindexed (detect_only).")
    if report.discarded:
        print_warning(f"Deleted {len(report.discarded)} untracked item(s) from disk.")

    console.print(
        f"[added]+{len(report.added)}[/] "
        f"[removed]-{len(report.removed)}[/] "
        f"[discarded]x{len(report.discarded)}[/] "
        f"[dim]({report.total_changed_count} change(s), "
        f"{report.unchanged_count} unchanged)[/dim]"
    )
