"""CLI commands for filedb.

This package contains all subcommand implementations.
"""

from filedb.cli.commands import config, items, scan, transfer

__all__ = ["config", "items", "scan", "transfer"]
