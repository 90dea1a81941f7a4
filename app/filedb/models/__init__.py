"""Data models for filedb.

This module exports the value types shared by the index, the
reconciler and the CLI.
"""

from filedb.models.file_info import FileInformation, FileSize, FileSizeUnit
from filedb.models.ids import ItemId
from filedb.models.options import ItemKind, ScanPolicy, TransferMode
from filedb.models.scan_report import ChangeKind, ExternalChange, ScanReport

__all__ = [
    "ChangeKind",
    "ExternalChange",
    "FileInformation",
    "FileSize",
    "FileSizeUnit",
    "ItemId",
    "ItemKind",
    "ScanPolicy",
    "ScanReport",
    "TransferMode",
]
