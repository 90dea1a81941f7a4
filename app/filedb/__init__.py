"""filedb - an ID-addressable index over a single directory tree.

Files and directories inside a database root are addressed by a stable
``(name, index)`` identifier instead of raw paths. The index is rebuilt
from disk on every open and can be reconciled against out-of-band
changes with ``DatabaseManager.scan_for_changes``.
"""

from filedb.core.errors import DatabaseError
from filedb.core.manager import DatabaseManager
from filedb.core.paths import GenPath
from filedb.models.ids import ItemId
from filedb.models.options import ItemKind, ScanPolicy, TransferMode
from filedb.models.scan_report import ChangeKind, ExternalChange, ScanReport

__version__ = "0.3.0"

__all__ = [
    "ChangeKind",
    "DatabaseError",
    "DatabaseManager",
    "ExternalChange",
    "GenPath",
    "ItemId",
    "ItemKind",
    "ScanPolicy",
    "ScanReport",
    "TransferMode",
    "__version__",
]
