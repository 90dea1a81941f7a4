"""Unit tests for scan report models."""

from pathlib import Path

from filedb.models.ids import ROOT_ID, ItemId
from filedb.models.options import ScanPolicy
from filedb.models.scan_report import ChangeKind, ExternalChange, ScanReport


def _change(kind: ChangeKind, name: str, index: int = 0) -> ExternalChange:
    return ExternalChange(kind, ItemId(name, index), Path(name))


class TestScanReport:
    """Tests for ScanReport."""

    def test_empty_report_has_no_changes(self) -> None:
        report = ScanReport(scan_from=ROOT_ID, policy=ScanPolicy.ADD_NEW, recursive=True)

        assert report.total_changed_count == 0
        assert report.has_changes is False

    def test_total_counts_every_change_list(self) -> None:
        report = ScanReport(
            scan_from=ROOT_ID,
            policy=ScanPolicy.REMOVE_NEW,
            recursive=True,
            removed=[_change(ChangeKind.REMOVED, "gone.txt")],
            discarded=[
                _change(ChangeKind.DISCARDED, "x.txt"),
                _change(ChangeKind.DISCARDED, "y.txt"),
            ],
            unchanged_count=4,
        )

        assert report.total_changed_count == 3
        assert report.has_changes is True

    def test_to_dict(self) -> None:
        report = ScanReport(
            scan_from=ItemId("docs", 0),
            policy=ScanPolicy.DETECT_ONLY,
            recursive=False,
            added=[ExternalChange(ChangeKind.ADDED, ItemId("a.txt", 1), Path("docs/a.txt"))],
        )

        data = report.to_dict()

        assert data["scan_from"] == "docs#0"
        assert data["policy"] == "detect_only"
        assert data["added"] == [
            {"kind": "added", "name": "a.txt", "index": 1, "path": "docs/a.txt"}
        ]
        assert data["total_changed_count"] == 1
