"""Unit tests for file size and metadata models."""

import pytest
from filedb.models.file_info import FileSize, FileSizeUnit


class TestFileSize:
    """Tests for FileSize."""

    @pytest.mark.parametrize(
        ("num_bytes", "expected"),
        [
            (0, FileSize(0, FileSizeUnit.BYTE)),
            (999, FileSize(999, FileSizeUnit.BYTE)),
            (1000, FileSize(1, FileSizeUnit.KILOBYTE)),
            (1_500_000, FileSize(1, FileSizeUnit.MEGABYTE)),
            (2 * 1000**5, FileSize(2, FileSizeUnit.PETABYTE)),
            (3000 * 1000**5, FileSize(3000, FileSizeUnit.PETABYTE)),
        ],
    )
    def test_from_bytes(self, num_bytes: int, expected: FileSize) -> None:
        assert FileSize.from_bytes(num_bytes) == expected

    def test_from_bytes_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            FileSize.from_bytes(-1)

    def test_as_unit_down_multiplies(self) -> None:
        size = FileSize(2, FileSizeUnit.MEGABYTE)
        assert size.as_unit(FileSizeUnit.KILOBYTE) == FileSize(2000, FileSizeUnit.KILOBYTE)

    def test_as_unit_up_truncates(self) -> None:
        size = FileSize(2500, FileSizeUnit.BYTE)
        assert size.as_unit(FileSizeUnit.KILOBYTE) == FileSize(2, FileSizeUnit.KILOBYTE)

    def test_as_unit_same_unit(self) -> None:
        size = FileSize(7, FileSizeUnit.GIGABYTE)
        assert size.as_unit(FileSizeUnit.GIGABYTE) == size

    def test_unit_string_pluralization(self) -> None:
        assert FileSize(1, FileSizeUnit.KILOBYTE).unit_as_string() == "Kilobyte"
        assert FileSize(0, FileSizeUnit.BYTE).unit_as_string() == "Bytes"
        assert str(FileSize(12, FileSizeUnit.MEGABYTE)) == "12 Megabytes"
