from __future__ import annotations

from pathlib import Path

import pytest

from item_import.csvfile.reader import FileSelectionError, ParseError, check_file, read_csv_text


def test_rejects_non_csv_extension(tmp_path: Path):
    f = tmp_path / "items.txt"
    f.write_text("name\nPen", encoding="utf-8")
    with pytest.raises(FileSelectionError) as e:
        check_file(f)
    assert str(e.value) == "Please upload a CSV file"


def test_rejects_oversized_file(tmp_path: Path):
    f = tmp_path / "items.csv"
    f.write_bytes(b"name\n" + b"x" * 100)
    with pytest.raises(FileSelectionError) as e:
        check_file(f, max_size_bytes=50)
    assert "File size must be less than" in str(e.value)


def test_default_limit_is_five_mebibytes(tmp_path: Path):
    f = tmp_path / "items.csv"
    f.write_bytes(b"a" * (5 * 1024 * 1024))
    assert check_file(f) == 5 * 1024 * 1024
    f.write_bytes(b"a" * (5 * 1024 * 1024 + 1))
    with pytest.raises(FileSelectionError) as e:
        check_file(f)
    assert str(e.value) == "File size must be less than 5MB"


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileSelectionError):
        check_file(tmp_path / "nope.csv")


def test_read_strips_bom(tmp_path: Path):
    f = tmp_path / "items.csv"
    f.write_bytes(b"\xef\xbb\xbfname\nPen")
    assert read_csv_text(f) == "name\nPen"


def test_read_rejects_non_utf8(tmp_path: Path):
    f = tmp_path / "items.csv"
    f.write_bytes(b"name\n\xff\xfe\xfa")
    with pytest.raises(ParseError):
        read_csv_text(f)
