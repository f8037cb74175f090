"""Tests for file type detection."""

import pytest

from bankimport.domain.entities import FileType
from bankimport.domain.file_type import detect_file_type


def test_declared_content_type_wins_over_extension():
    assert detect_file_type("export.xlsx", "text/csv") is FileType.CSV
    assert detect_file_type("export.csv", "application/vnd.ms-excel") is FileType.XLS


def test_content_type_parameters_are_ignored():
    assert detect_file_type("export", "text/csv; charset=utf-8") is FileType.CSV


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("movimientos.csv", FileType.CSV),
        ("EXTRACTO.CSV", FileType.CSV),
        ("extracto.txt", FileType.CSV),
        ("movimientos.xlsx", FileType.XLSX),
        ("movimientos.xls", FileType.XLS),
    ],
)
def test_extension_used_when_content_type_unknown(file_name, expected):
    assert detect_file_type(file_name, "application/octet-stream") is expected
    assert detect_file_type(file_name) is expected


@pytest.mark.parametrize("file_name", [None, "", "statement", "statement.pdf"])
def test_defaults_to_xlsx(file_name):
    assert detect_file_type(file_name, None) is FileType.XLSX


def test_spreadsheet_types():
    assert FileType.XLSX.is_spreadsheet
    assert FileType.XLS.is_spreadsheet
    assert not FileType.CSV.is_spreadsheet
