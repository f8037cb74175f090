"""Materialize statement files into RawRows.

Every cell is converted to text here, once. Downstream code re-parses the
text by role and never sees spreadsheet-typed values.
"""

import csv
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
import io
import logging
from typing import Any, Iterable, Optional
import zipfile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
import xlrd
from xlrd.compdoc import CompDocError

from bankimport.domain.entities import FileType, RawRow
from bankimport.domain.errors import StatementReadError

logger = logging.getLogger(__name__)

TEXT_ENCODINGS = ("utf-8-sig", "cp1252")


@dataclass(frozen=True)
class SheetRows:
    """Rows read from one file, with the sheet they came from."""

    rows: list[RawRow]
    sheet_name: Optional[str] = None
    row_extent: Optional[int] = None


def decode_text(content: bytes | str) -> str:
    """Decode statement bytes, trying UTF-8 then Windows-1252.

    Raises:
        StatementReadError: If no supported encoding decodes the bytes
    """
    if isinstance(content, str):
        return content
    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise StatementReadError("Could not decode file with any supported encoding")


def detect_delimiter(text: str) -> str:
    """Choose "," or ";" by counting them in the first non-blank line (ties favor ",")."""
    first_line = next((line for line in text.lstrip("\ufeff").splitlines() if line.strip()), "")
    return ";" if first_line.count(";") > first_line.count(",") else ","


def read_delimited_rows(text: str, max_rows: Optional[int] = None) -> SheetRows:
    """Split delimited text into RawRows.

    Args:
        text: Decoded file content
        max_rows: Rows beyond this limit are dropped

    Raises:
        StatementReadError: If the text is empty or not parseable as CSV
    """
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise StatementReadError("The file is empty")

    delimiter = detect_delimiter(text)
    logger.debug("CSV delimiter detected: %r", delimiter)

    try:
        records = list(csv.reader(io.StringIO(text), delimiter=delimiter))
    except csv.Error as e:
        raise StatementReadError(f"Could not read CSV file: {e}")

    # Trailing blank lines carry no rows
    while records and not any(cell.strip() for cell in records[-1]):
        records.pop()

    rows = [
        RawRow(index=index, cells=tuple(cell.strip().strip('"').strip() for cell in record))
        for index, record in enumerate(_limit(records, max_rows))
    ]
    return SheetRows(rows=rows, row_extent=len(rows))


def read_spreadsheet_rows(
    content: bytes, file_type: FileType, max_rows: Optional[int] = None
) -> SheetRows:
    """Read the first sheet holding data from an xlsx or xls workbook.

    Raises:
        StatementReadError: If the workbook cannot be opened or has no sheets
    """
    if not content:
        raise StatementReadError("The file is empty")
    if file_type is FileType.XLS:
        return _read_xls(content, max_rows)
    return _read_xlsx(content, max_rows)


def cell_to_text(value: Any) -> tuple[str, bool]:
    """Convert a typed spreadsheet value to text.

    Returns:
        (text, is_numeric) where is_numeric marks values rendered with "."
        as decimal separator
    """
    if value is None:
        return "", False
    if isinstance(value, bool):
        return str(value).lower(), False
    if isinstance(value, datetime):
        return value.date().isoformat(), False
    if isinstance(value, date):
        return value.isoformat(), False
    if isinstance(value, time):
        return value.isoformat(), False
    if isinstance(value, (int, float, Decimal)):
        if isinstance(value, float) and value.is_integer():
            return str(int(value)), True
        if isinstance(value, float):
            return format(Decimal(repr(value)), "f"), True
        return format(Decimal(value), "f"), True
    return str(value).strip(), False


def build_row(index: int, values: Iterable[Any]) -> RawRow:
    """Build a RawRow from typed cell values."""
    cells = []
    numeric = set()
    for column, value in enumerate(values):
        text, is_numeric = cell_to_text(value)
        cells.append(text)
        if is_numeric:
            numeric.add(column)
    return RawRow(index=index, cells=tuple(cells), numeric_cells=frozenset(numeric))


def _read_xlsx(content: bytes, max_rows: Optional[int]) -> SheetRows:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise StatementReadError(f"Could not open spreadsheet: {e}")

    try:
        sheets = [
            (ws.title, ws.max_row or 0, list(ws.iter_rows(values_only=True)))
            for ws in workbook.worksheets
        ]
    finally:
        workbook.close()

    return _select_sheet(sheets, max_rows)


def _read_xls(content: bytes, max_rows: Optional[int]) -> SheetRows:
    try:
        book = xlrd.open_workbook(file_contents=content)
    except (xlrd.XLRDError, CompDocError) as e:
        raise StatementReadError(f"Could not open spreadsheet: {e}")

    sheets = []
    for sheet in book.sheets():
        values = []
        for r in range(sheet.nrows):
            row = []
            for cell in sheet.row(r):
                if cell.ctype == xlrd.XL_CELL_DATE:
                    row.append(xlrd.xldate_as_datetime(cell.value, book.datemode))
                elif cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                    row.append(None)
                else:
                    row.append(cell.value)
            values.append(row)
        sheets.append((sheet.name, sheet.nrows, values))

    return _select_sheet(sheets, max_rows)


def _select_sheet(sheets: list[tuple[str, int, list]], max_rows: Optional[int]) -> SheetRows:
    """Pick the first sheet with more than one row, else the first sheet."""
    if not sheets:
        raise StatementReadError("The workbook has no sheets")

    name, extent, values = next(((n, e, v) for n, e, v in sheets if len(v) > 1), sheets[0])
    rows = [build_row(index, record) for index, record in enumerate(_limit(values, max_rows))]
    logger.debug("Reading sheet %r (%d rows, extent %d)", name, len(rows), extent)
    return SheetRows(rows=rows, sheet_name=name, row_extent=extent or len(rows))


def _limit(records: list, max_rows: Optional[int]) -> list:
    if max_rows is not None and len(records) > max_rows:
        logger.warning("File has %d rows, only the first %d are processed", len(records), max_rows)
        return records[:max_rows]
    return records
