"""Classification of an input file into a parse strategy."""

from pathlib import PurePath
from typing import Optional

from bankimport.domain.entities import FileType

CONTENT_TYPES = {
    "text/csv": FileType.CSV,
    "application/csv": FileType.CSV,
    "text/comma-separated-values": FileType.CSV,
    "text/plain": FileType.CSV,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": FileType.XLSX,
    "application/vnd.ms-excel.sheet.macroenabled.12": FileType.XLSX,
    "application/vnd.ms-excel": FileType.XLS,
}

EXTENSIONS = {
    ".csv": FileType.CSV,
    ".txt": FileType.CSV,
    ".xlsx": FileType.XLSX,
    ".xlsm": FileType.XLSX,
    ".xls": FileType.XLS,
}


def detect_file_type(file_name: Optional[str], content_type: Optional[str] = None) -> FileType:
    """Pick the parse strategy for a file.

    A recognized declared content type wins, then the file extension.
    Anything else is treated as xlsx, the shape most bank exports take.
    """
    if content_type:
        # Drop parameters such as "; charset=utf-8"
        declared = content_type.split(";")[0].strip().lower()
        if declared in CONTENT_TYPES:
            return CONTENT_TYPES[declared]

    if file_name:
        extension = PurePath(file_name.strip()).suffix.lower()
        if extension in EXTENSIONS:
            return EXTENSIONS[extension]

    return FileType.XLSX
