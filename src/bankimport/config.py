"""Import settings and environment configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DB_PATH_ENV = "BANKIMPORT_DB_PATH"
PROFILES_ENV = "BANKIMPORT_PROFILES"

# Bank letterheads and cover rows rarely take more than this before the header.
DEFAULT_HEADER_SEARCH_ROWS = 20
DEFAULT_PREVIEW_LIMIT = 20
DEFAULT_MAX_ROWS = 50_000
DEFAULT_MAX_FILE_SIZE = 8 * 1024 * 1024


@dataclass(frozen=True)
class ImportSettings:
    """Tunable limits of the statement parser."""

    header_search_rows: int = DEFAULT_HEADER_SEARCH_ROWS
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    max_rows: int = DEFAULT_MAX_ROWS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    def __post_init__(self):
        # Imported lazily: bankimport.domain imports this module.
        from bankimport.domain.errors import ValidationError

        for name in ("header_search_rows", "preview_limit", "max_rows", "max_file_size"):
            if getattr(self, name) < 1:
                raise ValidationError(f"{name} must be a positive integer")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ImportSettings":
        """Build settings from BANKIMPORT_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ValidationError: If a variable is set to a non-integer value
        """
        from bankimport.domain.errors import ValidationError

        environ = os.environ if environ is None else environ
        values = {}
        for name in ("header_search_rows", "preview_limit", "max_rows", "max_file_size"):
            variable = f"BANKIMPORT_{name.upper()}"
            raw = environ.get(variable)
            if raw is None or not raw.strip():
                continue
            try:
                values[name] = int(raw)
            except ValueError:
                raise ValidationError(f"{variable} must be an integer, got '{raw}'")
        return cls(**values)


def default_database_path() -> str:
    """Return BANKIMPORT_DB_PATH or ~/.bankimport/bankimport.db."""
    database_path = os.environ.get(DB_PATH_ENV)
    if database_path:
        return database_path

    db_dir = Path.home() / ".bankimport"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "bankimport.db")
