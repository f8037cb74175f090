"""Statement import domain service."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional

from bankimport.domain.account import AccountService
from bankimport.domain.duplicates import exclude_persisted, remove_duplicates
from bankimport.domain.entities import ColumnMapping, ImportResult
from bankimport.domain.errors import NotFoundError, ValidationError
from bankimport.domain.statement_parser import StatementParser

if TYPE_CHECKING:
    from bankimport.database.base import Database

logger = logging.getLogger(__name__)


class MovementImportService:
    """Service for importing statement files into accounts."""

    def __init__(self, db: "Database", parser: Optional[StatementParser] = None):
        """Initialize import service.

        Args:
            db: Database instance
            parser: Statement parser (defaults to one using the built-in profiles)
        """
        self.db = db
        self.parser = parser or StatementParser()
        self.account_service = AccountService(db)

    def parse_file(
        self,
        file_path: str | Path,
        content_type: Optional[str] = None,
        mapping: Optional[ColumnMapping | Mapping[str, int]] = None,
        header_row: Optional[int] = None,
        profile_key: Optional[str] = None,
    ) -> ImportResult:
        """Parse a statement file without storing anything.

        Args:
            file_path: Path to the statement
            content_type: Declared content type, if known
            mapping: Manual column mapping; skips header detection
            header_row: 0-based header row used with a manual mapping
            profile_key: Profile for date/decimal conventions of a manual mapping

        Raises:
            NotFoundError: If the file does not exist
            ValidationError: If the manual mapping is incomplete, or a header
                row or profile is given without a mapping
        """
        path = Path(file_path)
        if not path.is_file():
            raise NotFoundError(f"Statement file not found: {file_path}")

        if mapping is None and (header_row is not None or profile_key is not None):
            raise ValidationError("A header row or profile can only be given together with a column mapping")

        content = path.read_bytes()
        if mapping is not None:
            return self.parser.parse_with_mapping(
                content,
                path.name,
                mapping,
                header_row_index=header_row,
                content_type=content_type,
                profile_key=profile_key,
            )
        return self.parser.parse(content, path.name, content_type)

    def import_file(
        self,
        file_path: str | Path,
        account: str | int,
        content_type: Optional[str] = None,
        mapping: Optional[ColumnMapping | Mapping[str, int]] = None,
        header_row: Optional[int] = None,
        keep_duplicates: bool = False,
        profile_key: Optional[str] = None,
    ) -> dict[str, Any]:
        """Import movements from a statement file.

        Args:
            file_path: Path to the statement
            account: Account name or ID
            content_type: Declared content type, if known
            mapping: Manual column mapping; skips header detection
            header_row: 0-based header row used with a manual mapping
            keep_duplicates: Keep repeated movements within the file
            profile_key: Profile for date/decimal conventions of a manual mapping

        Returns:
            Dict with import statistics:
            - imported: number of movements stored
            - skipped: number of movements already stored for the account
            - duplicates_in_file: repeated movements dropped from the file
            - errors: list of error messages
            - warnings: rows whose running balance does not add up
            - bank: key of the matched bank profile
            - confidence: header detection confidence
            - fallback_required: True when a manual mapping is needed
            - available_columns: header candidate cells, for building a mapping

        Raises:
            NotFoundError: If the account or the file does not exist
            ValidationError: If the manual mapping is incomplete
        """
        target = self.account_service.resolve_account(account)
        result = self.parse_file(file_path, content_type, mapping, header_row, profile_key)

        stats: dict[str, Any] = {
            "imported": 0,
            "skipped": 0,
            "duplicates_in_file": 0,
            "errors": list(result.errors),
            "warnings": list(result.warnings),
            "bank": result.bank_key,
            "confidence": result.confidence,
            "fallback_required": result.fallback_required,
            "available_columns": list(result.header.headers) if result.header else [],
        }
        if result.fallback_required or not result.movements:
            return stats

        movements = result.movements
        if not keep_duplicates:
            unique = remove_duplicates(movements)
            stats["duplicates_in_file"] = len(movements) - len(unique)
            movements = unique

        cross_batch = exclude_persisted(movements, self.db.list_movements(account_id=target.id))
        stats["skipped"] = cross_batch.excluded
        if cross_batch.movements:
            stats["imported"] = self.db.add_movements(target.id, cross_batch.movements)

        logger.info(
            "Imported %d movement(s) into '%s' (%d already stored, %d repeated in file)",
            stats["imported"],
            target.name,
            stats["skipped"],
            stats["duplicates_in_file"],
        )
        return stats
