"""Statement parsing pipeline.

raw file -> rows -> header detection -> junk filter -> row parser ->
duplicate flagging -> balance check -> ImportResult.
"""

import logging
from typing import Mapping, Optional

from bankimport.config import ImportSettings
from bankimport.domain.duplicates import duplicate_stats, flag_duplicates
from bankimport.domain.entities import (
    BankProfile,
    ColumnMapping,
    FileType,
    HeaderDetectionResult,
    ImportResult,
    RawRow,
)
from bankimport.domain.errors import (
    MissingDescriptionError,
    RowParseError,
    StatementReadError,
    ValidationError,
    balance_mismatch,
    row_error,
)
from bankimport.domain.file_type import detect_file_type
from bankimport.domain.header_detection import HeaderDetector
from bankimport.domain.junk_filter import JunkRowFilter
from bankimport.domain.ledger import find_balance_mismatches
from bankimport.domain.movement_parser import MovementParser
from bankimport.domain.profiles import BankProfileRegistry, default_registry
from bankimport.domain.row_sources import (
    SheetRows,
    decode_text,
    read_delimited_rows,
    read_spreadsheet_rows,
)
from bankimport.utils.amount_parser import infer_decimal_separator

logger = logging.getLogger(__name__)


class StatementParser:
    """Turns bank statement files into normalized movements."""

    def __init__(
        self,
        registry: Optional[BankProfileRegistry] = None,
        settings: Optional[ImportSettings] = None,
    ):
        """Initialize statement parser.

        Args:
            registry: Bank profiles (defaults to the built-in registry)
            settings: Parser limits (defaults to ImportSettings())
        """
        self.registry = registry or default_registry()
        self.settings = settings or ImportSettings()
        self.detector = HeaderDetector(self.registry, self.settings.header_search_rows)

    def parse(
        self, content: bytes | str, file_name: str, content_type: Optional[str] = None
    ) -> ImportResult:
        """Parse a statement file, detecting its header and bank.

        Args:
            content: Raw file content
            file_name: Original file name, used to pick the parse strategy
            content_type: Declared content type, if known

        Returns:
            ImportResult. Unreadable or empty files give a result with no
            movements and a single error; an undetectable header gives a
            result with fallback_required set.
        """
        file_type = detect_file_type(file_name, content_type)
        try:
            sheet = self.read_rows(content, file_type)
        except StatementReadError as e:
            return self._failed(file_type, str(e))

        return self.parse_rows(
            sheet.rows, file_type=file_type, row_extent=sheet.row_extent, sheet_name=sheet.sheet_name
        )

    def parse_rows(
        self,
        rows: list[RawRow],
        file_type: FileType = FileType.CSV,
        row_extent: Optional[int] = None,
        sheet_name: Optional[str] = None,
    ) -> ImportResult:
        """Run the pipeline over already materialized rows."""
        if not rows or all(row.is_blank() for row in rows):
            return self._failed(file_type, "The file contains no rows")

        header = self.detector.detect(rows, row_extent)
        if header.fallback_required:
            logger.info("No header detected, a manual column mapping is required")
            generic = self.registry.generic
            return ImportResult(
                movements=[],
                total_rows=len(rows),
                errors=[],
                bank_key=generic.key,
                bank_name=generic.name,
                confidence=0.0,
                duplicate_stats=duplicate_stats([]),
                file_type=file_type,
                header=header,
                sheet_name=sheet_name,
                preview_limit=self.settings.preview_limit,
            )

        profile = self.registry.get(header.profile_key)
        return self._parse_movements(rows, header, profile, file_type, sheet_name)

    def parse_with_mapping(
        self,
        content: bytes | str,
        file_name: str,
        mapping: ColumnMapping | Mapping[str, int],
        header_row_index: Optional[int] = None,
        content_type: Optional[str] = None,
        profile_key: Optional[str] = None,
    ) -> ImportResult:
        """Parse a statement with a caller-supplied column mapping.

        Used after a parse reported fallback_required. Header detection is
        skipped and the result reports full confidence.

        Args:
            content: Raw file content
            file_name: Original file name
            mapping: ColumnMapping or {role: column index}
            header_row_index: 0-based header row; data starts on the next
                row. When None, the row header detection ranked best is used.
            content_type: Declared content type, if known
            profile_key: Profile supplying date and decimal conventions
                (defaults to the generic profile)

        Raises:
            ValidationError: If the mapping is incomplete or the header row
                is outside the file
            NotFoundError: If profile_key is unknown
        """
        if not isinstance(mapping, ColumnMapping):
            mapping = ColumnMapping.from_dict(mapping)
        mapping.require_complete()
        profile = self.registry.get(profile_key) if profile_key else self.registry.generic

        file_type = detect_file_type(file_name, content_type)
        try:
            sheet = self.read_rows(content, file_type)
        except StatementReadError as e:
            return self._failed(file_type, str(e))

        rows = sheet.rows
        if not rows or all(row.is_blank() for row in rows):
            return self._failed(file_type, "The file contains no rows")

        if header_row_index is None:
            header_row_index = self.detector.detect(rows, sheet.row_extent).header_row_index
        if not 0 <= header_row_index < len(rows):
            raise ValidationError(
                f"Header row {header_row_index + 1} is outside the file ({len(rows)} rows)"
            )

        header = HeaderDetectionResult(
            header_row_index=header_row_index,
            data_start_row_index=header_row_index + 1,
            mapping=mapping,
            confidence=1.0,
            fallback_required=False,
            profile_key=profile.key,
            headers=rows[header_row_index].cells,
        )
        return self._parse_movements(rows, header, profile, file_type, sheet.sheet_name)

    def read_rows(self, content: bytes | str, file_type: FileType) -> SheetRows:
        """Materialize a file into rows.

        Raises:
            StatementReadError: If the file is empty, too large or unreadable
        """
        if content is None or len(content) == 0:
            raise StatementReadError("The file is empty")
        if len(content) > self.settings.max_file_size:
            raise StatementReadError(
                f"The file is too large ({len(content)} bytes, limit {self.settings.max_file_size})"
            )

        if not file_type.is_spreadsheet:
            return read_delimited_rows(decode_text(content), self.settings.max_rows)
        if isinstance(content, str):
            raise StatementReadError(f"A {file_type.value} file must be read as bytes")
        return read_spreadsheet_rows(content, file_type, self.settings.max_rows)

    def _parse_movements(
        self,
        rows: list[RawRow],
        header: HeaderDetectionResult,
        profile: BankProfile,
        file_type: FileType,
        sheet_name: Optional[str],
    ) -> ImportResult:
        junk_filter = JunkRowFilter(profile)
        mapping = header.mapping
        data_rows = [row for row in rows[header.data_start_row_index :] if not junk_filter.is_junk(row, mapping)]
        junk = len(rows) - header.data_start_row_index - len(data_rows)

        separator = self._decimal_separator(data_rows, mapping, profile)
        parser = MovementParser(profile, separator)

        movements = []
        errors = []
        for row in data_rows:
            try:
                movement = parser.parse(row, mapping)
                if not movement.description:
                    raise MissingDescriptionError("Missing description")
            except RowParseError as e:
                logger.debug("Rejected row %d: %s", row.row_number, e)
                errors.append(row_error(row.row_number, e))
                continue
            movements.append(movement)

        movements = flag_duplicates(movements)
        stats = duplicate_stats(movements)
        warnings = [balance_mismatch(row_number) for row_number in find_balance_mismatches(movements)]
        logger.info(
            "Parsed %d movement(s) with profile '%s': %d error(s), %d junk row(s), %d duplicate(s), %d warning(s)",
            len(movements),
            profile.key,
            len(errors),
            junk,
            stats.duplicates,
            len(warnings),
        )
        return ImportResult(
            movements=movements,
            total_rows=len(rows),
            errors=errors,
            bank_key=profile.key,
            bank_name=profile.name,
            confidence=header.confidence,
            duplicate_stats=stats,
            file_type=file_type,
            header=header,
            sheet_name=sheet_name,
            preview_limit=self.settings.preview_limit,
            warnings=warnings,
            decimal_separator=separator,
        )

    def _decimal_separator(self, rows: list[RawRow], mapping: ColumnMapping, profile: BankProfile) -> str:
        """Return the decimal separator the text amounts of the file use.

        Falls back to the profile's separator when the samples are ambiguous.
        """
        columns = [
            column
            for column in (mapping.amount, mapping.cargo, mapping.abono, mapping.balance)
            if column is not None
        ]
        samples = [row.cell(column) for row in rows for column in columns if not row.is_numeric(column)]
        inferred = infer_decimal_separator(samples)
        if inferred is None or inferred == profile.decimal_separator:
            return profile.decimal_separator
        logger.info(
            "Amounts use '%s' as decimal separator, overriding '%s' of profile '%s'",
            inferred,
            profile.decimal_separator,
            profile.key,
        )
        return inferred

    def _failed(self, file_type: FileType, message: str) -> ImportResult:
        logger.warning("Could not read statement: %s", message)
        generic = self.registry.generic
        return ImportResult(
            movements=[],
            total_rows=0,
            errors=[message],
            bank_key=generic.key,
            bank_name=generic.name,
            confidence=0.0,
            duplicate_stats=duplicate_stats([]),
            file_type=file_type,
            preview_limit=self.settings.preview_limit,
        )
