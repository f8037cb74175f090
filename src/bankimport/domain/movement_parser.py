"""Conversion of one statement row into a ParsedMovement."""

from datetime import date
from decimal import Decimal
from typing import Optional

from bankimport.domain.duplicates import movement_hash
from bankimport.domain.entities import BankProfile, ColumnMapping, ParsedMovement, RawRow
from bankimport.domain.errors import (
    InvalidAmountError,
    InvalidDateError,
    MissingAmountError,
)
from bankimport.utils.amount_parser import parse_amount
from bankimport.utils.date_parser import parse_statement_date_any


class MovementParser:
    """Parses rows with a profile's date and decimal conventions."""

    def __init__(self, profile: BankProfile, decimal_separator: Optional[str] = None):
        """Initialize row parser.

        Args:
            profile: Profile supplying date and decimal conventions
            decimal_separator: Override for text amounts, e.g. one inferred
                from the file (defaults to the profile's separator)
        """
        self.profile = profile
        self.decimal_separator = decimal_separator or profile.decimal_separator

    def parse(self, row: RawRow, mapping: ColumnMapping) -> ParsedMovement:
        """Parse a row into a movement.

        Args:
            row: Source row
            mapping: Resolved column roles

        Returns:
            ParsedMovement carrying the source row and its duplicate hash.
            The description may be empty.

        Raises:
            InvalidDateError: If the date is blank or unparsable
            MissingAmountError: If no amount can be resolved
            InvalidAmountError: If an amount cell is not a number
        """
        posting_date = self.parse_date(row, mapping.date)
        amount = self.parse_row_amount(row, mapping)
        description = row.cell(mapping.description)

        return ParsedMovement(
            date=posting_date,
            amount=amount,
            description=description,
            duplicate_hash=movement_hash(posting_date, amount, description),
            row_number=row.row_number,
            value_date=self._optional_date(row, mapping.value_date),
            counterparty=row.cell(mapping.counterparty) or None,
            reference=row.cell(mapping.reference) or None,
            balance=self._optional_amount(row, mapping.balance),
            currency=row.cell(mapping.currency).upper() or None,
            raw=row,
        )

    def parse_date(self, row: RawRow, column: Optional[int]) -> date:
        text = row.cell(column)
        if not text:
            raise InvalidDateError("Missing date")
        try:
            return parse_statement_date_any(text, self.profile.date_format)
        except ValueError:
            raise InvalidDateError(f"Invalid date '{text}'")

    def parse_row_amount(self, row: RawRow, mapping: ColumnMapping) -> Decimal:
        """Resolve the signed amount from an amount column or a cargo/abono pair."""
        if mapping.amount is not None:
            text = row.cell(mapping.amount)
            if not text:
                raise MissingAmountError("Missing amount")
            return self._amount(row, mapping.amount)

        if mapping.has_split_amount:
            cargo = self._amount(row, mapping.cargo) if row.cell(mapping.cargo) else Decimal("0.00")
            abono = self._amount(row, mapping.abono) if row.cell(mapping.abono) else Decimal("0.00")
            return abono - cargo

        raise MissingAmountError("Missing amount")

    def _amount(self, row: RawRow, column: int) -> Decimal:
        text = row.cell(column)
        separator = "." if row.is_numeric(column) else self.decimal_separator
        try:
            return parse_amount(text, separator)
        except ValueError:
            raise InvalidAmountError(f"Invalid amount '{text}'")

    def _optional_date(self, row: RawRow, column: Optional[int]) -> Optional[date]:
        text = row.cell(column)
        if not text:
            return None
        try:
            return parse_statement_date_any(text, self.profile.date_format)
        except ValueError:
            return None

    def _optional_amount(self, row: RawRow, column: Optional[int]) -> Optional[Decimal]:
        if not row.cell(column):
            return None
        try:
            return self._amount(row, column)
        except InvalidAmountError:
            return None
