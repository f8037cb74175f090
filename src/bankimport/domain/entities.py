"""Domain model entities for bankimport.

These are pure data classes representing the statement import vocabulary,
independent of the file formats they are read from and of the database
schema movements end up in.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from bankimport.domain.errors import ValidationError, incomplete_mapping
from bankimport.utils.date_parser import DATE_FORMATS
from bankimport.utils.text import normalize_label

# Column roles, in the order header cells are matched against them.
# value_date comes before date so "Fecha valor" is not taken as the posting date.
VALUE_DATE = "value_date"
DATE = "date"
CARGO = "cargo"
ABONO = "abono"
AMOUNT = "amount"
DESCRIPTION = "description"
COUNTERPARTY = "counterparty"
BALANCE = "balance"
CURRENCY = "currency"
REFERENCE = "reference"

ROLES = (
    VALUE_DATE,
    DATE,
    CARGO,
    ABONO,
    AMOUNT,
    DESCRIPTION,
    COUNTERPARTY,
    BALANCE,
    CURRENCY,
    REFERENCE,
)

OPTIONAL_ROLES = (VALUE_DATE, COUNTERPARTY, BALANCE, CURRENCY, REFERENCE)


class FileType(str, Enum):
    """Parse strategy for an input file."""

    CSV = "csv"
    XLSX = "xlsx"
    XLS = "xls"

    @property
    def is_spreadsheet(self) -> bool:
        return self is not FileType.CSV


@dataclass(frozen=True)
class RawRow:
    """One source row as ordered text cells.

    Cells are always text; blank cells are "". numeric_cells records which
    positions came from typed spreadsheet numbers, whose text always uses
    "." as decimal separator regardless of the bank's locale.
    """

    index: int
    cells: tuple[str, ...]
    numeric_cells: frozenset[int] = frozenset()

    @property
    def row_number(self) -> int:
        """1-based row number as a user would count it in the file."""
        return self.index + 1

    def cell(self, column: Optional[int]) -> str:
        if column is None or column < 0 or column >= len(self.cells):
            return ""
        return self.cells[column].strip()

    def is_numeric(self, column: Optional[int]) -> bool:
        return column is not None and column in self.numeric_cells

    def is_blank(self) -> bool:
        return all(not cell.strip() for cell in self.cells)

    def non_empty_cells(self) -> list[str]:
        return [cell.strip() for cell in self.cells if cell.strip()]


@dataclass(frozen=True)
class ColumnMapping:
    """Resolved role -> column index table."""

    date: Optional[int] = None
    value_date: Optional[int] = None
    amount: Optional[int] = None
    cargo: Optional[int] = None
    abono: Optional[int] = None
    description: Optional[int] = None
    counterparty: Optional[int] = None
    balance: Optional[int] = None
    currency: Optional[int] = None
    reference: Optional[int] = None

    @classmethod
    def from_dict(cls, columns: Mapping[str, int]) -> "ColumnMapping":
        """Build a mapping from {role: index}, rejecting unknown roles."""
        unknown = sorted(set(columns) - set(ROLES))
        if unknown:
            raise ValidationError(
                f"Unknown column role(s): {', '.join(unknown)}. "
                f"Must be one of: {', '.join(sorted(ROLES))}"
            )
        for role, index in columns.items():
            if not isinstance(index, int) or index < 0:
                raise ValidationError(f"Column index for '{role}' must be a non-negative integer")
        return cls(**dict(columns))

    def as_dict(self) -> dict[str, int]:
        """Return only the mapped roles."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    @property
    def has_split_amount(self) -> bool:
        return self.cargo is not None and self.abono is not None

    def missing_roles(self) -> list[str]:
        """Return the required roles this mapping does not resolve."""
        missing = []
        if self.date is None:
            missing.append(DATE)
        if self.description is None:
            missing.append(DESCRIPTION)
        if self.amount is None and not self.has_split_amount:
            missing.append(f"{AMOUNT} (or {CARGO} and {ABONO})")
        return missing

    @property
    def is_complete(self) -> bool:
        """Date and description mapped, and amount XOR the cargo/abono pair."""
        if self.missing_roles():
            return False
        return (self.amount is None) == self.has_split_amount

    def require_complete(self) -> None:
        """Raise ValidationError unless is_complete holds."""
        missing = self.missing_roles()
        if missing:
            raise ValidationError(incomplete_mapping(missing))
        if not self.is_complete:
            raise ValidationError("Column mapping must use either 'amount' or 'cargo'/'abono', not both")


@dataclass(frozen=True)
class BankProfile:
    """One institution's export layout.

    header_aliases maps a role to the header labels the bank uses for it.
    Labels are normalized on construction.
    """

    key: str
    name: str
    header_aliases: Mapping[str, tuple[str, ...]]
    date_format: str = "DD/MM/YYYY"
    decimal_separator: str = ","
    header_skip_rows: int = 0
    expected_roles: tuple[str, ...] = ()

    def __post_init__(self):
        unknown = sorted(set(self.header_aliases) - set(ROLES))
        if unknown:
            raise ValidationError(f"Profile '{self.key}' has unknown role(s): {', '.join(unknown)}")
        if self.date_format not in DATE_FORMATS:
            raise ValidationError(
                f"Profile '{self.key}' has unsupported date format '{self.date_format}'. "
                f"Must be one of: {', '.join(DATE_FORMATS)}"
            )
        if self.decimal_separator not in (",", "."):
            raise ValidationError(
                f"Profile '{self.key}' decimal separator must be ',' or '.'"
            )
        if self.header_skip_rows < 0:
            raise ValidationError(f"Profile '{self.key}' header_skip_rows must not be negative")

        aliases = {
            role: tuple(dict.fromkeys(normalize_label(label) for label in labels if normalize_label(label)))
            for role, labels in self.header_aliases.items()
        }
        aliases = {role: labels for role, labels in aliases.items() if labels}
        object.__setattr__(self, "header_aliases", MappingProxyType(aliases))

        resolvable = (
            DATE in aliases
            and DESCRIPTION in aliases
            and (AMOUNT in aliases or (CARGO in aliases and ABONO in aliases))
        )
        if not resolvable:
            raise ValidationError(
                f"Profile '{self.key}' must define date, description and amount "
                "(or cargo and abono) header aliases"
            )

        expected = tuple(self.expected_roles) or tuple(role for role in ROLES if role in aliases)
        object.__setattr__(self, "expected_roles", expected)

    def roles_for(self, label: str) -> list[str]:
        """Return roles whose vocabulary contains the normalized label, in match order."""
        return [role for role in ROLES if label in self.header_aliases.get(role, ())]


@dataclass(frozen=True)
class HeaderDetectionResult:
    """Outcome of the header search."""

    header_row_index: int
    data_start_row_index: int
    mapping: ColumnMapping
    confidence: float
    fallback_required: bool
    profile_key: str
    headers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedMovement:
    """One normalized transaction."""

    date: date
    amount: Decimal
    description: str
    duplicate_hash: str
    row_number: int
    value_date: Optional[date] = None
    counterparty: Optional[str] = None
    reference: Optional[str] = None
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
    is_duplicate: bool = False
    raw: Optional[RawRow] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DuplicateStats:
    """Batch duplicate summary."""

    total: int
    duplicates: int
    unique: int
    duplicate_groups: int


@dataclass(frozen=True)
class CrossBatchResult:
    """New movements left after removing those already persisted."""

    movements: list[ParsedMovement]
    excluded: int


@dataclass(frozen=True)
class ImportResult:
    """Result of parsing one statement file."""

    movements: list[ParsedMovement]
    total_rows: int
    errors: list[str]
    bank_key: str
    bank_name: str
    confidence: float
    duplicate_stats: DuplicateStats
    file_type: FileType
    header: Optional[HeaderDetectionResult] = None
    sheet_name: Optional[str] = None
    preview_limit: int = 20
    warnings: list[str] = field(default_factory=list)
    decimal_separator: Optional[str] = None

    @property
    def preview(self) -> list[ParsedMovement]:
        return self.movements[: self.preview_limit]

    @property
    def fallback_required(self) -> bool:
        return self.header is not None and self.header.fallback_required

    def summary(self) -> dict[str, Any]:
        """Counters for user-facing import summaries."""
        return {
            "bank": self.bank_key,
            "confidence": self.confidence,
            "total_rows": self.total_rows,
            "movements": len(self.movements),
            "errors": len(self.errors),
            "duplicates": self.duplicate_stats.duplicates,
            "warnings": len(self.warnings),
            "fallback_required": self.fallback_required,
        }


@dataclass(frozen=True)
class Account:
    """Bank account a statement is imported into."""

    id: int
    name: str
    bank_name: str
    created_at: datetime


@dataclass(frozen=True)
class StoredMovement:
    """A movement already persisted by the movement store."""

    id: int
    account_id: int
    date: date
    amount: Decimal
    description: str
    duplicate_hash: str
    imported_at: datetime
    value_date: Optional[date] = None
    counterparty: Optional[str] = None
    reference: Optional[str] = None
    balance: Optional[Decimal] = None
    currency: Optional[str] = None
