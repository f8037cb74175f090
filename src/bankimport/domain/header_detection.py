"""Header row and column role detection."""

from dataclasses import dataclass
import logging
import re
from typing import Optional

from bankimport.domain.entities import (
    ABONO,
    AMOUNT,
    CARGO,
    DATE,
    DESCRIPTION,
    OPTIONAL_ROLES,
    VALUE_DATE,
    BankProfile,
    ColumnMapping,
    HeaderDetectionResult,
    RawRow,
)
from bankimport.domain.profiles import BankProfileRegistry
from bankimport.utils.text import normalize_label

logger = logging.getLogger(__name__)

LOGO_ROW_THRESHOLD = 0.4
MIN_HEADER_CELLS = 2

_LOGO_PATTERNS = (
    re.compile(r"^data:image", re.IGNORECASE),
    re.compile(r"\.(png|jpe?g|gif|svg)\b", re.IGNORECASE),
    re.compile(r"^[A-Za-z0-9+/]{50,}={0,2}$"),
    re.compile(r"^\s*\[(imagen|logo|image)\]", re.IGNORECASE),
)


def is_logo_row(row: RawRow) -> bool:
    """Return True when most of the row looks like embedded images or logos."""
    cells = row.non_empty_cells()
    if not cells:
        return True

    suspicious = 0
    for cell in cells:
        if len(cell) > 50 and " " not in cell:
            suspicious += 1
        elif any(pattern.search(cell) for pattern in _LOGO_PATTERNS):
            suspicious += 1
    return suspicious / len(cells) > LOGO_ROW_THRESHOLD


@dataclass(frozen=True)
class _Candidate:
    """One profile's reading of one row."""

    position: int
    profile: BankProfile
    columns: dict[str, int]
    is_generic: bool

    @property
    def score(self) -> int:
        return len(self.columns)

    @property
    def is_valid(self) -> bool:
        has_amount = AMOUNT in self.columns or (CARGO in self.columns and ABONO in self.columns)
        return DATE in self.columns and DESCRIPTION in self.columns and has_amount

    @property
    def confidence(self) -> float:
        return min(1.0, self.score / len(self.profile.expected_roles))


class HeaderDetector:
    """Finds the header row of a statement and maps its columns to roles."""

    def __init__(self, registry: BankProfileRegistry, search_rows: int = 20):
        """Initialize detector.

        Args:
            registry: Profiles to match header rows against
            search_rows: Number of leading rows searched for the header
        """
        self.registry = registry
        self.search_rows = search_rows

    def detect(self, rows: list[RawRow], row_extent: Optional[int] = None) -> HeaderDetectionResult:
        """Locate the header row and resolve column roles.

        Args:
            rows: Materialized source rows
            row_extent: Row count reported by a spreadsheet source, further
                bounding the search window

        Returns:
            Detection result; fallback_required is set when no row in the
            window has a date, an amount and a description column
        """
        window = min(self.search_rows, len(rows))
        if row_extent is not None:
            window = min(window, row_extent)

        best_position: Optional[int] = None
        best_rank = (False, 0)
        row_candidates: dict[int, list[_Candidate]] = {}

        for position in range(window):
            row = rows[position]
            if len(row.non_empty_cells()) < MIN_HEADER_CELLS or is_logo_row(row):
                continue

            candidates = [
                self._match(position, row, profile)
                for profile in self.registry.all_profiles()
                if position >= profile.header_skip_rows
            ]
            candidates = [c for c in candidates if c.score]
            if not candidates:
                continue

            row_candidates[position] = candidates
            rank = max((c.is_valid, c.score) for c in candidates)
            logger.debug("Row %d header rank: valid=%s score=%d", row.row_number, *rank)
            if best_position is None or rank > best_rank:
                best_position, best_rank = position, rank

        if best_position is None or not best_rank[0]:
            return self._fallback(rows, best_position)

        candidates = row_candidates[best_position]
        winner = max(
            (c for c in candidates if c.is_valid),
            key=lambda c: (c.confidence, not c.is_generic, c.score),
        )
        columns = dict(winner.columns)

        generic = next((c for c in candidates if c.is_generic), None)
        if generic is not None and generic is not winner:
            used = set(columns.values())
            for role in OPTIONAL_ROLES:
                column = generic.columns.get(role)
                if role not in columns and column is not None and column not in used:
                    columns[role] = column
                    used.add(column)

        columns = _resolve_amount_columns(columns)
        header_row = rows[best_position]
        logger.debug(
            "Header found at row %d for profile '%s' (confidence %.2f)",
            header_row.row_number,
            winner.profile.key,
            winner.confidence,
        )
        return HeaderDetectionResult(
            header_row_index=best_position,
            data_start_row_index=best_position + 1,
            mapping=ColumnMapping(**columns),
            confidence=winner.confidence,
            fallback_required=False,
            profile_key=winner.profile.key,
            headers=header_row.cells,
        )

    def _match(self, position: int, row: RawRow, profile: BankProfile) -> _Candidate:
        columns: dict[str, int] = {}
        for column, cell in enumerate(row.cells):
            label = normalize_label(cell)
            if not label:
                continue
            for role in profile.roles_for(label):
                if role not in columns:
                    columns[role] = column
                    break

        # A lone value date is the best posting date the row offers
        if DATE not in columns and VALUE_DATE in columns:
            columns[DATE] = columns.pop(VALUE_DATE)

        return _Candidate(
            position=position,
            profile=profile,
            columns=columns,
            is_generic=self.registry.is_generic(profile),
        )

    def _fallback(self, rows: list[RawRow], best_position: Optional[int]) -> HeaderDetectionResult:
        position = best_position if best_position is not None else 0
        headers = rows[position].cells if rows else ()
        logger.debug("No header row found in the first %d rows", self.search_rows)
        return HeaderDetectionResult(
            header_row_index=position,
            data_start_row_index=position + 1,
            mapping=ColumnMapping(),
            confidence=0.0,
            fallback_required=True,
            profile_key=self.registry.generic.key,
            headers=headers,
        )


def _resolve_amount_columns(columns: dict[str, int]) -> dict[str, int]:
    """Prefer a cargo/abono pair over a combined amount column."""
    has_pair = CARGO in columns and ABONO in columns
    if has_pair and AMOUNT in columns:
        columns.pop(AMOUNT)
    elif AMOUNT in columns:
        columns.pop(CARGO, None)
        columns.pop(ABONO, None)
    return columns
