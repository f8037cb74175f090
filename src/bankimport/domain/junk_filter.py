"""Recognition of non-transactional statement rows."""

import re

from bankimport.domain.entities import BankProfile, ColumnMapping, RawRow
from bankimport.utils.date_parser import parse_statement_date_any
from bankimport.utils.text import normalize_label

STOPLIST = frozenset(
    {
        "total",
        "totales",
        "subtotal",
        "suma",
        "saldo",
        "saldo inicial",
        "saldo final",
        "saldo anterior",
        "saldo actual",
        "saldo disponible",
        "resumen",
        "summary",
        "balance",
        "opening balance",
        "closing balance",
        "pagina",
        "pagina de",
        "page",
        "page of",
        "hoja",
        "continua",
        "continuacion",
    }
)

_SEPARATOR_RE = re.compile(r"^[\s\-_=*]*$")


def stoplist_label(text: str) -> str:
    """Normalize a cell for stoplist lookups, dropping tokens that carry digits.

    "Saldo final 31/01/2024" and "Página 2 de 5" reduce to their label.
    """
    tokens = [token for token in normalize_label(text).split() if not any(ch.isdigit() for ch in token)]
    return " ".join(tokens)


class JunkRowFilter:
    """Table-driven predicate for rows that are not movements."""

    def __init__(self, profile: BankProfile):
        self.profile = profile

    def is_junk(self, row: RawRow, mapping: ColumnMapping) -> bool:
        """Return True for blank, separator, summary or undated rows."""
        if row.is_blank() or all(_SEPARATOR_RE.match(cell) for cell in row.cells):
            return True

        cells = row.non_empty_cells()
        if cells and stoplist_label(cells[0]) in STOPLIST:
            return True
        if mapping.description is not None:
            description = row.cell(mapping.description)
            if description and stoplist_label(description) in STOPLIST:
                return True

        if mapping.date is not None:
            try:
                parse_statement_date_any(row.cell(mapping.date), self.profile.date_format)
            except ValueError:
                return True
        return False
