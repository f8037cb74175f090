"""Running balance consistency checks."""

from decimal import Decimal
from typing import Sequence

from bankimport.domain.entities import ParsedMovement

LEDGER_TOLERANCE = Decimal("0.01")


def _breaks(previous: ParsedMovement, current: ParsedMovement, tolerance: Decimal) -> bool:
    if previous.balance is None or current.balance is None:
        return False
    return abs(previous.balance + current.amount - current.balance) > tolerance


def find_balance_mismatches(
    movements: Sequence[ParsedMovement], tolerance: Decimal = LEDGER_TOLERANCE
) -> list[int]:
    """Return row numbers whose balance does not follow from the previous one.

    A row is consistent when the previous balance plus its amount equals its
    balance within tolerance. Pairs where either row has no balance are not
    checked. Statements list movements oldest first or newest first, so both
    readings are tried and the one with fewer mismatches is reported.

    Args:
        movements: Parsed movements in file order
        tolerance: Largest accepted difference

    Returns:
        Sorted 1-based row numbers of the inconsistent movements
    """
    pairs = list(zip(movements, movements[1:]))
    oldest_first = [later.row_number for earlier, later in pairs if _breaks(earlier, later, tolerance)]
    newest_first = [newer.row_number for newer, older in pairs if _breaks(older, newer, tolerance)]
    if len(newest_first) < len(oldest_first):
        return sorted(newest_first)
    return sorted(oldest_first)
