"""Tests for running balance checks."""

from datetime import date
from decimal import Decimal

from bankimport.domain.duplicates import movement_hash
from bankimport.domain.entities import ParsedMovement
from bankimport.domain.ledger import find_balance_mismatches


def movement(row_number, amount, balance):
    amount = Decimal(amount)
    return ParsedMovement(
        date=date(2024, 1, row_number),
        amount=amount,
        description=f"Movimiento {row_number}",
        duplicate_hash=movement_hash(date(2024, 1, row_number), amount, f"Movimiento {row_number}"),
        row_number=row_number,
        balance=Decimal(balance) if balance is not None else None,
    )


class TestFindBalanceMismatches:
    """Tests for find_balance_mismatches."""

    def test_consistent_oldest_first(self):
        movements = [movement(2, "-10.00", "90.00"), movement(3, "100.00", "190.00"), movement(4, "-0.50", "189.50")]
        assert find_balance_mismatches(movements) == []

    def test_consistent_newest_first(self):
        movements = [movement(2, "-0.50", "189.50"), movement(3, "100.00", "190.00"), movement(4, "-10.00", "90.00")]
        assert find_balance_mismatches(movements) == []

    def test_reports_inconsistent_row(self):
        movements = [movement(2, "-10.00", "90.00"), movement(3, "100.00", "190.00"), movement(4, "-20.00", "150.00")]
        assert find_balance_mismatches(movements) == [4]

    def test_within_tolerance(self):
        movements = [movement(2, "-10.00", "90.00"), movement(3, "10.00", "100.01")]
        assert find_balance_mismatches(movements) == []

    def test_rows_without_balance_are_not_checked(self):
        movements = [movement(2, "-10.00", "90.00"), movement(3, "5.00", None), movement(4, "1.00", "500.00")]
        assert find_balance_mismatches(movements) == []

    def test_short_batches(self):
        assert find_balance_mismatches([]) == []
        assert find_balance_mismatches([movement(2, "1.00", "1.00")]) == []
