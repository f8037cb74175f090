"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from bankimport.domain.entities import (
    Account,
    BankProfile,
    ColumnMapping,
    ParsedMovement,
    RawRow,
)
from bankimport.domain.errors import ValidationError


class TestAccount:
    """Tests for Account entity."""

    def test_create_account(self):
        account = Account(id=1, name="Nómina", bank_name="Santander", created_at=datetime.now(UTC))
        assert account.id == 1
        assert account.name == "Nómina"
        assert account.bank_name == "Santander"

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(id=1, name="Nómina", bank_name="Santander", created_at=datetime.now(UTC))
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.name = "Ahorro"


class TestRawRow:
    """Tests for RawRow cell access."""

    def test_row_number_is_one_based(self):
        assert RawRow(index=0, cells=("a",)).row_number == 1

    def test_cell_out_of_range_is_blank(self):
        row = RawRow(index=0, cells=(" Compra ", ""))
        assert row.cell(0) == "Compra"
        assert row.cell(5) == ""
        assert row.cell(None) == ""

    def test_blank_row(self):
        assert RawRow(index=0, cells=("", "  ")).is_blank()
        assert not RawRow(index=0, cells=("", "x")).is_blank()

    def test_numeric_cells(self):
        row = RawRow(index=0, cells=("01/02/2024", "-12.5"), numeric_cells=frozenset({1}))
        assert row.is_numeric(1)
        assert not row.is_numeric(0)
        assert not row.is_numeric(None)


class TestColumnMapping:
    """Tests for ColumnMapping completeness rules."""

    def test_amount_mapping_is_complete(self):
        mapping = ColumnMapping(date=0, description=1, amount=2)
        assert mapping.is_complete
        mapping.require_complete()

    def test_split_amount_mapping_is_complete(self):
        mapping = ColumnMapping(date=0, description=1, cargo=2, abono=3)
        assert mapping.has_split_amount
        assert mapping.is_complete

    def test_lone_cargo_is_incomplete(self):
        mapping = ColumnMapping(date=0, description=1, cargo=2)
        assert not mapping.is_complete
        with pytest.raises(ValidationError, match="amount"):
            mapping.require_complete()

    def test_amount_and_split_pair_is_incomplete(self):
        mapping = ColumnMapping(date=0, description=1, amount=2, cargo=3, abono=4)
        assert not mapping.is_complete
        with pytest.raises(ValidationError, match="either"):
            mapping.require_complete()

    def test_missing_roles(self):
        assert ColumnMapping(amount=2).missing_roles() == ["date", "description"]

    def test_from_dict(self):
        mapping = ColumnMapping.from_dict({"date": 0, "description": 2, "amount": 3})
        assert mapping.date == 0
        assert mapping.as_dict() == {"date": 0, "description": 2, "amount": 3}

    def test_from_dict_rejects_unknown_role(self):
        with pytest.raises(ValidationError, match="Unknown column role"):
            ColumnMapping.from_dict({"date": 0, "concepto": 1})

    def test_from_dict_rejects_negative_index(self):
        with pytest.raises(ValidationError, match="non-negative"):
            ColumnMapping.from_dict({"date": -1})


class TestBankProfile:
    """Tests for BankProfile validation."""

    def test_aliases_are_normalized(self):
        profile = BankProfile(
            key="test",
            name="Test",
            header_aliases={
                "date": ("Fecha Operación", "fecha operacion"),
                "description": ("Concepto",),
                "amount": ("Importe",),
            },
        )
        assert profile.header_aliases["date"] == ("fecha operacion",)
        assert profile.roles_for("concepto") == ["description"]
        assert profile.expected_roles == ("date", "amount", "description")

    def test_unresolvable_profile_rejected(self):
        with pytest.raises(ValidationError, match="must define"):
            BankProfile(
                key="test",
                name="Test",
                header_aliases={"date": ("Fecha",), "description": ("Concepto",)},
            )

    def test_unsupported_date_format_rejected(self):
        with pytest.raises(ValidationError, match="date format"):
            BankProfile(
                key="test",
                name="Test",
                header_aliases={"date": ("Fecha",), "description": ("Concepto",), "amount": ("Importe",)},
                date_format="MM/DD/YYYY",
            )


class TestParsedMovement:
    """Tests for ParsedMovement equality."""

    def test_raw_row_ignored_in_equality(self):
        kwargs = dict(
            date=date(2024, 1, 2),
            amount=Decimal("-10.00"),
            description="Compra",
            duplicate_hash="0123456789abcdef",
            row_number=5,
        )
        first = ParsedMovement(raw=RawRow(index=4, cells=("a",)), **kwargs)
        second = ParsedMovement(raw=RawRow(index=4, cells=("b",)), **kwargs)
        assert first == second
