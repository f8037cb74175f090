"""Domain tests for the movement import service."""

from decimal import Decimal

import pytest

from bankimport.domain.errors import NotFoundError, ValidationError


def test_import_result_contract(import_service, sample_account, fixtures_dir):
    """Import returns a structured result contract."""
    result = import_service.import_file(fixtures_dir / "santander_movimientos.csv", sample_account.name)

    assert result["imported"] == 3
    assert result["skipped"] == 0
    assert result["duplicates_in_file"] == 1
    assert result["errors"] == ["Row 9: Missing description", "Row 10: Invalid amount 'abc'"]
    assert result["bank"] == "santander"
    assert result["fallback_required"] is False
    assert result["available_columns"][0] == "Fecha Operación"


def test_import_stores_movements(import_service, temp_db, sample_account, fixtures_dir):
    import_service.import_file(fixtures_dir / "unicaja_cargo_abono.csv", sample_account.id)

    stored = temp_db.list_movements(account_id=sample_account.id)

    assert len(stored) == 4
    assert sorted(m.amount for m in stored) == [
        Decimal("-12.00"),
        Decimal("0.00"),
        Decimal("20.00"),
        Decimal("100.50"),
    ]
    assert all(len(m.duplicate_hash) == 16 for m in stored)


def test_reimport_skips_stored_movements(import_service, sample_account, fixtures_dir):
    """Movements already stored for the account are excluded."""
    path = fixtures_dir / "santander_movimientos.csv"
    import_service.import_file(path, sample_account.name)

    result = import_service.import_file(path, sample_account.name)

    assert result["imported"] == 0
    assert result["skipped"] == 3


def test_cross_batch_check_is_per_account(import_service, account_service, fixtures_dir):
    path = fixtures_dir / "santander_movimientos.csv"
    account_service.create_account("Personal", "Santander")
    account_service.create_account("Shared", "Santander")

    import_service.import_file(path, "Personal")
    result = import_service.import_file(path, "Shared")

    assert result["imported"] == 3
    assert result["skipped"] == 0


def test_keep_duplicates(import_service, sample_account, fixtures_dir):
    result = import_service.import_file(
        fixtures_dir / "santander_movimientos.csv", sample_account.name, keep_duplicates=True
    )

    assert result["imported"] == 4
    assert result["duplicates_in_file"] == 0


def test_import_requires_manual_mapping(import_service, temp_db, sample_account, fixtures_dir):
    result = import_service.import_file(fixtures_dir / "no_header.csv", sample_account.name)

    assert result["fallback_required"] is True
    assert result["imported"] == 0
    assert result["available_columns"] == ["foo", "bar", "baz"]
    assert temp_db.count_movements() == 0


def test_import_with_manual_mapping(import_service, sample_account, fixtures_dir):
    result = import_service.import_file(
        fixtures_dir / "unlabeled_movements.csv",
        sample_account.name,
        mapping={"date": 0, "description": 1, "amount": 2},
        header_row=0,
    )

    assert result["imported"] == 2
    assert result["confidence"] == 1.0


def test_import_incomplete_mapping_raises(import_service, sample_account, fixtures_dir):
    with pytest.raises(ValidationError):
        import_service.import_file(
            fixtures_dir / "unlabeled_movements.csv", sample_account.name, mapping={"date": 0}
        )


def test_import_unknown_account(import_service, fixtures_dir):
    with pytest.raises(NotFoundError, match="Account 'Nope' not found"):
        import_service.import_file(fixtures_dir / "santander_movimientos.csv", "Nope")


def test_import_missing_file(import_service, sample_account, tmp_path):
    with pytest.raises(NotFoundError, match="Statement file not found"):
        import_service.import_file(tmp_path / "missing.csv", sample_account.name)


def test_parse_file_does_not_store(import_service, temp_db, fixtures_dir):
    result = import_service.parse_file(fixtures_dir / "santander_movimientos.csv")

    assert len(result.movements) == 4
    assert temp_db.count_movements() == 0


def test_parse_file_header_row_requires_mapping(import_service, fixtures_dir):
    with pytest.raises(ValidationError, match="only be given together with a column mapping"):
        import_service.parse_file(fixtures_dir / "santander_movimientos.csv", header_row=3)


def test_import_reports_balance_warnings(import_service, sample_account, tmp_path):
    statement = tmp_path / "movimientos.csv"
    statement.write_text(
        "Fecha;Concepto;Importe;Saldo\n15/01/2024;Compra;-10,00;90,00\n16/01/2024;Nómina;100,00;250,00\n",
        encoding="utf-8",
    )

    result = import_service.import_file(statement, sample_account.name)

    assert result["imported"] == 2
    assert result["warnings"] == ["Row 3: Balance does not match the previous balance plus the amount"]
