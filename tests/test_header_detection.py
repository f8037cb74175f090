"""Tests for header row and column role detection."""

import pytest

from bankimport.domain.entities import RawRow
from bankimport.domain.header_detection import HeaderDetector, is_logo_row
from bankimport.domain.profiles import GENERIC_KEY, build_registry

SANTANDER_HEADER = ["Fecha Operación", "Fecha Valor", "Concepto", "Importe", "Saldo"]


@pytest.fixture
def detector(registry):
    return HeaderDetector(registry, search_rows=20)


def test_detects_header_after_title_rows(detector, make_rows):
    rows = make_rows(
        ["Banco Santander", ""],
        ["Cuenta ES12 3456", "Titular: Ana"],
        SANTANDER_HEADER,
        ["15/01/2024", "15/01/2024", "Compra", "-45,20", "1.254,80"],
    )

    result = detector.detect(rows)

    assert not result.fallback_required
    assert result.profile_key == "santander"
    assert result.header_row_index == 2
    assert result.data_start_row_index == 3
    assert result.mapping.as_dict() == {
        "date": 0,
        "value_date": 1,
        "amount": 3,
        "description": 2,
        "balance": 4,
    }
    assert result.confidence == pytest.approx(5 / 6)
    assert result.headers == tuple(SANTANDER_HEADER)


def test_cargo_abono_preferred_over_amount(detector, make_rows):
    rows = make_rows(["Fecha", "Concepto", "Importe", "Cargo", "Abono"])

    result = detector.detect(rows)

    assert result.mapping.amount is None
    assert result.mapping.cargo == 3
    assert result.mapping.abono == 4
    assert result.mapping.has_split_amount


def test_lone_cargo_dropped_next_to_amount(detector, make_rows):
    rows = make_rows(["Fecha", "Concepto", "Importe", "Cargo"])

    result = detector.detect(rows)

    assert result.mapping.amount == 2
    assert result.mapping.cargo is None
    assert result.mapping.is_complete


def test_value_date_promoted_when_no_posting_date(detector, make_rows):
    rows = make_rows(["Fecha valor", "Concepto", "Importe"])

    result = detector.detect(rows)

    assert not result.fallback_required
    assert result.mapping.date == 0
    assert result.mapping.value_date is None


def test_bank_profile_chosen_over_generic_on_equal_confidence(detector, make_rows):
    rows = make_rows(["Fecha", "Fecha valor", "Concepto", "Cargo", "Abono", "Saldo"])

    result = detector.detect(rows)

    assert result.profile_key == "unicaja"
    assert result.confidence == 1.0


def test_optional_roles_filled_from_generic(detector, make_rows):
    rows = make_rows(SANTANDER_HEADER + ["Divisa", "Referencia"])

    result = detector.detect(rows)

    assert result.profile_key == "santander"
    assert result.mapping.currency == 5
    assert result.mapping.reference == 6


def test_ing_header_with_symbols(detector, make_rows):
    rows = make_rows(["F. Valor", "Descripción", "Comentario", "Importe (€)", "Saldo (€)"])

    result = detector.detect(rows)

    assert result.profile_key == "ing"
    assert result.mapping.date == 0
    assert result.mapping.amount == 3
    assert result.confidence == 1.0


def test_header_within_search_window(detector, make_rows):
    titles = [["Extracto", str(i)] for i in range(10)]
    rows = make_rows(*titles, SANTANDER_HEADER)

    result = detector.detect(rows)

    assert not result.fallback_required
    assert result.header_row_index == 10


def test_header_beyond_search_window_requires_fallback(detector, make_rows):
    titles = [["Extracto", str(i)] for i in range(25)]
    rows = make_rows(*titles, SANTANDER_HEADER)

    result = detector.detect(rows)

    assert result.fallback_required
    assert result.confidence == 0
    assert result.mapping.as_dict() == {}


def test_row_extent_bounds_search_window(detector, make_rows):
    rows = make_rows(["a", "b"], ["c", "d"], ["e", "f"], SANTANDER_HEADER)

    assert detector.detect(rows, row_extent=3).fallback_required
    assert not detector.detect(rows, row_extent=10).fallback_required


def test_no_vocabulary_match_requires_fallback(detector, make_rows):
    rows = make_rows(["foo", "bar", "baz"], ["1", "2", "3"])

    result = detector.detect(rows)

    assert result.fallback_required
    assert result.confidence == 0
    assert result.profile_key == GENERIC_KEY
    assert result.headers == ("foo", "bar", "baz")


def test_incomplete_header_requires_fallback(detector, make_rows):
    rows = make_rows(["Fecha", "Importe", "Otro"], ["15/01/2024", "1,00", "x"])

    assert detector.detect(rows).fallback_required


def test_earliest_row_wins_ties(detector, make_rows):
    rows = make_rows(["x", "y"], SANTANDER_HEADER, ["x", "y"], SANTANDER_HEADER)

    assert detector.detect(rows).header_row_index == 1


def test_logo_rows_are_skipped(detector, make_rows):
    blob = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA"
    rows = make_rows(
        [blob, "logo.png", "[imagen]", "Fecha", "Concepto", "Importe"],
        ["x", "y"],
    )

    assert detector.detect(rows).fallback_required


def test_is_logo_row():
    assert is_logo_row(RawRow(index=0, cells=("[logo]", "Banco X")))
    assert is_logo_row(RawRow(index=0, cells=("data:image/png;base64,AAAA", "")))
    assert is_logo_row(RawRow(index=0, cells=("", "")))
    assert not is_logo_row(RawRow(index=0, cells=("Fecha", "Concepto", "Importe")))
    assert not is_logo_row(RawRow(index=0, cells=("logo.png", "Fecha", "Concepto", "Importe")))


def test_profile_header_skip_rows(make_rows):
    registry = build_registry(
        [
            {
                "key": "acme",
                "header_skip_rows": 2,
                "header_aliases": {"date": ["Día"], "description": ["Texto"], "amount": ["Valor"]},
            }
        ]
    )
    rows = make_rows(["Día", "Texto", "Valor"], ["-", "-"], ["Día", "Texto", "Valor"])

    result = HeaderDetector(registry).detect(rows)

    assert result.profile_key == "acme"
    assert result.header_row_index == 2
