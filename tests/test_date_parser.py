"""Tests for statement and command line date parsing."""

from datetime import date, timedelta

import pytest

from bankimport.utils.date_parser import (
    DATE_FORMATS,
    DD_MM_YY_DASH,
    DD_MM_YY_SLASH,
    DD_MM_YYYY_DASH,
    DD_MM_YYYY_SLASH,
    YYYY_MM_DD,
    format_statement_date,
    parse_date,
    parse_statement_date,
    parse_statement_date_any,
)


@pytest.mark.parametrize(
    "text,fmt",
    [
        ("15/01/2024", DD_MM_YYYY_SLASH),
        ("15-01-2024", DD_MM_YYYY_DASH),
        ("2024-01-15", YYYY_MM_DD),
        ("15/1/2024", DD_MM_YYYY_SLASH),
        ("15/01/2024 00:00:00", DD_MM_YYYY_SLASH),
        ("2024-01-15T10:30:00", YYYY_MM_DD),
        ("15/01/24", DD_MM_YY_SLASH),
        ("15-01-24", DD_MM_YY_DASH),
    ],
)
def test_parse_statement_date(text, fmt):
    assert parse_statement_date(text, fmt) == date(2024, 1, 15)


@pytest.mark.parametrize("fmt", DATE_FORMATS)
@pytest.mark.parametrize(
    "value", [date(2024, 2, 29), date(2099, 12, 31), date(2024, 1, 1), date(2030, 10, 5)]
)
def test_statement_date_round_trip(fmt, value):
    """Every supported token parses what it formats."""
    assert parse_statement_date(format_statement_date(value, fmt), fmt) == value


@pytest.mark.parametrize(
    "text,fmt",
    [
        ("", DD_MM_YYYY_SLASH),
        ("31/02/2024", DD_MM_YYYY_SLASH),
        ("2024-01-15", DD_MM_YYYY_SLASH),
        ("15/01/2024", YYYY_MM_DD),
        ("Total", DD_MM_YYYY_DASH),
        ("15/01/2024", DD_MM_YY_SLASH),
        ("15/13/24", DD_MM_YY_SLASH),
    ],
)
def test_parse_statement_date_invalid(text, fmt):
    with pytest.raises(ValueError):
        parse_statement_date(text, fmt)


def test_parse_statement_date_unknown_format():
    with pytest.raises(ValueError, match="Unsupported date format"):
        parse_statement_date("15/01/2024", "MM/DD/YYYY")


def test_parse_statement_date_any_falls_back_to_other_tokens():
    """Spreadsheet dates arrive as ISO text even for day-first banks."""
    assert parse_statement_date_any("2024-01-15", DD_MM_YYYY_SLASH) == date(2024, 1, 15)
    assert parse_statement_date_any("15-01-2024", DD_MM_YYYY_SLASH) == date(2024, 1, 15)

    with pytest.raises(ValueError, match="Could not parse date"):
        parse_statement_date_any("not a date", DD_MM_YYYY_SLASH)


def test_parse_statement_date_any_accepts_two_digit_years():
    """Short years are read as 20YY whatever the profile token."""
    assert parse_statement_date_any("15/01/24", DD_MM_YYYY_SLASH) == date(2024, 1, 15)
    assert parse_statement_date_any("15-01-24", DD_MM_YYYY_SLASH) == date(2024, 1, 15)
    assert parse_statement_date_any("15/01/2024", DD_MM_YY_SLASH) == date(2024, 1, 15)


def test_parse_date_relative_expressions():
    today = date.today()
    assert parse_date("today") == today
    assert parse_date("Yesterday") == today - timedelta(days=1)
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last year") == date(today.year - 1, 1, 1)

    last_month = parse_date("last month")
    assert last_month.day == 1
    assert last_month < today.replace(day=1)


def test_parse_date_absolute():
    """ISO dates are read as such, other dates day first."""
    assert parse_date("2024-01-02") == date(2024, 1, 2)
    assert parse_date("02/01/2024") == date(2024, 1, 2)


def test_parse_date_invalid():
    with pytest.raises(ValueError):
        parse_date("not a date")
