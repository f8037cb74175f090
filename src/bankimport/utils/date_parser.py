"""Date parsing utilities.

Two kinds of dates reach this module: statement dates, which follow a fixed
bank format token, and dates typed on the command line, which accept
relative expressions.
"""

from datetime import date, timedelta
import re

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DD_MM_YYYY_SLASH = "DD/MM/YYYY"
DD_MM_YYYY_DASH = "DD-MM-YYYY"
YYYY_MM_DD = "YYYY-MM-DD"
DD_MM_YY_SLASH = "DD/MM/YY"
DD_MM_YY_DASH = "DD-MM-YY"

DATE_FORMATS = (DD_MM_YYYY_SLASH, DD_MM_YYYY_DASH, YYYY_MM_DD, DD_MM_YY_SLASH, DD_MM_YY_DASH)

# Two-digit years are read as 20YY.
CENTURY = 2000

_DATE_PATTERNS = {
    DD_MM_YYYY_SLASH: re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})$"),
    DD_MM_YYYY_DASH: re.compile(r"^(?P<day>\d{1,2})-(?P<month>\d{1,2})-(?P<year>\d{4})$"),
    YYYY_MM_DD: re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})$"),
    DD_MM_YY_SLASH: re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{2})$"),
    DD_MM_YY_DASH: re.compile(r"^(?P<day>\d{1,2})-(?P<month>\d{1,2})-(?P<year>\d{2})$"),
}


def parse_statement_date(date_str: str, date_format: str) -> date:
    """Parse a statement date written with a bank format token.

    A trailing time part ("15/01/2024 00:00:00", "2024-01-15T10:00") is
    ignored.

    Args:
        date_str: Date text from the statement cell
        date_format: One of DATE_FORMATS

    Returns:
        Date object

    Raises:
        ValueError: If the text is blank, does not match the token or is
            not a valid calendar date
    """
    if date_format not in _DATE_PATTERNS:
        raise ValueError(f"Unsupported date format '{date_format}'")
    if not date_str or not date_str.strip():
        raise ValueError("Empty date string")

    text = date_str.strip().split()[0].split("T")[0]
    match = _DATE_PATTERNS[date_format].match(text)
    if match is None:
        raise ValueError(f"Date '{date_str.strip()}' does not match {date_format}")

    year = int(match["year"])
    if len(match["year"]) == 2:
        year += CENTURY
    try:
        return date(year, int(match["month"]), int(match["day"]))
    except ValueError as e:
        raise ValueError(f"Invalid date '{date_str.strip()}': {e}")


def parse_statement_date_any(date_str: str, preferred_format: str) -> date:
    """Parse a statement date trying the preferred token first, then the rest.

    Spreadsheet cells typed as dates arrive as ISO text, so a DD/MM/YYYY
    profile still has to accept them.
    """
    formats = [preferred_format] + [fmt for fmt in DATE_FORMATS if fmt != preferred_format]
    last_error: ValueError | None = None
    for fmt in formats:
        try:
            return parse_statement_date(date_str, fmt)
        except ValueError as e:
            last_error = e
    raise ValueError(f"Could not parse date '{(date_str or '').strip()}'") from last_error


def format_statement_date(value: date, date_format: str) -> str:
    """Format a date with a bank format token (inverse of parse_statement_date)."""
    if date_format == DD_MM_YYYY_SLASH:
        return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"
    if date_format == DD_MM_YYYY_DASH:
        return f"{value.day:02d}-{value.month:02d}-{value.year:04d}"
    if date_format == YYYY_MM_DD:
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
    if date_format == DD_MM_YY_SLASH:
        return f"{value.day:02d}/{value.month:02d}/{value.year % 100:02d}"
    if date_format == DD_MM_YY_DASH:
        return f"{value.day:02d}-{value.month:02d}-{value.year % 100:02d}"
    raise ValueError(f"Unsupported date format '{date_format}'")


def parse_date(date_str: str) -> date:
    """Parse a date typed by the user.

    Supports absolute dates ("2024-01-15", "15/01/2024") and relative
    expressions: "today", "yesterday", "this week", "this month",
    "this year", "last week", "last month", "last year".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "this month": today.replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last week": today - timedelta(days=today.weekday() + 7),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO first so "2024-01-02" is never read day-first
    if re.match(r"^\d{4}-\d{1,2}-\d{1,2}$", date_str):
        return parse_statement_date(date_str, YYYY_MM_DD)

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
