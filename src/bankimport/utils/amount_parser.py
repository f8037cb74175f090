"""Amount parsing utilities."""

from collections import Counter
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re
from typing import Iterable, Optional

CENTS = Decimal("0.01")

_CURRENCY_SYMBOLS_RE = re.compile(r"[$€£¥]")
_CURRENCY_CODE_RE = re.compile(r"^[A-Za-z]{3}(?=[\s\d(+-])|(?<=[\d)\s])[A-Za-z]{3}$")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_LIKE_RE = re.compile(r"^\d[\d.,]*$")


def parse_amount(amount_str: str, decimal_separator: str = ",") -> Decimal:
    """Parse a locale-formatted amount string into a Decimal.

    Handles various formats:
    - "1.234,56" (decimal_separator=",")
    - "1,234.56" (decimal_separator=".")
    - "-250,75"
    - "(123,45)" (negative in parentheses)
    - "38,69-" (trailing minus)
    - "€150,25", "150,25 EUR"

    Args:
        amount_str: Amount string
        decimal_separator: "," or "."

    Returns:
        Decimal amount rounded to two places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")
    if decimal_separator not in (",", "."):
        raise ValueError(f"Unsupported decimal separator '{decimal_separator}'")

    original = str(amount_str)
    amount_str = _CURRENCY_SYMBOLS_RE.sub("", original.strip())
    amount_str = _CURRENCY_CODE_RE.sub("", amount_str.strip())
    amount_str = _WHITESPACE_RE.sub("", amount_str)

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]
    # Trailing minus, e.g. "38,69-"
    if amount_str.endswith("-") and not amount_str.startswith(("-", "+")):
        is_negative = not is_negative
        amount_str = amount_str[:-1]

    if decimal_separator == ",":
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{original.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{original.strip()}'")

    if is_negative:
        amount = -amount
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Format an amount with exactly two decimals, e.g. Decimal("100.5") -> "100.50"."""
    return str(Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP))


def decimal_separator_hint(amount_str: str) -> Optional[str]:
    """Guess which separator an amount uses for decimals.

    The last "," or "." followed by one or two digits is the decimal
    separator. A separator repeated in the integer part is a thousands
    separator, so the other one is decimal. "1.234" on its own is ambiguous.

    Returns:
        ",", "." or None when the text gives no evidence
    """
    text = _CURRENCY_SYMBOLS_RE.sub("", str(amount_str or "").strip())
    text = _WHITESPACE_RE.sub("", _CURRENCY_CODE_RE.sub("", text.strip())).strip("()+-")
    if not _NUMBER_LIKE_RE.match(text):
        return None

    last = max(text.rfind(","), text.rfind("."))
    if last < 0:
        return None
    separator = text[last]
    other = "." if separator == "," else ","
    if re.fullmatch(r"\d{1,2}", text[last + 1 :]):
        return separator
    if text.count(separator) > 1:
        return other
    if other in text[:last]:
        return separator
    return None


def infer_decimal_separator(samples: Iterable[str]) -> Optional[str]:
    """Pick the decimal separator most samples agree on.

    Returns:
        "," or "." by majority of decisive samples, None on no evidence or a tie
    """
    votes = Counter(hint for hint in map(decimal_separator_hint, samples) if hint)
    if votes[","] == votes["."]:
        return None
    return "," if votes[","] > votes["."] else "."
