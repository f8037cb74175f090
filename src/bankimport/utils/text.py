"""Text normalization helpers shared by header matching and hashing."""

import re
import unicodedata

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_diacritics(text: str) -> str:
    """Remove combining marks, e.g. "Operación" -> "Operacion"."""
    normalized = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")


def normalize_label(text: str) -> str:
    """Normalize a header or label cell for vocabulary lookups.

    Lowercases, strips diacritics, drops punctuation and collapses
    whitespace, so "F. Operación" and "f operacion" compare equal.
    """
    if not text:
        return ""
    normalized = strip_diacritics(str(text).lower())
    normalized = _PUNCTUATION_RE.sub("", normalized)
    normalized = normalized.replace("_", " ")
    return _WHITESPACE_RE.sub(" ", normalized).strip()


def normalize_description(text: str) -> str:
    """Normalize a movement description for content hashing.

    Unlike normalize_label, punctuation becomes a space so that
    "S.L." and "S L" hash identically.
    """
    if not text:
        return ""
    normalized = strip_diacritics(str(text).lower())
    normalized = _PUNCTUATION_RE.sub(" ", normalized)
    normalized = normalized.replace("_", " ")
    return _WHITESPACE_RE.sub(" ", normalized).strip()
