"""Content-based duplicate detection for parsed movements.

A movement's identity is the triple (posting date, amount, normalized
description). The hash is stable across processes and batches, so it can be
recomputed from stored movements to check a new batch against them.
"""

from collections import Counter
from dataclasses import replace
from datetime import date
from decimal import Decimal
import hashlib
import logging
from typing import Iterable, Protocol

from bankimport.domain.entities import CrossBatchResult, DuplicateStats, ParsedMovement
from bankimport.utils.amount_parser import format_amount
from bankimport.utils.text import normalize_description

logger = logging.getLogger(__name__)

HASH_SEPARATOR = "|"
HASH_LENGTH = 16


class HashableMovement(Protocol):
    """Anything carrying the three identity fields (parsed or stored movements)."""

    date: date
    amount: Decimal
    description: str


def movement_hash(posting_date: date, amount: Decimal, description: str) -> str:
    """Return the 16 hex character identity token of a movement."""
    payload = HASH_SEPARATOR.join(
        [posting_date.isoformat(), format_amount(amount), normalize_description(description)]
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def hash_of(movement: HashableMovement) -> str:
    """Recompute the identity hash from a movement's content."""
    return movement_hash(movement.date, movement.amount, movement.description or "")


def flag_duplicates(movements: list[ParsedMovement]) -> list[ParsedMovement]:
    """Flag every member of a hash group with more than one movement.

    All members are flagged, including the first occurrence; use
    remove_duplicates to keep one representative per group.
    """
    counts = Counter(m.duplicate_hash for m in movements)
    return [replace(m, is_duplicate=counts[m.duplicate_hash] > 1) for m in movements]


def remove_duplicates(movements: list[ParsedMovement]) -> list[ParsedMovement]:
    """Keep the first movement per hash, preserving input order."""
    seen: set[str] = set()
    unique = []
    for movement in movements:
        if movement.duplicate_hash in seen:
            continue
        seen.add(movement.duplicate_hash)
        unique.append(movement)
    return unique


def exclude_persisted(
    movements: list[ParsedMovement], persisted: Iterable[HashableMovement]
) -> CrossBatchResult:
    """Drop new movements whose content already exists in the store.

    Persisted movements are re-hashed from their content rather than trusting
    a stored hash value.
    """
    known = {hash_of(m) for m in persisted}
    kept = [m for m in movements if m.duplicate_hash not in known]
    excluded = len(movements) - len(kept)
    if excluded:
        logger.debug("Excluded %d movement(s) already persisted", excluded)
    return CrossBatchResult(movements=kept, excluded=excluded)


def duplicate_stats(movements: list[ParsedMovement]) -> DuplicateStats:
    """Summarize flagged duplicates for import summaries."""
    total = len(movements)
    duplicates = sum(1 for m in movements if m.is_duplicate)
    groups = Counter(m.duplicate_hash for m in movements if m.is_duplicate)
    return DuplicateStats(
        total=total,
        duplicates=duplicates,
        unique=total - duplicates,
        duplicate_groups=sum(1 for count in groups.values() if count > 1),
    )
