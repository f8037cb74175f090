"""Domain layer for bankimport."""

from bankimport.domain.account import AccountService
from bankimport.domain.movement_import import MovementImportService
from bankimport.domain.statement_parser import StatementParser

__all__ = [
    "AccountService",
    "MovementImportService",
    "StatementParser",
]
