"""Abstract movement store interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from bankimport.domain.entities import Account, ParsedMovement, StoredMovement


class Database(ABC):
    """Abstract database interface for bankimport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, name: str, bank_name: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Movement operations
    @abstractmethod
    def add_movements(self, account_id: int, movements: list[ParsedMovement]) -> int:
        """Persist parsed movements for an account. Returns the number stored."""
        pass

    @abstractmethod
    def list_movements(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[StoredMovement]:
        """List stored movements with optional filters, newest first."""
        pass

    @abstractmethod
    def count_movements(self, account_id: Optional[int] = None) -> int:
        """Count stored movements, optionally for one account."""
        pass
