"""Account domain service."""

from typing import TYPE_CHECKING, Optional

from bankimport.domain.entities import Account as AccountEntity
from bankimport.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found, duplicate_account_name

if TYPE_CHECKING:
    from bankimport.database.base import Database


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: "Database"):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, name: str, bank_name: str) -> int:
        """Create a new account.

        Args:
            name: Account name
            bank_name: Bank name

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name must not be empty")

        # Check if account with same name exists
        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(duplicate_account_name(name))

        return self.db.create_account(name=name, bank_name=bank_name)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts."""
        return self.db.list_accounts()

    def resolve_account(self, account: str | int) -> AccountEntity:
        """Resolve an account name or ID to the account.

        Args:
            account: Account name, or ID (int or string representation of int)

        Raises:
            NotFoundError: If no account matches
        """
        if isinstance(account, int):
            found = self.db.get_account(account)
            if found is None:
                raise NotFoundError(account_not_found(account))
            return found

        # Names that are not numbers are looked up by name
        try:
            account_id = int(account)
        except (ValueError, TypeError):
            account_id = None

        if account_id is not None:
            found = self.db.get_account(account_id)
            if found is not None:
                return found

        for acc in self.db.list_accounts():
            if acc.name == account:
                return acc

        raise NotFoundError(account_not_found(account))
