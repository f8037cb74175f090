"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class StatementReadError(DomainError):
    """The statement file could not be read at all (empty, corrupt, unsupported)."""


class RowParseError(ValidationError):
    """A single statement row could not be turned into a movement."""


class InvalidDateError(RowParseError):
    """The posting date is blank or does not parse."""


class MissingAmountError(RowParseError):
    """No amount value could be resolved for the row."""


class InvalidAmountError(RowParseError):
    """An amount cell holds text that is not a number."""


class MissingDescriptionError(RowParseError):
    """The description cell is empty."""


def row_error(row_number: int, reason: object) -> str:
    """Return the user-facing message for a rejected row (1-based row number)."""
    return f"Row {row_number}: {reason}"


def account_not_found(account: object) -> str:
    """Return message for missing account."""
    return f"Account '{account}' not found"


def profile_not_found(key: str) -> str:
    """Return message for an unknown bank profile key."""
    return f"Bank profile '{key}' not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def incomplete_mapping(missing: list[str]) -> str:
    """Return message for a column mapping missing required roles."""
    return f"Column mapping is missing required roles: {', '.join(missing)}"


def balance_mismatch(row_number: int) -> str:
    """Return the warning for a row whose running balance does not add up."""
    return f"Row {row_number}: Balance does not match the previous balance plus the amount"
