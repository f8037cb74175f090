"""Mapper functions to convert between domain entities and SQLAlchemy models."""

from bankimport.domain import entities as domain
from bankimport.database.models import (
    Account as ORMAccount,
    Movement as ORMMovement,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
    )


def movement_to_domain(orm_movement: ORMMovement) -> domain.StoredMovement:
    """Convert SQLAlchemy Movement model to domain StoredMovement entity."""
    return domain.StoredMovement(
        id=orm_movement.id,
        account_id=orm_movement.account_id,
        date=orm_movement.date,
        amount=orm_movement.amount,
        description=orm_movement.description,
        duplicate_hash=orm_movement.duplicate_hash,
        imported_at=orm_movement.imported_at,
        value_date=orm_movement.value_date,
        counterparty=orm_movement.counterparty,
        reference=orm_movement.reference,
        balance=orm_movement.balance,
        currency=orm_movement.currency,
    )


def movement_from_parsed(account_id: int, movement: domain.ParsedMovement) -> ORMMovement:
    """Build a SQLAlchemy Movement row from a parsed movement."""
    return ORMMovement(
        account_id=account_id,
        date=movement.date,
        value_date=movement.value_date,
        amount=movement.amount,
        description=movement.description,
        counterparty=movement.counterparty,
        reference=movement.reference,
        balance=movement.balance,
        currency=movement.currency,
        duplicate_hash=movement.duplicate_hash,
    )
