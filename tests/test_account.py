"""Tests for the account service."""

import pytest

from bankimport.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_and_list_accounts(account_service):
    account_id = account_service.create_account(name="Nómina", bank_name="BBVA")

    accounts = account_service.list_accounts()

    assert [acc.id for acc in accounts] == [account_id]
    assert accounts[0].name == "Nómina"
    assert accounts[0].bank_name == "BBVA"


def test_create_account_duplicate_name(account_service, sample_account):
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(name=sample_account.name, bank_name="Other")


def test_create_account_blank_name(account_service):
    with pytest.raises(ValidationError):
        account_service.create_account(name="   ", bank_name="BBVA")


def test_resolve_account_by_name_and_id(account_service, sample_account):
    assert account_service.resolve_account(sample_account.name).id == sample_account.id
    assert account_service.resolve_account(sample_account.id).id == sample_account.id
    assert account_service.resolve_account(str(sample_account.id)).id == sample_account.id


def test_resolve_numeric_account_name(account_service):
    account_id = account_service.create_account(name="2024", bank_name="ING")

    assert account_service.resolve_account("2024").id == account_id


def test_resolve_unknown_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.resolve_account("Missing")
    with pytest.raises(NotFoundError):
        account_service.resolve_account(99)
