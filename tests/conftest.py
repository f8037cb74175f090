"""Shared pytest fixtures for bankimport tests."""

import tempfile
import os
from pathlib import Path
import pytest

from bankimport.database.factories import create_sqlite_database
from bankimport.domain.account import AccountService
from bankimport.domain.entities import RawRow
from bankimport.domain.movement_import import MovementImportService
from bankimport.domain.profiles import default_registry
from bankimport.domain.statement_parser import StatementParser


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a MovementImportService with a temporary database."""
    return MovementImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(name="Test Account", bank_name="Test Bank")
    return account_service.get_account(account_id)


@pytest.fixture
def registry():
    """Return the built-in bank profile registry."""
    return default_registry()


@pytest.fixture
def statement_parser(registry):
    """Create a StatementParser with the built-in profiles."""
    return StatementParser(registry=registry)


@pytest.fixture
def make_rows():
    """Build RawRows from lists of cell text."""

    def _make_rows(*cells_per_row):
        return [RawRow(index=i, cells=tuple(cells)) for i, cells in enumerate(cells_per_row)]

    return _make_rows


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
