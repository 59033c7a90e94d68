"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile
from datetime import datetime
from decimal import Decimal

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.asset import AssetService
from ledgerbook.domain.budget import BudgetService
from ledgerbook.domain.party import PartyService
from ledgerbook.domain.receivable import ReceivableService
from ledgerbook.domain.reporting import ReportService
from ledgerbook.domain.scheduling import ScheduleService
from ledgerbook.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that pass --db-path
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def party_service(temp_db):
    return PartyService(temp_db)


@pytest.fixture
def asset_service(temp_db):
    return AssetService(temp_db)


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db)


@pytest.fixture
def schedule_service(temp_db):
    return ScheduleService(temp_db)


@pytest.fixture
def receivable_service(temp_db):
    return ReceivableService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db)


@pytest.fixture
def seeded_chart(account_service):
    """Seed the default chart of accounts and return the account count."""
    return account_service.seed_default_chart()


@pytest.fixture
def sample_ledger(seeded_chart, transaction_service):
    """Salary in, groceries out: the main bank account ends at 14549.50."""
    transaction_service.create_transaction(
        date=datetime(2024, 1, 1, 9, 0),
        amount=Decimal("15000"),
        account_id="asset_bank_main",
        payment_account_id="inc_salary",
        note="January salary",
    )
    transaction_service.create_transaction(
        date=datetime(2024, 1, 5, 18, 30),
        amount=Decimal("450.50"),
        account_id="exp_groceries",
        payment_account_id="asset_bank_main",
        note="Weekly shop",
    )
    return transaction_service


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
