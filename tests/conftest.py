"""Shared pytest fixtures for tallybook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from tallybook.config import LedgerSettings
from tallybook.database.factories import create_sqlite_database
from tallybook.domain.account import AccountService
from tallybook.domain.assets import FixedAssetService
from tallybook.domain.entities import AccountType, JournalEntry, NewAccount
from tallybook.domain.reconciliation import ReconciliationService
from tallybook.domain.reports import ReportService
from tallybook.domain.spreadsheet_import import SpreadsheetImportService
from tallybook.domain.transaction import TransactionService


# Small chart used across tests: (code, name, type)
SAMPLE_CHART = [
    ("1100", "Cash", AccountType.ASSET),
    ("1200", "Bank", AccountType.ASSET),
    ("1300", "Accounts Receivable", AccountType.ASSET),
    ("1501", "Office Equipment", AccountType.ASSET),
    ("1601", "Accumulated Depreciation - Office Equipment", AccountType.ASSET),
    ("2100", "Accounts Payable", AccountType.LIABILITY),
    ("3100", "Share Capital", AccountType.EQUITY),
    ("3200", "Retained Earnings", AccountType.EQUITY),
    ("3999", "Opening Balance Equity", AccountType.EQUITY),
    ("4100", "Service Revenue", AccountType.REVENUE),
    ("5200", "Salaries Expense", AccountType.EXPENSE),
    ("5401", "Depreciation Expense - Office Equipment", AccountType.EXPENSE),
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

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
def settings():
    """Default ledger settings."""
    return LedgerSettings()


@pytest.fixture
def account_service(temp_db, settings):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, settings)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def report_service(temp_db, settings):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db, settings)


@pytest.fixture
def asset_service(temp_db):
    """Create a FixedAssetService with a temporary database."""
    return FixedAssetService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def import_service(temp_db, settings):
    """Create a SpreadsheetImportService with a temporary database."""
    return SpreadsheetImportService(temp_db, settings)


@pytest.fixture
def chart(account_service):
    """Create the sample chart of accounts and return accounts by code."""
    created = account_service.create_accounts(
        [NewAccount(code=code, name=name, type=account_type) for code, name, account_type in SAMPLE_CHART]
    )
    return {account.code: account for account in created}


@pytest.fixture
def record(transaction_service, chart):
    """Return a helper that records a two-line transaction.

    ``record(date, debit_code, credit_code, amount, description="", ref="")``
    """

    def _record(txn_date, debit_code, credit_code, amount, description="", ref=""):
        amount = Decimal(str(amount))
        return transaction_service.create_transaction(
            date=txn_date,
            description=description,
            ref=ref,
            entries=[
                JournalEntry(account_code=debit_code, debit=amount),
                JournalEntry(account_code=credit_code, credit=amount),
            ],
        )

    return _record


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
