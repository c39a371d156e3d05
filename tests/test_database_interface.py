"""Tests for the SQLAlchemy database returning domain models and rolling back."""

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from tallybook.config import LedgerSettings
from tallybook.database.factories import default_database_path, open_ledger
from tallybook.domain import entities
from tallybook.domain.entities import JournalEntry
from tallybook.domain.errors import InconsistentStateError, NotFoundError, PartialWriteFailure


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db, chart):
        account = temp_db.get_account("1200")

        assert isinstance(account, entities.Account)
        assert account.type == entities.AccountType.ASSET
        assert isinstance(account.balance, Decimal)
        assert isinstance(account.created_at, datetime)

    def test_get_missing_account(self, temp_db):
        assert temp_db.get_account("0000") is None

    def test_list_accounts_ordered_by_code(self, temp_db, chart):
        codes = [account.code for account in temp_db.list_accounts()]
        assert codes == sorted(codes)

    def test_transaction_returns_entries(self, temp_db, record):
        txn = record(date(2024, 1, 15), "1200", "4100", "10", description="Sale", ref="INV-1")

        stored = temp_db.get_transaction(txn.id)

        assert isinstance(stored, entities.Transaction)
        assert [e.account_code for e in stored.entries] == ["1200", "4100"]
        assert all(e.transaction_id == txn.id for e in stored.entries)

    def test_update_missing_account(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_account("0000", name="Nothing")

    def test_post_depreciation_on_missing_asset(self, temp_db, transaction_service, chart):
        posting = transaction_service.prepare_posting(
            date(2024, 1, 31),
            "Depreciation",
            "DEP-9",
            [
                JournalEntry(account_code="5401", debit=Decimal("10")),
                JournalEntry(account_code="1601", credit=Decimal("10")),
            ],
        )

        with pytest.raises(NotFoundError):
            temp_db.post_depreciation(9, Decimal("10"), posting)

        assert temp_db.list_transactions() == []
        assert temp_db.get_account("5401").balance == 0


class TestUnitOfWork:
    """Failed commits must leave neither entries nor balance changes behind."""

    def _sale(self, transaction_service):
        return transaction_service.create_transaction(
            date=date(2024, 1, 15),
            description="Sale",
            ref="INV-1",
            entries=[
                JournalEntry(account_code="1200", debit=Decimal("1000000")),
                JournalEntry(account_code="4100", credit=Decimal("1000000")),
            ],
        )

    def test_failed_commit_rolls_back(self, temp_db, transaction_service, chart, monkeypatch):
        session = temp_db._get_session()

        def failing_commit():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(session, "commit", failing_commit)

        with pytest.raises(PartialWriteFailure, match="disk I/O error"):
            self._sale(transaction_service)

        assert temp_db.list_transactions() == []
        assert temp_db.get_account("1200").balance == 0
        assert temp_db.get_account("4100").balance == 0

    def test_failed_rollback_is_reported(self, temp_db, transaction_service, chart, monkeypatch, caplog):
        session = temp_db._get_session()

        def failing(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(session, "commit", failing)
        monkeypatch.setattr(session, "rollback", failing)

        with caplog.at_level(logging.CRITICAL, logger="tallybook.database.sqlalchemy_db"):
            with pytest.raises(InconsistentStateError):
                self._sale(transaction_service)

        assert "Rollback failed" in caplog.text


class TestOpenLedger:
    """Tests for locating and opening the ledger."""

    def test_db_path_variable_wins(self, tmp_path):
        environ = {"TALLYBOOK_DB_PATH": str(tmp_path / "books.db"), "TALLYBOOK_HOME": "/elsewhere"}

        assert default_database_path(environ) == tmp_path / "books.db"

    def test_home_variable(self, tmp_path):
        assert default_database_path({"TALLYBOOK_HOME": str(tmp_path)}) == tmp_path / "tallybook.db"

    def test_open_ledger_reads_settings_from_same_environment(self, tmp_path):
        environ = {
            "TALLYBOOK_HOME": str(tmp_path / "data"),
            "TALLYBOOK_OPENING_BALANCE_ACCOUNT": "3900",
        }

        db, settings = open_ledger(environ=environ)
        try:
            assert (tmp_path / "data").is_dir()
            assert db.list_accounts() == []
            assert settings == LedgerSettings(opening_balance_account_code="3900")
        finally:
            db.disconnect()

    def test_explicit_path_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "books.db"

        db, settings = open_ledger(database_path=path, environ={})
        try:
            assert path.parent.is_dir()
            assert settings == LedgerSettings()
        finally:
            db.disconnect()
