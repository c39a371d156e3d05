"""Tests for the transaction service and balance updates."""

from datetime import date
from decimal import Decimal

import pytest

from tallybook.domain.entities import JournalEntry, NewTransaction
from tallybook.domain.errors import NotFoundError, ValidationError


def _balance(account_service, code):
    return account_service.get_account(code).balance


def test_create_simple_transaction(transaction_service, account_service, chart):
    txn = transaction_service.create_transaction(
        date=date(2024, 1, 15),
        description="Consulting invoice",
        ref="INV-001",
        entries=[
            JournalEntry(account_code="1200", debit=Decimal("1000000")),
            JournalEntry(account_code="4100", credit=Decimal("1000000")),
        ],
    )

    assert txn.id is not None
    assert txn.date == date(2024, 1, 15)
    assert txn.ref == "INV-001"
    assert len(txn.entries) == 2
    assert _balance(account_service, "1200") == Decimal("1000000")
    assert _balance(account_service, "4100") == Decimal("1000000")


def test_amounts_are_rounded_to_cents(transaction_service, chart):
    txn = transaction_service.create_transaction(
        date=date(2024, 1, 15),
        description="",
        ref="",
        entries=[
            JournalEntry(account_code="5200", debit="10.004"),
            JournalEntry(account_code="1100", credit="10.00"),
        ],
    )

    assert txn.entries[0].debit == Decimal("10.00")


def test_unbalanced_transaction_is_rejected(transaction_service, account_service, chart):
    with pytest.raises(ValidationError, match="not balanced") as excinfo:
        transaction_service.create_transaction(
            date=date(2024, 1, 15),
            description="Bad entry",
            ref="",
            entries=[
                JournalEntry(account_code="1200", debit=Decimal("500000")),
                JournalEntry(account_code="4100", credit=Decimal("400000")),
            ],
        )

    assert "500000.00" in str(excinfo.value)
    assert "400000.00" in str(excinfo.value)
    assert transaction_service.list_transactions() == []
    assert _balance(account_service, "1200") == 0


@pytest.mark.parametrize(
    "entries, message",
    [
        ([JournalEntry(account_code="1200", debit=Decimal("10"))], "at least two"),
        (
            [
                JournalEntry(account_code="1200", debit=Decimal("10")),
                JournalEntry(account_code="9999", credit=Decimal("10")),
            ],
            "unknown account code '9999'",
        ),
        (
            [
                JournalEntry(account_code="1200", debit=Decimal("-10")),
                JournalEntry(account_code="4100", credit=Decimal("-10")),
            ],
            "cannot be negative",
        ),
        (
            [
                JournalEntry(account_code="1200", debit=Decimal("10"), credit=Decimal("10")),
                JournalEntry(account_code="4100", credit=Decimal("10")),
            ],
            "either a debit or a credit",
        ),
        (
            [
                JournalEntry(account_code="1200"),
                JournalEntry(account_code="4100", credit=Decimal("10")),
            ],
            "cannot be zero",
        ),
        (
            [
                JournalEntry(account_code="", debit=Decimal("10")),
                JournalEntry(account_code="4100", credit=Decimal("10")),
            ],
            "missing account code",
        ),
        (
            [
                JournalEntry(account_code="1200", debit="ten"),
                JournalEntry(account_code="4100", credit=Decimal("10")),
            ],
            "Invalid debit",
        ),
    ],
)
def test_invalid_transactions_are_rejected(transaction_service, chart, entries, message):
    with pytest.raises(ValidationError, match=message):
        transaction_service.create_transaction(
            date=date(2024, 1, 15), description="", ref="", entries=entries
        )

    assert transaction_service.list_transactions() == []


def test_delete_transaction_reverses_balances(transaction_service, account_service, record):
    record(date(2024, 1, 10), "1200", "4100", "1000000")
    txn = record(date(2024, 1, 20), "5200", "1200", "250000")

    transaction_service.delete_transaction(txn.id)

    assert transaction_service.get_transaction(txn.id) is None
    assert _balance(account_service, "1200") == Decimal("1000000")
    assert _balance(account_service, "5200") == 0


def test_create_then_delete_restores_every_balance(transaction_service, account_service, chart):
    before = {account.code: account.balance for account in account_service.list_accounts()}
    txn = transaction_service.create_transaction(
        date=date(2024, 2, 1),
        description="Payroll",
        ref="PAY-02",
        entries=[
            JournalEntry(account_code="5200", debit=Decimal("750")),
            JournalEntry(account_code="1100", credit=Decimal("500")),
            JournalEntry(account_code="2100", credit=Decimal("250")),
        ],
    )

    transaction_service.delete_transaction(txn.id)

    after = {account.code: account.balance for account in account_service.list_accounts()}
    assert after == before


def test_delete_missing_transaction(transaction_service, chart):
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(999)


def test_create_reports_missing_stored_transaction(transaction_service, temp_db, chart, monkeypatch):
    monkeypatch.setattr(temp_db, "get_transaction", lambda transaction_id: None)

    with pytest.raises(NotFoundError, match="not found"):
        transaction_service.create_transaction(
            date=date(2024, 1, 10),
            description="Vanished",
            ref="",
            entries=[
                JournalEntry(account_code="1200", debit=Decimal("10")),
                JournalEntry(account_code="4100", credit=Decimal("10")),
            ],
        )


def test_update_transaction_header(transaction_service, account_service, record):
    txn = record(date(2024, 1, 10), "1200", "4100", "100", description="Old", ref="A")

    transaction_service.update_transaction(
        txn.id, date=date(2024, 1, 11), description="New description"
    )

    updated = transaction_service.get_transaction(txn.id)
    assert updated.date == date(2024, 1, 11)
    assert updated.description == "New description"
    assert updated.ref == "A"
    assert updated.entries == txn.entries
    assert _balance(account_service, "1200") == Decimal("100")


def test_update_missing_transaction(transaction_service, chart):
    with pytest.raises(NotFoundError):
        transaction_service.update_transaction(42, description="x")


class TestBatch:
    """Tests for all-or-nothing batches."""

    def _txn(self, debit_code, credit_code, debit, credit, description):
        return NewTransaction(
            date=date(2024, 3, 1),
            description=description,
            ref="",
            entries=(
                JournalEntry(account_code=debit_code, debit=Decimal(debit)),
                JournalEntry(account_code=credit_code, credit=Decimal(credit)),
            ),
        )

    def test_batch_creates_all(self, transaction_service, account_service, chart):
        ids = transaction_service.create_transactions_batch(
            [
                self._txn("1200", "4100", "300", "300", "Sale 1"),
                self._txn("1200", "4100", "200", "200", "Sale 2"),
            ]
        )

        assert len(ids) == 2
        assert _balance(account_service, "1200") == Decimal("500")

    def test_invalid_member_writes_nothing(self, transaction_service, account_service, chart):
        with pytest.raises(ValidationError, match="Transaction 2 \\('Sale 2'\\)"):
            transaction_service.create_transactions_batch(
                [
                    self._txn("1200", "4100", "300", "300", "Sale 1"),
                    self._txn("1200", "4100", "500000", "400000", "Sale 2"),
                ]
            )

        assert transaction_service.list_transactions() == []
        for account in account_service.list_accounts():
            assert account.balance == 0

    def test_empty_batch(self, transaction_service, chart):
        assert transaction_service.create_transactions_batch([]) == []


class TestListTransactions:
    """Tests for transaction filters."""

    @pytest.fixture
    def journal(self, record):
        return [
            record(date(2024, 1, 5), "1200", "4100", "100", description="Website build", ref="INV-1"),
            record(date(2024, 1, 20), "5200", "1100", "40", description="Salary", ref="PAY-1"),
            record(date(2024, 2, 3), "1200", "4100", "60", description="Hosting", ref="INV-2"),
        ]

    def test_newest_first(self, transaction_service, journal):
        refs = [txn.ref for txn in transaction_service.list_transactions()]
        assert refs == ["INV-2", "PAY-1", "INV-1"]

    def test_date_range(self, transaction_service, journal):
        txns = transaction_service.list_transactions(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
        assert {txn.ref for txn in txns} == {"INV-1", "PAY-1"}

    def test_account_filter(self, transaction_service, journal):
        txns = transaction_service.list_transactions(account_code="1100")
        assert [txn.ref for txn in txns] == ["PAY-1"]

    def test_search_matches_description_and_ref(self, transaction_service, journal):
        assert [t.ref for t in transaction_service.list_transactions(search="hosting")] == ["INV-2"]
        assert len(transaction_service.list_transactions(search="INV")) == 2
