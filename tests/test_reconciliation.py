"""Tests for bank reconciliation."""

from datetime import date
from decimal import Decimal

import pytest

from tallybook.domain.entities import BookLine, StatementLine
from tallybook.domain.errors import NotFoundError, ValidationError
from tallybook.domain.reconciliation import match_statement, statement_line_transaction


def _statement(line_number, day, debit="0", credit="0", description=""):
    return StatementLine(
        line_number=line_number,
        date=day,
        description=description,
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def _book(txn_id, day, debit="0", credit="0"):
    return BookLine(
        transaction_id=txn_id,
        date=day,
        description="",
        debit=Decimal(debit),
        credit=Decimal(credit),
    )


def test_match_is_one_to_one():
    day = date(2024, 1, 10)
    statement = [_statement(2, day, debit="100"), _statement(3, day, debit="100")]
    book = [_book(1, day, debit="100")]

    result = match_statement("1200", statement, book)

    assert [(s.line_number, b.transaction_id) for s, b in result.matched] == [(2, 1)]
    assert [s.line_number for s in result.unmatched_statement] == [3]
    assert result.unmatched_book == ()
    assert not result.is_fully_reconciled


def test_match_needs_same_date_and_side():
    statement = [
        _statement(2, date(2024, 1, 10), debit="100"),
        _statement(3, date(2024, 1, 11), credit="50"),
    ]
    book = [_book(1, date(2024, 1, 11), debit="100"), _book(2, date(2024, 1, 11), credit="50")]

    result = match_statement("1200", statement, book)

    assert len(result.matched) == 1
    assert [b.transaction_id for b in result.unmatched_book] == [1]


def test_reconcile_against_books(reconciliation_service, record):
    record(date(2024, 1, 15), "1200", "4100", "1000000", description="Invoice 1")
    record(date(2024, 1, 20), "5200", "1200", "300000", description="Salary")
    record(date(2024, 1, 22), "5200", "1100", "5000", description="Cash expense")

    statement = [
        _statement(2, date(2024, 1, 15), debit="1000000"),
        _statement(3, date(2024, 1, 20), credit="300000"),
    ]

    result = reconciliation_service.reconcile("1200", statement)

    assert len(result.matched) == 2
    assert result.is_fully_reconciled


def test_reconcile_date_range(reconciliation_service, record):
    record(date(2023, 12, 30), "1200", "4100", "10")
    record(date(2024, 1, 5), "1200", "4100", "20")

    result = reconciliation_service.reconcile(
        "1200", [], start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
    )

    assert [line.debit for line in result.unmatched_book] == [Decimal("20")]


def test_reconcile_requires_asset_account(reconciliation_service, chart):
    with pytest.raises(ValidationError):
        reconciliation_service.reconcile("4100", [])
    with pytest.raises(NotFoundError):
        reconciliation_service.reconcile("1999", [])


def test_statement_line_transaction_sides():
    deposit = statement_line_transaction("1200", _statement(2, date(2024, 1, 5), debit="70"), "4100")
    fee = statement_line_transaction(
        "1200", _statement(3, date(2024, 1, 6), credit="15", description="Bank fee"), "5200"
    )

    assert [(e.account_code, e.debit, e.credit) for e in deposit.entries] == [
        ("1200", Decimal("70"), Decimal("0")),
        ("4100", Decimal("0"), Decimal("70")),
    ]
    assert [(e.account_code, e.debit, e.credit) for e in fee.entries] == [
        ("5200", Decimal("15"), Decimal("0")),
        ("1200", Decimal("0"), Decimal("15")),
    ]
    assert fee.description == "(Reconciliation) Bank fee"
    assert fee.ref == "RECON-3"


def test_journal_unmatched_lines_become_matched(
    reconciliation_service, account_service, transaction_service, record
):
    record(date(2024, 1, 15), "1200", "4100", "1000000")
    statement = [
        _statement(2, date(2024, 1, 15), debit="1000000"),
        _statement(3, date(2024, 1, 21), credit="15000", description="Bank fee"),
        _statement(4, date(2024, 1, 25), debit="2500", description="Interest"),
    ]

    result, transaction_ids = reconciliation_service.journal_unmatched(
        "1200", statement, [3], "5200"
    )

    assert len(transaction_ids) == 1
    assert len(result.matched) == 2
    assert [line.line_number for line in result.unmatched_statement] == [4]
    assert account_service.get_account("1200").balance == Decimal("985000")
    assert account_service.get_account("5200").balance == Decimal("15000")
    txn = transaction_service.get_transaction(transaction_ids[0])
    assert txn.date == date(2024, 1, 21)
    assert txn.description == "(Reconciliation) Bank fee"


def test_journal_unmatched_is_all_or_nothing(reconciliation_service, transaction_service, chart):
    statement = [
        _statement(2, date(2024, 1, 21), credit="15000"),
        _statement(3, date(2024, 1, 22)),
    ]

    with pytest.raises(ValidationError):
        reconciliation_service.journal_unmatched("1200", statement, [2, 3], "5200")

    assert transaction_service.list_transactions() == []


@pytest.mark.parametrize(
    "line_numbers,counter,message",
    [
        ([2], "5200", "already matched"),
        ([9], "5200", "not found"),
        ([3], "1200", "must differ"),
        ([3], "9999", "Counter account 9999 not found"),
    ],
)
def test_journal_unmatched_rejects(reconciliation_service, record, line_numbers, counter, message):
    record(date(2024, 1, 15), "1200", "4100", "100")
    statement = [
        _statement(2, date(2024, 1, 15), debit="100"),
        _statement(3, date(2024, 1, 21), credit="15"),
    ]

    with pytest.raises(ValidationError, match=message):
        reconciliation_service.journal_unmatched("1200", statement, line_numbers, counter)


def test_journal_unmatched_outside_period(reconciliation_service, chart):
    statement = [_statement(2, date(2024, 2, 3), credit="15")]

    with pytest.raises(ValidationError, match="outside the reconciled period"):
        reconciliation_service.journal_unmatched(
            "1200", statement, [2], "5200", end_date=date(2024, 1, 31)
        )
