"""Bank reconciliation domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from tallybook.database.base import Database
from tallybook.domain.entities import (
    AccountType,
    BookLine,
    JournalEntry,
    NewTransaction,
    ReconciliationResult,
    StatementLine,
    Transaction,
)
from tallybook.domain.errors import NotFoundError, ValidationError, account_not_found
from tallybook.domain.transaction import TransactionService

logger = logging.getLogger(__name__)


def book_lines_for_account(
    account_code: str, transactions: Iterable[Transaction]
) -> list[BookLine]:
    """Return each transaction's effect on one account, oldest first."""
    lines = []
    for txn in transactions:
        entries = [e for e in txn.entries if e.account_code == account_code]
        if not entries:
            continue
        lines.append(
            BookLine(
                transaction_id=txn.id,
                date=txn.date,
                description=txn.description,
                debit=sum((e.debit for e in entries), Decimal("0")),
                credit=sum((e.credit for e in entries), Decimal("0")),
            )
        )
    return sorted(lines, key=lambda line: (line.date, line.transaction_id))


def statement_line_transaction(
    account_code: str, line: StatementLine, counter_account_code: str
) -> NewTransaction:
    """Build the transaction that books a statement line.

    A deposit debits the reconciled account and credits the counter
    account; a withdrawal does the opposite.
    """
    if line.debit > 0:
        debit_code, credit_code, amount = account_code, counter_account_code, line.debit
    else:
        debit_code, credit_code, amount = counter_account_code, account_code, line.credit
    return NewTransaction(
        date=line.date,
        description=f"(Reconciliation) {line.description}".rstrip(),
        ref=f"RECON-{line.line_number}",
        entries=(
            JournalEntry(account_code=debit_code, debit=amount),
            JournalEntry(account_code=credit_code, credit=amount),
        ),
    )


def match_statement(
    account_code: str,
    statement: Sequence[StatementLine],
    book: Sequence[BookLine],
) -> ReconciliationResult:
    """Match statement lines to book lines one-to-one.

    A statement line matches the first unmatched book line with the same
    date, debit and credit.
    """
    available = list(book)
    matched = []
    unmatched_statement = []
    for line in statement:
        for index, candidate in enumerate(available):
            if (
                candidate.date == line.date
                and candidate.debit == line.debit
                and candidate.credit == line.credit
            ):
                matched.append((line, candidate))
                del available[index]
                break
        else:
            unmatched_statement.append(line)

    return ReconciliationResult(
        account_code=account_code,
        matched=tuple(matched),
        unmatched_statement=tuple(unmatched_statement),
        unmatched_book=tuple(available),
    )


class ReconciliationService:
    """Service for reconciling a cash or bank account with a statement."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(
        self,
        account_code: str,
        statement: Sequence[StatementLine],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ReconciliationResult:
        """Auto-match a bank statement against an account's book lines.

        Args:
            account_code: Cash or bank account code
            statement: Statement lines
            start_date: Optional start of the book lines considered
            end_date: Optional end of the book lines considered

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the account is not an asset account
        """
        account = self.db.get_account(account_code)
        if account is None:
            raise NotFoundError(account_not_found(account_code))
        if account.type != AccountType.ASSET:
            raise ValidationError(f"Account {account_code} is not a cash or bank account")

        transactions = self.db.list_transactions(
            start_date=start_date, end_date=end_date, account_code=account_code
        )
        return match_statement(
            account_code, statement, book_lines_for_account(account_code, transactions)
        )

    def journal_unmatched(
        self,
        account_code: str,
        statement: Sequence[StatementLine],
        line_numbers: Sequence[int],
        counter_account_code: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[ReconciliationResult, list[int]]:
        """Book unmatched statement lines, then reconcile again.

        Each selected line becomes a transaction between the reconciled
        account and the counter account, so it matches on the next run. The
        lines are booked as one all-or-nothing batch.

        Args:
            account_code: Cash or bank account code
            statement: Statement lines
            line_numbers: Statement line numbers to book
            counter_account_code: Account on the other side of each line
            start_date: Optional start of the book lines considered
            end_date: Optional end of the book lines considered

        Returns:
            The new reconciliation result and the new transaction IDs

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If a line is unknown, already matched or outside
                the date range, or the counter account is invalid
        """
        result = self.reconcile(account_code, statement, start_date=start_date, end_date=end_date)
        if counter_account_code == account_code:
            raise ValidationError("Counter account must differ from the reconciled account")
        if self.db.get_account(counter_account_code) is None:
            raise ValidationError(f"Counter account {counter_account_code} not found")

        unmatched = {line.line_number: line for line in result.unmatched_statement}
        matched = {pair[0].line_number for pair in result.matched}
        lines = []
        for number in dict.fromkeys(line_numbers):
            if number in matched:
                raise ValidationError(f"Statement line {number} is already matched")
            if number not in unmatched:
                raise ValidationError(f"Statement line {number} not found")
            line = unmatched[number]
            if (start_date and line.date < start_date) or (end_date and line.date > end_date):
                raise ValidationError(
                    f"Statement line {number} dated {line.date} is outside the reconciled period"
                )
            lines.append(line)

        transaction_ids = TransactionService(self.db).create_transactions_batch(
            [statement_line_transaction(account_code, line, counter_account_code) for line in lines]
        )
        logger.info(
            "Booked statement line(s) %s against %s as transaction(s) %s",
            [line.line_number for line in lines],
            counter_account_code,
            transaction_ids,
        )
        return (
            self.reconcile(account_code, statement, start_date=start_date, end_date=end_date),
            transaction_ids,
        )
