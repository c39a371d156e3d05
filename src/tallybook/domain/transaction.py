"""Transaction domain service."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Sequence

from tallybook.database.base import Database
from tallybook.domain.entities import (
    Account,
    JournalEntry,
    JournalPosting,
    NewTransaction,
    Transaction as TransactionEntity,
)
from tallybook.domain.errors import (
    NotFoundError,
    ValidationError,
    transaction_not_found,
    unbalanced_entries,
    unknown_account_code,
)
from tallybook.domain.mutations import compute_balance_deltas

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_amount(value: Any, field: str = "amount") -> Decimal:
    """Convert a debit/credit value to a Decimal rounded to cents.

    Raises:
        ValidationError: If the value is not a finite number
    """
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid {field} '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field} '{value}'")
    return amount.quantize(CENT)


def normalize_entries(entries: Sequence[Any]) -> tuple[JournalEntry, ...]:
    """Validate entry lines and return them as clean JournalEntry objects.

    Each line must reference an account and carry exactly one non-zero,
    non-negative side.
    """
    normalized = []
    for line_number, entry in enumerate(entries, start=1):
        code = (entry.account_code or "").strip()
        if not code:
            raise ValidationError(f"Entry {line_number}: missing account code")
        debit = to_amount(entry.debit, "debit")
        credit = to_amount(entry.credit, "credit")
        if debit < 0 or credit < 0:
            raise ValidationError(f"Entry {line_number}: debit and credit cannot be negative")
        if debit != 0 and credit != 0:
            raise ValidationError(f"Entry {line_number}: an entry is either a debit or a credit")
        if debit == 0 and credit == 0:
            raise ValidationError(f"Entry {line_number}: amount cannot be zero")
        normalized.append(JournalEntry(account_code=code, debit=debit, credit=credit))
    return tuple(normalized)


def build_posting(
    txn_date: date,
    description: str,
    ref: str,
    entries: Sequence[JournalEntry],
    accounts: Mapping[str, Account],
) -> JournalPosting:
    """Validate a transaction and compute the balance deltas it causes.

    Args:
        txn_date: Transaction date
        description: Free text description
        ref: Free text reference
        entries: Entry lines
        accounts: Accounts the entries may reference, keyed by code

    Returns:
        JournalPosting ready to be stored

    Raises:
        ValidationError: If the transaction has fewer than two entries,
            references an unknown account, or is not balanced
    """
    if not isinstance(txn_date, date):
        raise ValidationError(f"Invalid transaction date '{txn_date}'")

    clean = normalize_entries(entries)
    if len(clean) < 2:
        raise ValidationError("A transaction needs at least two entries")

    for entry in clean:
        if entry.account_code not in accounts:
            raise ValidationError(unknown_account_code(entry.account_code))

    total_debit = sum((e.debit for e in clean), Decimal("0"))
    total_credit = sum((e.credit for e in clean), Decimal("0"))
    if total_debit != total_credit or total_debit == 0:
        raise ValidationError(unbalanced_entries(total_debit, total_credit))

    transaction = NewTransaction(
        date=txn_date,
        description=(description or "").strip(),
        ref=(ref or "").strip(),
        entries=clean,
    )
    return JournalPosting(
        transaction=transaction,
        deltas=compute_balance_deltas(clean, accounts),
    )


class TransactionService:
    """Service for managing journal transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _accounts_by_code(self) -> dict[str, Account]:
        return {account.code: account for account in self.db.list_accounts()}

    def prepare_posting(
        self,
        date: date,
        description: str,
        ref: str,
        entries: Sequence[JournalEntry],
        accounts: Optional[Mapping[str, Account]] = None,
    ) -> JournalPosting:
        """Validate a transaction against the stored chart of accounts."""
        if accounts is None:
            accounts = self._accounts_by_code()
        return build_posting(date, description, ref, entries, accounts)

    def create_transaction(
        self,
        date: date,
        description: str,
        ref: str,
        entries: Sequence[JournalEntry],
    ) -> TransactionEntity:
        """Create a balanced transaction and update the affected balances.

        Args:
            date: Transaction date
            description: Description
            ref: Reference
            entries: At least two entry lines

        Returns:
            The stored transaction with its entries

        Raises:
            ValidationError: If the transaction is invalid; nothing is written
            PartialWriteFailure: If storing failed and was rolled back
        """
        posting = self.prepare_posting(date, description, ref, entries)
        [transaction_id] = self.db.insert_transactions([posting])
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def create_transactions_batch(self, transactions: Sequence[NewTransaction]) -> list[int]:
        """Create several transactions as one all-or-nothing batch.

        Every transaction is validated before anything is written.

        Args:
            transactions: Transactions to create

        Returns:
            New transaction IDs in input order

        Raises:
            ValidationError: If any transaction is invalid; nothing is written
        """
        accounts = self._accounts_by_code()
        postings = []
        for index, txn in enumerate(transactions, start=1):
            try:
                postings.append(
                    build_posting(txn.date, txn.description, txn.ref, txn.entries, accounts)
                )
            except ValidationError as e:
                label = txn.description or txn.ref or f"#{index}"
                raise ValidationError(f"Transaction {index} ('{label}'): {e}") from e

        if not postings:
            return []
        return self.db.insert_transactions(postings)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_code: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first."""
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_code=account_code,
            search=search,
        )

    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        description: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> None:
        """Update the header of a transaction.

        Entries of a stored transaction are immutable; to change amounts or
        accounts, delete the transaction and record a new one.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.update_transaction_header(
            transaction_id=transaction_id,
            date=date,
            description=description,
            ref=ref,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and reverse its effect on account balances.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        deltas = compute_balance_deltas(txn.entries, self._accounts_by_code(), reverse=True)
        self.db.delete_transaction(transaction_id, deltas)
        logger.info("Reversed balances %s for transaction %s", deltas, transaction_id)
