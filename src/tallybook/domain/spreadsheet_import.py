"""Spreadsheet (CSV) import domain service.

Imports are all-or-nothing: every row is parsed and every transaction
validated before anything is written.
"""

import csv
import logging
from datetime import date
from pathlib import Path
from typing import Iterator, Optional

from tallybook.config import LedgerSettings
from tallybook.database.base import Database
from tallybook.domain.account import AccountService
from tallybook.domain.entities import (
    AccountType,
    ImportSummary,
    JournalEntry,
    NewAccount,
    NewTransaction,
    StatementLine,
)
from tallybook.domain.errors import ValidationError
from tallybook.domain.transaction import TransactionService
from tallybook.utils.amount_parser import parse_optional_amount
from tallybook.utils.date_parser import parse_date

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = ("date", "description", "ref", "account_code", "debit", "credit")
ACCOUNT_COLUMNS = ("code", "name", "type")
STATEMENT_COLUMNS = ("date", "description")

ACCOUNT_IMPORT_REF = "IMPORT-OPENING"


def _normalize_header(name: str) -> str:
    return name.strip().lower().replace(" ", "_")


def read_rows(csv_file_path: str, required: tuple[str, ...]) -> Iterator[tuple[int, dict[str, str]]]:
    """Yield (row number, row) pairs with normalized column names.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file has no header or lacks required columns
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValidationError("CSV file has no columns")

        columns = {_normalize_header(name) for name in reader.fieldnames if name}
        missing = [column for column in required if column not in columns]
        if missing:
            raise ValidationError(f"CSV file missing required columns: {', '.join(missing)}")

        for row_num, row in enumerate(reader, start=2):  # Start at 2 (header is row 1)
            values = {
                _normalize_header(key): (value or "").strip()
                for key, value in row.items()
                if key
            }
            if not any(values.values()):
                continue
            yield row_num, values


class SpreadsheetImportService:
    """Service for importing transactions, accounts and bank statements."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize import service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to LedgerSettings())
        """
        self.db = db
        self.settings = settings or LedgerSettings()
        self.transaction_service = TransactionService(db)
        self.account_service = AccountService(db, self.settings)

    def parse_transactions(self, csv_file_path: str) -> list[NewTransaction]:
        """Group CSV rows into transactions.

        Rows with the same date, description and ref form one transaction,
        in order of first appearance.

        Raises:
            ValidationError: If a row cannot be parsed
        """
        groups: dict[tuple[date, str, str], list[JournalEntry]] = {}
        for row_num, row in read_rows(csv_file_path, TRANSACTION_COLUMNS):
            try:
                txn_date = parse_date(row["date"])
                debit = parse_optional_amount(row.get("debit"))
                credit = parse_optional_amount(row.get("credit"))
            except ValueError as e:
                raise ValidationError(f"Row {row_num}: {e}") from e
            if not row.get("account_code"):
                raise ValidationError(f"Row {row_num}: missing account code")

            key = (txn_date, row.get("description", ""), row.get("ref", ""))
            groups.setdefault(key, []).append(
                JournalEntry(account_code=row["account_code"], debit=debit, credit=credit)
            )

        return [
            NewTransaction(date=txn_date, description=description, ref=ref, entries=tuple(entries))
            for (txn_date, description, ref), entries in groups.items()
        ]

    def import_transactions(self, csv_file_path: str) -> ImportSummary:
        """Import journal transactions from a CSV file.

        Args:
            csv_file_path: Path to a CSV file with columns date, description,
                ref, account_code, debit, credit

        Returns:
            ImportSummary with the number of transactions and entries

        Raises:
            ValidationError: If any row or transaction is invalid; nothing is written
            FileNotFoundError: If the CSV file doesn't exist
        """
        transactions = self.parse_transactions(csv_file_path)
        if not transactions:
            raise ValidationError("CSV file contains no transactions")

        transaction_ids = self.transaction_service.create_transactions_batch(transactions)
        logger.info("Imported %d transaction(s) from %s", len(transaction_ids), csv_file_path)
        return ImportSummary(
            transactions=len(transaction_ids),
            entries=sum(len(txn.entries) for txn in transactions),
        )

    def parse_accounts(self, csv_file_path: str) -> list[NewAccount]:
        """Read new accounts from a CSV file.

        Raises:
            ValidationError: If a row is incomplete, has an unknown type, or
                repeats a code used earlier in the file
        """
        new_accounts: list[NewAccount] = []
        seen: set[str] = set()
        for row_num, row in read_rows(csv_file_path, ACCOUNT_COLUMNS):
            code, name, type_name = row.get("code"), row.get("name"), row.get("type")
            if not code or not name or not type_name:
                raise ValidationError(f"Row {row_num}: code, name and type are required")
            if code in seen:
                raise ValidationError(f"Row {row_num}: account code '{code}' appears twice in the file")
            seen.add(code)

            try:
                account_type = AccountType.parse(type_name)
                opening_balance = parse_optional_amount(row.get("opening_balance"))
            except ValueError as e:
                raise ValidationError(f"Row {row_num}: {e}") from e

            new_accounts.append(
                NewAccount(
                    code=code,
                    name=name,
                    type=account_type,
                    description=row.get("description", ""),
                    opening_balance=opening_balance,
                )
            )
        return new_accounts

    def import_accounts(self, csv_file_path: str, opening_date: Optional[date] = None) -> ImportSummary:
        """Import accounts from a CSV file.

        Opening balances are recorded as one transaction dated
        ``opening_date`` (default today), balanced against the opening
        balance account.

        Args:
            csv_file_path: Path to a CSV file with columns code, name, type
                and optionally opening_balance, description
            opening_date: Date of the opening balance transaction

        Returns:
            ImportSummary with the number of accounts and opening transactions

        Raises:
            ValidationError: If any account is invalid; nothing is written
            FileNotFoundError: If the CSV file doesn't exist
        """
        new_accounts = self.parse_accounts(csv_file_path)
        if not new_accounts:
            raise ValidationError("CSV file contains no accounts")

        created = self.account_service.create_accounts(
            new_accounts,
            opening_date=opening_date,
            opening_ref=ACCOUNT_IMPORT_REF,
            opening_description="Opening balances from account import",
        )
        has_opening = any(account.opening_balance != 0 for account in new_accounts)
        return ImportSummary(accounts=len(created), transactions=1 if has_opening else 0)

    def read_bank_statement(self, csv_file_path: str) -> list[StatementLine]:
        """Read a bank statement CSV with columns date, description, debit, credit.

        Raises:
            ValidationError: If a row cannot be parsed
            FileNotFoundError: If the CSV file doesn't exist
        """
        lines = []
        for row_num, row in read_rows(csv_file_path, STATEMENT_COLUMNS):
            try:
                lines.append(
                    StatementLine(
                        line_number=row_num,
                        date=parse_date(row["date"]),
                        description=row.get("description", ""),
                        debit=parse_optional_amount(row.get("debit")),
                        credit=parse_optional_amount(row.get("credit")),
                    )
                )
            except ValueError as e:
                raise ValidationError(f"Row {row_num}: {e}") from e
        return lines
