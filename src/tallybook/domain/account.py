"""Account domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from tallybook.config import LedgerSettings
from tallybook.database.base import Database
from tallybook.domain.entities import (
    Account as AccountEntity,
    AccountType,
    JournalEntry,
    JournalPosting,
    NewAccount,
)
from tallybook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_code,
)
from tallybook.domain.ledger import derived_balance, is_debit_normal
from tallybook.domain.transaction import build_posting, to_amount

logger = logging.getLogger(__name__)

OPENING_BALANCE_REF = "OPENING-BALANCE"


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize account service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to LedgerSettings())
        """
        self.db = db
        self.settings = settings or LedgerSettings()

    def _to_entity(self, new_account: NewAccount) -> AccountEntity:
        """Resolve role flags and return the account as it will be stored."""
        is_asset = new_account.type == AccountType.ASSET
        is_contra_asset = new_account.is_contra_asset
        if is_contra_asset is None:
            is_contra_asset = is_asset and self.settings.looks_contra_asset(new_account.name)
        is_cash_equivalent = new_account.is_cash_equivalent
        if is_cash_equivalent is None:
            is_cash_equivalent = (
                is_asset
                and not is_contra_asset
                and self.settings.looks_cash_equivalent(new_account.name)
            )
        if not is_asset and (is_contra_asset or is_cash_equivalent):
            raise ValidationError(
                f"Account {new_account.code}: only asset accounts can be contra-asset "
                "or cash-equivalent"
            )
        return AccountEntity(
            code=new_account.code.strip(),
            name=new_account.name.strip(),
            type=new_account.type,
            balance=Decimal("0"),
            description=(new_account.description or "").strip(),
            is_contra_asset=is_contra_asset,
            is_cash_equivalent=is_cash_equivalent,
        )

    def opening_balance_entry(self, account: AccountEntity, amount: Decimal) -> JournalEntry:
        """Return the entry that gives an account the requested opening balance."""
        debit_side = is_debit_normal(account) == (amount > 0)
        magnitude = abs(amount)
        if debit_side:
            return JournalEntry(account_code=account.code, debit=magnitude, credit=Decimal("0"))
        return JournalEntry(account_code=account.code, debit=Decimal("0"), credit=magnitude)

    def create_accounts(
        self,
        new_accounts: Sequence[NewAccount],
        opening_date: Optional[date] = None,
        opening_ref: str = OPENING_BALANCE_REF,
        opening_description: Optional[str] = None,
    ) -> list[AccountEntity]:
        """Create accounts, recording all opening balances in one transaction.

        Opening balances are balanced against the configured opening balance
        account. Nothing is written if any account is invalid.

        Args:
            new_accounts: Accounts to create
            opening_date: Date of the opening balance transaction (defaults to today)
            opening_ref: Reference of the opening balance transaction
            opening_description: Description of the opening balance transaction

        Returns:
            The created accounts

        Raises:
            ValidationError: If a code is blank or taken, a name is blank, or
                the opening balance account doesn't exist
        """
        existing = {account.code: account for account in self.db.list_accounts()}
        accounts: dict[str, AccountEntity] = dict(existing)
        created: list[AccountEntity] = []
        entries: list[JournalEntry] = []

        for new_account in new_accounts:
            code = (new_account.code or "").strip()
            if not code:
                raise ValidationError("Account code cannot be empty")
            if not (new_account.name or "").strip():
                raise ValidationError(f"Account {code}: name cannot be empty")
            if code in accounts:
                raise ValidationError(duplicate_account_code(code))

            account = self._to_entity(new_account)
            accounts[code] = account
            created.append(account)

            opening_balance = to_amount(new_account.opening_balance, "opening balance")
            if opening_balance != 0:
                entries.append(self.opening_balance_entry(account, opening_balance))

        opening = None
        if entries:
            opening = self._opening_posting(
                entries,
                accounts,
                opening_date or date.today(),
                opening_ref,
                opening_description or self._opening_description(created),
            )

        self.db.create_accounts(created, opening=opening)
        logger.info("Created accounts %s", [account.code for account in created])
        return [self.db.get_account(account.code) for account in created]

    def _opening_posting(
        self,
        entries: list[JournalEntry],
        accounts: dict[str, AccountEntity],
        opening_date: date,
        ref: str,
        description: str,
    ) -> JournalPosting:
        counter_code = self.settings.opening_balance_account_code
        if counter_code not in accounts:
            raise ValidationError(
                f"Opening balance account {counter_code} does not exist; "
                "create it before recording opening balances"
            )
        if any(entry.account_code == counter_code for entry in entries):
            raise ValidationError(
                f"Account {counter_code} is the opening balance account and cannot "
                "have an opening balance itself"
            )

        difference = sum((e.debit - e.credit for e in entries), Decimal("0"))
        if difference > 0:
            entries = entries + [
                JournalEntry(account_code=counter_code, debit=Decimal("0"), credit=difference)
            ]
        elif difference < 0:
            entries = entries + [
                JournalEntry(account_code=counter_code, debit=-difference, credit=Decimal("0"))
            ]
        return build_posting(opening_date, description, ref, entries, accounts)

    @staticmethod
    def _opening_description(created: Sequence[AccountEntity]) -> str:
        if len(created) == 1:
            return f"Opening balance for account {created[0].code}"
        return "Opening balances"

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        description: str = "",
        opening_balance: Decimal = Decimal("0"),
        opening_date: Optional[date] = None,
        is_contra_asset: Optional[bool] = None,
        is_cash_equivalent: Optional[bool] = None,
    ) -> AccountEntity:
        """Create a new account.

        A non-zero opening balance is recorded as a transaction dated
        ``opening_date`` (default today) against the opening balance
        account, so the new account's balance equals the requested value.

        Raises:
            ValidationError: If the code already exists or input is invalid
        """
        [account] = self.create_accounts(
            [
                NewAccount(
                    code=code,
                    name=name,
                    type=account_type,
                    description=description,
                    opening_balance=opening_balance,
                    is_contra_asset=is_contra_asset,
                    is_cash_equivalent=is_cash_equivalent,
                )
            ],
            opening_date=opening_date,
        )
        return account

    def get_account(self, code: str) -> Optional[AccountEntity]:
        """Get account by code.

        Args:
            code: Account code

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(code)

    def require_account(self, code: str) -> AccountEntity:
        """Get account by code or raise NotFoundError."""
        account = self.db.get_account(code)
        if account is None:
            raise NotFoundError(account_not_found(code))
        return account

    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[AccountEntity]:
        """List accounts ordered by code, optionally of one type."""
        accounts = self.db.list_accounts()
        if account_type is not None:
            accounts = [account for account in accounts if account.type == account_type]
        return accounts

    def update_account(
        self,
        code: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_contra_asset: Optional[bool] = None,
        is_cash_equivalent: Optional[bool] = None,
    ) -> None:
        """Update account header fields.

        The code, type and balance of an account never change here.

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the name is blank or a role flag doesn't fit the type
        """
        account = self.require_account(code)

        if name is not None and not name.strip():
            raise ValidationError("Account name cannot be empty")
        if account.type != AccountType.ASSET and (is_contra_asset or is_cash_equivalent):
            raise ValidationError(
                f"Account {code}: only asset accounts can be contra-asset or cash-equivalent"
            )

        self.db.update_account(
            code=code,
            name=name.strip() if name is not None else None,
            description=description,
            is_contra_asset=is_contra_asset,
            is_cash_equivalent=is_cash_equivalent,
        )

    def get_derived_balance(self, code: str) -> Decimal:
        """Return the account balance derived from the journal."""
        account = self.require_account(code)
        return derived_balance(account, self.db.list_transactions(account_code=code))

    def delete_account(self, code: str) -> None:
        """Delete an account.

        Args:
            code: Account code to delete

        Raises:
            NotFoundError: If the account doesn't exist
            ValidationError: If the account's balance derived from the journal
                is not zero
        """
        balance = self.get_derived_balance(code)
        if balance != 0:
            raise ValidationError(account_delete_blocked(code, balance))

        self.db.delete_account(code)
