"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from tallybook.domain.entities import (
    Account,
    FixedAsset,
    JournalPosting,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for tallybook.

    Every method that changes balances is a single unit of work: either all
    of its rows and balance increments are stored, or none are.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_accounts(
        self,
        accounts: Sequence[Account],
        opening: Optional[JournalPosting] = None,
    ) -> None:
        """Create accounts with zero balance, and optionally post their opening balances."""
        pass

    @abstractmethod
    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        code: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_contra_asset: Optional[bool] = None,
        is_cash_equivalent: Optional[bool] = None,
    ) -> None:
        """Update account header fields. Fields left as None are unchanged."""
        pass

    @abstractmethod
    def delete_account(self, code: str) -> None:
        """Delete an account."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transactions(self, postings: Sequence[JournalPosting]) -> list[int]:
        """Insert transactions with their entries and apply their balance deltas.

        Returns the new transaction IDs in input order.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, with entries."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_code: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_code: Only transactions with an entry on this account
            search: Case-insensitive text matched against description and ref
        """
        pass

    @abstractmethod
    def update_transaction_header(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        description: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> None:
        """Update header fields of a transaction. Entries are never touched."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int, deltas: Mapping[str, Decimal]) -> None:
        """Delete a transaction with its entries and apply the reversing deltas."""
        pass

    # Fixed asset operations
    @abstractmethod
    def create_fixed_asset(
        self,
        name: str,
        category: str,
        cost: Decimal,
        acquired_on: date,
        residual_value: Decimal = Decimal("0"),
        is_depreciable: bool = False,
        life_years: Optional[int] = None,
        method: Optional[str] = None,
        asset_account_code: Optional[str] = None,
        accumulated_depreciation_account_code: Optional[str] = None,
        depreciation_expense_account_code: Optional[str] = None,
        purchase: Optional[JournalPosting] = None,
    ) -> int:
        """Create a fixed asset, optionally posting its purchase. Returns asset ID."""
        pass

    @abstractmethod
    def get_fixed_asset(self, asset_id: int) -> Optional[FixedAsset]:
        """Get fixed asset by ID."""
        pass

    @abstractmethod
    def list_fixed_assets(self) -> list[FixedAsset]:
        """List all fixed assets."""
        pass

    @abstractmethod
    def post_depreciation(self, asset_id: int, amount: Decimal, posting: JournalPosting) -> int:
        """Post a depreciation transaction and add it to the asset's accumulated depreciation.

        Returns the new transaction ID.
        """
        pass

    @abstractmethod
    def update_fixed_asset(
        self,
        asset_id: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        residual_value: Optional[Decimal] = None,
        is_depreciable: Optional[bool] = None,
        life_years: Optional[int] = None,
        method: Optional[str] = None,
        asset_account_code: Optional[str] = None,
        accumulated_depreciation_account_code: Optional[str] = None,
        depreciation_expense_account_code: Optional[str] = None,
    ) -> None:
        """Update fixed asset register fields. Fields left as None are unchanged.

        Cost, acquisition date and accumulated depreciation follow the
        journal and are not editable.
        """
        pass

    @abstractmethod
    def delete_fixed_asset(self, asset_id: int) -> None:
        """Delete a fixed asset. Its journal transactions are kept."""
        pass
