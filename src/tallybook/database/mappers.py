"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the engine never sees ORM
objects and the schema can change without touching it.
"""

from tallybook.domain import entities as domain
from tallybook.database.models import (
    Account as ORMAccount,
    FixedAsset as ORMFixedAsset,
    JournalEntry as ORMJournalEntry,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        balance=orm_account.balance,
        description=orm_account.description,
        is_contra_asset=orm_account.is_contra_asset,
        is_cash_equivalent=orm_account.is_cash_equivalent,
        created_at=orm_account.created_at,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_code=orm_entry.account_code,
        debit=orm_entry.debit,
        credit=orm_entry.credit,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with entries) to domain Transaction."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        ref=orm_transaction.ref,
        entries=tuple(journal_entry_to_domain(e) for e in orm_transaction.entries),
        created_at=orm_transaction.created_at,
        fixed_asset_id=orm_transaction.fixed_asset_id,
    )


def fixed_asset_to_domain(orm_asset: ORMFixedAsset) -> domain.FixedAsset:
    """Convert SQLAlchemy FixedAsset model to domain FixedAsset entity."""
    return domain.FixedAsset(
        id=orm_asset.id,
        name=orm_asset.name,
        category=orm_asset.category,
        cost=orm_asset.cost,
        acquired_on=orm_asset.acquired_on,
        life_years=orm_asset.life_years,
        residual_value=orm_asset.residual_value,
        method=domain.DepreciationMethod(orm_asset.method) if orm_asset.method else None,
        is_depreciable=orm_asset.is_depreciable,
        accumulated_depreciation=orm_asset.accumulated_depreciation,
        asset_account_code=orm_asset.asset_account_code,
        accumulated_depreciation_account_code=orm_asset.accumulated_depreciation_account_code,
        depreciation_expense_account_code=orm_asset.depreciation_expense_account_code,
        created_at=orm_asset.created_at,
    )


def new_transaction_to_orm(transaction: domain.NewTransaction) -> ORMTransaction:
    """Build an unsaved SQLAlchemy Transaction (with entries) from a domain one."""
    return ORMTransaction(
        date=transaction.date,
        description=transaction.description,
        ref=transaction.ref,
        entries=[
            ORMJournalEntry(
                account_code=entry.account_code,
                debit=entry.debit,
                credit=entry.credit,
            )
            for entry in transaction.entries
        ],
    )
