"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class PartialWriteFailure(DomainError):
    """A unit of work failed after part of it was sent to the store.

    The store has been rolled back; nothing from the unit was kept.
    """


class InconsistentStateError(PartialWriteFailure):
    """Rolling back a failed unit of work failed as well.

    Stored balances may no longer agree with the journal.
    """


def account_not_found(code: str) -> str:
    """Return message for missing account."""
    return f"Account {code} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def asset_not_found(asset_id: int) -> str:
    """Return message for missing fixed asset."""
    return f"Fixed asset {asset_id} not found"


def duplicate_account_code(code: str) -> str:
    """Return message for an account code that is already taken."""
    return f"Account with code '{code}' already exists"


def unknown_account_code(code: str) -> str:
    """Return message for an entry referencing an unknown account."""
    return f"Entry references unknown account code '{code}'"


def unbalanced_entries(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for a transaction whose sides do not agree."""
    return (
        f"Transaction is not balanced (debit: {total_debit}, credit: {total_credit})"
    )


def account_delete_blocked(code: str, balance: Decimal) -> str:
    """Return message when an account still carries a balance."""
    return (
        f"Cannot delete account {code}: its balance is {balance}. "
        "Post a reversing transaction to bring it to zero first."
    )
