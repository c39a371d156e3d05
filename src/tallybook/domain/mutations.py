"""Balance deltas for transaction creation and deletion.

Deltas are expressed in each account's normal-balance convention, netted
per account code, and meant to be applied as atomic increments so that
concurrent writers commute.
"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Mapping

from tallybook.domain.entities import Account, JournalEntry
from tallybook.domain.ledger import ZERO, is_debit_normal


def entry_delta(account: Account, debit: Decimal, credit: Decimal) -> Decimal:
    """Return the change an entry makes to the account's stored balance."""
    if is_debit_normal(account):
        return debit - credit
    return credit - debit


def compute_balance_deltas(
    entries: Iterable[JournalEntry],
    accounts: Mapping[str, Account],
    reverse: bool = False,
) -> dict[str, Decimal]:
    """Net the balance changes of a transaction's entries per account.

    Args:
        entries: Journal entries of one transaction
        accounts: Known accounts keyed by code; entries for other codes
            are skipped
        reverse: If True, compute the deltas that undo the entries, by
            swapping each entry's debit and credit

    Returns:
        Mapping of account code to signed delta, without zero deltas
    """
    deltas: dict[str, Decimal] = {}
    for entry in entries:
        account = accounts.get(entry.account_code)
        if account is None:
            continue
        debit, credit = entry.debit, entry.credit
        if reverse:
            debit, credit = credit, debit
        deltas[account.code] = deltas.get(account.code, ZERO) + entry_delta(
            account, debit, credit
        )
    return {code: delta for code, delta in deltas.items() if delta != 0}


def apply_balance_deltas(
    accounts: Mapping[str, Account], deltas: Mapping[str, Decimal]
) -> dict[str, Account]:
    """Return a new account mapping with deltas added to the balances.

    Used for in-memory snapshots; stores apply the same deltas as
    increments.
    """
    updated = dict(accounts)
    for code, delta in deltas.items():
        if code in updated:
            updated[code] = replace(updated[code], balance=updated[code].balance + delta)
    return updated
