"""Ledger balance calculation.

All balances here are raw and debit-positive: every entry contributes
``debit - credit`` regardless of the account's normal side. Callers that
present balances apply the normal-balance convention themselves.
"""

from decimal import Decimal
from typing import Iterable, Optional, Sequence
from datetime import date

from tallybook.domain.entities import (
    Account,
    AccountLedger,
    AccountType,
    LedgerBalances,
    LedgerLine,
    Period,
    Transaction,
)

ZERO = Decimal("0")


def is_debit_normal(account: Account) -> bool:
    """Return True if the account accumulates value on the debit side.

    Assets and expenses are debit-normal, except contra-asset accounts which
    behave like liabilities. Liability, equity and revenue accounts are
    credit-normal.
    """
    if account.type == AccountType.ASSET:
        return not account.is_contra_asset
    return account.type == AccountType.EXPENSE


def compute_balances(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    period: Period,
) -> LedgerBalances:
    """Compute opening balances, period changes and closing balances.

    Args:
        accounts: All known accounts
        transactions: Complete transaction history with entries
        period: Reporting period; ``period.start <= period.end`` is assumed

    Returns:
        LedgerBalances with a value for every known account code. Entries
        referencing unknown accounts are ignored.
    """
    opening = {account.code: ZERO for account in accounts}
    changes = {account.code: ZERO for account in accounts}

    for txn in transactions:
        if txn.date > period.end:
            continue
        target = opening if txn.date < period.start else changes
        for entry in txn.entries:
            if entry.account_code not in target:
                continue
            target[entry.account_code] += entry.debit - entry.credit

    closing = {code: opening[code] + changes[code] for code in opening}
    return LedgerBalances(
        opening_balances=opening,
        period_changes=changes,
        closing_balances=closing,
    )


def derived_balance(account: Account, transactions: Iterable[Transaction]) -> Decimal:
    """Return an account's all-time balance from the journal, normal-side positive."""
    raw = ZERO
    for txn in transactions:
        for entry in txn.entries:
            if entry.account_code == account.code:
                raw += entry.debit - entry.credit
    return raw if is_debit_normal(account) else -raw


def build_account_ledger(
    account: Account,
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> AccountLedger:
    """Build the chronological ledger of one account.

    The running balance is expressed in the account's normal-balance
    convention. Activity before ``start_date`` is folded into the opening
    balance; activity after ``end_date`` is left out.
    """
    sign = Decimal("1") if is_debit_normal(account) else Decimal("-1")
    ordered = sorted(
        (txn for txn in transactions if any(e.account_code == account.code for e in txn.entries)),
        key=lambda txn: (txn.date, txn.id or 0),
    )

    opening = ZERO
    running = ZERO
    lines: list[LedgerLine] = []
    for txn in ordered:
        if end_date is not None and txn.date > end_date:
            break
        debit = sum((e.debit for e in txn.entries if e.account_code == account.code), ZERO)
        credit = sum((e.credit for e in txn.entries if e.account_code == account.code), ZERO)
        change = sign * (debit - credit)

        if start_date is not None and txn.date < start_date:
            opening += change
            running = opening
            continue

        running += change
        lines.append(
            LedgerLine(
                transaction_id=txn.id,
                date=txn.date,
                ref=txn.ref,
                description=txn.description,
                debit=debit,
                credit=credit,
                running_balance=running,
            )
        )

    return AccountLedger(
        account=account,
        opening_balance=opening,
        lines=tuple(lines),
        closing_balance=running,
    )
