"""Financial statement aggregation.

Builds the income statement, balance sheet and simplified cash flow for a
period from the raw balances of :mod:`tallybook.domain.ledger`. Every call
recomputes everything from the inputs it is given.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from dateutil.relativedelta import relativedelta

from tallybook.domain.entities import (
    Account,
    AccountType,
    CashFlowSummary,
    ComparativeReport,
    CompareBy,
    FigureChange,
    FinancialReport,
    Period,
    ReportLine,
    Transaction,
)
from tallybook.domain.ledger import ZERO, compute_balances

BALANCE_TOLERANCE = Decimal("0.01")

COMPARE_OFFSETS = {
    CompareBy.MONTH: relativedelta(months=1),
    CompareBy.HALF_YEAR: relativedelta(months=6),
    CompareBy.YEAR: relativedelta(years=1),
}


def _line(account: Account, balance: Decimal) -> ReportLine:
    return ReportLine(
        code=account.code,
        name=account.name,
        balance=balance,
        is_contra_asset=account.is_contra_asset,
    )


def _total(lines: Iterable[ReportLine]) -> Decimal:
    return sum((line.balance for line in lines), ZERO)


def build_financials(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    period: Period,
    retained_earnings_code: str,
) -> FinancialReport:
    """Build the financial report for a period.

    Args:
        accounts: All known accounts
        transactions: Complete transaction history with entries
        period: Reporting period
        retained_earnings_code: Equity account that receives net income in
            the balance sheet view (``equity_with_pl``)

    Returns:
        FinancialReport with lines ordered by account code
    """
    balances = compute_balances(accounts, transactions, period)
    changes = balances.period_changes
    closing = balances.closing_balances
    ordered = sorted(accounts, key=lambda account: account.code)

    def of_type(account_type: AccountType) -> list[Account]:
        return [account for account in ordered if account.type == account_type]

    # Income statement: revenue grows on the credit side
    revenues = tuple(_line(a, -changes[a.code]) for a in of_type(AccountType.REVENUE))
    expenses = tuple(_line(a, changes[a.code]) for a in of_type(AccountType.EXPENSE))
    total_revenue = _total(revenues)
    total_expense = _total(expenses)
    net_income = total_revenue - total_expense

    # Balance sheet
    assets = tuple(
        _line(a, -closing[a.code] if a.is_contra_asset else closing[a.code])
        for a in of_type(AccountType.ASSET)
    )
    liabilities = tuple(_line(a, -closing[a.code]) for a in of_type(AccountType.LIABILITY))
    equity = tuple(_line(a, -closing[a.code]) for a in of_type(AccountType.EQUITY))
    # Earnings from before the period were never closed into equity
    prior_earnings = -sum(
        (
            balances.opening_balances[a.code]
            for a in ordered
            if a.type in (AccountType.REVENUE, AccountType.EXPENSE)
        ),
        ZERO,
    )
    equity_with_pl = tuple(
        _line_with_income(line, prior_earnings + net_income)
        if line.code == retained_earnings_code
        else line
        for line in equity
    )

    total_assets = sum(
        (-line.balance if line.is_contra_asset else line.balance for line in assets), ZERO
    )
    total_liabilities = _total(liabilities)
    total_equity = _total(equity)
    total_equity_with_pl = _total(equity_with_pl)
    total_liabilities_and_equity = total_liabilities + total_equity_with_pl

    cash_codes = [
        a.code for a in of_type(AccountType.ASSET) if a.is_cash_equivalent
    ]
    start_cash = sum((balances.opening_balances[code] for code in cash_codes), ZERO)
    end_cash = sum((closing[code] for code in cash_codes), ZERO)

    return FinancialReport(
        period=period,
        revenues=revenues,
        total_revenue=total_revenue,
        expenses=expenses,
        total_expense=total_expense,
        net_income=net_income,
        assets=assets,
        total_assets=total_assets,
        liabilities=liabilities,
        total_liabilities=total_liabilities,
        equity=equity,
        total_equity=total_equity,
        equity_with_pl=equity_with_pl,
        total_equity_with_pl=total_equity_with_pl,
        total_liabilities_and_equity=total_liabilities_and_equity,
        is_balanced=abs(total_assets - total_liabilities_and_equity) < BALANCE_TOLERANCE,
        cash_flow=CashFlowSummary(
            start_cash=start_cash,
            end_cash=end_cash,
            net_change=end_cash - start_cash,
        ),
    )


def _line_with_income(line: ReportLine, earnings: Decimal) -> ReportLine:
    return ReportLine(
        code=line.code,
        name=line.name,
        balance=line.balance + earnings,
        is_contra_asset=line.is_contra_asset,
    )


def previous_period(period: Period, compare_by: CompareBy) -> Period:
    """Shift a period back by the comparison offset."""
    offset = COMPARE_OFFSETS[compare_by]
    return Period(start=period.start - offset, end=period.end - offset)


def percent_change(current: Decimal, previous: Decimal) -> Decimal:
    """Percentage change relative to the magnitude of the previous value."""
    if previous == 0:
        return ZERO
    return ((current - previous) / abs(previous) * 100).quantize(Decimal("0.1"))


def build_comparative(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    period: Period,
    retained_earnings_code: str,
    compare_by: CompareBy = CompareBy.YEAR,
) -> ComparativeReport:
    """Build a period's report next to the report of an earlier period."""
    current = build_financials(accounts, transactions, period, retained_earnings_code)
    previous = build_financials(
        accounts,
        transactions,
        previous_period(period, compare_by),
        retained_earnings_code,
    )

    figures = (
        ("Revenue", current.total_revenue, previous.total_revenue),
        ("Expenses", current.total_expense, previous.total_expense),
        ("Net income", current.net_income, previous.net_income),
        ("Total assets", current.total_assets, previous.total_assets),
        ("Total liabilities", current.total_liabilities, previous.total_liabilities),
        ("Total equity", current.total_equity_with_pl, previous.total_equity_with_pl),
    )
    changes = tuple(
        FigureChange(
            label=label,
            current=now,
            previous=before,
            change=now - before,
            percent_change=percent_change(now, before),
        )
        for label, now, before in figures
    )
    return ComparativeReport(
        current=current,
        previous=previous,
        compare_by=compare_by,
        changes=changes,
    )
