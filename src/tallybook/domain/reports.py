"""Reporting domain service.

Loads a snapshot of accounts and transactions and hands it to the pure
engine. Nothing is cached between calls.
"""

from datetime import date
from typing import Optional

from tallybook.config import LedgerSettings
from tallybook.database.base import Database
from tallybook.domain.entities import (
    AccountLedger,
    ComparativeReport,
    CompareBy,
    FinancialReport,
    LedgerBalances,
    Period,
)
from tallybook.domain.errors import NotFoundError, ValidationError, account_not_found
from tallybook.domain.financials import build_comparative, build_financials
from tallybook.domain.ledger import build_account_ledger, compute_balances


def make_period(start: date, end: date) -> Period:
    """Build a reporting period, rejecting reversed ranges."""
    if start > end:
        raise ValidationError(f"Period start {start} is after period end {end}")
    return Period(start=start, end=end)


class ReportService:
    """Service for financial reports."""

    def __init__(self, db: Database, settings: Optional[LedgerSettings] = None):
        """Initialize report service.

        Args:
            db: Database instance
            settings: Ledger settings (defaults to LedgerSettings())
        """
        self.db = db
        self.settings = settings or LedgerSettings()

    def balances(self, start: date, end: date) -> LedgerBalances:
        """Raw opening, period and closing balances for a period."""
        period = make_period(start, end)
        return compute_balances(self.db.list_accounts(), self.db.list_transactions(), period)

    def financial_report(self, start: date, end: date) -> FinancialReport:
        """Income statement, balance sheet and cash flow for a period."""
        period = make_period(start, end)
        return build_financials(
            self.db.list_accounts(),
            self.db.list_transactions(),
            period,
            self.settings.retained_earnings_account_code,
        )

    def comparative_report(
        self, start: date, end: date, compare_by: CompareBy = CompareBy.YEAR
    ) -> ComparativeReport:
        """Report for a period next to the report of an earlier period."""
        period = make_period(start, end)
        return build_comparative(
            self.db.list_accounts(),
            self.db.list_transactions(),
            period,
            self.settings.retained_earnings_account_code,
            compare_by=compare_by,
        )

    def account_ledger(
        self,
        code: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AccountLedger:
        """Chronological ledger of one account with running balances."""
        if start_date is not None and end_date is not None:
            make_period(start_date, end_date)
        account = self.db.get_account(code)
        if account is None:
            raise NotFoundError(account_not_found(code))
        return build_account_ledger(
            account,
            self.db.list_transactions(account_code=code),
            start_date=start_date,
            end_date=end_date,
        )
