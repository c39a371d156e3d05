"""Domain model entities for tallybook.

These are pure data classes representing bookkeeping concepts, independent
of database schema. The reporting engine only ever sees these types, so it
can be fed from the database, an import file or a test fixture alike.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Closed set of account classifications."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"

    @classmethod
    def parse(cls, value: str) -> "AccountType":
        """Parse an account type name, case-insensitively."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown account type '{value}'")


class DepreciationMethod(str, Enum):
    """Depreciation methods supported for fixed assets."""

    STRAIGHT_LINE = "straight-line"


class CompareBy(str, Enum):
    """How far back the comparison period of a comparative report lies."""

    MONTH = "month"
    HALF_YEAR = "half-year"
    YEAR = "year"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry.

    ``balance`` is the persisted running balance in the account's own
    normal-balance convention. ``is_contra_asset`` and ``is_cash_equivalent``
    are decided once when the account is created.
    """

    code: str
    name: str
    type: AccountType
    balance: Decimal = Decimal("0")
    description: str = ""
    is_contra_asset: bool = False
    is_cash_equivalent: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalEntry:
    """One debit-or-credit line of a transaction."""

    account_code: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    id: Optional[int] = None
    transaction_id: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Journal transaction with its entries."""

    id: Optional[int]
    date: date
    description: str
    ref: str
    entries: tuple[JournalEntry, ...] = ()
    created_at: Optional[datetime] = None
    fixed_asset_id: Optional[int] = None


@dataclass(frozen=True)
class NewTransaction:
    """A validated transaction that has not been persisted yet."""

    date: date
    description: str
    ref: str
    entries: tuple[JournalEntry, ...]


@dataclass(frozen=True)
class Period:
    """Inclusive date range used for reporting."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class LedgerBalances:
    """Raw debit-positive balances per account code."""

    opening_balances: dict[str, Decimal]
    period_changes: dict[str, Decimal]
    closing_balances: dict[str, Decimal]


@dataclass(frozen=True)
class ReportLine:
    """Account line of a financial report, with its displayed balance."""

    code: str
    name: str
    balance: Decimal
    is_contra_asset: bool = False


@dataclass(frozen=True)
class CashFlowSummary:
    """Simplified cash flow: start and end cash and the change between."""

    start_cash: Decimal
    end_cash: Decimal
    net_change: Decimal


@dataclass(frozen=True)
class FinancialReport:
    """Income statement, balance sheet and cash flow for one period."""

    period: Period
    revenues: tuple[ReportLine, ...]
    total_revenue: Decimal
    expenses: tuple[ReportLine, ...]
    total_expense: Decimal
    net_income: Decimal
    assets: tuple[ReportLine, ...]
    total_assets: Decimal
    liabilities: tuple[ReportLine, ...]
    total_liabilities: Decimal
    equity: tuple[ReportLine, ...]
    total_equity: Decimal
    equity_with_pl: tuple[ReportLine, ...]
    total_equity_with_pl: Decimal
    total_liabilities_and_equity: Decimal
    is_balanced: bool
    cash_flow: CashFlowSummary


@dataclass(frozen=True)
class FigureChange:
    """One compared figure of a comparative report."""

    label: str
    current: Decimal
    previous: Decimal
    change: Decimal
    percent_change: Decimal


@dataclass(frozen=True)
class ComparativeReport:
    """A period's report next to the report of an earlier period."""

    current: FinancialReport
    previous: FinancialReport
    compare_by: CompareBy
    changes: tuple[FigureChange, ...]


@dataclass(frozen=True)
class LedgerLine:
    """One line of an account ledger with the balance after it."""

    transaction_id: Optional[int]
    date: date
    ref: str
    description: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """All lines of an account in a date range."""

    account: Account
    opening_balance: Decimal
    lines: tuple[LedgerLine, ...]
    closing_balance: Decimal


@dataclass(frozen=True)
class FixedAsset:
    """Fixed asset register entry."""

    id: int
    name: str
    category: str
    cost: Decimal
    acquired_on: date
    residual_value: Decimal
    is_depreciable: bool
    accumulated_depreciation: Decimal
    life_years: Optional[int] = None
    method: Optional[DepreciationMethod] = None
    asset_account_code: Optional[str] = None
    accumulated_depreciation_account_code: Optional[str] = None
    depreciation_expense_account_code: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def book_value(self) -> Decimal:
        return self.cost - self.accumulated_depreciation


@dataclass(frozen=True)
class StatementLine:
    """A line of an imported bank statement."""

    line_number: int
    date: date
    description: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class BookLine:
    """A transaction's effect on one cash or bank account."""

    transaction_id: int
    date: date
    description: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of matching a bank statement against the books."""

    account_code: str
    matched: tuple[tuple[StatementLine, BookLine], ...] = ()
    unmatched_statement: tuple[StatementLine, ...] = ()
    unmatched_book: tuple[BookLine, ...] = ()

    @property
    def is_fully_reconciled(self) -> bool:
        return not self.unmatched_statement and not self.unmatched_book


@dataclass(frozen=True)
class ImportSummary:
    """Statistics returned by the spreadsheet importers."""

    accounts: int = 0
    transactions: int = 0
    entries: int = 0


@dataclass(frozen=True)
class JournalPosting:
    """A new transaction together with the balance deltas it causes."""

    transaction: NewTransaction
    deltas: dict[str, Decimal]


@dataclass(frozen=True)
class NewAccount:
    """Account to be created, with an optional opening balance.

    ``is_contra_asset`` and ``is_cash_equivalent`` left as None are inferred
    from the account name.
    """

    code: str
    name: str
    type: AccountType
    description: str = ""
    opening_balance: Decimal = Decimal("0")
    is_contra_asset: Optional[bool] = None
    is_cash_equivalent: Optional[bool] = None
