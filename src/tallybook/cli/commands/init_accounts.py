"""Initialize the default chart of accounts."""

import click
from tallybook.domain.account import AccountService
from tallybook.domain.entities import AccountType, NewAccount


# Default small-business chart of accounts: (code, name, type, description)
DEFAULT_ACCOUNTS = [
    # Current assets
    ("1100", "Cash", AccountType.ASSET, "Cash on hand"),
    ("1200", "Bank", AccountType.ASSET, "Company bank account"),
    ("1300", "Accounts Receivable", AccountType.ASSET, "Amounts owed by customers"),
    ("1400", "Inventory", AccountType.ASSET, "Goods held for sale"),
    # Fixed assets
    ("1501", "Office Equipment", AccountType.ASSET, "Office equipment in use"),
    ("1511", "Vehicles", AccountType.ASSET, "Company vehicles"),
    ("1601", "Accumulated Depreciation - Office Equipment", AccountType.ASSET,
     "Accumulated depreciation of office equipment"),
    ("1611", "Accumulated Depreciation - Vehicles", AccountType.ASSET,
     "Accumulated depreciation of vehicles"),
    # Liabilities
    ("2100", "Accounts Payable", AccountType.LIABILITY, "Amounts owed to suppliers"),
    ("2200", "Bank Loan", AccountType.LIABILITY, "Loans from banks"),
    ("2300", "Income Tax Payable", AccountType.LIABILITY, "Income tax not yet paid"),
    # Equity
    ("3100", "Share Capital", AccountType.EQUITY, "Capital paid in by owners"),
    ("3200", "Retained Earnings", AccountType.EQUITY, "Accumulated retained profits"),
    ("3999", "Opening Balance Equity", AccountType.EQUITY,
     "Counter-account for opening balances"),
    # Revenue
    ("4100", "Service Revenue", AccountType.REVENUE, "Revenue from services"),
    # Expenses
    ("5100", "Cost of Revenue", AccountType.EXPENSE, "Direct costs of revenue"),
    ("5200", "Salaries Expense", AccountType.EXPENSE, "Employee salaries"),
    ("5300", "Rent Expense", AccountType.EXPENSE, "Rent of business premises"),
    ("5401", "Depreciation Expense - Office Equipment", AccountType.EXPENSE,
     "Depreciation of office equipment"),
    ("5411", "Depreciation Expense - Vehicles", AccountType.EXPENSE,
     "Depreciation of vehicles"),
    ("5500", "Income Tax Expense", AccountType.EXPENSE, "Corporate income tax"),
]


@click.command("init-accounts")
@click.pass_context
def init_accounts(ctx):
    """Initialize database with the default chart of accounts.

    Accounts whose code already exists are left untouched.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    existing = {account.code for account in service.list_accounts()}
    missing = [
        NewAccount(code=code, name=name, type=account_type, description=description)
        for code, name, account_type, description in DEFAULT_ACCOUNTS
        if code not in existing
    ]

    if not missing:
        click.echo("Default accounts already exist.")
        return

    click.echo("Creating default chart of accounts...")
    service.create_accounts(missing)
    skipped = len(DEFAULT_ACCOUNTS) - len(missing)
    click.echo(f"Successfully created {len(missing)} accounts.")
    if skipped:
        click.echo(f"Skipped {skipped} existing accounts.")


def register_commands(cli):
    """Register init-accounts command with main CLI."""
    cli.add_command(init_accounts)
