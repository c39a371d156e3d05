"""Account management commands."""

import click
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount
from tallybook.domain.account import AccountService
from tallybook.domain.entities import AccountType
from tallybook.domain.errors import DomainError
from tallybook.utils.amount_parser import parse_amount
from tallybook.utils.date_parser import parse_date

ACCOUNT_TYPES = [account_type.value for account_type in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Account type",
)
@click.option("--description", default="", help="Account description")
@click.option("--opening-balance", help="Opening balance, recorded against the opening balance account")
@click.option("--opening-date", help="Date of the opening balance (defaults to today)")
@click.option(
    "--contra-asset/--no-contra-asset",
    default=None,
    help="Mark an asset account as contra-asset (inferred from the name if omitted)",
)
@click.option(
    "--cash/--no-cash",
    default=None,
    help="Mark an asset account as cash-equivalent (inferred from the name if omitted)",
)
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    description: str,
    opening_balance: str | None,
    opening_date: str | None,
    contra_asset: bool | None,
    cash: bool | None,
):
    """Create a new account.

    Examples:
        tallybook account create 1200 "Bank" --type Asset
        tallybook account create 1110 "Petty Cash" --type Asset --opening-balance 1000000
        tallybook account create 1601 "Accumulated Depreciation - Office Equipment" --type Asset
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        balance = parse_amount(opening_balance) if opening_balance else None
        balance_date = parse_date(opening_date) if opening_date else None
        account = service.create_account(
            code=code,
            name=name,
            account_type=AccountType.parse(account_type),
            description=description,
            opening_balance=balance if balance is not None else 0,
            opening_date=balance_date,
            is_contra_asset=contra_asset,
            is_cash_equivalent=cash,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account {account.code} '{account.name}' ({account.type.value})")
    if account.is_contra_asset:
        click.echo("  Contra-asset: yes")
    if account.is_cash_equivalent:
        click.echo("  Cash-equivalent: yes")
    if account.balance != 0:
        click.echo(f"  Opening balance: {format_amount(account.balance)}")


@account_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    help="Only list accounts of this type",
)
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List the chart of accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    accounts = service.list_accounts(
        AccountType.parse(account_type) if account_type else None
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        flags = []
        if acc.is_contra_asset:
            flags.append("contra")
        if acc.is_cash_equivalent:
            flags.append("cash")
        flag_str = f" [{', '.join(flags)}]" if flags else ""
        click.echo(
            f"{acc.code:<8} {acc.name + flag_str:<40} {acc.type.value:<10} "
            f"{format_amount(acc.balance):>18}"
        )


@account_group.command("show")
@click.argument("code", metavar="CODE")
@click.pass_context
def show_account(ctx, code: str):
    """Show one account with its stored and journal-derived balance."""
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        account = service.require_account(code)
        derived = service.get_derived_balance(code)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Account {account.code}: {account.name}")
    click.echo(f"  Type: {account.type.value}")
    if account.description:
        click.echo(f"  Description: {account.description}")
    click.echo(f"  Contra-asset: {'yes' if account.is_contra_asset else 'no'}")
    click.echo(f"  Cash-equivalent: {'yes' if account.is_cash_equivalent else 'no'}")
    click.echo(f"  Balance: {format_amount(account.balance)}")
    if derived != account.balance:
        click.echo(f"  Journal balance: {format_amount(derived)} (differs from stored balance)")


@account_group.command("update")
@click.argument("code", metavar="CODE")
@click.option("--name", help="New account name")
@click.option("--description", help="New description")
@click.option("--contra-asset/--no-contra-asset", default=None, help="Contra-asset flag")
@click.option("--cash/--no-cash", default=None, help="Cash-equivalent flag")
@click.pass_context
def update_account(
    ctx,
    code: str,
    name: str | None,
    description: str | None,
    contra_asset: bool | None,
    cash: bool | None,
) -> None:
    """Update an account's name, description or role flags.

    The code and type of an account cannot be changed.

    Examples:
        tallybook account update 1200 --name "Bank - Operating"
        tallybook account update 1130 --cash
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    try:
        service.update_account(
            code=code,
            name=name,
            description=description,
            is_contra_asset=contra_asset,
            is_cash_equivalent=cash,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {code}")


@account_group.command("delete")
@click.argument("code", metavar="CODE")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, code: str, yes: bool) -> None:
    """Delete an account.

    The account can only be deleted while its balance derived from the
    journal is zero. Post a reversing transaction first if needed.

    Examples:
        tallybook account delete 1110
    """
    service = AccountService(ctx.obj["db"], ctx.obj["settings"])

    account_obj = service.get_account(code)
    if account_obj is None:
        click.echo(f"Error: Account {code} not found", err=True)
        ctx.exit(1)

    # Confirm deletion
    if not yes and not click.confirm(
        f"Are you sure you want to delete account {code} '{account_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account {code} '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
