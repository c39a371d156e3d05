"""Transaction management commands."""

import click
from tallybook.cli.date_filters import (
    end_date_option,
    period_option,
    resolve_cli_date_range,
    start_date_option,
)
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount
from tallybook.domain.errors import DomainError
from tallybook.domain.transaction import TransactionService
from tallybook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage journal transactions."""
    pass


@transaction_group.command("list")
@period_option
@start_date_option
@end_date_option
@click.option("--account", help="Only transactions touching this account code")
@click.option("--search", help="Text to search for in description or reference")
@click.option("--verbose", "-v", is_flag=True, help="Show every entry line of each transaction")
@click.pass_context
def list_transactions(
    ctx,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    account: str | None,
    search: str | None,
    verbose: bool,
):
    """List transactions with optional filters, newest first.

    Use --verbose to show the debit and credit lines of each transaction.
    """
    service = TransactionService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    transactions = service.list_transactions(
        start_date=start, end_date=end, account_code=account, search=search
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Ref':<14} {'Description':<48} {'Amount':>18}")
    click.echo("-" * 100)

    for txn in transactions:
        total = sum(entry.debit for entry in txn.entries)
        description = (txn.description or "")[:48]
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {(txn.ref or '')[:14]:<14} "
            f"{description:<48} {format_amount(total):>18}"
        )
        if verbose:
            for entry in txn.entries:
                if entry.debit:
                    click.echo(f"{'':<20}Dr {entry.account_code:<10} {format_amount(entry.debit):>18}")
                else:
                    click.echo(
                        f"{'':<20}Cr {entry.account_code:<10} {'':>18} "
                        f"{format_amount(entry.credit):>18}"
                    )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="Transaction description")
@click.option("--ref", help="Reference")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    description: str | None,
    ref: str | None,
) -> None:
    """Update the date, description or reference of a transaction.

    Entry lines cannot be edited. Delete the transaction and add it again
    to change amounts or accounts.

    Examples:
        tallybook transaction update 1 --ref INV-002
        tallybook transaction update 1 --date 2024-01-16 --description "Consulting fee"
    """
    service = TransactionService(ctx.obj["db"])

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        service.update_transaction(
            transaction_id=transaction_id,
            date=txn_date,
            description=description,
            ref=ref,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on balances.

    Examples:
        tallybook transaction delete 1
    """
    service = TransactionService(ctx.obj["db"])

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
