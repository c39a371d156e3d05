"""Add transaction command."""

import click
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount
from tallybook.domain.entities import JournalEntry
from tallybook.domain.errors import DomainError
from tallybook.domain.transaction import TransactionService
from tallybook.utils.amount_parser import parse_amount
from tallybook.utils.date_parser import parse_date


def parse_entry_option(value: str, side: str) -> JournalEntry:
    """Parse a CODE=AMOUNT option into a journal entry."""
    code, sep, amount_str = value.partition("=")
    if not sep or not code.strip():
        raise ValueError(f"Invalid --{side} '{value}', expected CODE=AMOUNT")
    amount = parse_amount(amount_str)
    if side == "debit":
        return JournalEntry(account_code=code.strip(), debit=amount)
    return JournalEntry(account_code=code.strip(), credit=amount)


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", default="", help="Transaction description")
@click.option("--ref", default="", help="Reference (invoice number, receipt, ...)")
@click.option("--debit", "debits", multiple=True, help="Debit line as CODE=AMOUNT (repeatable)")
@click.option("--credit", "credits", multiple=True, help="Credit line as CODE=AMOUNT (repeatable)")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    description: str,
    ref: str,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
):
    """Record a journal transaction.

    Debits and credits must balance.

    Examples:
        tallybook add --date 2024-01-15 --description "Consulting" --ref INV-001 \\
            --debit 1200=1000000 --credit 4100=1000000
        tallybook add --date today --debit 5300=2500000 --credit 1100=500000 --credit 1200=2000000
    """
    service = TransactionService(ctx.obj["db"])

    try:
        txn_date = parse_date(date)
        entries = [parse_entry_option(value, "debit") for value in debits]
        entries += [parse_entry_option(value, "credit") for value in credits]
        txn = service.create_transaction(
            date=txn_date, description=description, ref=ref, entries=entries
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Date: {txn.date}")
    if txn.ref:
        click.echo(f"  Ref: {txn.ref}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    for entry in txn.entries:
        if entry.debit:
            click.echo(f"  Dr {entry.account_code:<8} {format_amount(entry.debit):>18}")
        else:
            click.echo(f"  Cr {entry.account_code:<8} {'':>18} {format_amount(entry.credit):>18}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
