"""CSV import commands."""

import click
from tallybook.cli.error_handling import handle_domain_error
from tallybook.domain.errors import DomainError
from tallybook.domain.spreadsheet_import import SpreadsheetImportService
from tallybook.utils.date_parser import parse_date


@click.group("import")
def import_group():
    """Import transactions or accounts from CSV files."""
    pass


@import_group.command("transactions")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_transactions(ctx, csv_file: str):
    """Import journal transactions from a CSV file.

    Expected columns: date, description, ref, account_code, debit, credit.
    Rows with the same date, description and ref form one transaction.
    Nothing is imported if any transaction is unbalanced or invalid.
    """
    service = SpreadsheetImportService(ctx.obj["db"], ctx.obj["settings"])

    try:
        result = service.import_transactions(csv_file)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.transactions} transactions")
    click.echo(f"  Entries: {result.entries}")


@import_group.command("accounts")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--opening-date", help="Date of the opening balance transaction (defaults to today)")
@click.pass_context
def import_accounts(ctx, csv_file: str, opening_date: str | None):
    """Import accounts from a CSV file.

    Expected columns: code, name, type and optionally opening_balance,
    description. Opening balances are recorded against the opening balance
    account.
    """
    service = SpreadsheetImportService(ctx.obj["db"], ctx.obj["settings"])

    try:
        balance_date = parse_date(opening_date) if opening_date else None
        result = service.import_accounts(csv_file, opening_date=balance_date)
    except (DomainError, ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.accounts} accounts")
    if result.transactions:
        click.echo("  Opening balances recorded")


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_group)
