"""Bank reconciliation command."""

import click
from tallybook.cli.date_filters import end_date_option, resolve_cli_date_range, start_date_option
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount
from tallybook.domain.errors import DomainError
from tallybook.domain.reconciliation import ReconciliationService
from tallybook.domain.spreadsheet_import import SpreadsheetImportService


@click.command("reconcile")
@click.argument("code", metavar="CODE")
@click.argument("statement_file", type=click.Path(exists=True))
@start_date_option
@end_date_option
@click.option(
    "--journal",
    "journal_lines",
    type=int,
    multiple=True,
    help="Statement line number to book as a new transaction (repeatable)",
)
@click.option("--counter", "counter_code", help="Counter account code for --journal lines")
@click.pass_context
def reconcile(
    ctx,
    code: str,
    statement_file: str,
    start_date: str | None,
    end_date: str | None,
    journal_lines: tuple[int, ...],
    counter_code: str | None,
):
    """Match a bank statement CSV against the book lines of an account.

    The statement needs columns date, description, debit, credit, seen from
    the account's side (a deposit is a debit). A statement line matches a
    book line with the same date and amounts.

    Examples:
        tallybook reconcile 1200 statement-2024-01.csv --start-date 2024-01-01
        tallybook reconcile 1200 statement-2024-01.csv --journal 4 --counter 5300
    """
    if journal_lines and not counter_code:
        raise click.UsageError("--journal needs --counter")

    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    try:
        statement = SpreadsheetImportService(db, ctx.obj["settings"]).read_bank_statement(
            statement_file
        )
        service = ReconciliationService(db)
        if journal_lines:
            result, transaction_ids = service.journal_unmatched(
                code, statement, journal_lines, counter_code, start_date=start, end_date=end
            )
        else:
            result = service.reconcile(code, statement, start_date=start, end_date=end)
            transaction_ids = []
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    for transaction_id in transaction_ids:
        click.echo(f"Created transaction {transaction_id}")

    click.echo(f"\nReconciliation of account {result.account_code}")
    click.echo(f"  Matched: {len(result.matched)}")
    click.echo(f"  Unmatched statement lines: {len(result.unmatched_statement)}")
    click.echo(f"  Unmatched book lines: {len(result.unmatched_book)}")

    if result.unmatched_statement:
        click.echo("\nOn statement, not in books:")
        for line in result.unmatched_statement:
            click.echo(
                f"  line {line.line_number:<5} {str(line.date):<12} {line.description[:30]:<30} "
                f"{format_amount(line.debit):>16} {format_amount(line.credit):>16}"
            )

    if result.unmatched_book:
        click.echo("\nIn books, not on statement:")
        for book_line in result.unmatched_book:
            click.echo(
                f"  txn {book_line.transaction_id:<6} {str(book_line.date):<12} "
                f"{(book_line.description or '')[:30]:<30} "
                f"{format_amount(book_line.debit):>16} {format_amount(book_line.credit):>16}"
            )

    if result.is_fully_reconciled:
        click.echo("\nAccount is fully reconciled.")


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile)
