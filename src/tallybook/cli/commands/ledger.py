"""Account ledger command."""

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
from tallybook.domain.reports import ReportService


@click.command("ledger")
@click.argument("code", metavar="CODE")
@period_option
@start_date_option
@end_date_option
@click.pass_context
def show_ledger(
    ctx, code: str, period: str | None, start_date: str | None, end_date: str | None
):
    """Show the ledger of one account with a running balance.

    Balances are shown on the account's normal side, so a positive balance
    is a debit for assets and expenses and a credit for the other types.

    Examples:
        tallybook ledger 1200 --period this-month
        tallybook ledger 4100 --start-date 2024-01-01 --end-date 2024-06-30
    """
    service = ReportService(ctx.obj["db"], ctx.obj["settings"])
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    try:
        ledger = service.account_ledger(code, start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account = ledger.account
    click.echo(f"\nLedger {account.code} - {account.name} ({account.type.value})")
    click.echo("-" * 110)
    click.echo(
        f"{'Date':<12} {'Ref':<12} {'Description':<30} "
        f"{'Debit':>16} {'Credit':>16} {'Balance':>18}"
    )
    click.echo("-" * 110)
    click.echo(f"{'':<12} {'':<12} {'Opening balance':<30} {'':>16} {'':>16} "
               f"{format_amount(ledger.opening_balance):>18}")

    for line in ledger.lines:
        debit = format_amount(line.debit) if line.debit else ""
        credit = format_amount(line.credit) if line.credit else ""
        click.echo(
            f"{str(line.date):<12} {(line.ref or '')[:12]:<12} {(line.description or '')[:30]:<30} "
            f"{debit:>16} {credit:>16} {format_amount(line.running_balance):>18}"
        )

    click.echo("-" * 110)
    click.echo(f"{'':<12} {'':<12} {'Closing balance':<30} {'':>16} {'':>16} "
               f"{format_amount(ledger.closing_balance):>18}")


def register_commands(cli):
    """Register ledger command with main CLI."""
    cli.add_command(show_ledger)
