"""Financial report commands."""

import click
from tallybook.cli.date_filters import (
    end_date_option,
    period_option,
    resolve_report_period,
    start_date_option,
)
from tallybook.cli.error_handling import handle_domain_error
from tallybook.cli.formatting import format_amount, report_row, rule
from tallybook.domain.entities import CompareBy, FinancialReport
from tallybook.domain.errors import DomainError
from tallybook.domain.reports import ReportService


def _financial_report(ctx, period, start_date, end_date) -> FinancialReport:
    start, end = resolve_report_period(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    try:
        return ReportService(ctx.obj["db"], ctx.obj["settings"]).financial_report(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)


def _section(title, lines, total_label, total):
    click.echo(report_row(title))
    for line in lines:
        click.echo(report_row(f"{line.code} {line.name}", line.balance, indent=1))
    click.echo(report_row(total_label, total))


def _echo_income_statement(report: FinancialReport) -> None:
    _section("Revenue", report.revenues, "Total revenue", report.total_revenue)
    click.echo()
    _section("Expenses", report.expenses, "Total expenses", report.total_expense)
    click.echo(rule())
    click.echo(report_row("NET INCOME", report.net_income))


def _echo_balance_sheet(report: FinancialReport) -> None:
    _section("Assets", report.assets, "Total assets", report.total_assets)
    click.echo()
    _section("Liabilities", report.liabilities, "Total liabilities", report.total_liabilities)
    click.echo()
    _section(
        "Equity (including current earnings)",
        report.equity_with_pl,
        "Total equity",
        report.total_equity_with_pl,
    )
    click.echo(rule())
    click.echo(report_row("TOTAL LIABILITIES AND EQUITY", report.total_liabilities_and_equity))
    if report.is_balanced:
        click.echo("Balance sheet is balanced.")
    else:
        difference = report.total_assets - report.total_liabilities_and_equity
        click.echo(f"WARNING: balance sheet is out of balance by {format_amount(difference)}")


@click.group()
def report_group():
    """Produce financial statements."""
    pass


@report_group.command("income")
@period_option
@start_date_option
@end_date_option
@click.pass_context
def income_statement(ctx, period, start_date, end_date):
    """Income statement (profit and loss) for a period.

    Defaults to the current year.

    Examples:
        tallybook report income --period last-month
        tallybook report income --start-date 2024-01-01 --end-date 2024-12-31
    """
    report = _financial_report(ctx, period, start_date, end_date)
    click.echo(f"\nIncome statement {report.period.start} to {report.period.end}")
    click.echo(rule("="))
    _echo_income_statement(report)


@report_group.command("balance")
@period_option
@start_date_option
@end_date_option
@click.pass_context
def balance_sheet(ctx, period, start_date, end_date):
    """Balance sheet as of the end of a period."""
    report = _financial_report(ctx, period, start_date, end_date)
    click.echo(f"\nBalance sheet as of {report.period.end}")
    click.echo(rule("="))
    _echo_balance_sheet(report)


@report_group.command("cashflow")
@period_option
@start_date_option
@end_date_option
@click.pass_context
def cash_flow(ctx, period, start_date, end_date):
    """Change in cash and cash-equivalent accounts over a period."""
    report = _financial_report(ctx, period, start_date, end_date)
    summary = report.cash_flow
    click.echo(f"\nCash flow {report.period.start} to {report.period.end}")
    click.echo(rule("="))
    click.echo(report_row("Cash at start of period", summary.start_cash))
    click.echo(report_row("Net change in cash", summary.net_change))
    click.echo(rule())
    click.echo(report_row("Cash at end of period", summary.end_cash))


@report_group.command("comparative")
@period_option
@start_date_option
@end_date_option
@click.option(
    "--compare",
    "compare_by",
    type=click.Choice([c.value for c in CompareBy], case_sensitive=False),
    default=CompareBy.YEAR.value,
    show_default=True,
    help="Length of the shift to the comparison period",
)
@click.pass_context
def comparative(ctx, period, start_date, end_date, compare_by):
    """Compare a period with the same period a month, half-year or year earlier.

    Examples:
        tallybook report comparative --period this-year
        tallybook report comparative --period last-month --compare month
    """
    start, end = resolve_report_period(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    service = ReportService(ctx.obj["db"], ctx.obj["settings"])
    try:
        report = service.comparative_report(start, end, compare_by=CompareBy(compare_by.lower()))
    except DomainError as e:
        handle_domain_error(ctx, e)

    current, previous = report.current.period, report.previous.period
    click.echo(
        f"\nComparative report {current.start} to {current.end} "
        f"vs {previous.start} to {previous.end}"
    )
    click.echo("=" * 96)
    click.echo(f"{'':<20} {'Current':>18} {'Previous':>18} {'Change':>18} {'%':>10}")
    click.echo("-" * 96)
    for figure in report.changes:
        click.echo(
            f"{figure.label:<20} {format_amount(figure.current):>18} "
            f"{format_amount(figure.previous):>18} {format_amount(figure.change):>18} "
            f"{figure.percent_change:>9}%"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
