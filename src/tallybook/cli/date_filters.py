"""CLI helpers for date range resolution."""

from datetime import date

import click

from tallybook.utils.date_parser import PERIOD_NAMES, get_date_range, parse_date

period_option = click.option(
    "--period",
    type=click.Choice(PERIOD_NAMES, case_sensitive=False),
    help="Named period (cannot be combined with --start-date/--end-date)",
)
start_date_option = click.option(
    "--start-date", help="Start date (YYYY-MM-DD or relative like 'start of year')"
)
end_date_option = click.option(
    "--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'end of month')"
)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None = None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        return get_date_range(period)

    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end


def resolve_report_period(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> tuple[date, date]:
    """Resolve a complete reporting period, defaulting to the current year."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=get_date_range("this-year"),
    )
    if start is None:
        start = end.replace(month=1, day=1)
    if end is None:
        end = date.today()
    return start, end
