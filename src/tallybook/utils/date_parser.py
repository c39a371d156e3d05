"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIOD_NAMES = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15/01/2024" (day first)
    - Relative dates: "today", "yesterday", "tomorrow"
    - Period boundaries: "start of month", "end of month", "start of year",
      "end of year"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": today.replace(day=1),
        "end of month": today + relativedelta(day=31),
        "start of year": today.replace(month=1, day=1),
        "end of year": today.replace(month=12, day=31),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # ISO dates are unambiguous; everything else is read day first
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def get_date_range(period: str) -> tuple[date, date]:
    """Get the full calendar range of a named reporting period.

    Args:
        period: One of this-month, last-month, this-quarter, last-quarter,
            this-year, last-year

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        start_date = today.replace(day=1)
        return (start_date, start_date + relativedelta(day=31))

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return (start_date, start_date + relativedelta(day=31))

    elif period == "this-quarter":
        start_date = _quarter_start(today)
        return (start_date, start_date + relativedelta(months=3) - timedelta(days=1))

    elif period == "last-quarter":
        start_date = _quarter_start(today) - relativedelta(months=3)
        return (start_date, start_date + relativedelta(months=3) - timedelta(days=1))

    elif period == "this-year":
        return (today.replace(month=1, day=1), today.replace(month=12, day=31))

    elif period == "last-year":
        year = today.year - 1
        return (date(year, 1, 1), date(year, 12, 31))

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(PERIOD_NAMES)}"
        )
