"""Tests for date and amount parsers."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from tallybook.utils.amount_parser import parse_amount, parse_optional_amount
from tallybook.utils.date_parser import PERIOD_NAMES, get_date_range, parse_date


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_day_first():
    """Ambiguous numeric dates are read day first."""
    assert parse_date("03/04/2024") == date(2024, 4, 3)


def test_parse_relative_dates():
    today = date.today()
    assert parse_date("today") == today
    assert parse_date("Yesterday") == today - timedelta(days=1)
    assert parse_date("tomorrow") == today + timedelta(days=1)
    assert parse_date("start of month") == today.replace(day=1)
    assert parse_date("end of year") == date(today.year, 12, 31)


def test_parse_end_of_month():
    result = parse_date("end of month")
    assert result.month == date.today().month
    assert (result + timedelta(days=1)).day == 1


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize("period", PERIOD_NAMES)
def test_get_date_range_is_full_calendar_range(period):
    start, end = get_date_range(period)

    assert start <= end
    assert start.day == 1
    assert (end + timedelta(days=1)).day == 1


def test_get_date_range_quarters():
    start, end = get_date_range("this-quarter")
    assert start.month in (1, 4, 7, 10)
    assert end.month == start.month + 2

    last_start, last_end = get_date_range("last-quarter")
    assert last_end + timedelta(days=1) == start


def test_get_date_range_years():
    today = date.today()
    assert get_date_range("this-year") == (date(today.year, 1, 1), date(today.year, 12, 31))
    assert get_date_range("last-year") == (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")


class TestAmountParser:
    """Tests for amount parsing."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("123.45", Decimal("123.45")),
            ("-123.45", Decimal("-123.45")),
            ("1,234.56", Decimal("1234.56")),
            ("$123.45", Decimal("123.45")),
            ("Rp 1,000,000", Decimal("1000000")),
            ("IDR 2500", Decimal("2500")),
            ("(50.00)", Decimal("-50.00")),
        ],
    )
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "NaN", "1.2.3"])
    def test_parse_amount_invalid(self, text):
        with pytest.raises(ValueError):
            parse_amount(text)

    def test_parse_optional_amount(self):
        assert parse_optional_amount(None) == 0
        assert parse_optional_amount("  ") == 0
        assert parse_optional_amount("12.50") == Decimal("12.50")
