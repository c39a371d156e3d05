"""Text formatting helpers for CLI output."""

from decimal import Decimal

LINE_WIDTH = 72


def format_amount(amount: Decimal) -> str:
    """Format an amount with thousands separators; negatives in parentheses."""
    if amount < 0:
        return f"({-amount:,.2f})"
    return f"{amount:,.2f}"


def report_row(label: str, amount: Decimal | None = None, indent: int = 0) -> str:
    """One line of a report: label on the left, amount right-aligned."""
    label = " " * (4 * indent) + label
    if amount is None:
        return label
    amount_str = format_amount(amount)
    return f"{label:<{LINE_WIDTH - 20}}{amount_str:>20}"


def rule(char: str = "-") -> str:
    return char * LINE_WIDTH
