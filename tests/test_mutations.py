"""Tests for balance delta computation."""

from decimal import Decimal

from tallybook.domain.entities import Account, AccountType, JournalEntry
from tallybook.domain.mutations import (
    apply_balance_deltas,
    compute_balance_deltas,
    entry_delta,
)

ACCOUNTS = {
    "1200": Account(code="1200", name="Bank", type=AccountType.ASSET),
    "1601": Account(
        code="1601",
        name="Accumulated Depreciation",
        type=AccountType.ASSET,
        is_contra_asset=True,
    ),
    "2100": Account(code="2100", name="Accounts Payable", type=AccountType.LIABILITY),
    "4100": Account(code="4100", name="Service Revenue", type=AccountType.REVENUE),
    "5200": Account(code="5200", name="Salaries", type=AccountType.EXPENSE),
    "5401": Account(code="5401", name="Depreciation Expense", type=AccountType.EXPENSE),
}


def _entries(*lines):
    return [
        JournalEntry(account_code=code, debit=Decimal(debit), credit=Decimal(credit))
        for code, debit, credit in lines
    ]


def test_entry_delta_follows_normal_side():
    assert entry_delta(ACCOUNTS["1200"], Decimal("10"), Decimal("0")) == Decimal("10")
    assert entry_delta(ACCOUNTS["4100"], Decimal("0"), Decimal("10")) == Decimal("10")
    assert entry_delta(ACCOUNTS["2100"], Decimal("10"), Decimal("0")) == Decimal("-10")
    assert entry_delta(ACCOUNTS["1601"], Decimal("0"), Decimal("10")) == Decimal("10")


def test_sale_increases_bank_and_revenue():
    deltas = compute_balance_deltas(
        _entries(("1200", "1000000", "0"), ("4100", "0", "1000000")), ACCOUNTS
    )

    assert deltas == {"1200": Decimal("1000000"), "4100": Decimal("1000000")}


def test_depreciation_increases_contra_asset():
    deltas = compute_balance_deltas(
        _entries(("5401", "100000", "0"), ("1601", "0", "100000")), ACCOUNTS
    )

    assert deltas == {"5401": Decimal("100000"), "1601": Decimal("100000")}


def test_deltas_are_netted_per_account():
    deltas = compute_balance_deltas(
        _entries(
            ("1200", "500", "0"),
            ("1200", "0", "200"),
            ("4100", "0", "300"),
        ),
        ACCOUNTS,
    )

    assert deltas == {"1200": Decimal("300"), "4100": Decimal("300")}


def test_zero_net_deltas_are_dropped():
    deltas = compute_balance_deltas(
        _entries(("1200", "500", "0"), ("1200", "0", "500")), ACCOUNTS
    )

    assert deltas == {}


def test_unknown_codes_are_skipped():
    deltas = compute_balance_deltas(
        _entries(("1200", "100", "0"), ("9999", "0", "100")), ACCOUNTS
    )

    assert deltas == {"1200": Decimal("100")}


def test_reverse_undoes_forward():
    entries = _entries(("5200", "750", "0"), ("1200", "0", "500"), ("2100", "0", "250"))

    forward = compute_balance_deltas(entries, ACCOUNTS)
    backward = compute_balance_deltas(entries, ACCOUNTS, reverse=True)

    assert set(forward) == set(backward)
    for code in forward:
        assert forward[code] + backward[code] == 0


def test_apply_balance_deltas_returns_new_accounts():
    updated = apply_balance_deltas(ACCOUNTS, {"1200": Decimal("250"), "9999": Decimal("1")})

    assert updated["1200"].balance == Decimal("250")
    assert ACCOUNTS["1200"].balance == 0
    assert "9999" not in updated
    assert updated["4100"] is ACCOUNTS["4100"]
