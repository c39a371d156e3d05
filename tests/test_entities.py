"""Tests for domain entities, errors and settings."""

from dataclasses import FrozenInstanceError
from datetime import date
from decimal import Decimal

import pytest

from tallybook.config import LedgerSettings
from tallybook.domain.entities import (
    Account,
    AccountType,
    FixedAsset,
    Period,
    ReconciliationResult,
)
from tallybook.domain.errors import (
    DomainError,
    InconsistentStateError,
    NotFoundError,
    PartialWriteFailure,
    ValidationError,
    unbalanced_entries,
)


class TestAccountType:
    """Tests for AccountType parsing."""

    @pytest.mark.parametrize("value", ["Asset", "asset", " ASSET "])
    def test_parse_is_case_insensitive(self, value):
        assert AccountType.parse(value) == AccountType.ASSET

    def test_parse_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown account type"):
            AccountType.parse("Income")


def test_account_is_frozen():
    account = Account(code="1200", name="Bank", type=AccountType.ASSET)
    with pytest.raises(FrozenInstanceError):
        account.balance = Decimal("1")


def test_period_contains_is_inclusive():
    period = Period(start=date(2024, 1, 1), end=date(2024, 1, 31))
    assert period.contains(date(2024, 1, 1))
    assert period.contains(date(2024, 1, 31))
    assert not period.contains(date(2024, 2, 1))


def test_fixed_asset_book_value():
    asset = FixedAsset(
        id=1,
        name="Laptop",
        category="Equipment",
        cost=Decimal("1200"),
        acquired_on=date(2024, 1, 1),
        residual_value=Decimal("0"),
        is_depreciable=True,
        accumulated_depreciation=Decimal("300"),
    )
    assert asset.book_value == Decimal("900")


def test_empty_reconciliation_is_fully_reconciled():
    assert ReconciliationResult(account_code="1200").is_fully_reconciled


def test_error_hierarchy():
    assert issubclass(ValidationError, DomainError)
    assert issubclass(NotFoundError, DomainError)
    assert issubclass(InconsistentStateError, PartialWriteFailure)
    # Existing ValueError handlers keep working
    assert issubclass(DomainError, ValueError)


def test_unbalanced_message_names_both_totals():
    message = unbalanced_entries(Decimal("500000.00"), Decimal("400000.00"))
    assert "not balanced" in message
    assert "500000.00" in message
    assert "400000.00" in message


class TestLedgerSettings:
    """Tests for settings and role keywords."""

    def test_defaults(self):
        settings = LedgerSettings.from_env({})
        assert settings.opening_balance_account_code == "3999"
        assert settings.retained_earnings_account_code == "3200"

    def test_from_env(self):
        settings = LedgerSettings.from_env(
            {
                "TALLYBOOK_OPENING_BALANCE_ACCOUNT": "3900",
                "TALLYBOOK_RETAINED_EARNINGS_ACCOUNT": "3300",
                "TALLYBOOK_CASH_KEYWORDS": "Till, Wallet",
            }
        )
        assert settings.opening_balance_account_code == "3900"
        assert settings.retained_earnings_account_code == "3300"
        assert settings.cash_keywords == ("till", "wallet")
        assert settings.looks_cash_equivalent("Shop Till")
        assert not settings.looks_cash_equivalent("Bank")

    def test_keyword_matching(self):
        settings = LedgerSettings()
        assert settings.looks_contra_asset("Accumulated Depreciation - Vehicles")
        assert settings.looks_contra_asset("Akumulasi Penyusutan Kendaraan")
        assert settings.looks_cash_equivalent("Petty Cash")
        assert not settings.looks_cash_equivalent("Office Equipment")
