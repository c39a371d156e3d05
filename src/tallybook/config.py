"""Ledger settings."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_OPENING_BALANCE_ACCOUNT = "3999"
DEFAULT_RETAINED_EARNINGS_ACCOUNT = "3200"
DEFAULT_CONTRA_ASSET_KEYWORDS = ("accumulated depreciation", "akumulasi penyusutan")
DEFAULT_CASH_KEYWORDS = ("cash", "bank", "kas")


def _split_keywords(value: str) -> tuple[str, ...]:
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class LedgerSettings:
    """Account codes and keywords the ledger depends on.

    Attributes:
        opening_balance_account_code: Equity account used as the counter-entry
            of opening balance transactions
        retained_earnings_account_code: Equity account that receives the
            period's net income on the balance sheet
        contra_asset_keywords: Lowercase name fragments that mark a new asset
            account as contra-asset when not stated explicitly
        cash_keywords: Lowercase name fragments that mark a new asset account
            as cash-equivalent when not stated explicitly
    """

    opening_balance_account_code: str = DEFAULT_OPENING_BALANCE_ACCOUNT
    retained_earnings_account_code: str = DEFAULT_RETAINED_EARNINGS_ACCOUNT
    contra_asset_keywords: tuple[str, ...] = DEFAULT_CONTRA_ASSET_KEYWORDS
    cash_keywords: tuple[str, ...] = DEFAULT_CASH_KEYWORDS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerSettings":
        """Build settings from TALLYBOOK_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            LedgerSettings with defaults for unset variables
        """
        if environ is None:
            environ = os.environ

        contra = environ.get("TALLYBOOK_CONTRA_KEYWORDS")
        cash = environ.get("TALLYBOOK_CASH_KEYWORDS")
        return cls(
            opening_balance_account_code=environ.get(
                "TALLYBOOK_OPENING_BALANCE_ACCOUNT", DEFAULT_OPENING_BALANCE_ACCOUNT
            ),
            retained_earnings_account_code=environ.get(
                "TALLYBOOK_RETAINED_EARNINGS_ACCOUNT", DEFAULT_RETAINED_EARNINGS_ACCOUNT
            ),
            contra_asset_keywords=_split_keywords(contra) if contra else DEFAULT_CONTRA_ASSET_KEYWORDS,
            cash_keywords=_split_keywords(cash) if cash else DEFAULT_CASH_KEYWORDS,
        )

    def looks_contra_asset(self, name: str) -> bool:
        """Return True if an account name matches a contra-asset keyword."""
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.contra_asset_keywords)

    def looks_cash_equivalent(self, name: str) -> bool:
        """Return True if an account name matches a cash keyword."""
        lowered = name.lower()
        return any(keyword in lowered for keyword in self.cash_keywords)
