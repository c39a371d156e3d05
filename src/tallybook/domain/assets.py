"""Fixed asset domain service."""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from tallybook.database.base import Database
from tallybook.domain.entities import (
    AccountType,
    DepreciationMethod,
    FixedAsset,
    JournalEntry,
)
from tallybook.domain.errors import NotFoundError, ValidationError, asset_not_found
from tallybook.domain.transaction import CENT, TransactionService, to_amount

logger = logging.getLogger(__name__)


def monthly_depreciation(asset: FixedAsset) -> Decimal:
    """Straight-line depreciation for one month."""
    months = (asset.life_years or 1) * 12
    return (asset.cost - asset.residual_value) / months


def depreciation_amount(asset: FixedAsset) -> Decimal:
    """Amount the next monthly depreciation run will post.

    Never takes the book value below the residual value.
    """
    remaining = asset.book_value - asset.residual_value
    amount = max(Decimal("0"), min(monthly_depreciation(asset), remaining))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def end_of_month(day: date) -> date:
    """Last day of the month containing ``day``."""
    return day + relativedelta(day=31)


class FixedAssetService:
    """Service for the fixed asset register and depreciation runs."""

    def __init__(self, db: Database):
        """Initialize fixed asset service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)

    def _require_account(self, code: str, account_type: AccountType, role: str) -> None:
        account = self.db.get_account(code)
        if account is None:
            raise ValidationError(f"{role} account {code} not found")
        if account.type != account_type:
            raise ValidationError(
                f"{role} account {code} must be of type {account_type.value}, "
                f"not {account.type.value}"
            )

    def register_asset(
        self,
        name: str,
        cost: Decimal,
        acquired_on: date,
        category: str = "",
        asset_account_code: Optional[str] = None,
        payment_account_code: Optional[str] = None,
        is_depreciable: bool = False,
        life_years: Optional[int] = None,
        residual_value: Decimal = Decimal("0"),
        accumulated_depreciation_account_code: Optional[str] = None,
        depreciation_expense_account_code: Optional[str] = None,
    ) -> FixedAsset:
        """Register a fixed asset.

        When a payment account is given, the purchase is journalized in the
        same unit of work: debit the asset account, credit the payment
        account.

        Raises:
            ValidationError: If input is invalid or referenced accounts are
                missing or of the wrong type
        """
        if not name or not name.strip():
            raise ValidationError("Asset name cannot be empty")
        cost = to_amount(cost, "cost")
        residual_value = to_amount(residual_value, "residual value")
        if cost < 0:
            raise ValidationError("Asset cost cannot be negative")
        if residual_value < 0 or residual_value > cost:
            raise ValidationError("Residual value must be between zero and the cost")

        if is_depreciable:
            if life_years is None or life_years <= 0:
                raise ValidationError("Depreciable assets need a useful life of at least one year")
            if not accumulated_depreciation_account_code or not depreciation_expense_account_code:
                raise ValidationError(
                    "Depreciable assets need an accumulated depreciation account "
                    "and a depreciation expense account"
                )
            self._require_account(
                accumulated_depreciation_account_code, AccountType.ASSET, "Accumulated depreciation"
            )
            self._require_account(
                depreciation_expense_account_code, AccountType.EXPENSE, "Depreciation expense"
            )
        else:
            life_years = None

        if asset_account_code:
            self._require_account(asset_account_code, AccountType.ASSET, "Asset")

        purchase = None
        if payment_account_code and cost > 0:
            if not asset_account_code:
                raise ValidationError("Journalizing a purchase needs an asset account")
            purchase = self.transaction_service.prepare_posting(
                date=acquired_on,
                description=f"Purchase of asset: {name.strip()}",
                ref="ASSET",
                entries=[
                    JournalEntry(account_code=asset_account_code, debit=cost),
                    JournalEntry(account_code=payment_account_code, credit=cost),
                ],
            )

        asset_id = self.db.create_fixed_asset(
            name=name.strip(),
            category=(category or "").strip(),
            cost=cost,
            acquired_on=acquired_on,
            residual_value=residual_value,
            is_depreciable=is_depreciable,
            life_years=life_years,
            method=DepreciationMethod.STRAIGHT_LINE.value if is_depreciable else None,
            asset_account_code=asset_account_code,
            accumulated_depreciation_account_code=accumulated_depreciation_account_code,
            depreciation_expense_account_code=depreciation_expense_account_code,
            purchase=purchase,
        )
        return self.require_asset(asset_id)

    def get_asset(self, asset_id: int) -> Optional[FixedAsset]:
        """Get fixed asset by ID."""
        return self.db.get_fixed_asset(asset_id)

    def require_asset(self, asset_id: int) -> FixedAsset:
        """Get fixed asset by ID or raise NotFoundError."""
        asset = self.db.get_fixed_asset(asset_id)
        if asset is None:
            raise NotFoundError(asset_not_found(asset_id))
        return asset

    def list_assets(self) -> list[FixedAsset]:
        """List all fixed assets."""
        return self.db.list_fixed_assets()

    def update_asset(
        self,
        asset_id: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        residual_value: Optional[Decimal] = None,
        is_depreciable: Optional[bool] = None,
        life_years: Optional[int] = None,
        asset_account_code: Optional[str] = None,
        accumulated_depreciation_account_code: Optional[str] = None,
        depreciation_expense_account_code: Optional[str] = None,
    ) -> FixedAsset:
        """Edit the register fields of an asset.

        Cost, acquisition date and accumulated depreciation are backed by
        journal transactions and can't be edited here. Turning depreciation
        off clears the useful life and depreciation accounts.

        Raises:
            NotFoundError: If the asset doesn't exist
            ValidationError: If the edited asset would be invalid
        """
        asset = self.require_asset(asset_id)

        if name is not None and not name.strip():
            raise ValidationError("Asset name cannot be empty")
        if residual_value is not None:
            residual_value = to_amount(residual_value, "residual value")
            if residual_value < 0 or residual_value > asset.cost:
                raise ValidationError("Residual value must be between zero and the cost")
            if residual_value > asset.book_value:
                raise ValidationError("Residual value cannot exceed the current book value")
        if asset_account_code:
            self._require_account(asset_account_code, AccountType.ASSET, "Asset")

        depreciable = asset.is_depreciable if is_depreciable is None else is_depreciable
        if depreciable:
            life = life_years if life_years is not None else asset.life_years
            if life is None or life <= 0:
                raise ValidationError("Depreciable assets need a useful life of at least one year")
            accumulated = (
                accumulated_depreciation_account_code or asset.accumulated_depreciation_account_code
            )
            expense = depreciation_expense_account_code or asset.depreciation_expense_account_code
            if not accumulated or not expense:
                raise ValidationError(
                    "Depreciable assets need an accumulated depreciation account "
                    "and a depreciation expense account"
                )
            self._require_account(accumulated, AccountType.ASSET, "Accumulated depreciation")
            self._require_account(expense, AccountType.EXPENSE, "Depreciation expense")
        elif (
            life_years is not None
            or accumulated_depreciation_account_code
            or depreciation_expense_account_code
        ):
            raise ValidationError(
                f"Asset '{asset.name}' is not depreciable; useful life and "
                "depreciation accounts don't apply"
            )

        self.db.update_fixed_asset(
            asset_id,
            name=name.strip() if name is not None else None,
            category=category.strip() if category is not None else None,
            residual_value=residual_value,
            is_depreciable=is_depreciable,
            life_years=life_years,
            method=DepreciationMethod.STRAIGHT_LINE.value if is_depreciable else None,
            asset_account_code=asset_account_code,
            accumulated_depreciation_account_code=accumulated_depreciation_account_code,
            depreciation_expense_account_code=depreciation_expense_account_code,
        )
        return self.require_asset(asset_id)

    def delete_asset(self, asset_id: int) -> None:
        """Remove an asset from the register.

        Its purchase and depreciation transactions stay in the journal;
        delete those separately to reverse them.

        Raises:
            NotFoundError: If the asset doesn't exist
        """
        self.require_asset(asset_id)
        self.db.delete_fixed_asset(asset_id)

    def run_depreciation(self, asset_id: int, on_date: Optional[date] = None) -> FixedAsset:
        """Post one month of straight-line depreciation for an asset.

        Args:
            asset_id: Fixed asset ID
            on_date: Date of the depreciation transaction (defaults to the
                last day of the current month)

        Returns:
            The asset with its accumulated depreciation updated

        Raises:
            NotFoundError: If the asset doesn't exist
            ValidationError: If the asset is not depreciable, lacks accounts,
                or is fully depreciated
        """
        asset = self.require_asset(asset_id)
        if not asset.is_depreciable:
            raise ValidationError(f"Asset '{asset.name}' is not depreciable")
        if (
            not asset.depreciation_expense_account_code
            or not asset.accumulated_depreciation_account_code
        ):
            raise ValidationError(
                f"Asset '{asset.name}' has no depreciation accounts configured"
            )

        amount = depreciation_amount(asset)
        if amount <= 0:
            raise ValidationError(f"Asset '{asset.name}' is fully depreciated")

        posting = self.transaction_service.prepare_posting(
            date=on_date or end_of_month(date.today()),
            description=f"Monthly depreciation for asset: {asset.name}",
            ref=f"DEP-{asset.id}",
            entries=[
                JournalEntry(account_code=asset.depreciation_expense_account_code, debit=amount),
                JournalEntry(account_code=asset.accumulated_depreciation_account_code, credit=amount),
            ],
        )
        self.db.post_depreciation(asset.id, amount, posting)
        logger.info("Depreciated asset %s by %s", asset.id, amount)
        return self.require_asset(asset.id)
