"""Fixed asset domain service."""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.chart import FIXED_ASSETS_GROUP_ID
from ledgerbook.domain.entities import (
    AccountClass,
    AccountLevel,
    Asset as AssetEntity,
    NormalBalance,
    Transaction,
    TransactionType,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    asset_not_found,
)
from ledgerbook.domain.scheduling import book_value, monthly_depreciation
from ledgerbook.domain.transaction import validate_amount

logger = logging.getLogger(__name__)

COST_CODE_BASE = 12100


class AssetService:
    """Service for registering fixed assets and reading their book value."""

    def __init__(self, db: Database):
        """Initialize asset service.

        Args:
            db: Database instance
        """
        self.db = db

    def register_asset(
        self,
        name: str,
        original_value: Decimal,
        purchase_date: date,
        useful_life_years: int,
        payment_account_id: Optional[str] = None,
        group_id: str = FIXED_ASSETS_GROUP_ID,
        note: Optional[str] = None,
    ) -> str:
        """Register a fixed asset with its own ledger accounts.

        Creates a debit-normal cost account and a credit-normal accumulated
        depreciation account linked to the asset, both under ``group_id``.
        When ``payment_account_id`` is given, the acquisition is posted as
        Dr cost / Cr payment account on the purchase date.

        Args:
            name: Asset name
            original_value: Acquisition cost
            purchase_date: Date of purchase
            useful_life_years: Depreciation period in years
            payment_account_id: Optional account the purchase was paid from
            group_id: Fixed asset group the new accounts go under
            note: Optional note

        Returns:
            Asset ID

        Raises:
            ValidationError: If the value or useful life is invalid
            NotFoundError: If the group or payment account doesn't exist
        """
        if not name or not name.strip():
            raise ValidationError("Asset name cannot be empty")
        validate_amount(original_value, "Asset value")
        if original_value == 0:
            raise ValidationError(f"Asset value must be positive: {original_value}")
        if useful_life_years <= 0:
            raise ValidationError("Useful life must be at least one year")

        group = self.db.get_account(group_id)
        if group is None:
            raise NotFoundError(account_not_found(group_id))
        if payment_account_id is not None and self.db.get_account(payment_account_id) is None:
            raise NotFoundError(account_not_found(payment_account_id))

        asset_id = uuid.uuid4().hex
        cost_account_id = f"{asset_id}_cost"
        accumulated_account_id = f"{asset_id}_accdep"
        code = str(COST_CODE_BASE + self.db.get_account_child_count(group_id) + 1)

        from ledgerbook.domain.account import AccountService

        accounts = AccountService(self.db)
        accounts.create_account(
            account_id=cost_account_id,
            code=code,
            name=f"{name} (Cost)",
            account_class=AccountClass.ASSETS,
            parent_id=group_id,
            level=AccountLevel.GL,
            normal_balance=NormalBalance.DEBIT,
            linked_asset_id=asset_id,
        )
        accounts.create_account(
            account_id=accumulated_account_id,
            code=f"AD-{code}",
            name=f"Accum Dep - {name}",
            account_class=AccountClass.ASSETS,
            parent_id=group_id,
            level=AccountLevel.SUB_LEDGER,
            normal_balance=NormalBalance.CREDIT,
            is_system=True,
            linked_asset_id=asset_id,
        )

        asset = AssetEntity(
            id=asset_id,
            name=name,
            original_value=original_value,
            purchase_date=purchase_date,
            useful_life_years=useful_life_years,
            cost_account_id=cost_account_id,
            accumulated_account_id=accumulated_account_id,
            note=note,
        )
        self.db.create_asset(asset)

        if payment_account_id is not None:
            self.db.create_transaction(
                Transaction(
                    id=uuid.uuid4().hex,
                    date=datetime(purchase_date.year, purchase_date.month, purchase_date.day),
                    amount=original_value,
                    account_id=cost_account_id,
                    payment_account_id=payment_account_id,
                    transaction_type=TransactionType.TRANSFER,
                    note=f"Acquisition: {name}",
                )
            )

        logger.info("Registered asset %s (%s) at %s", asset_id, name, original_value)
        return asset_id

    def get_asset(self, asset_id: str) -> Optional[AssetEntity]:
        """Get asset by ID."""
        return self.db.get_asset(asset_id)

    def list_assets(self) -> list[AssetEntity]:
        """List all assets."""
        return self.db.list_assets()

    def get_book_value(self, asset_id: str) -> Decimal:
        """Original value less accumulated depreciation on the ledger.

        Raises:
            NotFoundError: If the asset doesn't exist
        """
        asset = self.db.get_asset(asset_id)
        if asset is None:
            raise NotFoundError(asset_not_found(asset_id))
        transactions = self.db.list_transactions(account_id=asset.accumulated_account_id)
        return book_value(asset, transactions)

    def get_monthly_depreciation(self, asset_id: str) -> Decimal:
        asset = self.db.get_asset(asset_id)
        if asset is None:
            raise NotFoundError(asset_not_found(asset_id))
        return monthly_depreciation(asset)
