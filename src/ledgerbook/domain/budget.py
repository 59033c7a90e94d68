"""Monthly budget domain service."""

import calendar
import logging
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import AccountClass, MonthlyBudget
from ledgerbook.domain.errors import NotFoundError, ValidationError, account_not_found
from ledgerbook.domain.transaction import validate_amount

logger = logging.getLogger(__name__)


def month_bounds(month_key: str) -> tuple[date, date]:
    """First and last day of a ``YYYY-MM`` month.

    Raises:
        ValidationError: If ``month_key`` is not a valid ``YYYY-MM`` month
    """
    year_text, sep, month_text = month_key.partition("-")
    if (
        not sep
        or len(year_text) != 4
        or len(month_text) != 2
        or not year_text.isdigit()
        or not month_text.isdigit()
        or not 1 <= int(month_text) <= 12
    ):
        raise ValidationError(f"Month must be given as YYYY-MM, got '{month_key}'")
    year, month = int(year_text), int(month_text)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


class BudgetService:
    """Service for storing monthly spending limits."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def set_budget(
        self,
        month_key: str,
        limit: Optional[Decimal] = None,
        account_limits: Optional[Mapping[str, Decimal]] = None,
    ) -> MonthlyBudget:
        """Create or replace the budget for a month.

        Args:
            month_key: Month as ``YYYY-MM``
            limit: Overall spending limit; defaults to the sum of the
                per-account limits
            account_limits: Spending limit per expense account ID

        Returns:
            The stored budget

        Raises:
            ValidationError: If the month, an amount or an account class is invalid
            NotFoundError: If a limited account doesn't exist
        """
        month_bounds(month_key)
        account_limits = dict(account_limits or {})
        for account_id, amount in account_limits.items():
            validate_amount(amount, f"Limit for '{account_id}'")
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            if account.account_class != AccountClass.EXPENSES:
                raise ValidationError(
                    f"Budget limits apply to expense accounts, '{account_id}' is "
                    f"{account.account_class.value}"
                )
        if limit is None:
            if not account_limits:
                raise ValidationError("Give an overall limit or at least one account limit")
            limit = sum(account_limits.values(), Decimal("0"))
        validate_amount(limit, "Budget limit")

        budget = MonthlyBudget(month_key=month_key, limit=limit, account_limits=account_limits)
        self.db.save_monthly_budget(budget)
        logger.info(
            "Saved budget for %s: limit %s across %d account limit(s)",
            month_key,
            limit,
            len(account_limits),
        )
        return budget

    def get_budget(self, month_key: str) -> MonthlyBudget:
        """Get the budget stored for a month.

        Raises:
            ValidationError: If ``month_key`` is malformed
            NotFoundError: If no budget is stored for the month
        """
        month_bounds(month_key)
        budget = self.db.get_monthly_budget(month_key)
        if budget is None:
            raise NotFoundError(f"No budget stored for {month_key}")
        return budget

    def list_budgets(self) -> list[MonthlyBudget]:
        """List stored budgets ordered by month."""
        return self.db.list_monthly_budgets()
