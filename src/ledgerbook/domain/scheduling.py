"""Depreciation and recurring-transaction schedulers.

The planners step through calendar periods and produce postings; they read
balances from the ledger core but never change it. ``ScheduleService``
persists what the planners produce.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from ledgerbook.database.base import Database
from ledgerbook.domain.balances import ZERO, natural_balance
from ledgerbook.domain.entities import (
    Asset,
    Frequency,
    NormalBalance,
    RecurringRule,
    Transaction,
    TransactionType,
)
from ledgerbook.domain.errors import NotFoundError, ValidationError, account_not_found
from ledgerbook.domain.transaction import validate_amount

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

FREQUENCY_STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.YEARLY: relativedelta(years=1),
}


@dataclass(frozen=True)
class DepreciationRun:
    """Postings generated for one asset and its state afterwards."""

    asset: Asset
    transactions: tuple[Transaction, ...]
    book_value: Decimal


@dataclass(frozen=True)
class RecurringRun:
    rule: RecurringRule
    transactions: tuple[Transaction, ...]


def monthly_depreciation(asset: Asset) -> Decimal:
    """Straight-line monthly charge, rounded to cents."""
    if asset.useful_life_years <= 0:
        raise ValidationError(f"Asset '{asset.name}' must have a positive useful life")
    return (asset.original_value / (asset.useful_life_years * 12)).quantize(
        CENT, rounding=ROUND_HALF_UP
    )


def book_value(asset: Asset, transactions: Iterable[Transaction]) -> Decimal:
    """Original value less what its accumulated depreciation account holds."""
    if asset.accumulated_account_id is None:
        return asset.original_value
    accumulated = natural_balance(
        asset.accumulated_account_id, transactions, NormalBalance.CREDIT
    )
    return asset.original_value - accumulated


def _at_start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def plan_depreciation(
    asset: Asset,
    transactions: Iterable[Transaction],
    now: datetime,
    expense_account_id: str,
) -> DepreciationRun:
    """Catch up monthly depreciation for ``asset`` up to ``now``.

    Runs start one month after the last run (or the purchase date) and
    continue while the run date is strictly before ``now``. The last charge
    is capped so the book value never goes below zero.

    Raises:
        ValidationError: If the asset has no accumulated depreciation account
    """
    if asset.accumulated_account_id is None:
        raise ValidationError(
            f"Asset '{asset.name}' has no accumulated depreciation account"
        )

    remaining = book_value(asset, transactions)
    monthly = monthly_depreciation(asset)
    anchor = asset.last_depreciation_date or asset.purchase_date
    next_run = anchor + relativedelta(months=1)
    last_run = asset.last_depreciation_date

    postings: list[Transaction] = []
    while _at_start_of_day(next_run) < now:
        if remaining <= CENT:
            break
        amount = min(monthly, remaining)
        postings.append(
            Transaction(
                id=uuid.uuid4().hex,
                date=_at_start_of_day(next_run),
                amount=amount,
                account_id=expense_account_id,
                payment_account_id=asset.accumulated_account_id,
                transaction_type=TransactionType.EXPENSE,
                note=f"Depreciation: {asset.name} ({next_run.strftime('%b %Y')})",
            )
        )
        remaining -= amount
        last_run = next_run
        next_run = next_run + relativedelta(months=1)

    return DepreciationRun(
        asset=replace(asset, last_depreciation_date=last_run),
        transactions=tuple(postings),
        book_value=max(remaining, ZERO),
    )


def plan_recurring(rule: RecurringRule, now: datetime) -> RecurringRun:
    """Emit one posting per occurrence of ``rule`` due on or before ``now``.

    Each posting is dated at its due date and the rule's next due date moves
    past ``now``.
    """
    if not rule.active:
        return RecurringRun(rule=rule, transactions=())

    step = FREQUENCY_STEPS[rule.frequency]
    due = rule.next_due_date
    last_run = rule.last_run_date
    postings: list[Transaction] = []
    while _at_start_of_day(due) <= now:
        postings.append(
            Transaction(
                id=uuid.uuid4().hex,
                date=_at_start_of_day(due),
                amount=rule.amount,
                account_id=rule.account_id,
                payment_account_id=rule.payment_account_id,
                transaction_type=rule.transaction_type,
                note=f"Recurring: {rule.note or 'Auto Transaction'}",
                related_party_id=rule.party_id,
            )
        )
        last_run = due
        due = due + step

    return RecurringRun(
        rule=replace(rule, next_due_date=due, last_run_date=last_run),
        transactions=tuple(postings),
    )


class ScheduleService:
    """Service for running scheduled postings."""

    def __init__(self, db: Database):
        """Initialize schedule service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_recurring_rule(
        self,
        account_id: str,
        amount: Decimal,
        frequency: Frequency,
        next_due_date: date,
        payment_account_id: Optional[str] = None,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        party_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> str:
        """Store a recurring rule.

        Returns:
            Rule ID

        Raises:
            ValidationError: If the amount is invalid or both sides are the same
            NotFoundError: If a referenced account doesn't exist
        """
        validate_amount(amount)
        if payment_account_id == account_id:
            raise ValidationError("Debit and credit accounts must differ")
        for referenced in (account_id, payment_account_id):
            if referenced is not None and self.db.get_account(referenced) is None:
                raise NotFoundError(account_not_found(referenced))

        rule = RecurringRule(
            id=uuid.uuid4().hex,
            transaction_type=transaction_type,
            account_id=account_id,
            amount=amount,
            frequency=frequency,
            next_due_date=next_due_date,
            payment_account_id=payment_account_id,
            party_id=party_id,
            note=note,
        )
        self.db.create_recurring_rule(rule)
        logger.info("Created %s recurring rule %s", frequency.value, rule.id)
        return rule.id

    def list_recurring_rules(self) -> list[RecurringRule]:
        return self.db.list_recurring_rules()

    def run_depreciation(
        self,
        now: Optional[datetime] = None,
        expense_account_id: str = "exp_depreciation",
    ) -> list[Transaction]:
        """Post all due depreciation for every asset.

        Args:
            now: Cutoff instant (defaults to the current time)
            expense_account_id: Account debited with depreciation expense

        Returns:
            The postings that were created

        Raises:
            NotFoundError: If the expense account does not exist
        """
        if self.db.get_account(expense_account_id) is None:
            raise NotFoundError(account_not_found(expense_account_id))
        now = now or datetime.now()

        created: list[Transaction] = []
        transactions = self.db.list_transactions()
        for asset in self.db.list_assets():
            if asset.accumulated_account_id is None:
                logger.warning("Skipping asset %s: no accumulated depreciation account", asset.id)
                continue
            run = plan_depreciation(asset, transactions, now, expense_account_id)
            for txn in run.transactions:
                self.db.create_transaction(txn)
                logger.info("Depreciated %s by %s on %s", asset.name, txn.amount, txn.date.date())
            if run.transactions:
                self.db.update_asset_depreciation(asset.id, run.asset.last_depreciation_date)
            created.extend(run.transactions)
        return created

    def run_recurring(self, now: Optional[datetime] = None) -> list[Transaction]:
        """Post every due occurrence of the active recurring rules."""
        now = now or datetime.now()

        created: list[Transaction] = []
        for rule in self.db.list_recurring_rules(active_only=True):
            run = plan_recurring(rule, now)
            if not run.transactions:
                continue
            for txn in run.transactions:
                self.db.create_transaction(txn)
                logger.info("Posted recurring rule %s for %s", rule.id, txn.date.date())
            self.db.update_recurring_schedule(
                rule.id,
                next_due_date=run.rule.next_due_date,
                last_run_date=run.rule.last_run_date,
            )
            created.extend(run.transactions)
        return created
