"""Receivable and payable domain service.

An item is recognised with an accrual posting against the party's control
account and cleared by one or more settlement postings against cash.
"""

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.chart import PAYABLES_ID, RECEIVABLES_ID
from ledgerbook.domain.entities import (
    Receivable as ReceivableEntity,
    ReceivableKind,
    ReceivableStatus,
    ReceivableSubType,
    TransactionType,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    party_not_found,
    receivable_not_found,
)
from ledgerbook.domain.transaction import TransactionService, validate_amount

logger = logging.getLogger(__name__)


def accrual_type(kind: ReceivableKind, sub_type: ReceivableSubType) -> TransactionType:
    """Transaction type used when an item is recognised."""
    if sub_type == ReceivableSubType.LOAN:
        return TransactionType.TRANSFER
    if kind == ReceivableKind.RECEIVABLE:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


class ReceivableService:
    """Service for invoices, bills and loans owed to or by a party."""

    def __init__(self, db: Database):
        """Initialize receivable service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def add_receivable(
        self,
        kind: ReceivableKind,
        party_id: str,
        target_account_id: str,
        amount: Decimal,
        issue_date: date,
        due_date: date,
        sub_type: Optional[ReceivableSubType] = None,
        note: Optional[str] = None,
    ) -> str:
        """Record a receivable or payable and post its accrual.

        Receivables debit the control account and credit ``target_account_id``;
        payables debit ``target_account_id`` and credit the control account.
        The control account is the party's linked account, or the general
        receivables/payables account when the party has none.

        Args:
            kind: Receivable or payable
            party_id: Counterparty ID
            target_account_id: Revenue (receivable) or expense (payable) account
            amount: Positive amount in whole cents
            issue_date: Date the accrual is posted
            due_date: Date payment is expected
            sub_type: Invoice, bill or loan; defaults by kind
            note: Optional note

        Returns:
            Receivable ID

        Raises:
            ValidationError: If the amount or dates are invalid
            NotFoundError: If the party or an account doesn't exist
        """
        validate_amount(amount)
        if amount == 0:
            raise ValidationError("Amount must be positive")
        if due_date < issue_date:
            raise ValidationError("Due date cannot be before the issue date")

        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))
        if self.db.get_account(target_account_id) is None:
            raise NotFoundError(account_not_found(target_account_id))

        if sub_type is None:
            sub_type = (
                ReceivableSubType.INVOICE
                if kind == ReceivableKind.RECEIVABLE
                else ReceivableSubType.BILL
            )
        control_account_id = party.linked_account_id or (
            RECEIVABLES_ID if kind == ReceivableKind.RECEIVABLE else PAYABLES_ID
        )
        if self.db.get_account(control_account_id) is None:
            raise NotFoundError(account_not_found(control_account_id))
        if control_account_id == target_account_id:
            raise ValidationError("Target account cannot be the control account")

        receivable = ReceivableEntity(
            id=uuid.uuid4().hex,
            kind=kind,
            sub_type=sub_type,
            party_id=party.id,
            target_account_id=target_account_id,
            control_account_id=control_account_id,
            amount=amount,
            issue_date=issue_date,
            due_date=due_date,
            note=note,
        )
        if kind == ReceivableKind.RECEIVABLE:
            debit, credit = control_account_id, target_account_id
        else:
            debit, credit = target_account_id, control_account_id

        self.transactions.create_transaction(
            date=issue_date,
            amount=amount,
            account_id=debit,
            payment_account_id=credit,
            transaction_type=accrual_type(kind, sub_type),
            note=f"Accrual: {sub_type.value} Ref:{receivable.id}",
            related_party_id=party.id,
        )
        self.db.create_receivable(receivable)
        logger.info(
            "Recorded %s %s for party %s: %s due %s",
            kind.value,
            receivable.id,
            party.id,
            amount,
            due_date,
        )
        return receivable.id

    def record_payment(
        self,
        receivable_id: str,
        amount: Decimal,
        cash_account_id: str,
        paid_on: Optional[date | datetime] = None,
    ) -> ReceivableEntity:
        """Settle all or part of an open item through a cash account.

        Returns:
            The receivable as it stands after the payment

        Raises:
            NotFoundError: If the receivable or cash account doesn't exist
            ValidationError: If the amount is not positive, exceeds what is
                still open, or the item is already paid
        """
        receivable = self.get_receivable(receivable_id)
        validate_amount(amount)
        if amount == 0:
            raise ValidationError("Payment amount must be positive")
        if receivable.is_paid:
            raise ValidationError(f"Receivable '{receivable_id}' is already paid")
        if amount > receivable.remaining:
            raise ValidationError(
                f"Payment {amount} exceeds the open amount {receivable.remaining}"
            )

        paid_on = paid_on or datetime.now()
        paid_amount = receivable.paid_amount + amount
        fully_paid = paid_amount >= receivable.amount
        if receivable.kind == ReceivableKind.RECEIVABLE:
            debit, credit = cash_account_id, receivable.control_account_id
            transaction_type = TransactionType.INCOME
        else:
            debit, credit = receivable.control_account_id, cash_account_id
            transaction_type = TransactionType.EXPENSE

        self.transactions.create_transaction(
            date=paid_on,
            amount=amount,
            account_id=debit,
            payment_account_id=credit,
            transaction_type=transaction_type,
            note=(
                f"Settlement ({'Full' if fully_paid else 'Partial'}): "
                f"{receivable.sub_type.value} Ref:{receivable.id}"
            ),
            related_party_id=receivable.party_id,
        )
        paid_date = _as_date(paid_on) if fully_paid else None
        self.db.update_receivable_payment(receivable.id, paid_amount, paid_date)
        logger.info(
            "Recorded payment of %s on %s %s (%s open)",
            amount,
            receivable.kind.value,
            receivable.id,
            receivable.amount - paid_amount,
        )
        return self.get_receivable(receivable.id)

    def get_receivable(self, receivable_id: str) -> ReceivableEntity:
        """Get receivable by ID.

        Raises:
            NotFoundError: If the receivable doesn't exist
        """
        receivable = self.db.get_receivable(receivable_id)
        if receivable is None:
            raise NotFoundError(receivable_not_found(receivable_id))
        return receivable

    def list_receivables(
        self,
        kind: Optional[ReceivableKind] = None,
        status: Optional[ReceivableStatus] = None,
        party_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[ReceivableEntity]:
        """List receivables ordered by due date, optionally filtered."""
        today = today or date.today()
        receivables = self.db.list_receivables()
        if kind is not None:
            receivables = [r for r in receivables if r.kind == kind]
        if party_id is not None:
            receivables = [r for r in receivables if r.party_id == party_id]
        if status is not None:
            receivables = [r for r in receivables if r.status(today) == status]
        return receivables


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
