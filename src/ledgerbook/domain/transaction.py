"""Transaction domain service."""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Transaction as TransactionEntity, TransactionType
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    party_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def validate_amount(amount: Decimal, label: str = "Amount") -> None:
    """Reject amounts the ledger cannot store exactly.

    Amounts are kept to the cent, so anything finer would be rounded on
    the way into the database.

    Raises:
        ValidationError: If ``amount`` is not a finite, non-negative decimal
            in whole cents
    """
    if not isinstance(amount, Decimal) or not amount.is_finite():
        raise ValidationError(f"{label} must be a finite decimal, got {amount!r}")
    if amount < 0:
        raise ValidationError(f"{label} cannot be negative: {amount}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{label} has more than two decimal places: {amount}")


class TransactionService:
    """Service for recording and editing ledger postings.

    This is the layer that rejects malformed input; the ledger core assumes
    the transactions it receives have already passed through here.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        date: datetime,
        amount: Decimal,
        account_id: str,
        payment_account_id: Optional[str] = None,
        transaction_type: TransactionType = TransactionType.JOURNAL,
        note: Optional[str] = None,
        related_party_id: Optional[str] = None,
        original_amount: Optional[Decimal] = None,
        currency: Optional[str] = None,
    ) -> str:
        """Record a transaction.

        Args:
            date: Transaction instant
            amount: Non-negative amount in the base unit of account
            account_id: Account debited
            payment_account_id: Optional account credited
            transaction_type: Kind of transaction
            note: Optional note
            related_party_id: Optional counterparty ID
            original_amount: Optional amount in the original currency
            currency: Optional original currency code

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount is invalid or both sides are the same
            NotFoundError: If a referenced account or party doesn't exist
        """
        transaction = TransactionEntity(
            id=uuid.uuid4().hex,
            date=_as_datetime(date),
            amount=amount,
            account_id=account_id,
            payment_account_id=payment_account_id,
            transaction_type=transaction_type,
            note=note,
            related_party_id=related_party_id,
            original_amount=original_amount,
            currency=currency,
        )
        self._validate(transaction)
        self.db.create_transaction(transaction)
        logger.info(
            "Recorded transaction %s: Dr %s / Cr %s %s",
            transaction.id,
            account_id,
            payment_account_id or "-",
            amount,
        )
        return transaction.id

    def _validate(self, transaction: TransactionEntity) -> None:
        validate_amount(transaction.amount)
        if transaction.original_amount is not None:
            validate_amount(transaction.original_amount, "Original amount")
        if self.db.get_account(transaction.account_id) is None:
            raise NotFoundError(account_not_found(transaction.account_id))
        if transaction.payment_account_id is not None:
            if transaction.payment_account_id == transaction.account_id:
                raise ValidationError("Debit and credit accounts must differ")
            if self.db.get_account(transaction.payment_account_id) is None:
                raise NotFoundError(account_not_found(transaction.payment_account_id))
        if transaction.related_party_id is not None:
            if self.db.get_party(transaction.related_party_id) is None:
                raise NotFoundError(party_not_found(transaction.related_party_id))

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter (whole day included)
            account_id: Optional account filter (either side)

        Returns:
            List of transaction entities ordered by date
        """
        return self.db.list_transactions(
            start_date=start_date, end_date=end_date, account_id=account_id
        )

    def update_transaction(self, transaction_id: str, **changes) -> None:
        """Replace a transaction with an edited copy.

        Args:
            transaction_id: Transaction ID
            **changes: Fields to change (e.g. ``amount``, ``note``)

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If the edited transaction is invalid
        """
        existing = self.db.get_transaction(transaction_id)
        if existing is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if "id" in changes:
            raise ValidationError("Transaction ID cannot be changed")
        if "date" in changes:
            changes["date"] = _as_datetime(changes["date"])

        try:
            updated = replace(existing, **changes)
        except TypeError as e:
            raise ValidationError(f"Invalid transaction field: {e}") from e
        self._validate(updated)
        self.db.update_transaction(updated)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)
