"""Ledger balance engine.

Balances are kept Dr-positive everywhere inside the core: debits add,
credits subtract, whatever the account's normal balance. ``to_natural`` is
the one place where a balance is flipped for display.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ledgerbook.domain.entities import Account, NormalBalance, Transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class LedgerDiagnostics:
    """Postings that referenced accounts missing from the chart."""

    orphaned_postings: int = 0
    missing_account_ids: set[str] = field(default_factory=set)

    def record(self, account_id: str) -> None:
        self.orphaned_postings += 1
        self.missing_account_ids.add(account_id)

    @property
    def has_orphans(self) -> bool:
        return self.orphaned_postings > 0


def direct_balance(account_id: str, transactions: Iterable[Transaction]) -> Decimal:
    """Return debits minus credits posted exactly to ``account_id``."""
    debits = ZERO
    credits = ZERO
    for txn in transactions:
        if txn.account_id == account_id:
            debits += txn.amount
        if txn.payment_account_id == account_id:
            credits += txn.amount
    return debits - credits


def to_natural(value: Decimal, normal_balance: NormalBalance) -> Decimal:
    """Convert a Dr-positive balance to the account's natural sign.

    Credit-normal accounts (liabilities, equity, revenue, contra-assets)
    are negated so that a balance in the expected direction is positive.
    """
    if normal_balance == NormalBalance.CREDIT:
        return -value
    return value


def natural_balance(
    account_id: str,
    transactions: Iterable[Transaction],
    normal_balance: NormalBalance,
) -> Decimal:
    """Return the balance of ``account_id`` in its natural sign."""
    return to_natural(direct_balance(account_id, transactions), normal_balance)


def signed_impact(
    debit: Decimal, credit: Decimal, normal_balance: NormalBalance
) -> Decimal:
    """Return the effect of a debit/credit pair on a natural balance."""
    return to_natural(debit - credit, normal_balance)


def balances_by_account(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Return Dr-positive balances for every account touched, in one pass."""
    balances: dict[str, Decimal] = {}
    for txn in transactions:
        balances[txn.account_id] = balances.get(txn.account_id, ZERO) + txn.amount
        if txn.payment_account_id:
            balances[txn.payment_account_id] = (
                balances.get(txn.payment_account_id, ZERO) - txn.amount
            )
    return balances


def find_orphaned_postings(
    accounts: Sequence[Account], transactions: Iterable[Transaction]
) -> LedgerDiagnostics:
    """Count transaction sides that reference unknown accounts."""
    known = {account.id for account in accounts}
    diagnostics = LedgerDiagnostics()
    for txn in transactions:
        if txn.account_id not in known:
            diagnostics.record(txn.account_id)
        if txn.payment_account_id and txn.payment_account_id not in known:
            diagnostics.record(txn.payment_account_id)
    if diagnostics.has_orphans:
        logger.warning(
            "%d posting(s) reference unknown accounts: %s",
            diagnostics.orphaned_postings,
            ", ".join(sorted(diagnostics.missing_account_ids)),
        )
    return diagnostics


def window_bounds(
    start: Optional[date | datetime], end: Optional[date | datetime]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Resolve a date window to instants.

    Plain dates become start-of-day for ``start`` and end-of-day for
    ``end``; datetimes are used as given.
    """
    return _start_instant(start), _end_instant(end)


def _start_instant(value: Optional[date | datetime]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _end_instant(value: Optional[date | datetime]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


def transactions_until(
    transactions: Iterable[Transaction], end: Optional[date | datetime]
) -> list[Transaction]:
    """Return transactions dated on or before the end of ``end``."""
    end_at = _end_instant(end)
    if end_at is None:
        return list(transactions)
    return [txn for txn in transactions if txn.date <= end_at]


def transactions_between(
    transactions: Iterable[Transaction],
    start: Optional[date | datetime],
    end: Optional[date | datetime],
) -> list[Transaction]:
    """Return transactions inside ``[start, end]``, end inclusive to end-of-day."""
    start_at, end_at = window_bounds(start, end)
    result = []
    for txn in transactions:
        if start_at is not None and txn.date < start_at:
            continue
        if end_at is not None and txn.date > end_at:
            continue
        result.append(txn)
    return result
