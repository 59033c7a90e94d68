"""Statement assembler: time-windowed running balances for an account.

A statement can target a posting account or any group above it. For a group,
every posting to an account in its subtree counts, and a transfer between
two sub-accounts of the same group shows up as a zero-net row with both a
debit and a credit.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ledgerbook.domain.balances import ZERO, signed_impact, window_bounds
from ledgerbook.domain.entities import Account, Transaction
from ledgerbook.domain.errors import NotFoundError, account_not_found
from ledgerbook.domain.hierarchy import get_all_descendant_ids


@dataclass(frozen=True)
class StatementRow:
    """One in-window posting with the running balance after it."""

    transaction: Transaction
    debit: Decimal
    credit: Decimal
    balance: Decimal
    description: str
    sub_account_name: Optional[str] = None
    party_name: Optional[str] = None

    @property
    def date(self) -> datetime:
        return self.transaction.date


@dataclass(frozen=True)
class Statement:
    """Statement of account over a date window, in the target's natural sign."""

    account: Account
    start: Optional[datetime]
    end: Optional[datetime]
    opening_balance: Decimal
    closing_balance: Decimal
    total_debits: Decimal
    total_credits: Decimal
    rows: tuple[StatementRow, ...] = field(default_factory=tuple)

    @property
    def net_movement(self) -> Decimal:
        return signed_impact(
            self.total_debits, self.total_credits, self.account.normal_balance
        )

    @property
    def is_consistent(self) -> bool:
        """Closing balance equals opening balance plus period movement."""
        return self.closing_balance == self.opening_balance + self.net_movement


def build_statement(
    account_id: str,
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    start: Optional[date | datetime],
    end: Optional[date | datetime],
    parties: Optional[Mapping[str, str]] = None,
) -> Statement:
    """Reconstruct opening, running and closing balances for an account.

    Args:
        account_id: Target account (posting account or group)
        accounts: Full chart of accounts
        transactions: All transactions, not only those in the window
        start: Window start; earlier postings fold into the opening balance
        end: Window end, inclusive to end-of-day; later postings are ignored
        parties: Optional party id to name lookup for row descriptions

    Returns:
        Statement in the target account's natural sign

    Raises:
        NotFoundError: If the target account does not exist
        CyclicHierarchyError: If the target's subtree loops
    """
    accounts_by_id = {account.id: account for account in accounts}
    account = accounts_by_id.get(account_id)
    if account is None:
        raise NotFoundError(account_not_found(account_id))

    relevant_ids = get_all_descendant_ids(account_id, accounts)
    is_group_view = len(relevant_ids) > 1
    start_at, end_at = window_bounds(start, end)
    parties = parties or {}

    opening_balance = ZERO
    running_balance = ZERO
    total_debits = ZERO
    total_credits = ZERO
    rows: list[StatementRow] = []

    for txn in sorted(transactions, key=lambda t: t.date):
        debit = txn.amount if txn.account_id in relevant_ids else ZERO
        credit = txn.amount if txn.payment_account_id in relevant_ids else ZERO
        if txn.account_id not in relevant_ids and txn.payment_account_id not in relevant_ids:
            continue

        impact = signed_impact(debit, credit, account.normal_balance)

        if start_at is not None and txn.date < start_at:
            opening_balance += impact
            running_balance += impact
            continue
        if end_at is not None and txn.date > end_at:
            continue

        running_balance += impact
        total_debits += debit
        total_credits += credit

        sub_account_name = None
        if is_group_view:
            sub_account_name = _sub_account_name(
                txn, account_id, relevant_ids, accounts_by_id
            )
        party_name = parties.get(txn.related_party_id) if txn.related_party_id else None

        rows.append(
            StatementRow(
                transaction=txn,
                debit=debit,
                credit=credit,
                balance=running_balance,
                description=describe_posting(txn, party_name, sub_account_name),
                sub_account_name=sub_account_name,
                party_name=party_name,
            )
        )

    return Statement(
        account=account,
        start=start_at,
        end=end_at,
        opening_balance=opening_balance,
        closing_balance=running_balance,
        total_debits=total_debits,
        total_credits=total_credits,
        rows=tuple(rows),
    )


def _sub_account_name(
    txn: Transaction,
    target_id: str,
    relevant_ids: set[str],
    accounts_by_id: Mapping[str, Account],
) -> Optional[str]:
    """Name the child account hit by a posting when viewing a group."""
    if txn.account_id == target_id or txn.payment_account_id == target_id:
        return None
    if txn.account_id in relevant_ids:
        sub_account = accounts_by_id.get(txn.account_id)
    else:
        sub_account = accounts_by_id.get(txn.payment_account_id or "")
    return sub_account.name if sub_account is not None else None


def describe_posting(
    txn: Transaction,
    party_name: Optional[str] = None,
    sub_account_name: Optional[str] = None,
) -> str:
    """Build a row description like ``Acme - Invoice 7 - [Petty Cash] (Mar 2024)``."""
    parts = []
    if party_name:
        parts.append(party_name)
    parts.append(txn.note or txn.transaction_type.value.upper())
    if sub_account_name:
        parts.append(f"[{sub_account_name}]")
    return f"{' - '.join(parts)} ({txn.date.strftime('%b %Y')})"
