"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum storage or column layout
can change without the ledger core noticing.
"""

from decimal import Decimal

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    Party as ORMParty,
    Asset as ORMAsset,
    RecurringRule as ORMRecurringRule,
    Receivable as ORMReceivable,
    MonthlyBudget as ORMMonthlyBudget,
    BudgetLimit as ORMBudgetLimit,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_class=domain.AccountClass(orm_account.account_class),
        level=domain.AccountLevel(orm_account.level),
        normal_balance=domain.NormalBalance(orm_account.normal_balance),
        is_posting=orm_account.is_posting,
        parent_id=orm_account.parent_id,
        is_system=orm_account.is_system,
        is_direct_cost=orm_account.is_direct_cost,
        linked_asset_id=orm_account.linked_asset_id,
    )


def account_to_orm(account: domain.Account) -> ORMAccount:
    """Convert domain Account entity to a new SQLAlchemy Account model."""
    return ORMAccount(
        id=account.id,
        code=account.code,
        name=account.name,
        account_class=account.account_class.value,
        level=account.level.value,
        normal_balance=account.normal_balance.value,
        is_posting=account.is_posting,
        parent_id=account.parent_id,
        is_system=account.is_system,
        is_direct_cost=account.is_direct_cost,
        linked_asset_id=account.linked_asset_id,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=Decimal(orm_transaction.amount),
        account_id=orm_transaction.account_id,
        payment_account_id=orm_transaction.payment_account_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        note=orm_transaction.note,
        related_party_id=orm_transaction.related_party_id,
        original_amount=(
            Decimal(orm_transaction.original_amount)
            if orm_transaction.original_amount is not None
            else None
        ),
        currency=orm_transaction.currency,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Convert domain Transaction entity to a new SQLAlchemy Transaction model."""
    return ORMTransaction(
        id=transaction.id,
        date=transaction.date,
        amount=transaction.amount,
        account_id=transaction.account_id,
        payment_account_id=transaction.payment_account_id,
        transaction_type=transaction.transaction_type.value,
        note=transaction.note,
        related_party_id=transaction.related_party_id,
        original_amount=transaction.original_amount,
        currency=transaction.currency,
    )


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        name=orm_party.name,
        party_type=domain.PartyType(orm_party.party_type),
        linked_account_id=orm_party.linked_account_id,
    )


def asset_to_domain(orm_asset: ORMAsset) -> domain.Asset:
    """Convert SQLAlchemy Asset model to domain Asset entity."""
    return domain.Asset(
        id=orm_asset.id,
        name=orm_asset.name,
        original_value=Decimal(orm_asset.original_value),
        purchase_date=orm_asset.purchase_date,
        useful_life_years=orm_asset.useful_life_years,
        cost_account_id=orm_asset.cost_account_id,
        accumulated_account_id=orm_asset.accumulated_account_id,
        last_depreciation_date=orm_asset.last_depreciation_date,
        note=orm_asset.note,
    )


def recurring_rule_to_domain(orm_rule: ORMRecurringRule) -> domain.RecurringRule:
    """Convert SQLAlchemy RecurringRule model to domain RecurringRule entity."""
    return domain.RecurringRule(
        id=orm_rule.id,
        transaction_type=domain.TransactionType(orm_rule.transaction_type),
        account_id=orm_rule.account_id,
        amount=Decimal(orm_rule.amount),
        frequency=domain.Frequency(orm_rule.frequency),
        next_due_date=orm_rule.next_due_date,
        payment_account_id=orm_rule.payment_account_id,
        party_id=orm_rule.party_id,
        note=orm_rule.note,
        active=orm_rule.active,
        last_run_date=orm_rule.last_run_date,
    )


def receivable_to_domain(orm_receivable: ORMReceivable) -> domain.Receivable:
    """Convert SQLAlchemy Receivable model to domain Receivable entity."""
    return domain.Receivable(
        id=orm_receivable.id,
        kind=domain.ReceivableKind(orm_receivable.kind),
        sub_type=domain.ReceivableSubType(orm_receivable.sub_type),
        party_id=orm_receivable.party_id,
        target_account_id=orm_receivable.target_account_id,
        control_account_id=orm_receivable.control_account_id,
        amount=Decimal(orm_receivable.amount),
        issue_date=orm_receivable.issue_date,
        due_date=orm_receivable.due_date,
        paid_amount=Decimal(orm_receivable.paid_amount),
        paid_date=orm_receivable.paid_date,
        note=orm_receivable.note,
    )


def receivable_to_orm(receivable: domain.Receivable) -> ORMReceivable:
    """Convert domain Receivable entity to a new SQLAlchemy Receivable model."""
    return ORMReceivable(
        id=receivable.id,
        kind=receivable.kind.value,
        sub_type=receivable.sub_type.value,
        party_id=receivable.party_id,
        target_account_id=receivable.target_account_id,
        control_account_id=receivable.control_account_id,
        amount=receivable.amount,
        issue_date=receivable.issue_date,
        due_date=receivable.due_date,
        paid_amount=receivable.paid_amount,
        paid_date=receivable.paid_date,
        note=receivable.note,
    )


def budget_to_domain(orm_budget: ORMMonthlyBudget) -> domain.MonthlyBudget:
    """Convert SQLAlchemy MonthlyBudget (with its limits) to a domain MonthlyBudget."""
    return domain.MonthlyBudget(
        month_key=orm_budget.month_key,
        limit=Decimal(orm_budget.limit),
        account_limits={
            limit.account_id: Decimal(limit.amount) for limit in orm_budget.account_limits
        },
    )


def budget_limits_to_orm(budget: domain.MonthlyBudget) -> list[ORMBudgetLimit]:
    """Build the per-account limit rows for a monthly budget."""
    return [
        ORMBudgetLimit(month_key=budget.month_key, account_id=account_id, amount=amount)
        for account_id, amount in sorted(budget.account_limits.items())
    ]
