"""Tests for database mappers."""

from datetime import date, datetime
from decimal import Decimal

from ledgerbook.database.models import (
    Account as ORMAccount,
    Asset as ORMAsset,
    MonthlyBudget as ORMMonthlyBudget,
    Party as ORMParty,
    Receivable as ORMReceivable,
    RecurringRule as ORMRecurringRule,
    Transaction as ORMTransaction,
)
from ledgerbook.database.mappers import (
    account_to_domain,
    account_to_orm,
    asset_to_domain,
    budget_limits_to_orm,
    budget_to_domain,
    party_to_domain,
    receivable_to_domain,
    receivable_to_orm,
    recurring_rule_to_domain,
    transaction_to_domain,
    transaction_to_orm,
)
from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    AccountLevel,
    Asset,
    Frequency,
    MonthlyBudget,
    NormalBalance,
    PartyType,
    Receivable,
    ReceivableKind,
    ReceivableSubType,
    Transaction,
    TransactionType,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        orm_account = ORMAccount(
            id="12900",
            code="12900",
            name="Accumulated Depreciation",
            account_class="Assets",
            level="gl",
            normal_balance="credit",
            is_posting=True,
            parent_id="12000",
            is_system=True,
            is_direct_cost=False,
            linked_asset_id=None,
        )
        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.account_class == AccountClass.ASSETS
        assert account.level == AccountLevel.GL
        assert account.normal_balance == NormalBalance.CREDIT
        assert account.parent_id == "12000"
        assert account.is_system is True

    def test_account_to_orm_stores_enum_values(self):
        account = Account(
            id="cogs_hosting",
            code="51100",
            name="Web Hosting & Server",
            account_class=AccountClass.EXPENSES,
            level=AccountLevel.GL,
            normal_balance=NormalBalance.DEBIT,
            is_posting=True,
            parent_id="51000",
            is_direct_cost=True,
        )
        orm_account = account_to_orm(account)

        assert orm_account.account_class == "Expenses"
        assert orm_account.level == "gl"
        assert orm_account.normal_balance == "debit"
        assert orm_account.is_direct_cost is True
        assert account_to_domain(orm_account) == account


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        orm_transaction = ORMTransaction(
            id="t1",
            date=datetime(2024, 1, 5, 18, 30),
            amount=Decimal("450.50"),
            account_id="exp_groceries",
            payment_account_id="asset_bank_main",
            transaction_type="expense",
            note="Weekly shop",
            related_party_id=None,
            original_amount=Decimal("5.40"),
            currency="USD",
        )
        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.amount == Decimal("450.50")
        assert txn.transaction_type == TransactionType.EXPENSE
        assert txn.original_amount == Decimal("5.40")
        assert txn.currency == "USD"

    def test_transaction_with_none_fields(self):
        orm_transaction = ORMTransaction(
            id="t2",
            date=datetime(2024, 1, 5),
            amount=Decimal("10"),
            account_id="asset_cash",
            payment_account_id=None,
            transaction_type="journal",
            note=None,
            related_party_id=None,
            original_amount=None,
            currency=None,
        )
        txn = transaction_to_domain(orm_transaction)

        assert txn.payment_account_id is None
        assert txn.original_amount is None
        assert txn.note is None

    def test_transaction_to_orm(self):
        txn = Transaction(
            id="t3",
            date=datetime(2024, 2, 1),
            amount=Decimal("25000"),
            account_id="exp_rent",
            payment_account_id="asset_bank_main",
            transaction_type=TransactionType.EXPENSE,
        )
        orm_transaction = transaction_to_orm(txn)
        assert orm_transaction.transaction_type == "expense"
        assert transaction_to_domain(orm_transaction) == txn


class TestOtherMappers:
    """Tests for party, asset and recurring rule mappers."""

    def test_party_to_domain(self):
        party = party_to_domain(
            ORMParty(id="p1", name="Acme", party_type="vendor", linked_account_id="liab_ap_general")
        )
        assert party.party_type == PartyType.VENDOR
        assert party.linked_account_id == "liab_ap_general"

    def test_asset_to_domain(self):
        asset = asset_to_domain(
            ORMAsset(
                id="a1",
                name="Laptop",
                original_value=Decimal("1200"),
                purchase_date=date(2024, 1, 10),
                useful_life_years=3,
                cost_account_id="a1_cost",
                accumulated_account_id="a1_accdep",
                last_depreciation_date=None,
                note=None,
            )
        )
        assert isinstance(asset, Asset)
        assert asset.original_value == Decimal("1200")
        assert asset.last_depreciation_date is None

    def test_recurring_rule_to_domain(self):
        rule = recurring_rule_to_domain(
            ORMRecurringRule(
                id="r1",
                transaction_type="expense",
                account_id="exp_rent",
                amount=Decimal("25000"),
                frequency="monthly",
                next_due_date=date(2024, 2, 1),
                payment_account_id="asset_bank_main",
                party_id=None,
                note="Rent",
                active=True,
                last_run_date=None,
            )
        )
        assert rule.frequency == Frequency.MONTHLY
        assert rule.transaction_type == TransactionType.EXPENSE
        assert rule.active is True

    def test_receivable_to_domain(self):
        receivable = receivable_to_domain(
            ORMReceivable(
                id="rc1",
                kind="payable",
                sub_type="bill",
                party_id="p1",
                target_account_id="exp_rent",
                control_account_id="liab_ap_general",
                amount=Decimal("2500"),
                paid_amount=Decimal("1000"),
                issue_date=date(2024, 3, 1),
                due_date=date(2024, 3, 15),
                paid_date=None,
                note=None,
            )
        )
        assert receivable.kind == ReceivableKind.PAYABLE
        assert receivable.sub_type == ReceivableSubType.BILL
        assert receivable.remaining == Decimal("1500")

    def test_receivable_to_orm_stores_enum_values(self):
        orm_receivable = receivable_to_orm(
            Receivable(
                id="rc1",
                kind=ReceivableKind.RECEIVABLE,
                sub_type=ReceivableSubType.LOAN,
                party_id="p1",
                target_account_id="asset_bank_main",
                control_account_id="asset_ar_general",
                amount=Decimal("1000"),
                issue_date=date(2024, 3, 1),
                due_date=date(2024, 6, 1),
            )
        )
        assert orm_receivable.kind == "receivable"
        assert orm_receivable.sub_type == "loan"
        assert orm_receivable.paid_amount == Decimal("0")

    def test_budget_to_domain(self):
        orm_budget = ORMMonthlyBudget(month_key="2024-01", limit=Decimal("900"))
        orm_budget.account_limits = budget_limits_to_orm(
            MonthlyBudget(
                month_key="2024-01",
                limit=Decimal("900"),
                account_limits={"exp_rent": Decimal("400"), "exp_groceries": Decimal("500")},
            )
        )

        budget = budget_to_domain(orm_budget)
        assert budget.limit == Decimal("900")
        assert budget.account_limits == {
            "exp_groceries": Decimal("500"),
            "exp_rent": Decimal("400"),
        }
