"""Domain model entities for ledgerbook.

These are pure data classes representing business concepts, independent of
database schema. The ledger core only ever sees these types, so the
persistence layer can change without touching balance computations.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountClass(str, Enum):
    """Top-level accounting category. Member order is report order."""

    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSES = "Expenses"

    @property
    def default_normal_balance(self) -> "NormalBalance":
        if self in (AccountClass.ASSETS, AccountClass.EXPENSES):
            return NormalBalance.DEBIT
        return NormalBalance.CREDIT


class AccountLevel(str, Enum):
    """Hierarchy depth marker (organizational only)."""

    CLASS = "class"
    GROUP = "group"
    GL = "gl"
    SUB_LEDGER = "sub_ledger"


class NormalBalance(str, Enum):
    """Side on which an account's balance is naturally positive."""

    DEBIT = "debit"
    CREDIT = "credit"


class TransactionType(str, Enum):
    """Kind of transaction, fixed when the transaction is created."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    JOURNAL = "journal"


class PartyType(str, Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    EMPLOYEE = "employee"
    OTHER = "other"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ReceivableKind(str, Enum):
    """Money owed to us (receivable) or by us (payable)."""

    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class ReceivableSubType(str, Enum):
    INVOICE = "invoice"
    BILL = "bill"
    LOAN = "loan"


class ReceivableStatus(str, Enum):
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts node.

    ``is_direct_cost`` marks cost-of-goods-sold accounts for the income
    statement. ``linked_asset_id`` ties an accumulated depreciation account
    to the fixed asset it belongs to.
    """

    id: str
    code: str
    name: str
    account_class: AccountClass
    level: AccountLevel
    normal_balance: NormalBalance
    is_posting: bool
    parent_id: Optional[str] = None
    is_system: bool = False
    is_direct_cost: bool = False
    linked_asset_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger posting.

    ``account_id`` is debited and ``payment_account_id`` (if any) is
    credited by ``amount``, which is always in the base unit of account.
    """

    id: str
    date: datetime
    amount: Decimal
    account_id: str
    payment_account_id: Optional[str] = None
    transaction_type: TransactionType = TransactionType.JOURNAL
    note: Optional[str] = None
    related_party_id: Optional[str] = None
    original_amount: Optional[Decimal] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class Party:
    """Customer, vendor or other counterparty."""

    id: str
    name: str
    party_type: PartyType = PartyType.OTHER
    linked_account_id: Optional[str] = None


@dataclass(frozen=True)
class Asset:
    """Fixed asset depreciated straight-line over its useful life."""

    id: str
    name: str
    original_value: Decimal
    purchase_date: date
    useful_life_years: int
    cost_account_id: Optional[str] = None
    accumulated_account_id: Optional[str] = None
    last_depreciation_date: Optional[date] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class RecurringRule:
    """Template for a transaction posted on a fixed schedule."""

    id: str
    transaction_type: TransactionType
    account_id: str
    amount: Decimal
    frequency: Frequency
    next_due_date: date
    payment_account_id: Optional[str] = None
    party_id: Optional[str] = None
    note: Optional[str] = None
    active: bool = True
    last_run_date: Optional[date] = None


@dataclass(frozen=True)
class Receivable:
    """Invoice, bill or loan settled by one or more payments.

    ``target_account_id`` is the revenue account credited (receivables) or
    the expense account debited (payables) when the item is recognised.
    ``control_account_id`` is the receivable or payable sub-ledger that
    carries the open balance until it is paid.
    """

    id: str
    kind: ReceivableKind
    sub_type: ReceivableSubType
    party_id: str
    target_account_id: str
    control_account_id: str
    amount: Decimal
    issue_date: date
    due_date: date
    paid_amount: Decimal = Decimal("0")
    paid_date: Optional[date] = None
    note: Optional[str] = None

    @property
    def remaining(self) -> Decimal:
        return max(self.amount - self.paid_amount, Decimal("0"))

    @property
    def is_paid(self) -> bool:
        return self.paid_amount >= self.amount

    def status(self, today: date) -> ReceivableStatus:
        """Paid once fully settled, overdue once past the due date."""
        if self.is_paid:
            return ReceivableStatus.PAID
        if self.due_date < today:
            return ReceivableStatus.OVERDUE
        return ReceivableStatus.PENDING


@dataclass(frozen=True)
class MonthlyBudget:
    """Spending limits for one month (``YYYY-MM``).

    ``limit`` caps total expenses; ``account_limits`` caps individual
    expense accounts, keyed by account id.
    """

    month_key: str
    limit: Decimal
    account_limits: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class AccountNode:
    """Ledger view of an account with Dr-positive balances.

    ``direct_balance`` covers postings made exactly to this account;
    ``total_balance`` adds every descendant's total.
    """

    account: Account
    children: list["AccountNode"] = field(default_factory=list)
    direct_balance: Decimal = Decimal("0")
    total_balance: Decimal = Decimal("0")

    @property
    def id(self) -> str:
        return self.account.id

    @property
    def code(self) -> str:
        return self.account.code

    @property
    def name(self) -> str:
        return self.account.name

    @property
    def account_class(self) -> AccountClass:
        return self.account.account_class

    @property
    def level(self) -> AccountLevel:
        return self.account.level

    @property
    def normal_balance(self) -> NormalBalance:
        return self.account.normal_balance


@dataclass(frozen=True)
class LedgerSnapshot:
    """Consistent view of the books handed to the ledger core."""

    accounts: tuple[Account, ...]
    transactions: tuple[Transaction, ...]
    parties: tuple[Party, ...] = ()

    def party_names(self) -> dict[str, str]:
        return {party.id: party.name for party in self.parties}
