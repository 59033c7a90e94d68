"""Aggregate report builders.

Every report here is a projection of the balance engine and hierarchy
resolver over a windowed transaction list. Amounts come out of the core
Dr-positive and are converted with ``to_natural`` using the account class's
normal balance, so contra accounts (accumulated depreciation under assets,
returns under revenue) reduce their section total.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ledgerbook.domain.balances import (
    ZERO,
    balances_by_account,
    to_natural,
    transactions_between,
    transactions_until,
    window_bounds,
)
from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    AccountNode,
    Transaction,
    TransactionType,
)
from ledgerbook.domain.errors import NotFoundError, account_not_found
from ledgerbook.domain.hierarchy import build_tree, get_all_descendant_ids, walk_tree

# Rows whose absolute amount is at or below this are left out of
# income statement and tree listings.
DISPLAY_THRESHOLD = Decimal("0.01")

NET_INCOME_CLOSING_ID = "net_income_closing"
CLOSING_CONTRA_ID = "net_income_contra"

PROFIT_AND_LOSS_CLASSES = (AccountClass.REVENUE, AccountClass.EXPENSES)
BALANCE_SHEET_CLASSES = (
    AccountClass.ASSETS,
    AccountClass.LIABILITIES,
    AccountClass.EQUITY,
)


def class_amount(value: Decimal, account_class: AccountClass) -> Decimal:
    """Convert a Dr-positive amount to the natural sign of its class."""
    return to_natural(value, account_class.default_normal_balance)


@dataclass(frozen=True)
class ReportLine:
    """Flattened tree row for display."""

    node: AccountNode
    depth: int
    amount: Decimal


def tree_lines(
    nodes: Iterable[AccountNode],
    account_class: AccountClass,
    depth: int = 0,
    include_zero: bool = False,
) -> list[ReportLine]:
    """Flatten a class forest into display lines in natural sign."""
    return [
        ReportLine(
            node=node,
            depth=level,
            amount=class_amount(node.total_balance, account_class),
        )
        for node, level in walk_tree(nodes, depth)
        if include_zero or abs(node.total_balance) > DISPLAY_THRESHOLD
    ]


# Trial balance


@dataclass(frozen=True)
class TrialBalanceRow:
    account: Account
    balance: Decimal
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Cumulative signed balances split into debit and credit columns."""

    as_of: Optional[datetime]
    groups: dict[AccountClass, tuple[TrialBalanceRow, ...]]
    total_debit: Decimal
    total_credit: Decimal

    @property
    def rows(self) -> list[TrialBalanceRow]:
        return [row for cls in AccountClass for row in self.groups.get(cls, ())]

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    @property
    def is_balanced(self) -> bool:
        return self.difference == ZERO


def build_trial_balance(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    as_of: Optional[date | datetime] = None,
) -> TrialBalance:
    """Build a trial balance of every account with a non-zero balance.

    Posting accounts are always considered; a non-posting account appears
    only if something was posted directly to it. Positive (debit) balances
    go in the debit column, negative ones in the credit column as positive
    numbers.
    """
    balances = balances_by_account(transactions_until(transactions, as_of))

    groups: dict[AccountClass, list[TrialBalanceRow]] = {cls: [] for cls in AccountClass}
    total_debit = ZERO
    total_credit = ZERO
    for account in accounts:
        if not account.is_posting and account.id not in balances:
            continue
        balance = balances.get(account.id, ZERO)
        if balance == ZERO:
            continue
        debit = balance if balance > ZERO else ZERO
        credit = -balance if balance < ZERO else ZERO
        groups[account.account_class].append(
            TrialBalanceRow(account=account, balance=balance, debit=debit, credit=credit)
        )
        total_debit += debit
        total_credit += credit

    _, end_at = window_bounds(None, as_of)
    return TrialBalance(
        as_of=end_at,
        groups={
            cls: tuple(sorted(rows, key=lambda r: r.account.code))
            for cls, rows in groups.items()
        },
        total_debit=total_debit,
        total_credit=total_credit,
    )


# Income statement


@dataclass(frozen=True)
class IncomeStatementLine:
    account: Account
    amount: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    """Period-only revenue and expenses, expenses split by direct cost."""

    start: Optional[datetime]
    end: Optional[datetime]
    revenue: tuple[IncomeStatementLine, ...]
    direct_costs: tuple[IncomeStatementLine, ...]
    operating_expenses: tuple[IncomeStatementLine, ...]

    @property
    def total_revenue(self) -> Decimal:
        return sum((line.amount for line in self.revenue), ZERO)

    @property
    def total_direct_costs(self) -> Decimal:
        return sum((line.amount for line in self.direct_costs), ZERO)

    @property
    def gross_profit(self) -> Decimal:
        return self.total_revenue - self.total_direct_costs

    @property
    def total_operating_expenses(self) -> Decimal:
        return sum((line.amount for line in self.operating_expenses), ZERO)

    @property
    def net_income(self) -> Decimal:
        return self.gross_profit - self.total_operating_expenses


def build_income_statement(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    start: Optional[date | datetime],
    end: Optional[date | datetime],
) -> IncomeStatement:
    """Build an income statement from postings inside ``[start, end]``."""
    balances = balances_by_account(transactions_between(transactions, start, end))

    revenue: list[IncomeStatementLine] = []
    direct_costs: list[IncomeStatementLine] = []
    operating: list[IncomeStatementLine] = []
    for account in sorted(accounts, key=lambda a: a.code):
        if account.account_class not in PROFIT_AND_LOSS_CLASSES:
            continue
        if not account.is_posting and account.id not in balances:
            continue
        amount = class_amount(balances.get(account.id, ZERO), account.account_class)
        if abs(amount) <= DISPLAY_THRESHOLD:
            continue
        line = IncomeStatementLine(account=account, amount=amount)
        if account.account_class == AccountClass.REVENUE:
            revenue.append(line)
        elif account.is_direct_cost:
            direct_costs.append(line)
        else:
            operating.append(line)

    start_at, end_at = window_bounds(start, end)
    return IncomeStatement(
        start=start_at,
        end=end_at,
        revenue=tuple(revenue),
        direct_costs=tuple(direct_costs),
        operating_expenses=tuple(operating),
    )


# Balance sheet


@dataclass(frozen=True)
class BalanceSheet:
    """Cumulative position with current earnings closed into equity."""

    as_of: Optional[datetime]
    tree: dict[AccountClass, list[AccountNode]]
    net_income: Decimal

    def section(self, account_class: AccountClass) -> list[AccountNode]:
        return self.tree.get(account_class, [])

    def section_total(self, account_class: AccountClass) -> Decimal:
        raw = sum((node.total_balance for node in self.section(account_class)), ZERO)
        return class_amount(raw, account_class)

    @property
    def total_assets(self) -> Decimal:
        return self.section_total(AccountClass.ASSETS)

    @property
    def total_liabilities(self) -> Decimal:
        return self.section_total(AccountClass.LIABILITIES)

    @property
    def total_equity(self) -> Decimal:
        return self.section_total(AccountClass.EQUITY)

    @property
    def is_balanced(self) -> bool:
        return self.total_assets == self.total_liabilities + self.total_equity


def net_income_closing_entry(
    net_income: Decimal, retained_earnings_id: str, at: datetime
) -> Transaction:
    """Return the synthetic entry closing net income into retained earnings.

    A profit credits retained earnings and a loss debits it. The other side
    points at an id outside the chart, so it contributes nothing.
    """
    is_profit = net_income > ZERO
    return Transaction(
        id=NET_INCOME_CLOSING_ID,
        date=at,
        amount=abs(net_income),
        account_id=CLOSING_CONTRA_ID if is_profit else retained_earnings_id,
        payment_account_id=retained_earnings_id if is_profit else CLOSING_CONTRA_ID,
        transaction_type=TransactionType.JOURNAL,
        note="Net income closed to retained earnings",
    )


def build_balance_sheet(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    as_of: Optional[date | datetime] = None,
    retained_earnings_id: str = "equity_retained",
) -> BalanceSheet:
    """Build a balance sheet as of the end of ``as_of``.

    Raises:
        NotFoundError: If the retained earnings account does not exist
    """
    if not any(account.id == retained_earnings_id for account in accounts):
        raise NotFoundError(account_not_found(retained_earnings_id))

    txns = transactions_until(transactions, as_of)
    balances = balances_by_account(txns)
    # Dr-positive: revenue is negative and expenses positive, so profit is
    # the negated sum.
    net_income = -sum(
        (
            balances.get(account.id, ZERO)
            for account in accounts
            if account.account_class in PROFIT_AND_LOSS_CLASSES
        ),
        ZERO,
    )

    _, end_at = window_bounds(None, as_of)
    if net_income != ZERO:
        closing_at = end_at or max(txn.date for txn in txns)
        txns.append(net_income_closing_entry(net_income, retained_earnings_id, closing_at))

    return BalanceSheet(
        as_of=end_at,
        tree=build_tree(accounts, txns),
        net_income=net_income,
    )


# Cash flow


@dataclass
class CashFlowSection:
    inflow: Decimal = ZERO
    outflow: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow


@dataclass
class CashFlowStatement:
    """Direct-method cash flow over a window."""

    start: Optional[datetime]
    end: Optional[datetime]
    opening_cash: Decimal = ZERO
    operating: CashFlowSection = field(default_factory=CashFlowSection)
    investing: CashFlowSection = field(default_factory=CashFlowSection)
    financing: CashFlowSection = field(default_factory=CashFlowSection)

    @property
    def net_change(self) -> Decimal:
        return self.operating.net + self.investing.net + self.financing.net

    @property
    def closing_cash(self) -> Decimal:
        return self.opening_cash + self.net_change


def _subtree_ids(group_id: Optional[str], accounts: Sequence[Account]) -> set[str]:
    if group_id is None or not any(a.id == group_id for a in accounts):
        return set()
    return get_all_descendant_ids(group_id, accounts)


def build_cash_flow(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    start: Optional[date | datetime],
    end: Optional[date | datetime],
    cash_group_id: str = "11100",
    investing_group_id: Optional[str] = "12000",
) -> CashFlowStatement:
    """Classify cash movements by the account on the other side.

    Cash accounts are the subtree of ``cash_group_id``. Movements between two
    cash accounts are skipped. The contra account decides the section:
    revenue, expenses and non-investing assets are operating, accounts in
    the ``investing_group_id`` subtree are investing, and liabilities,
    equity or a missing contra account are financing.
    """
    cash_ids = _subtree_ids(cash_group_id, accounts)
    investing_ids = _subtree_ids(investing_group_id, accounts)
    accounts_by_id = {account.id: account for account in accounts}
    start_at, end_at = window_bounds(start, end)

    report = CashFlowStatement(start=start_at, end=end_at)
    for txn in transactions:
        is_cash_debit = txn.account_id in cash_ids
        is_cash_credit = txn.payment_account_id in cash_ids
        if not is_cash_debit and not is_cash_credit:
            continue
        if start_at is not None and txn.date < start_at:
            if is_cash_debit:
                report.opening_cash += txn.amount
            if is_cash_credit:
                report.opening_cash -= txn.amount
            continue
        if end_at is not None and txn.date > end_at:
            continue
        if is_cash_debit and is_cash_credit:
            continue

        if is_cash_debit:
            contra = accounts_by_id.get(txn.payment_account_id or "")
            section = _cash_flow_section(report, contra, investing_ids)
            section.inflow += txn.amount
        else:
            contra = accounts_by_id.get(txn.account_id)
            section = _cash_flow_section(report, contra, investing_ids)
            section.outflow += txn.amount

    return report


def _cash_flow_section(
    report: CashFlowStatement, contra: Optional[Account], investing_ids: set[str]
) -> CashFlowSection:
    if contra is None:
        return report.financing
    if contra.account_class in PROFIT_AND_LOSS_CLASSES:
        return report.operating
    if contra.account_class == AccountClass.ASSETS:
        if contra.id in investing_ids:
            return report.investing
        return report.operating
    return report.financing


# Dashboard and budget


@dataclass(frozen=True)
class CashBalance:
    account: Account
    balance: Decimal


def build_cash_position(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    as_of: Optional[date | datetime] = None,
    cash_group_id: str = "11100",
) -> list[CashBalance]:
    """Return the balance of every posting cash account, ordered by code."""
    cash_ids = _subtree_ids(cash_group_id, accounts)
    balances = balances_by_account(transactions_until(transactions, as_of))
    return [
        CashBalance(account=account, balance=balances.get(account.id, ZERO))
        for account in sorted(accounts, key=lambda a: a.code)
        if account.id in cash_ids and account.is_posting
    ]


@dataclass(frozen=True)
class BudgetLine:
    account: Account
    limit: Decimal
    spent: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.limit - self.spent

    @property
    def percent_used(self) -> Decimal:
        if self.limit <= ZERO:
            return ZERO
        return self.spent / self.limit * 100

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit


@dataclass(frozen=True)
class BudgetReport:
    start: Optional[datetime]
    end: Optional[datetime]
    lines: tuple[BudgetLine, ...]
    total_expenses: Decimal = ZERO
    overall_limit: Optional[Decimal] = None

    @property
    def total_limit(self) -> Decimal:
        return sum((line.limit for line in self.lines), ZERO)

    @property
    def total_spent(self) -> Decimal:
        return sum((line.spent for line in self.lines), ZERO)

    @property
    def remaining(self) -> Decimal:
        return self.total_limit - self.total_spent

    @property
    def overall_remaining(self) -> Optional[Decimal]:
        if self.overall_limit is None:
            return None
        return self.overall_limit - self.total_expenses

    @property
    def is_over_overall(self) -> bool:
        return self.overall_limit is not None and self.total_expenses > self.overall_limit


def build_budget_report(
    accounts: Sequence[Account],
    transactions: Iterable[Transaction],
    limits: Mapping[str, Decimal],
    start: Optional[date | datetime],
    end: Optional[date | datetime],
    overall_limit: Optional[Decimal] = None,
) -> BudgetReport:
    """Compare per-account spending limits with period activity.

    Spending on a group account includes its whole subtree. Limits for
    unknown accounts are skipped. ``total_expenses`` covers every Expense
    account, limited or not, and is what ``overall_limit`` is checked against.
    """
    period = transactions_between(transactions, start, end)
    balances = balances_by_account(period)
    accounts_by_id = {account.id: account for account in accounts}

    lines = []
    for account_id, limit in limits.items():
        account = accounts_by_id.get(account_id)
        if account is None:
            continue
        subtree = get_all_descendant_ids(account_id, accounts)
        spent = class_amount(
            sum((balances.get(i, ZERO) for i in subtree), ZERO),
            account.account_class,
        )
        lines.append(BudgetLine(account=account, limit=Decimal(limit), spent=spent))

    start_at, end_at = window_bounds(start, end)
    lines.sort(key=lambda line: line.account.code)
    total_expenses = sum(
        (
            class_amount(balances.get(account.id, ZERO), account.account_class)
            for account in accounts
            if account.account_class == AccountClass.EXPENSES
        ),
        ZERO,
    )
    return BudgetReport(
        start=start_at,
        end=end_at,
        lines=tuple(lines),
        total_expenses=total_expenses,
        overall_limit=None if overall_limit is None else Decimal(overall_limit),
    )
