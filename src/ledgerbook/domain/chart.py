"""Default chart of accounts."""

from typing import Optional

from ledgerbook.domain.entities import (
    Account,
    AccountClass,
    AccountLevel,
    NormalBalance,
)

ASSETS = AccountClass.ASSETS
LIABILITIES = AccountClass.LIABILITIES
EQUITY = AccountClass.EQUITY
REVENUE = AccountClass.REVENUE
EXPENSES = AccountClass.EXPENSES

CLASS = AccountLevel.CLASS
GROUP = AccountLevel.GROUP
GL = AccountLevel.GL
SUB_LEDGER = AccountLevel.SUB_LEDGER

DR = NormalBalance.DEBIT
CR = NormalBalance.CREDIT

CASH_GROUP_ID = "11100"
FIXED_ASSETS_GROUP_ID = "12000"
ACCUMULATED_DEPRECIATION_ID = "12900"
RETAINED_EARNINGS_ID = "equity_retained"
DEPRECIATION_EXPENSE_ID = "exp_depreciation"
RECEIVABLES_ID = "asset_ar_general"
PAYABLES_ID = "liab_ap_general"


def _account(
    account_id: str,
    code: str,
    name: str,
    account_class: AccountClass,
    level: AccountLevel,
    normal_balance: NormalBalance,
    is_posting: bool,
    parent_id: Optional[str] = None,
    is_system: bool = False,
    is_direct_cost: bool = False,
) -> Account:
    return Account(
        id=account_id,
        code=code,
        name=name,
        account_class=account_class,
        level=level,
        normal_balance=normal_balance,
        is_posting=is_posting,
        parent_id=parent_id,
        is_system=is_system,
        is_direct_cost=is_direct_cost,
    )


# Parents always come before their children.
DEFAULT_ACCOUNTS: tuple[Account, ...] = (
    # Assets
    _account("10000", "10000", "ASSETS", ASSETS, CLASS, DR, False, is_system=True),
    _account("11000", "11000", "Current Assets", ASSETS, GROUP, DR, False, "10000", is_system=True),
    _account(CASH_GROUP_ID, "11100", "Cash & Cash Equivalents", ASSETS, GROUP, DR, False, "11000", is_system=True),
    _account("asset_bank_main", "11110", "Main Bank Account", ASSETS, GL, DR, True, CASH_GROUP_ID),
    _account("asset_cash", "11120", "Petty Cash", ASSETS, GL, DR, True, CASH_GROUP_ID),
    _account("asset_wallet", "11130", "Digital Wallet", ASSETS, GL, DR, True, CASH_GROUP_ID),
    _account("11200", "11200", "Accounts Receivable", ASSETS, GL, DR, False, "11000", is_system=True),
    _account(RECEIVABLES_ID, "11201", "General Receivables", ASSETS, SUB_LEDGER, DR, True, "11200"),
    _account("asset_parties", "11900", "Parties", ASSETS, GL, DR, False, "11000", is_system=True),
    _account(FIXED_ASSETS_GROUP_ID, "12000", "Fixed Assets", ASSETS, GROUP, DR, False, "10000", is_system=True),
    _account("12100", "12100", "Computer Equipment", ASSETS, GL, DR, True, FIXED_ASSETS_GROUP_ID),
    _account(ACCUMULATED_DEPRECIATION_ID, "12900", "Accumulated Depreciation", ASSETS, GL, CR, True, FIXED_ASSETS_GROUP_ID, is_system=True),
    # Liabilities
    _account("20000", "20000", "LIABILITIES", LIABILITIES, CLASS, CR, False, is_system=True),
    _account("21000", "21000", "Current Liabilities", LIABILITIES, GROUP, CR, False, "20000", is_system=True),
    _account("liab_ap", "21100", "Accounts Payable", LIABILITIES, GL, CR, False, "21000", is_system=True),
    _account(PAYABLES_ID, "21101", "General Payables", LIABILITIES, SUB_LEDGER, CR, True, "liab_ap"),
    # Equity
    _account("30000", "30000", "EQUITY", EQUITY, CLASS, CR, False, is_system=True),
    _account("equity_opening", "31000", "Opening Balance Equity", EQUITY, GL, CR, True, "30000", is_system=True),
    _account(RETAINED_EARNINGS_ID, "32000", "Retained Earnings", EQUITY, GL, CR, True, "30000", is_system=True),
    # Revenue
    _account("40000", "40000", "REVENUE", REVENUE, CLASS, CR, False, is_system=True),
    _account("41000", "41000", "Operating Revenue", REVENUE, GROUP, CR, False, "40000", is_system=True),
    _account("rev_consulting", "41100", "Consulting Services", REVENUE, GL, CR, True, "41000"),
    _account("rev_rental", "41200", "Rental Income", REVENUE, GL, CR, True, "41000"),
    _account("42000", "42000", "Professional Income", REVENUE, GROUP, CR, False, "40000", is_system=True),
    _account("inc_salary", "42100", "Salary (Stable Job)", REVENUE, GL, CR, True, "42000"),
    # Expenses
    _account("50000", "50000", "EXPENSES", EXPENSES, CLASS, DR, False, is_system=True),
    _account("51000", "51000", "Direct Costs (COGS)", EXPENSES, GROUP, DR, False, "50000", is_system=True, is_direct_cost=True),
    _account("cogs_hosting", "51100", "Web Hosting & Server", EXPENSES, GL, DR, True, "51000", is_direct_cost=True),
    _account("cogs_maintenance", "51200", "Property Maintenance", EXPENSES, GL, DR, True, "51000", is_direct_cost=True),
    _account("60000", "60000", "Operating Expenses", EXPENSES, GROUP, DR, False, "50000", is_system=True),
    _account("exp_rent", "60100", "Rent Expense", EXPENSES, GL, DR, True, "60000"),
    _account("exp_groceries", "60200", "Groceries & Supplies", EXPENSES, GL, DR, True, "60000"),
    _account("exp_transport", "60300", "Transport & Fuel", EXPENSES, GL, DR, True, "60000"),
    _account("exp_utilities", "60400", "Utilities", EXPENSES, GL, DR, True, "60000"),
    _account(DEPRECIATION_EXPENSE_ID, "60900", "Depreciation Expense", EXPENSES, GL, DR, True, "60000", is_system=True),
)
