"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import (
    Account,
    Asset,
    LedgerSnapshot,
    MonthlyBudget,
    Party,
    Receivable,
    RecurringRule,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for ledgerbook.

    The ledger core never talks to this interface directly; services read a
    ``snapshot()`` and hand it over.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(self, account: Account) -> str:
        """Store a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(self, account: Account) -> None:
        """Replace the stored fields of an existing account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: str) -> int:
        """Count transactions debiting or crediting an account."""
        pass

    @abstractmethod
    def get_account_child_count(self, account_id: str) -> int:
        """Count accounts whose parent is the given account."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, transaction: Transaction) -> str:
        """Store a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> None:
        """Replace a stored transaction as a whole."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions ordered by date.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive, whole day)
            account_id: Optional account filter matching either side
        """
        pass

    # Party operations
    @abstractmethod
    def create_party(self, party: Party) -> str:
        """Store a party. Returns party ID."""
        pass

    @abstractmethod
    def get_party(self, party_id: str) -> Optional[Party]:
        """Get party by ID."""
        pass

    @abstractmethod
    def list_parties(self) -> list[Party]:
        """List all parties ordered by name."""
        pass

    # Asset operations
    @abstractmethod
    def create_asset(self, asset: Asset) -> str:
        """Store a fixed asset. Returns asset ID."""
        pass

    @abstractmethod
    def get_asset(self, asset_id: str) -> Optional[Asset]:
        """Get asset by ID."""
        pass

    @abstractmethod
    def list_assets(self) -> list[Asset]:
        """List all assets."""
        pass

    @abstractmethod
    def update_asset_depreciation(
        self, asset_id: str, last_depreciation_date: Optional[date]
    ) -> None:
        """Record the date of the latest depreciation run for an asset."""
        pass

    # Recurring rule operations
    @abstractmethod
    def create_recurring_rule(self, rule: RecurringRule) -> str:
        """Store a recurring rule. Returns rule ID."""
        pass

    @abstractmethod
    def list_recurring_rules(self, active_only: bool = False) -> list[RecurringRule]:
        """List recurring rules ordered by next due date."""
        pass

    @abstractmethod
    def update_recurring_schedule(
        self, rule_id: str, next_due_date: date, last_run_date: Optional[date]
    ) -> None:
        """Move a recurring rule to its next due date."""
        pass

    # Receivable operations
    @abstractmethod
    def create_receivable(self, receivable: Receivable) -> str:
        """Store a receivable or payable. Returns its ID."""
        pass

    @abstractmethod
    def get_receivable(self, receivable_id: str) -> Optional[Receivable]:
        """Get receivable by ID."""
        pass

    @abstractmethod
    def list_receivables(self) -> list[Receivable]:
        """List receivables and payables ordered by due date."""
        pass

    @abstractmethod
    def update_receivable_payment(
        self, receivable_id: str, paid_amount: Decimal, paid_date: Optional[date]
    ) -> None:
        """Record the settled amount of a receivable."""
        pass

    # Budget operations
    @abstractmethod
    def save_monthly_budget(self, budget: MonthlyBudget) -> None:
        """Create or replace the budget for a month."""
        pass

    @abstractmethod
    def get_monthly_budget(self, month_key: str) -> Optional[MonthlyBudget]:
        """Get the budget stored for a month (YYYY-MM)."""
        pass

    @abstractmethod
    def list_monthly_budgets(self) -> list[MonthlyBudget]:
        """List stored budgets ordered by month."""
        pass

    def snapshot(self) -> LedgerSnapshot:
        """Return accounts, transactions and parties as one immutable view."""
        return LedgerSnapshot(
            accounts=tuple(self.list_accounts()),
            transactions=tuple(self.list_transactions()),
            parties=tuple(self.list_parties()),
        )
