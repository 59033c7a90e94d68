"""Account domain service."""

import logging
from dataclasses import replace
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.chart import DEFAULT_ACCOUNTS
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    AccountClass,
    AccountLevel,
    AccountNode,
    NormalBalance,
)
from ledgerbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_id,
    system_account_delete_blocked,
)
from ledgerbook.domain.hierarchy import build_tree, ensure_acyclic

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        account_id: str,
        code: str,
        name: str,
        account_class: AccountClass,
        parent_id: Optional[str] = None,
        level: AccountLevel = AccountLevel.GL,
        normal_balance: Optional[NormalBalance] = None,
        is_posting: bool = True,
        is_system: bool = False,
        is_direct_cost: bool = False,
        linked_asset_id: Optional[str] = None,
    ) -> str:
        """Create a new account.

        Args:
            account_id: Stable account ID
            code: Display/sort code (e.g., "11110")
            name: Account name
            account_class: Top-level accounting class
            parent_id: Optional parent account ID
            level: Hierarchy level marker
            normal_balance: Normal balance; defaults from the account class
            is_posting: Whether transactions may be posted to the account
            is_system: Whether the account is protected from deletion
            is_direct_cost: Whether the account is a direct cost (COGS)
            linked_asset_id: Fixed asset this account belongs to

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is empty or the parent is in another class
            ConflictError: If the account ID already exists
            NotFoundError: If the parent account doesn't exist
        """
        if not account_id or not account_id.strip():
            raise ValidationError("Account ID cannot be empty")
        if not name or not name.strip():
            raise ValidationError("Account name cannot be empty")
        if self.db.get_account(account_id) is not None:
            raise ConflictError(duplicate_account_id(account_id))

        if parent_id is not None:
            self._validate_parent(parent_id, account_class)

        account = AccountEntity(
            id=account_id,
            code=code,
            name=name,
            account_class=account_class,
            level=level,
            normal_balance=normal_balance or account_class.default_normal_balance,
            is_posting=is_posting,
            parent_id=parent_id,
            is_system=is_system,
            is_direct_cost=is_direct_cost,
            linked_asset_id=linked_asset_id,
        )
        self.db.create_account(account)
        logger.info("Created account %s (%s %s)", account_id, code, name)
        return account_id

    def _validate_parent(self, parent_id: str, account_class: AccountClass) -> AccountEntity:
        parent = self.db.get_account(parent_id)
        if parent is None:
            raise NotFoundError(f"Parent account '{parent_id}' not found")
        if parent.account_class != account_class:
            raise ValidationError(
                f"Parent account '{parent_id}' belongs to {parent.account_class.value}, "
                f"not {account_class.value}"
            )
        return parent

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: str) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts ordered by code."""
        return self.db.list_accounts()

    def get_account_tree(self) -> dict[AccountClass, list[AccountNode]]:
        """Build the account forest with current balances."""
        snapshot = self.db.snapshot()
        return build_tree(snapshot.accounts, snapshot.transactions)

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        code: Optional[str] = None,
        parent_id: Optional[str] = None,
        make_root: bool = False,
    ) -> None:
        """Rename, recode or move an account.

        Args:
            account_id: Account ID to update
            name: Optional new name
            code: Optional new code
            parent_id: Optional new parent ID
            make_root: Detach the account from its parent so it becomes a
                top-level account of its class

        Raises:
            ValidationError: If both ``parent_id`` and ``make_root`` are given
            NotFoundError: If the account or new parent doesn't exist
            CyclicHierarchyError: If the move would put the account under itself
        """
        if make_root and parent_id is not None:
            raise ValidationError("Choose either a new parent or make_root, not both")

        account = self.require_account(account_id)
        updated = account
        if name is not None:
            if not name.strip():
                raise ValidationError("Account name cannot be empty")
            updated = replace(updated, name=name)
        if code is not None:
            updated = replace(updated, code=code)
        if parent_id is not None:
            self._validate_parent(parent_id, account.account_class)
            updated = replace(updated, parent_id=parent_id)
            accounts = [
                updated if acc.id == account_id else acc for acc in self.db.list_accounts()
            ]
            ensure_acyclic(accounts)
        elif make_root:
            updated = replace(updated, parent_id=None)

        self.db.update_account(updated)

    def delete_account(self, account_id: str) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account is a system account or has
                postings or sub-accounts
        """
        account = self.require_account(account_id)
        if account.is_system:
            raise DependencyError(system_account_delete_blocked(account_id))

        transaction_count = self.db.get_account_transaction_count(account_id)
        child_count = self.db.get_account_child_count(account_id)
        if transaction_count > 0 or child_count > 0:
            raise DependencyError(
                account_delete_blocked(account_id, transaction_count, child_count)
            )

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def seed_default_chart(self) -> int:
        """Create any default chart accounts that don't exist yet.

        Returns:
            Number of accounts created
        """
        created = 0
        for account in DEFAULT_ACCOUNTS:
            if self.db.get_account(account.id) is not None:
                continue
            self.db.create_account(account)
            created += 1
        logger.info("Seeded %d default account(s)", created)
        return created
