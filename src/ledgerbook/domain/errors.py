"""Shared domain error messages and error types."""

from typing import Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class CyclicHierarchyError(DomainError):
    """Account parent links form a loop."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        super().__init__(cyclic_hierarchy(self.cycle))


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account '{account_id}' not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction '{transaction_id}' not found"


def party_not_found(party_id: str) -> str:
    return f"Party '{party_id}' not found"


def asset_not_found(asset_id: str) -> str:
    return f"Asset '{asset_id}' not found"


def receivable_not_found(receivable_id: str) -> str:
    return f"Receivable '{receivable_id}' not found"


def duplicate_account_id(account_id: str) -> str:
    """Return message for an account id that is already taken."""
    return f"Account with id '{account_id}' already exists"


def cyclic_hierarchy(cycle: Sequence[str]) -> str:
    """Return message naming the accounts that form a parent loop."""
    return "Account hierarchy contains a cycle: " + " -> ".join(cycle)


def account_delete_blocked(
    account_id: str, transaction_count: int, child_count: int
) -> str:
    """Return message when account has postings or sub-accounts."""
    parts = []
    if transaction_count > 0:
        parts.append(
            f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}"
        )
    if child_count > 0:
        parts.append(f"{child_count} sub-account{'s' if child_count != 1 else ''}")
    return (
        f"Cannot delete account '{account_id}': it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )


def system_account_delete_blocked(account_id: str) -> str:
    return f"Cannot delete account '{account_id}': it is a system account"
