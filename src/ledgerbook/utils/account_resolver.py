"""Utility for resolving account references typed on the command line."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import NotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: str) -> str:
    """Resolve an account ID, code or exact name to an account ID.

    IDs win over codes, and codes over names, so ``11110`` finds the main
    bank account even if some other account is named "11110".

    Raises:
        NotFoundError: If nothing matches
    """
    if account_service.get_account(account) is not None:
        return account

    accounts = account_service.list_accounts()
    for acc in accounts:
        if acc.code == account:
            return acc.id
    for acc in accounts:
        if acc.name == account:
            return acc.id

    raise NotFoundError(account_not_found(account))
