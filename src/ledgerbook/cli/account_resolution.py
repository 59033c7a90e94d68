"""CLI helpers for account resolution."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.utils.account_resolver import resolve_account
from ledgerbook.utils.amount_parser import parse_amount


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> str:
    """Resolve an account ID, code or name, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)


def resolve_limits_or_exit(
    ctx: click.Context, account_service: AccountService, limits: Iterable[str]
) -> dict[str, Decimal]:
    """Turn ``ACCOUNT=AMOUNT`` options into amounts keyed by account ID."""
    resolved: dict[str, Decimal] = {}
    for value in limits:
        account, sep, amount = value.partition("=")
        if not sep:
            click.echo(
                f"Error: Budget limit must look like ACCOUNT=AMOUNT, got '{value}'", err=True
            )
            ctx.exit(1)
        try:
            parsed = parse_amount(amount)
        except ValueError as exc:
            handle_domain_error(ctx, exc)
        resolved[resolve_account_or_exit(ctx, account_service, account.strip())] = parsed
    return resolved
