"""Add transaction command."""

from datetime import datetime, time

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import TransactionType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.party import PartyService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date, parse_datetime


@click.command("add")
@click.option("--debit", "debit", required=True, help="Account debited (ID, code or name)")
@click.option("--credit", "credit", help="Account credited (ID, code or name)")
@click.option(
    "--date",
    "txn_date",
    required=True,
    help="Transaction date (YYYY-MM-DD, 'YYYY-MM-DD HH:MM' or 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount (e.g., 123.45 or 1,234.50)")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType]),
    default=TransactionType.JOURNAL.value,
    show_default=True,
)
@click.option("--note", help="Note shown in statements")
@click.option("--party", help="Party ID or name")
@click.option("--original-amount", help="Amount in the original currency")
@click.option("--currency", help="Original currency code (e.g., USD)")
@click.pass_context
def add_transaction(
    ctx,
    debit: str,
    credit: str | None,
    txn_date: str,
    amount: str,
    transaction_type: str,
    note: str | None,
    party: str | None,
    original_amount: str | None,
    currency: str | None,
):
    """Record a journal entry: debit one account, credit another.

    Examples:
        ledgerbook add --debit asset_bank_main --credit inc_salary --date 2024-01-15 --amount 15000
        ledgerbook add --debit exp_groceries --credit 11110 --date today --amount 450.50 --note "Weekly shop"
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = None
    if credit is not None:
        credit_id = resolve_account_or_exit(ctx, account_service, credit)

    try:
        when = _parse_when(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
        txn_original = parse_amount(original_amount) if original_amount else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        party_id = PartyService(db).resolve_party(party).id if party else None
        transaction_id = transaction_service.create_transaction(
            date=when,
            amount=txn_amount,
            account_id=debit_id,
            payment_account_id=credit_id,
            transaction_type=TransactionType(transaction_type),
            note=note,
            related_party_id=party_id,
            original_amount=txn_original,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Dr {debit_id}")
    click.echo(f"  Cr {credit_id or '-'}")
    click.echo(f"  Date: {when:%Y-%m-%d %H:%M}")
    click.echo(f"  Amount: {txn_amount:,.2f}")
    if note:
        click.echo(f"  Note: {note}")


def _parse_when(value: str) -> datetime:
    if ":" in value:
        return parse_datetime(value)
    return datetime.combine(parse_date(value), time.min)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
