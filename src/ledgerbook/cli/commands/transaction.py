"""Transaction management commands."""

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.date_filters import period_options, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@period_options
@click.option("--account", help="Only postings touching this account (ID, code or name)")
@click.option("--verbose", "-v", is_flag=True, help="Show type, party and currency details")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    account: str | None,
    verbose: bool,
):
    """View transactions with optional filters.

    Account can be specified by ID, code or name; postings on either side
    of the entry are included.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transactions = service.list_transactions(
        start_date=start, end_date=end, account_id=account_id
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    click.echo(
        f"{'ID':<34} {'Date':<12} {'Amount':>12}  {'Debit':<22} {'Credit':<22} Note"
    )
    click.echo("-" * 120)
    for txn in transactions:
        debit_name = names.get(txn.account_id, f"? {txn.account_id}")
        credit_name = (
            names.get(txn.payment_account_id, f"? {txn.payment_account_id}")
            if txn.payment_account_id
            else "-"
        )
        click.echo(
            f"{txn.id:<34} {txn.date:%Y-%m-%d}   {txn.amount:>12,.2f}  "
            f"{debit_name[:22]:<22} {credit_name[:22]:<22} {(txn.note or '')[:30]}"
        )
        if verbose:
            details = [f"type={txn.transaction_type.value}"]
            if txn.related_party_id:
                details.append(f"party={txn.related_party_id}")
            if txn.currency:
                details.append(f"original={txn.original_amount} {txn.currency}")
            click.echo(f"{'':<34} {' '.join(details)}")

    total = sum(txn.amount for txn in transactions)
    click.echo("-" * 120)
    click.echo(f"{'TOTAL':<34} {'':<12} {total:>12,.2f}  Count: {len(transactions)}")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", "txn_date", help="New date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--amount", help="New amount")
@click.option("--note", help="New note")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    txn_date: str | None,
    amount: str | None,
    note: str | None,
) -> None:
    """Update the date, amount or note of a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    changes = {}
    try:
        if txn_date is not None:
            changes["date"] = parse_date(txn_date)
        if amount is not None:
            changes["amount"] = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    if note is not None:
        changes["note"] = note

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_transaction(transaction_id, **changes)
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        ledgerbook transaction delete 3f2a9c... --yes
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction '{transaction_id}' not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id} ({txn.amount:,.2f})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
