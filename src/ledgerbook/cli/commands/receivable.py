"""Receivable and payable commands."""

from datetime import date, timedelta

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import ReceivableKind, ReceivableStatus, ReceivableSubType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.party import PartyService
from ledgerbook.domain.receivable import ReceivableService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date

DEFAULT_TERM_DAYS = 30


@click.group()
def receivable_group():
    """Track invoices, bills and loans owed to or by parties."""
    pass


@receivable_group.command("add")
@click.argument("kind", type=click.Choice([k.value for k in ReceivableKind]))
@click.option("--party", required=True, help="Party ID or name")
@click.option(
    "--account",
    required=True,
    help="Revenue (receivable) or expense (payable) account ID, code or name",
)
@click.option("--amount", required=True, help="Amount owed")
@click.option("--issued", default="today", show_default=True, help="Issue date")
@click.option("--due", help=f"Due date (default: {DEFAULT_TERM_DAYS} days after issue)")
@click.option(
    "--type",
    "sub_type",
    type=click.Choice([s.value for s in ReceivableSubType]),
    help="Invoice, bill or loan (default: invoice for receivables, bill for payables)",
)
@click.option("--note", help="Note")
@click.pass_context
def add_receivable(
    ctx,
    kind: str,
    party: str,
    account: str,
    amount: str,
    issued: str,
    due: str | None,
    sub_type: str | None,
    note: str | None,
):
    """Record a receivable or payable and post its accrual.

    Examples:
        ledgerbook receivable add receivable --party "Acme Corp" --account rev_consulting --amount 5000 --due 2024-03-31
        ledgerbook receivable add payable --party "Office Landlord" --account exp_rent --amount 2500
    """
    db = ctx.obj["db"]
    target_account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        receivable_amount = parse_amount(amount)
        issue_date = parse_date(issued)
        due_date = parse_date(due) if due else issue_date + timedelta(days=DEFAULT_TERM_DAYS)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        party_id = PartyService(db).resolve_party(party).id
        receivable_id = ReceivableService(db).add_receivable(
            kind=ReceivableKind(kind),
            party_id=party_id,
            target_account_id=target_account_id,
            amount=receivable_amount,
            issue_date=issue_date,
            due_date=due_date,
            sub_type=ReceivableSubType(sub_type) if sub_type else None,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded {kind} {receivable_id} of {receivable_amount:,.2f}, "
        f"due {due_date.isoformat()}"
    )


@receivable_group.command("pay")
@click.argument("receivable_id", metavar="RECEIVABLE_ID")
@click.option("--amount", help="Amount paid (default: everything still open)")
@click.option("--cash", "cash_account", required=True, help="Cash or bank account ID, code or name")
@click.option("--date", "paid_on", help="Payment date (default: now)")
@click.pass_context
def pay_receivable(
    ctx, receivable_id: str, amount: str | None, cash_account: str, paid_on: str | None
):
    """Record a full or partial payment.

    Examples:
        ledgerbook receivable pay 3f2a... --cash asset_bank_main --amount 2000
    """
    db = ctx.obj["db"]
    service = ReceivableService(db)
    cash_account_id = resolve_account_or_exit(ctx, AccountService(db), cash_account)

    try:
        payment_date = parse_date(paid_on) if paid_on else None
        payment = parse_amount(amount) if amount else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        if payment is None:
            payment = service.get_receivable(receivable_id).remaining
        receivable = service.record_payment(
            receivable_id, payment, cash_account_id, paid_on=payment_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if receivable.is_paid:
        click.echo(f"Recorded payment of {payment:,.2f}; {receivable_id} is fully paid")
    else:
        click.echo(
            f"Recorded payment of {payment:,.2f}; {receivable.remaining:,.2f} still open"
        )


@receivable_group.command("list")
@click.option("--kind", type=click.Choice([k.value for k in ReceivableKind]))
@click.option("--status", type=click.Choice([s.value for s in ReceivableStatus]))
@click.option("--party", help="Party ID or name")
@click.option("--as-of", "as_of", help="Date used to decide what is overdue (default: today)")
@click.pass_context
def list_receivables(
    ctx, kind: str | None, status: str | None, party: str | None, as_of: str | None
):
    """List receivables and payables by due date."""
    db = ctx.obj["db"]
    try:
        today = parse_date(as_of) if as_of else date.today()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        party_id = PartyService(db).resolve_party(party).id if party else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    receivables = ReceivableService(db).list_receivables(
        kind=ReceivableKind(kind) if kind else None,
        status=ReceivableStatus(status) if status else None,
        party_id=party_id,
        today=today,
    )
    if not receivables:
        click.echo("No receivables found.")
        return

    parties = {p.id: p.name for p in PartyService(db).list_parties()}
    click.echo(
        f"\n{'ID':<34} {'Kind':<10} {'Party':<20} {'Due':<12} "
        f"{'Amount':>12} {'Open':>12}  Status"
    )
    click.echo("-" * 112)
    for item in receivables:
        click.echo(
            f"{item.id:<34} {item.kind.value:<10} {parties.get(item.party_id, '')[:20]:<20} "
            f"{item.due_date.isoformat():<12} {item.amount:>12,.2f} {item.remaining:>12,.2f}  "
            f"{item.status(today).value}"
        )


def register_commands(cli):
    """Register receivable commands with main CLI."""
    cli.add_command(receivable_group, name="receivable")
