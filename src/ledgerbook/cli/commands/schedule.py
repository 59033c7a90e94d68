"""Scheduled posting commands."""

from datetime import datetime, time

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.chart import DEPRECIATION_EXPENSE_ID
from ledgerbook.domain.entities import Frequency, TransactionType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.party import PartyService
from ledgerbook.domain.scheduling import ScheduleService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


@click.group()
def schedule_group():
    """Recurring transactions and depreciation."""
    pass


@schedule_group.command("add")
@click.option("--debit", required=True, help="Account debited (ID, code or name)")
@click.option("--credit", help="Account credited (ID, code or name)")
@click.option("--amount", required=True, help="Amount per occurrence")
@click.option(
    "--every",
    "frequency",
    type=click.Choice([f.value for f in Frequency]),
    default=Frequency.MONTHLY.value,
    show_default=True,
)
@click.option("--start", "start", required=True, help="First due date")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType]),
    default=TransactionType.EXPENSE.value,
    show_default=True,
)
@click.option("--party", help="Party ID or name")
@click.option("--note", help="Note")
@click.pass_context
def add_rule(
    ctx,
    debit: str,
    credit: str | None,
    amount: str,
    frequency: str,
    start: str,
    transaction_type: str,
    party: str | None,
    note: str | None,
):
    """Create a recurring transaction rule.

    Examples:
        ledgerbook schedule add --debit exp_rent --credit asset_bank_main --amount 25000 --start 2024-02-01 --note Rent
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = resolve_account_or_exit(ctx, account_service, credit) if credit else None

    try:
        rule_amount = parse_amount(amount)
        first_due = parse_date(start)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        party_id = PartyService(db).resolve_party(party).id if party else None
        rule_id = ScheduleService(db).add_recurring_rule(
            account_id=debit_id,
            amount=rule_amount,
            frequency=Frequency(frequency),
            next_due_date=first_due,
            payment_account_id=credit_id,
            transaction_type=TransactionType(transaction_type),
            party_id=party_id,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created {frequency} rule {rule_id}, first due {first_due.isoformat()}")


@schedule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List recurring transaction rules."""
    rules = ScheduleService(ctx.obj["db"]).list_recurring_rules()
    if not rules:
        click.echo("No recurring rules found.")
        return

    click.echo(f"\n{'ID':<34} {'Every':<8} {'Amount':>12}  {'Debit':<20} {'Next due':<12} Note")
    click.echo("-" * 110)
    for rule in rules:
        status = "" if rule.active else " (inactive)"
        click.echo(
            f"{rule.id:<34} {rule.frequency.value:<8} {rule.amount:>12,.2f}  "
            f"{rule.account_id[:20]:<20} {rule.next_due_date.isoformat():<12} "
            f"{rule.note or ''}{status}"
        )


@schedule_group.command("run")
@click.option("--as-of", "as_of", help="Run everything due up to this date (default: now)")
@click.option(
    "--expense-account",
    default=DEPRECIATION_EXPENSE_ID,
    show_default=True,
    help="Account debited with depreciation",
)
@click.option("--skip-depreciation", is_flag=True, help="Only post recurring rules")
@click.option("--skip-recurring", is_flag=True, help="Only post depreciation")
@click.pass_context
def run_schedules(
    ctx,
    as_of: str | None,
    expense_account: str,
    skip_depreciation: bool,
    skip_recurring: bool,
):
    """Post all due recurring transactions and depreciation."""
    db = ctx.obj["db"]
    service = ScheduleService(db)

    now = None
    if as_of is not None:
        try:
            now = datetime.combine(parse_date(as_of), time.max)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    try:
        recurring = [] if skip_recurring else service.run_recurring(now)
        depreciation = (
            [] if skip_depreciation else service.run_depreciation(now, expense_account)
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted {len(recurring)} recurring transaction(s)")
    click.echo(f"Posted {len(depreciation)} depreciation entr{'y' if len(depreciation) == 1 else 'ies'}")
    for txn in recurring + depreciation:
        click.echo(f"  {txn.date:%Y-%m-%d} {txn.amount:>12,.2f}  {txn.note}")


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
