"""Party (customer/vendor) commands."""

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import PartyType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.party import PartyService


@click.group()
def party_group():
    """Manage customers, vendors and other counterparties."""
    pass


@party_group.command("create")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "party_type",
    type=click.Choice([t.value for t in PartyType]),
    default=PartyType.OTHER.value,
    show_default=True,
)
@click.option("--account", help="Linked receivable/payable account ID, code or name")
@click.pass_context
def create_party(ctx, name: str, party_type: str, account: str | None):
    """Create a party.

    Examples:
        ledgerbook party create "Acme Corp" --type customer --account asset_parties
    """
    db = ctx.obj["db"]
    service = PartyService(db)

    linked_account_id = None
    if account is not None:
        linked_account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        party_id = service.create_party(
            name=name, party_type=PartyType(party_type), linked_account_id=linked_account_id
        )
        click.echo(f"Created party '{name}' (ID: {party_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@party_group.command("list")
@click.pass_context
def list_parties(ctx):
    """List all parties."""
    db = ctx.obj["db"]
    service = PartyService(db)

    parties = service.list_parties()
    if not parties:
        click.echo("No parties found.")
        return

    click.echo(f"\n{'ID':<34} {'Name':<30} {'Type':<10} Account")
    click.echo("-" * 90)
    for party in parties:
        click.echo(
            f"{party.id:<34} {party.name:<30} {party.party_type.value:<10} "
            f"{party.linked_account_id or ''}"
        )


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group, name="party")
