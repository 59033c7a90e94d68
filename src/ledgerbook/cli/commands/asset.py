"""Fixed asset commands."""

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.asset import AssetService
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


@click.group()
def asset_group():
    """Manage fixed assets."""
    pass


@asset_group.command("add")
@click.argument("name", metavar="NAME")
@click.option("--value", required=True, help="Purchase cost")
@click.option("--purchased", "purchased", required=True, help="Purchase date")
@click.option("--life", "life_years", type=int, required=True, help="Useful life in years")
@click.option("--paid-from", help="Account the purchase was paid from (ID, code or name)")
@click.option("--note", help="Note")
@click.pass_context
def add_asset(
    ctx,
    name: str,
    value: str,
    purchased: str,
    life_years: int,
    paid_from: str | None,
    note: str | None,
):
    """Register a fixed asset.

    Creates a cost account and an accumulated depreciation account for the
    asset under Fixed Assets. With --paid-from the purchase is posted too.

    Examples:
        ledgerbook asset add "Laptop" --value 120000 --purchased 2024-01-10 --life 3 --paid-from asset_bank_main
    """
    db = ctx.obj["db"]
    service = AssetService(db)

    try:
        original_value = parse_amount(value)
        purchase_date = parse_date(purchased)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    payment_account_id = None
    if paid_from is not None:
        payment_account_id = resolve_account_or_exit(ctx, AccountService(db), paid_from)

    try:
        asset_id = service.register_asset(
            name=name,
            original_value=original_value,
            purchase_date=purchase_date,
            useful_life_years=life_years,
            payment_account_id=payment_account_id,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Registered asset '{name}' (ID: {asset_id})")
    click.echo(f"  Monthly depreciation: {service.get_monthly_depreciation(asset_id):,.2f}")


@asset_group.command("list")
@click.pass_context
def list_assets(ctx):
    """List fixed assets with their current book value."""
    db = ctx.obj["db"]
    service = AssetService(db)

    assets = service.list_assets()
    if not assets:
        click.echo("No assets found.")
        return

    click.echo(
        f"\n{'Name':<30} {'Purchased':<12} {'Cost':>14} {'Book value':>14} {'Life':>5}  Last run"
    )
    click.echo("-" * 95)
    for asset in assets:
        last_run = asset.last_depreciation_date.isoformat() if asset.last_depreciation_date else "-"
        click.echo(
            f"{asset.name[:30]:<30} {asset.purchase_date.isoformat():<12} "
            f"{asset.original_value:>14,.2f} {service.get_book_value(asset.id):>14,.2f} "
            f"{asset.useful_life_years:>5}  {last_run}"
        )


def register_commands(cli):
    """Register asset commands with main CLI."""
    cli.add_command(asset_group, name="asset")
