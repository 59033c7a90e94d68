"""Account management commands."""

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountClass, AccountLevel, AccountNode, NormalBalance
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.hierarchy import walk_tree
from ledgerbook.domain.reports import class_amount

INDENT_SIZE = 4


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("account_id", metavar="ACCOUNT_ID")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--class",
    "account_class",
    type=click.Choice([c.value for c in AccountClass], case_sensitive=False),
    help="Account class (defaults to the parent's class)",
)
@click.option("--parent", help="Parent account ID, code or name")
@click.option(
    "--level",
    type=click.Choice([lvl.value for lvl in AccountLevel]),
    default=AccountLevel.GL.value,
    show_default=True,
)
@click.option(
    "--normal-balance",
    type=click.Choice([nb.value for nb in NormalBalance]),
    help="Normal balance (defaults from the account class)",
)
@click.option("--group", "is_group", is_flag=True, help="Create a non-posting group account")
@click.option("--direct-cost", is_flag=True, help="Mark an expense account as cost of sales")
@click.pass_context
def create_account(
    ctx,
    account_id: str,
    code: str,
    name: str,
    account_class: str | None,
    parent: str | None,
    level: str,
    normal_balance: str | None,
    is_group: bool,
    direct_cost: bool,
):
    """Create a new account.

    Examples:
        ledgerbook account create exp_coffee 60600 "Coffee" --parent 60000
        ledgerbook account create 13000 13000 "Investments" --class Assets --group
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    parent_id = None
    if parent is not None:
        parent_id = resolve_account_or_exit(ctx, service, parent)
        if account_class is None:
            account_class = service.get_account(parent_id).account_class.value
    if account_class is None:
        click.echo("Error: --class is required for top-level accounts", err=True)
        ctx.exit(1)

    try:
        service.create_account(
            account_id=account_id,
            code=code,
            name=name,
            account_class=_account_class(account_class),
            parent_id=parent_id,
            level=AccountLevel(level),
            normal_balance=NormalBalance(normal_balance) if normal_balance else None,
            is_posting=not is_group,
            is_direct_cost=direct_cost,
        )
        click.echo(f"Created account '{name}' (ID: {account_id}, code {code})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def _account_class(value: str) -> AccountClass:
    for account_class in AccountClass:
        if account_class.value.lower() == value.lower():
            return account_class
    raise click.BadParameter(f"Unknown account class '{value}'")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts ordered by code."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found. Run 'ledgerbook init-chart' to create the default chart.")
        return

    click.echo(f"\n{'Code':<10} {'ID':<24} {'Name':<30} {'Class':<12} {'Level':<10} Flags")
    click.echo("-" * 100)
    for acc in accounts:
        flags = []
        if not acc.is_posting:
            flags.append("group")
        if acc.is_system:
            flags.append("system")
        if acc.normal_balance != acc.account_class.default_normal_balance:
            flags.append(f"{acc.normal_balance.value}-normal")
        if acc.is_direct_cost:
            flags.append("direct-cost")
        click.echo(
            f"{acc.code:<10} {acc.id:<24} {acc.name:<30} {acc.account_class.value:<12} "
            f"{acc.level.value:<10} {', '.join(flags)}"
        )


def _display_tree(nodes: list[AccountNode], account_class: AccountClass, indent: int = 0) -> None:
    for node, level in walk_tree(nodes, indent):
        indent_str = " " * (INDENT_SIZE * level)
        label = f"{node.code} {node.name}"
        name_width = 50 - (INDENT_SIZE * level)
        amount = class_amount(node.total_balance, account_class)
        click.echo(f"{indent_str}{label:<{name_width}} {amount:>16,.2f}")


@account_group.command("tree")
@click.pass_context
def account_tree(ctx):
    """Show the account hierarchy with rolled-up balances."""
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        tree = service.get_account_tree()
    except DomainError as e:
        handle_domain_error(ctx, e)

    for i, (account_class, roots) in enumerate(tree.items()):
        if not roots:
            continue
        if i:
            click.echo()
        click.echo(account_class.value.upper())
        _display_tree(roots, account_class, indent=1)


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--code", help="New account code")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, code: str | None) -> None:
    """Rename (and optionally recode) an account.

    ACCOUNT can be an account ID, code or name.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.update_account(account_id, name=new_name, code=code)
        click.echo(f"Renamed account to '{new_name}'")
        if code is not None:
            click.echo(f"Code updated to '{code}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("move")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_parent", metavar="[NEW_PARENT]", required=False)
@click.option("--root", "make_root", is_flag=True, help="Make it a top-level account of its class")
@click.pass_context
def move_account(ctx, account: str, new_parent: str | None, make_root: bool) -> None:
    """Move an account under a different parent.

    Examples:
        ledgerbook account move asset_wallet 11000
        ledgerbook account move asset_wallet --root
    """
    if make_root == (new_parent is not None):
        click.echo("Error: Give either NEW_PARENT or --root", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        if make_root:
            service.update_account(account_id, make_root=True)
            click.echo(f"Moved account '{account_id}' to the top level")
            return
        parent_id = resolve_account_or_exit(ctx, service, new_parent)
        service.update_account(account_id, parent_id=parent_id)
        click.echo(f"Moved account '{account_id}' under '{parent_id}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account ID, code or name.

    System accounts, and accounts that still have postings or sub-accounts,
    cannot be deleted.

    Examples:
        ledgerbook account delete exp_coffee
        ledgerbook account delete 60600 --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
