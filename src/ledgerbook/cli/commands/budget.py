"""Monthly budget commands."""

import click

from ledgerbook.cli.account_resolution import resolve_limits_or_exit
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.budget import BudgetService
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import parse_amount


@click.group()
def budget_group():
    """Store monthly spending limits."""
    pass


@budget_group.command("set")
@click.argument("month", metavar="YYYY-MM")
@click.option("--total", help="Overall limit for all expenses (default: sum of --limit)")
@click.option(
    "--limit",
    "limits",
    multiple=True,
    help="Spending limit as ACCOUNT=AMOUNT (repeatable)",
)
@click.pass_context
def set_budget(ctx, month: str, total: str | None, limits: tuple[str, ...]):
    """Create or replace the budget for a month.

    Examples:
        ledgerbook budget set 2024-03 --total 150000 --limit exp_rent=25000 --limit exp_groceries=8000
    """
    db = ctx.obj["db"]
    account_limits = resolve_limits_or_exit(ctx, AccountService(db), limits)

    try:
        overall = parse_amount(total) if total is not None else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        budget = BudgetService(db).set_budget(month, overall, account_limits)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Saved budget for {budget.month_key}: {budget.limit:,.2f} "
        f"({len(budget.account_limits)} account limit(s))"
    )


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List stored monthly budgets."""
    budgets = BudgetService(ctx.obj["db"]).list_budgets()
    if not budgets:
        click.echo("No budgets found.")
        return

    click.echo(f"\n{'Month':<10} {'Limit':>14}  Account limits")
    click.echo("-" * 60)
    for budget in budgets:
        click.echo(
            f"{budget.month_key:<10} {budget.limit:>14,.2f}  {len(budget.account_limits)}"
        )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
