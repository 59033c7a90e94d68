"""Financial report commands."""

from datetime import date
from decimal import Decimal

import click

from ledgerbook.cli.account_resolution import resolve_account_or_exit, resolve_limits_or_exit
from ledgerbook.cli.date_filters import (
    period_options,
    resolve_cli_as_of,
    resolve_cli_date_range,
)
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.reporting import ReportService
from ledgerbook.domain.reports import BALANCE_SHEET_CLASSES, CashFlowSection, tree_lines

INDENT_SIZE = 4
NAME_WIDTH = 50
AMOUNT_WIDTH = 16


def _line(label: str, amount: Decimal, indent: int = 0) -> None:
    indent_str = " " * (INDENT_SIZE * indent)
    width = NAME_WIDTH - (INDENT_SIZE * indent)
    click.echo(f"{indent_str}{label:<{width}} {amount:>{AMOUNT_WIDTH},.2f}")


def _rule(char: str = "-") -> None:
    click.echo(char * (NAME_WIDTH + AMOUNT_WIDTH + 1))


def _window_label(start: date | None, end: date | None) -> str:
    if start is None and end is None:
        return "all time"
    if start is None:
        return f"through {end.isoformat()}"
    if end is None:
        return f"from {start.isoformat()}"
    return f"{start.isoformat()} to {end.isoformat()}"


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="Balances as of the end of this date (default: all postings)")
@click.pass_context
def trial_balance(ctx, as_of: str | None):
    """Debit and credit balance of every account."""
    service = ReportService(ctx.obj["db"])
    report = service.trial_balance(resolve_cli_as_of(ctx, as_of))

    click.echo(f"\nTrial Balance ({_window_label(None, report.as_of and report.as_of.date())})")
    click.echo(f"{'Code':<10} {'Account':<36} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 77)
    for account_class, rows in report.groups.items():
        if not rows:
            continue
        click.echo(account_class.value.upper())
        for row in rows:
            debit = f"{row.debit:,.2f}" if row.debit else ""
            credit = f"{row.credit:,.2f}" if row.credit else ""
            click.echo(
                f"{row.account.code:<10} {row.account.name[:36]:<36} {debit:>14} {credit:>14}"
            )
    click.echo("-" * 77)
    click.echo(f"{'TOTAL':<47} {report.total_debit:>14,.2f} {report.total_credit:>14,.2f}")
    if not report.is_balanced:
        click.echo(f"Out of balance by {report.difference:,.2f}", err=True)


@report_group.command("income-statement")
@period_options
@click.pass_context
def income_statement(
    ctx, start_date: str | None, end_date: str | None, period_flags: dict[str, bool]
):
    """Revenue, direct costs and operating expenses for a period."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    report = ReportService(ctx.obj["db"]).income_statement(start, end)

    click.echo(f"\nIncome Statement ({_window_label(start, end)})")
    _rule("=")
    click.echo("Revenue")
    for line in report.revenue:
        _line(f"{line.account.code} {line.account.name}", line.amount, indent=1)
    _line("Total Revenue", report.total_revenue)
    click.echo()
    click.echo("Cost of Sales")
    for line in report.direct_costs:
        _line(f"{line.account.code} {line.account.name}", line.amount, indent=1)
    _line("Total Cost of Sales", report.total_direct_costs)
    _rule()
    _line("Gross Profit", report.gross_profit)
    click.echo()
    click.echo("Operating Expenses")
    for line in report.operating_expenses:
        _line(f"{line.account.code} {line.account.name}", line.amount, indent=1)
    _line("Total Operating Expenses", report.total_operating_expenses)
    _rule("=")
    _line("Net Income" if report.net_income >= 0 else "Net Loss", report.net_income)


@report_group.command("balance-sheet")
@click.option("--as-of", help="Position as of the end of this date (default: all postings)")
@click.option("--all", "show_all", is_flag=True, help="Include zero-balance accounts")
@click.pass_context
def balance_sheet(ctx, as_of: str | None, show_all: bool):
    """Assets, liabilities and equity with current earnings closed."""
    service = ReportService(ctx.obj["db"])
    try:
        report = service.balance_sheet(resolve_cli_as_of(ctx, as_of))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nBalance Sheet ({_window_label(None, report.as_of and report.as_of.date())})")
    for account_class in BALANCE_SHEET_CLASSES:
        _rule("=")
        click.echo(account_class.value.upper())
        for line in tree_lines(report.section(account_class), account_class, 1, show_all):
            _line(f"{line.node.code} {line.node.name}", line.amount, line.depth)
        _line(f"Total {account_class.value}", report.section_total(account_class))
    _rule("=")
    _line("Liabilities + Equity", report.total_liabilities + report.total_equity)
    if not report.is_balanced:
        click.echo(
            f"Warning: assets differ from liabilities + equity by "
            f"{report.total_assets - report.total_liabilities - report.total_equity:,.2f}",
            err=True,
        )


def _section(title: str, section: CashFlowSection) -> None:
    click.echo(title)
    _line("Inflows", section.inflow, indent=1)
    _line("Outflows", -section.outflow, indent=1)
    _line(f"Net {title.lower()}", section.net)


@report_group.command("cash-flow")
@period_options
@click.pass_context
def cash_flow(ctx, start_date: str | None, end_date: str | None, period_flags: dict[str, bool]):
    """Cash movements by operating, investing and financing activity."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    report = ReportService(ctx.obj["db"]).cash_flow(start, end)

    click.echo(f"\nCash Flow ({_window_label(start, end)})")
    _rule("=")
    _line("Opening cash", report.opening_cash)
    _rule()
    _section("Operating activities", report.operating)
    _section("Investing activities", report.investing)
    _section("Financing activities", report.financing)
    _rule()
    _line("Net change in cash", report.net_change)
    _rule("=")
    _line("Closing cash", report.closing_cash)


@report_group.command("statement")
@click.argument("account", metavar="ACCOUNT")
@period_options
@click.pass_context
def statement(
    ctx,
    account: str,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
):
    """Statement of account with running balance.

    ACCOUNT can be an account ID, code or name. Group accounts include all
    postings to their sub-accounts.

    Examples:
        ledgerbook report statement asset_bank_main --this-month
        ledgerbook report statement 11000 --start-date 2024-01-01 --end-date 2024-03-31
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )
    try:
        result = ReportService(db).statement(account_id, start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"\nStatement: {result.account.code} {result.account.name} ({_window_label(start, end)})"
    )
    click.echo("-" * 110)
    click.echo(f"{'Date':<12} {'Description':<52} {'Debit':>14} {'Credit':>14} {'Balance':>14}")
    click.echo("-" * 110)
    click.echo(f"{'':<12} {'Opening balance':<52} {'':>14} {'':>14} {result.opening_balance:>14,.2f}")
    for row in result.rows:
        debit = f"{row.debit:,.2f}" if row.debit else ""
        credit = f"{row.credit:,.2f}" if row.credit else ""
        click.echo(
            f"{row.date:%Y-%m-%d}   {row.description[:52]:<52} {debit:>14} {credit:>14} "
            f"{row.balance:>14,.2f}"
        )
    click.echo("-" * 110)
    click.echo(
        f"{'':<12} {'Closing balance':<52} {result.total_debits:>14,.2f} "
        f"{result.total_credits:>14,.2f} {result.closing_balance:>14,.2f}"
    )


@report_group.command("cash")
@click.option("--as-of", help="Balances as of the end of this date")
@click.pass_context
def cash_position(ctx, as_of: str | None):
    """Balance of every cash and bank account."""
    balances = ReportService(ctx.obj["db"]).cash_position(resolve_cli_as_of(ctx, as_of))
    if not balances:
        click.echo("No cash accounts found.")
        return

    click.echo("\nCash position")
    _rule()
    for entry in balances:
        _line(f"{entry.account.code} {entry.account.name}", entry.balance)
    _rule()
    _line("Total", sum((entry.balance for entry in balances), Decimal("0")))


@report_group.command("budget")
@click.option(
    "--limit",
    "limits",
    multiple=True,
    help="Spending limit as ACCOUNT=AMOUNT (repeatable)",
)
@click.option("--month", help="Use the budget stored for this month (YYYY-MM)")
@period_options
@click.pass_context
def budget(
    ctx,
    limits: tuple[str, ...],
    month: str | None,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
):
    """Compare spending against per-account limits.

    Either give limits on the command line for any period, or compare a
    month with the budget stored by ``ledgerbook budget set``.

    Examples:
        ledgerbook report budget --limit exp_groceries=8000 --limit 60000=40000 --this-month
        ledgerbook report budget --month 2024-03
    """
    db = ctx.obj["db"]
    service = ReportService(db)

    if bool(limits) == bool(month):
        click.echo("Error: Give either --limit or --month", err=True)
        ctx.exit(1)

    if month:
        if start_date or end_date or any(period_flags.values()):
            click.echo("Error: --month cannot be combined with a date range", err=True)
            ctx.exit(1)
        try:
            report = service.monthly_budget(month)
        except DomainError as e:
            handle_domain_error(ctx, e)
        start, end = report.start.date(), report.end.date()
    else:
        start, end = resolve_cli_date_range(
            ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
        )
        parsed = resolve_limits_or_exit(ctx, AccountService(db), limits)
        report = service.budget(parsed, start, end)

    click.echo(f"\nBudget ({_window_label(start, end)})")
    click.echo(f"{'Account':<36} {'Limit':>14} {'Spent':>14} {'Remaining':>14} {'Used':>7}")
    click.echo("-" * 89)
    for line in report.lines:
        flag = " OVER" if line.is_over_budget else ""
        click.echo(
            f"{line.account.name[:36]:<36} {line.limit:>14,.2f} {line.spent:>14,.2f} "
            f"{line.remaining:>14,.2f} {line.percent_used:>6.0f}%{flag}"
        )
    click.echo("-" * 89)
    click.echo(
        f"{'TOTAL':<36} {report.total_limit:>14,.2f} {report.total_spent:>14,.2f} "
        f"{report.remaining:>14,.2f}"
    )
    if report.overall_limit is not None:
        flag = " OVER" if report.is_over_overall else ""
        click.echo(
            f"{'ALL EXPENSES':<36} {report.overall_limit:>14,.2f} "
            f"{report.total_expenses:>14,.2f} {report.overall_remaining:>14,.2f}{flag}"
        )


@report_group.command("check")
@click.pass_context
def check(ctx):
    """Look for postings that reference accounts missing from the chart."""
    diagnostics = ReportService(ctx.obj["db"]).diagnostics()
    if not diagnostics.has_orphans:
        click.echo("No orphaned postings.")
        return
    click.echo(f"{diagnostics.orphaned_postings} posting side(s) reference unknown accounts:")
    for account_id in sorted(diagnostics.missing_account_ids):
        click.echo(f"  {account_id}")
    ctx.exit(1)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
