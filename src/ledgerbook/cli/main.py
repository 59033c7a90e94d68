"""Main CLI entry point."""

import logging
import os

import click

from ledgerbook.database.factories import DB_PATH_ENV_VAR, create_sqlite_database

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    add,
    asset,
    budget,
    init_chart,
    party,
    receivable,
    report,
    schedule,
    transaction,
)

LOG_LEVEL_ENV_VAR = "LEDGERBOOK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Configure root logging once per process."""
    if verbose:
        level = logging.DEBUG
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerbook - double-entry bookkeeping.

    Keep a hierarchical chart of accounts, record postings between accounts,
    and produce trial balances, income statements, balance sheets, cash flow
    and account statements.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
init_chart.register_commands(cli)
account.register_commands(cli)
party.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
asset.register_commands(cli)
schedule.register_commands(cli)
receivable.register_commands(cli)
budget.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
