"""Initialize the default chart of accounts."""

import click

from ledgerbook.domain.account import AccountService


@click.command("init-chart")
@click.pass_context
def init_chart(ctx):
    """Create the default chart of accounts.

    Accounts that already exist are left untouched, so running this again
    only fills in what is missing.
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    created = service.seed_default_chart()
    if created == 0:
        click.echo("Default chart already present; nothing to do.")
        return
    click.echo(f"Created {created} account{'s' if created != 1 else ''}.")


def register_commands(cli):
    """Register init-chart command with main CLI."""
    cli.add_command(init_chart)
