"""Main CLI entry point."""

import click

from spendbook.config import Settings
from spendbook.database.factories import create_record_store
from spendbook.logging_setup import configure_logging

# Import and register all commands at module level
from spendbook.cli.commands import (
    account,
    cashback,
    category,
    people,
    shop,
    transaction,
)


@click.group()
@click.option(
    "--database-url",
    help="SQLAlchemy database URL (overrides SPENDBOOK_DATABASE_URL). Demo data is used when unset.",
    envvar="SPENDBOOK_DATABASE_URL",
)
@click.option(
    "--log-level",
    help="Logging level (overrides SPENDBOOK_LOG_LEVEL)",
    envvar="SPENDBOOK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, database_url: str | None, log_level: str | None):
    """Spendbook - personal finance tracking.

    Record expenses, income, transfers and debts across accounts, with
    cashback normalization and per-person summaries.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.obj["settings"] = settings

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_record_store(database_url or settings.database_url)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
account.register_commands(cli)
cashback.register_commands(cli)
category.register_commands(cli)
people.register_commands(cli)
shop.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
