"""CLI error handling helpers."""

import click

from spendbook.domain.errors import DomainError, PartialBulkFailure


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, PartialBulkFailure) and error.deleted_ids:
        click.echo(f"Already deleted: {', '.join(error.deleted_ids)}", err=True)
    ctx.exit(1)
