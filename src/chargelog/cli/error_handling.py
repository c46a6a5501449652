"""CLI error handling helpers."""

import click

from chargelog.domain.errors import DomainError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Storage failures have already been rolled back by the store, so the user
    is told that nothing changed.
    """
    if isinstance(error, StorageError):
        click.echo(f"Error: {error}. No changes were saved.", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
