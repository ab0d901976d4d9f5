"""CLI error handling helpers."""

import click
import structlog

from fxposition.domain.errors import DependencyMissingError, DomainError, StateConflictError

logger = structlog.get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with failure.

    Configuration faults get a hint to seed the catalog; conflicts from a
    concurrent writer are reported as retryable.
    """
    logger.debug("command_failed", command=ctx.command_path, error=type(error).__name__)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, DependencyMissingError):
        click.echo("Hint: run 'fxpos item init' to create the default balance items", err=True)
    elif isinstance(error, StateConflictError) and "retry" in str(error):
        click.echo("The command can be run again once the other writer finishes.", err=True)
    ctx.exit(1)
