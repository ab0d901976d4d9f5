"""Main CLI entry point."""

import click

from fxposition.config import get_log_level
from fxposition.database.factories import create_sqlite_database
from fxposition.domain.entities import Actor, Role
from fxposition.utils.logging_config import configure_logging

# Import and register all commands at module level
from fxposition.cli.commands import (
    balance,
    capital,
    correspondent,
    currency,
    item,
    rate,
    report,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FXPOS_DB_PATH environment variable)",
    envvar="FXPOS_DB_PATH",
)
@click.option(
    "--user-id",
    type=int,
    default=1,
    show_default=True,
    envvar="FXPOS_USER_ID",
    help="ID of the acting user, recorded in audit fields",
)
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.MAKER.value,
    show_default=True,
    envvar="FXPOS_ROLE",
    help="Role of the acting user",
)
@click.option(
    "--log-level",
    envvar="FXPOS_LOG_LEVEL",
    help="Log level written to stderr (default WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: int, role: str, log_level: str | None):
    """fxposition - Foreign-currency position back office.

    Record dated balances and purchase/sale transactions under maker-checker
    control, compute the net open position against paid-up capital, and
    monitor correspondent bank balances against their limits.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level or get_log_level())

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["actor"] = Actor(id=user_id, role=Role(role))


# Register all commands
currency.register_commands(cli)
item.register_commands(cli)
rate.register_commands(cli)
balance.register_commands(cli)
transaction.register_commands(cli)
capital.register_commands(cli)
report.register_commands(cli)
correspondent.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
