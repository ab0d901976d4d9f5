"""Currency management commands."""

import click

from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.reference import ReferenceDataService


@click.group()
def currency_group():
    """Manage currencies."""
    pass


@currency_group.command("add")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.pass_context
def add_currency(ctx, code: str, name: str) -> None:
    """Add a currency.

    Examples:
        fxpos currency add USD "US Dollar"
    """
    service = ReferenceDataService(ctx.obj["db"])
    try:
        created = service.create_currency(code=code, name=name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created currency {created.code} (ID: {created.id})")


@currency_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive currencies")
@click.pass_context
def list_currencies(ctx, show_all: bool) -> None:
    """List currencies."""
    service = ReferenceDataService(ctx.obj["db"])
    currencies = service.list_currencies(active_only=not show_all)
    if not currencies:
        click.echo("No currencies found.")
        return

    click.echo("\nCurrencies:")
    click.echo("-" * 60)
    for cur in currencies:
        status = "" if cur.is_active else " (inactive)"
        click.echo(f"ID: {cur.id:3d} | {cur.code} | {cur.name}{status}")


def register_commands(cli):
    """Register currency commands with main CLI."""
    cli.add_command(currency_group, name="currency")
