"""Balance item catalog commands."""

import click

from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.entities import BalanceType, ItemCategory
from fxposition.domain.reference import ReferenceDataService


@click.group()
def item_group():
    """Manage the balance item catalog."""
    pass


@item_group.command("init")
@click.pass_context
def init_items(ctx) -> None:
    """Seed the default balance item catalog.

    Items that already exist are left alone, so this can be run again
    safely.
    """
    service = ReferenceDataService(ctx.obj["db"])
    created = service.init_default_items()
    if created == 0:
        click.echo("Balance item catalog already initialized.")
    else:
        click.echo(f"Created {created} balance item{'s' if created != 1 else ''}.")


@item_group.command("add")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--category",
    type=click.Choice([c.value for c in ItemCategory]),
    required=True,
    help="Item category",
)
@click.option(
    "--balance-type",
    type=click.Choice([t.value for t in BalanceType]),
    help="Defaults to off_balance_sheet for memo categories",
)
@click.option("--order", "display_order", type=int, default=0, help="Display order")
@click.pass_context
def add_item(
    ctx, code: str, name: str, category: str, balance_type: str | None, display_order: int
) -> None:
    """Add a balance item.

    Examples:
        fxpos item add NOSTRO_USD "Nostro USD" --category asset
    """
    service = ReferenceDataService(ctx.obj["db"])
    try:
        created = service.create_balance_item(
            code=code.upper(),
            name=name,
            category=ItemCategory(category),
            balance_type=BalanceType(balance_type) if balance_type else None,
            display_order=display_order,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created balance item {created.code} (ID: {created.id})")


@item_group.command("list")
@click.pass_context
def list_items(ctx) -> None:
    """List balance items grouped by category."""
    service = ReferenceDataService(ctx.obj["db"])
    items = service.list_balance_items()
    if not items:
        click.echo("No balance items found. Run 'fxpos item init' to seed the catalog.")
        return

    for category in ItemCategory:
        members = [i for i in items if i.category == category]
        if not members:
            continue
        click.echo(f"\n{category.value}:")
        click.echo("-" * 60)
        for i in members:
            click.echo(f"ID: {i.id:3d} | {i.code:20s} | {i.name}")


def register_commands(cli):
    """Register balance item commands with main CLI."""
    cli.add_command(item_group, name="item")
