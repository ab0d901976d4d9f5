"""Balance entry commands."""

import click

from fxposition.cli.arguments import (
    current_actor,
    format_money,
    resolve_cli_amount,
    resolve_cli_date,
)
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.balance import BalanceLedgerService
from fxposition.domain.entities import ApprovalStatus, BalanceEntry


def _describe(entry: BalanceEntry) -> str:
    return (
        f"ID: {entry.id:4d} | {entry.balance_date.isoformat()} | "
        f"{format_money(entry.amount):>18s} | {entry.status.value}"
    )


@click.group()
def balance_group():
    """Manage dated balance entries."""
    pass


@balance_group.command("add")
@click.argument("currency", metavar="CURRENCY")
@click.argument("item", metavar="ITEM")
@click.argument("amount", metavar="AMOUNT")
@click.option("--date", "balance_date", help="Balance date (defaults to today)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_balance(
    ctx, currency: str, item: str, amount: str, balance_date: str | None, notes: str | None
) -> None:
    """Add a balance entry.

    CURRENCY is a currency code or ID, ITEM a balance item code or ID.
    Makers create drafts; authorizers create authorized entries.

    Examples:
        fxpos balance add USD DIASPORA_AC 125000
        fxpos --role authorizer balance add USD ODBP "1,500.00" --date yesterday
    """
    service = BalanceLedgerService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, balance_date)
    value = resolve_cli_amount(ctx, amount)
    try:
        entry = service.create_entry(on_date, currency, item, value, current_actor(ctx), notes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created balance entry {entry.id} ({entry.status.value})")


@balance_group.command("list")
@click.option("--date", "balance_date", help="Balance date (defaults to today)")
@click.option("--currency", help="Currency code or ID")
@click.option(
    "--status", type=click.Choice([s.value for s in ApprovalStatus]), help="Filter by status"
)
@click.pass_context
def list_balances(ctx, balance_date: str | None, currency: str | None, status: str | None) -> None:
    """List balance entries of a date."""
    service = BalanceLedgerService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, balance_date)
    try:
        entries = service.list_entries(
            on_date, currency=currency, status=ApprovalStatus(status) if status else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not entries:
        click.echo(f"No balance entries for {on_date.isoformat()}.")
        return

    currencies = {c.id: c.code for c in service.reference.list_currencies(active_only=False)}
    items = {i.id: i.code for i in service.reference.list_balance_items(active_only=False)}
    click.echo(f"\nBalance entries for {on_date.isoformat()}:")
    click.echo("-" * 80)
    for entry in entries:
        click.echo(
            f"{_describe(entry)} | {currencies.get(entry.currency_id, '?')} | "
            f"{items.get(entry.item_id, '?')}"
        )


def _transition(ctx, action: str, entry_id: int) -> None:
    service = BalanceLedgerService(ctx.obj["db"])
    try:
        entry = getattr(service, action)(entry_id, current_actor(ctx))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Balance entry {entry.id} is now {entry.status.value}")


@balance_group.command("submit")
@click.argument("entry_id", type=int)
@click.pass_context
def submit_balance(ctx, entry_id: int) -> None:
    """Submit a draft entry for authorization."""
    _transition(ctx, "submit", entry_id)


@balance_group.command("authorize")
@click.argument("entry_id", type=int)
@click.pass_context
def authorize_balance(ctx, entry_id: int) -> None:
    """Authorize a submitted entry (authorizer or admin)."""
    _transition(ctx, "authorize", entry_id)


@balance_group.command("reject")
@click.argument("entry_id", type=int)
@click.pass_context
def reject_balance(ctx, entry_id: int) -> None:
    """Reject a submitted entry (authorizer or admin)."""
    _transition(ctx, "reject", entry_id)


@balance_group.command("update")
@click.argument("entry_id", type=int)
@click.argument("amount", metavar="AMOUNT")
@click.option("--notes", help="Notes")
@click.pass_context
def update_balance(ctx, entry_id: int, amount: str, notes: str | None) -> None:
    """Change the amount of an entry.

    Authorized entries can only be changed by an admin.
    """
    service = BalanceLedgerService(ctx.obj["db"])
    value = resolve_cli_amount(ctx, amount)
    try:
        entry = service.update(entry_id, value, current_actor(ctx), notes=notes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated balance entry {entry.id} ({entry.status.value})")


@balance_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_balance(ctx, entry_id: int, yes: bool) -> None:
    """Delete an entry. Authorized entries can only be deleted by an admin."""
    service = BalanceLedgerService(ctx.obj["db"])
    if not yes and not click.confirm(f"Are you sure you want to delete balance entry {entry_id}?"):
        click.echo("Deletion cancelled.")
        return
    try:
        service.delete(entry_id, current_actor(ctx))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted balance entry {entry_id}")


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
