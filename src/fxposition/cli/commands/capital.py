"""Paid-up capital commands."""

import click

from fxposition.cli.arguments import (
    current_actor,
    format_money,
    resolve_cli_amount,
    resolve_cli_date,
)
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.capital import CapitalService


@click.group()
def capital_group():
    """Manage paid-up capital."""
    pass


@capital_group.command("set")
@click.argument("amount", metavar="AMOUNT")
@click.option("--effective-date", help="Date the amount takes effect (defaults to today)")
@click.option("--currency", help="Currency code (defaults to FXPOS_CAPITAL_CURRENCY or ETB)")
@click.option("--notes", help="Notes")
@click.pass_context
def set_capital(
    ctx, amount: str, effective_date: str | None, currency: str | None, notes: str | None
) -> None:
    """Record paid-up capital effective from a date.

    Examples:
        fxpos capital set 3500000 --effective-date 2024-07-01
    """
    try:
        service = CapitalService(ctx.obj["db"])
    except ValueError as e:
        handle_domain_error(ctx, e)
    on_date = resolve_cli_date(ctx, effective_date)
    value = resolve_cli_amount(ctx, amount)
    try:
        record = service.upsert_capital(
            value, on_date, current_actor(ctx), currency=currency, notes=notes
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Capital {format_money(record.amount)} {record.currency} "
        f"effective {record.effective_date.isoformat()} (ID: {record.id})"
    )


@capital_group.command("show")
@click.option("--date", "on_date", help="Date (defaults to today)")
@click.pass_context
def show_capital(ctx, on_date: str | None) -> None:
    """Show the capital effective on a date."""
    lookup_date = resolve_cli_date(ctx, on_date)
    try:
        amount = CapitalService(ctx.obj["db"]).capital_for_date(lookup_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Paid-up capital on {lookup_date.isoformat()}: {format_money(amount)}")


@capital_group.command("history")
@click.pass_context
def capital_history(ctx) -> None:
    """List every capital record, newest first."""
    try:
        records = CapitalService(ctx.obj["db"]).get_capital_history()
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not records:
        click.echo("No capital records found.")
        return

    click.echo("\nCapital history:")
    click.echo("-" * 60)
    for r in records:
        status = "active" if r.is_active else "inactive"
        click.echo(
            f"ID: {r.id:3d} | {r.effective_date.isoformat()} | "
            f"{format_money(r.amount):>18s} {r.currency} | {status}"
        )


def register_commands(cli):
    """Register capital commands with main CLI."""
    cli.add_command(capital_group, name="capital")
