"""Correspondent bank commands."""

import click

from fxposition.cli.arguments import (
    current_actor,
    format_money,
    format_percent,
    resolve_cli_amount,
    resolve_cli_date,
)
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.alerts import AlertService
from fxposition.domain.correspondent import CorrespondentLimitMonitor
from fxposition.domain.reference import ReferenceDataService


@click.group()
def correspondent_group():
    """Manage correspondent banks, balances and alerts."""
    pass


@correspondent_group.command("add-bank")
@click.argument("name", metavar="NAME")
@click.argument("currency", metavar="CURRENCY")
@click.option("--max-limit", help="Maximum share of the currency total, in percent")
@click.option("--min-limit", help="Minimum share of the currency total, in percent")
@click.option("--account-number", help="Account number")
@click.option("--swift", "swift_code", help="SWIFT code")
@click.pass_context
def add_bank(
    ctx,
    name: str,
    currency: str,
    max_limit: str | None,
    min_limit: str | None,
    account_number: str | None,
    swift_code: str | None,
) -> None:
    """Register a correspondent bank.

    Examples:
        fxpos correspondent add-bank "Citi NY" USD --max-limit 25
    """
    service = ReferenceDataService(ctx.obj["db"])
    max_value = resolve_cli_amount(ctx, max_limit, "max limit")
    min_value = resolve_cli_amount(ctx, min_limit, "min limit")
    try:
        bank = service.create_bank(
            name,
            currency,
            max_limit=max_value,
            min_limit=min_value,
            account_number=account_number,
            swift_code=swift_code,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created correspondent bank '{bank.name}' (ID: {bank.id})")


@correspondent_group.command("banks")
@click.option("--currency", help="Currency code or ID")
@click.pass_context
def list_banks(ctx, currency: str | None) -> None:
    """List active correspondent banks."""
    service = ReferenceDataService(ctx.obj["db"])
    try:
        banks = service.list_banks(currency)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not banks:
        click.echo("No correspondent banks found.")
        return

    codes = {c.id: c.code for c in service.list_currencies(active_only=False)}
    click.echo("\nCorrespondent banks:")
    click.echo("-" * 80)
    for b in banks:
        click.echo(
            f"ID: {b.id:3d} | {b.name:25s} | {codes.get(b.currency_id, '?')} | "
            f"max {format_percent(b.max_limit)} | min {format_percent(b.min_limit)}"
        )


@correspondent_group.command("set-limits")
@click.argument("bank_id", type=int)
@click.option("--max-limit", help="Maximum share in percent (omit to clear)")
@click.option("--min-limit", help="Minimum share in percent (omit to clear)")
@click.pass_context
def set_limits(ctx, bank_id: int, max_limit: str | None, min_limit: str | None) -> None:
    """Replace the limits of a bank."""
    service = ReferenceDataService(ctx.obj["db"])
    max_value = resolve_cli_amount(ctx, max_limit, "max limit")
    min_value = resolve_cli_amount(ctx, min_limit, "min limit")
    try:
        bank = service.update_bank_limits(bank_id, max_value, min_value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Limits of '{bank.name}': max {format_percent(bank.max_limit)}, "
        f"min {format_percent(bank.min_limit)}"
    )


@correspondent_group.command("set-active")
@click.argument("bank_id", type=int)
@click.option("--active/--inactive", default=True, help="New status of the bank")
@click.pass_context
def set_active(ctx, bank_id: int, active: bool) -> None:
    """Activate or deactivate a bank.

    Examples:
        fxpos correspondent set-active 3 --inactive
    """
    service = ReferenceDataService(ctx.obj["db"])
    try:
        bank = service.set_bank_active(bank_id, active)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Bank '{bank.name}' is now {'active' if bank.is_active else 'inactive'}")


@correspondent_group.command("balance")
@click.argument("bank_id", type=int)
@click.argument("amount", metavar="AMOUNT")
@click.option("--date", "balance_date", help="Balance date (defaults to today)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_balance(
    ctx, bank_id: int, amount: str, balance_date: str | None, notes: str | None
) -> None:
    """Record a bank's balance for a date and check its limits."""
    monitor = CorrespondentLimitMonitor(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, balance_date)
    value = resolve_cli_amount(ctx, amount)
    try:
        balance = monitor.add_balance(bank_id, on_date, value, current_actor(ctx), notes=notes)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Recorded balance {format_money(balance.balance_amount)} for bank {bank_id} "
        f"on {on_date.isoformat()}"
    )
    for alert in AlertService(ctx.obj["db"]).get_active_alerts(on_date):
        if alert.bank_id == bank_id:
            click.echo(
                f"Alert {alert.id}: {alert.alert_type.value} "
                f"({format_percent(alert.current_percentage)} vs {format_percent(alert.limit_percentage)})"
            )


@correspondent_group.command("history")
@click.argument("bank_id", type=int)
@click.pass_context
def balance_history(ctx, bank_id: int) -> None:
    """List a bank's recorded balances, newest first."""
    monitor = CorrespondentLimitMonitor(ctx.obj["db"])
    try:
        balances = monitor.get_bank_balances(bank_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not balances:
        click.echo("No balances recorded.")
        return
    for b in balances:
        click.echo(f"{b.balance_date.isoformat()} | {format_money(b.balance_amount):>18s}")


@correspondent_group.command("alerts")
@click.option("--date", "alert_date", help="Only alerts of this date")
@click.pass_context
def list_alerts(ctx, alert_date: str | None) -> None:
    """List unresolved limit alerts."""
    on_date = resolve_cli_date(ctx, alert_date) if alert_date else None
    alerts = AlertService(ctx.obj["db"]).get_active_alerts(on_date)
    if not alerts:
        click.echo("No active alerts.")
        return

    click.echo("\nActive alerts:")
    click.echo("-" * 80)
    for a in alerts:
        click.echo(
            f"ID: {a.id:3d} | bank {a.bank_id} | {a.alert_date.isoformat()} | "
            f"{a.alert_type.value} | {format_percent(a.current_percentage)} vs "
            f"{format_percent(a.limit_percentage)} | variation {format_percent(a.variation)}"
        )


@correspondent_group.command("resolve")
@click.argument("alert_id", type=int)
@click.pass_context
def resolve_alert(ctx, alert_id: int) -> None:
    """Mark an alert resolved."""
    try:
        alert = AlertService(ctx.obj["db"]).resolve_alert(alert_id, current_actor(ctx))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Resolved alert {alert.id}")


def register_commands(cli):
    """Register correspondent commands with main CLI."""
    cli.add_command(correspondent_group, name="correspondent")
