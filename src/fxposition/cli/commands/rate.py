"""Exchange rate commands."""

import click

from fxposition.cli.arguments import resolve_cli_amount, resolve_cli_date
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.reference import ReferenceDataService


@click.group()
def rate_group():
    """Manage exchange rates."""
    pass


@rate_group.command("set")
@click.argument("currency", metavar="CURRENCY")
@click.argument("buying", metavar="BUYING")
@click.argument("selling", metavar="SELLING")
@click.option("--mid", help="Mid rate (defaults to the midpoint of buying and selling)")
@click.option("--date", "rate_date", help="Rate date (YYYY-MM-DD, 'today', 'yesterday')")
@click.pass_context
def set_rate(
    ctx, currency: str, buying: str, selling: str, mid: str | None, rate_date: str | None
) -> None:
    """Record the exchange rate of a currency for a date.

    Examples:
        fxpos rate set USD 55.50 56.60
        fxpos rate set EUR 60 61 --mid 60.4 --date 2024-03-01
    """
    service = ReferenceDataService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, rate_date)
    buying_rate = resolve_cli_amount(ctx, buying, "buying rate")
    selling_rate = resolve_cli_amount(ctx, selling, "selling rate")
    mid_rate = resolve_cli_amount(ctx, mid, "mid rate")
    try:
        rate = service.set_exchange_rate(currency, on_date, buying_rate, selling_rate, mid_rate)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Rate for {currency.upper()} on {on_date.isoformat()}: "
        f"buying {rate.buying_rate}, selling {rate.selling_rate}, mid {rate.mid_rate}"
    )


@rate_group.command("list")
@click.option("--date", "rate_date", help="Rate date (defaults to today)")
@click.pass_context
def list_rates(ctx, rate_date: str | None) -> None:
    """List exchange rates of a date."""
    service = ReferenceDataService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, rate_date)
    rates = service.list_exchange_rates(on_date)
    if not rates:
        click.echo(f"No exchange rates for {on_date.isoformat()}.")
        return

    codes = {c.id: c.code for c in service.list_currencies(active_only=False)}
    click.echo(f"\nExchange rates for {on_date.isoformat()}:")
    click.echo("-" * 60)
    for r in rates:
        click.echo(
            f"{codes.get(r.currency_id, r.currency_id)} | buying {r.buying_rate} | "
            f"selling {r.selling_rate} | mid {r.mid_rate}"
        )


def register_commands(cli):
    """Register exchange rate commands with main CLI."""
    cli.add_command(rate_group, name="rate")
