"""CLI helpers for parsing dates and amounts."""

from datetime import date
from decimal import Decimal

import click

from fxposition.domain.entities import Actor
from fxposition.utils.amount_parser import parse_amount
from fxposition.utils.date_parser import parse_date


def resolve_cli_date(ctx: click.Context, value: str | None) -> date:
    """Parse a --date style option; missing means today."""
    if value is None:
        return date.today()
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def resolve_cli_amount(ctx: click.Context, value: str | None, label: str = "amount") -> Decimal | None:
    """Parse an amount argument; None passes through."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} format: {e}", err=True)
        ctx.exit(1)


def current_actor(ctx: click.Context) -> Actor:
    return ctx.obj["actor"]


def format_money(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def format_percent(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value:.2f}%"
