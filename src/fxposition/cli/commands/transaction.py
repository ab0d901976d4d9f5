"""Foreign-currency transaction commands."""

import click

from fxposition.cli.arguments import (
    current_actor,
    format_money,
    resolve_cli_amount,
    resolve_cli_date,
)
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.entities import ApprovalStatus, TransactionType
from fxposition.domain.transaction import TransactionWorkflowService


@click.group()
def transaction_group():
    """Manage purchase and sale transactions."""
    pass


@transaction_group.command("add")
@click.argument("transaction_type", type=click.Choice([t.value for t in TransactionType]))
@click.argument("currency", metavar="CURRENCY")
@click.argument("amount", metavar="AMOUNT")
@click.option("--rate", help="Deal rate")
@click.option("--date", "transaction_date", help="Transaction date (defaults to today)")
@click.option("--reference", help="Reference number")
@click.option("--description", help="Description")
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    currency: str,
    amount: str,
    rate: str | None,
    transaction_date: str | None,
    reference: str | None,
    description: str | None,
) -> None:
    """Record a purchase or sale.

    Examples:
        fxpos txn add purchase USD 200 --rate 56.1
        fxpos --role authorizer txn add sale EUR 50 --date yesterday
    """
    service = TransactionWorkflowService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, transaction_date)
    value = resolve_cli_amount(ctx, amount)
    deal_rate = resolve_cli_amount(ctx, rate, "rate")
    try:
        txn = service.create_transaction(
            on_date,
            currency,
            TransactionType(transaction_type),
            value,
            deal_rate,
            current_actor(ctx),
            reference=reference,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {txn.id} ({txn.status.value})")


@transaction_group.command("list")
@click.option("--date", "transaction_date", help="Transaction date (defaults to today)")
@click.option("--currency", help="Currency code or ID")
@click.option(
    "--status", type=click.Choice([s.value for s in ApprovalStatus]), help="Filter by status"
)
@click.pass_context
def list_transactions(
    ctx, transaction_date: str | None, currency: str | None, status: str | None
) -> None:
    """List transactions of a date."""
    service = TransactionWorkflowService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, transaction_date)
    try:
        txns = service.list_transactions(
            on_date, currency=currency, status=ApprovalStatus(status) if status else None
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not txns:
        click.echo(f"No transactions for {on_date.isoformat()}.")
        return

    codes = {c.id: c.code for c in service.reference.list_currencies(active_only=False)}
    click.echo(f"\nTransactions for {on_date.isoformat()}:")
    click.echo("-" * 80)
    for txn in txns:
        click.echo(
            f"ID: {txn.id:4d} | {txn.transaction_type.value:8s} | "
            f"{codes.get(txn.currency_id, '?')} | {format_money(txn.amount):>16s} | "
            f"{txn.status.value}"
        )


def _transition(ctx, action: str, transaction_id: int) -> None:
    service = TransactionWorkflowService(ctx.obj["db"])
    try:
        txn = getattr(service, action)(transaction_id, current_actor(ctx))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {txn.id} is now {txn.status.value}")


@transaction_group.command("submit")
@click.argument("transaction_id", type=int)
@click.pass_context
def submit_transaction(ctx, transaction_id: int) -> None:
    """Submit a draft transaction for authorization."""
    _transition(ctx, "submit", transaction_id)


@transaction_group.command("authorize")
@click.argument("transaction_id", type=int)
@click.pass_context
def authorize_transaction(ctx, transaction_id: int) -> None:
    """Authorize a submitted transaction and post it to the balances."""
    _transition(ctx, "authorize", transaction_id)


@transaction_group.command("reject")
@click.argument("transaction_id", type=int)
@click.pass_context
def reject_transaction(ctx, transaction_id: int) -> None:
    """Reject a submitted transaction."""
    _transition(ctx, "reject", transaction_id)


@transaction_group.command("cash")
@click.argument("currency", metavar="CURRENCY")
@click.option("--date", "cash_date", help="Date (defaults to today)")
@click.pass_context
def cash_on_hand(ctx, currency: str, cash_date: str | None) -> None:
    """Show how the day's cash on hand is derived."""
    service = TransactionWorkflowService(ctx.obj["db"])
    on_date = resolve_cli_date(ctx, cash_date)
    try:
        cash = service.calculate_cash_on_hand(currency, on_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nCash on hand {cash.currency} {cash.calculation_date.isoformat()}:")
    click.echo("-" * 40)
    click.echo(f"Opening balance: {format_money(cash.opening_balance):>20s}")
    click.echo(f"Purchases:       {format_money(cash.purchases):>20s}")
    click.echo(f"Sales:           {format_money(cash.sales):>20s}")
    click.echo(f"Computed:        {format_money(cash.computed):>20s}")
    click.echo(f"Recorded:        {format_money(cash.recorded):>20s}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="txn")
