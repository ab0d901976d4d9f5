"""Reporting commands."""

import click

from fxposition.cli.arguments import format_money, format_percent, resolve_cli_date
from fxposition.cli.error_handling import handle_domain_error
from fxposition.domain.correspondent import DEFAULT_CASH_COVER_TOP, CorrespondentLimitMonitor
from fxposition.domain.position import PositionCalculator


@click.group()
def report_group():
    """Position and correspondent reports."""
    pass


@report_group.command("totals")
@click.option("--date", "report_date", help="Report date (defaults to today)")
@click.pass_context
def totals_report(ctx, report_date: str | None) -> None:
    """Authorized balances per currency summed by category."""
    on_date = resolve_cli_date(ctx, report_date)
    try:
        totals = PositionCalculator(ctx.obj["db"]).get_totals(on_date)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not totals:
        click.echo("No active currencies.")
        return

    click.echo(f"\nTotals for {on_date.isoformat()}:")
    click.echo("-" * 80)
    for t in totals:
        click.echo(
            f"{t.currency} | asset {format_money(t.asset)} | liability {format_money(t.liability)} | "
            f"memo asset {format_money(t.memo_asset)} | memo liability {format_money(t.memo_liability)} | "
            f"total liability {format_money(t.total_liability)} | cash {format_money(t.cash_on_hand)}"
        )


@report_group.command("position")
@click.option("--date", "report_date", help="Report date (defaults to today)")
@click.pass_context
def position_report(ctx, report_date: str | None) -> None:
    """Net open position per currency and overall."""
    on_date = resolve_cli_date(ctx, report_date)
    try:
        report = PositionCalculator(ctx.obj["db"]).get_position(on_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nOpen position for {on_date.isoformat()}:")
    click.echo("-" * 80)
    if not report.currencies:
        click.echo("No currency has a mid rate for this date.")
    for p in report.currencies:
        click.echo(
            f"{p.currency} | position {format_money(p.position)} | mid {p.mid_rate} | "
            f"local {format_money(p.position_local)} | {format_percent(p.percentage)} | {p.type}"
        )

    overall = report.overall
    click.echo("-" * 80)
    click.echo(f"Total long:            {format_money(overall.total_long)}")
    click.echo(f"Total short:           {format_money(overall.total_short)}")
    click.echo(f"Overall open position: {format_money(overall.overall_open_position)}")
    click.echo(f"Overall percentage:    {format_percent(overall.overall_percentage)}")
    click.echo(f"Paid-up capital:       {format_money(overall.paid_up_capital)}")


@report_group.command("limits")
@click.option("--date", "report_date", help="Report date (defaults to today)")
@click.pass_context
def limits_report(ctx, report_date: str | None) -> None:
    """Correspondent bank shares of each currency total."""
    on_date = resolve_cli_date(ctx, report_date)
    report = CorrespondentLimitMonitor(ctx.obj["db"]).generate_limits_report(on_date)
    if not report.currencies:
        click.echo("No correspondent banks.")
        return

    for code, currency_limits in report.currencies.items():
        click.echo(f"\n{code} (total {format_money(currency_limits.total_balance)}):")
        click.echo("-" * 80)
        for line in currency_limits.banks:
            click.echo(
                f"{line.bank_name:25s} | {format_money(line.balance):>18s} | "
                f"{format_percent(line.percentage):>8s} | max {format_percent(line.max_limit)} | "
                f"min {format_percent(line.min_limit)} | {line.status}"
            )

    if report.breaches:
        click.echo(f"\n{len(report.breaches)} limit breach(es).")


@report_group.command("cash-cover")
@click.option("--date", "report_date", help="Report date (defaults to today)")
@click.option("--top", type=int, default=DEFAULT_CASH_COVER_TOP, show_default=True)
@click.pass_context
def cash_cover_report(ctx, report_date: str | None, top: int) -> None:
    """Banks holding the largest balances per currency."""
    on_date = resolve_cli_date(ctx, report_date)
    report = CorrespondentLimitMonitor(ctx.obj["db"]).generate_cash_cover_report(on_date, top=top)
    if not report.cash_cover:
        click.echo("No correspondent banks.")
        return

    for code, lines in report.cash_cover.items():
        click.echo(f"\n{code}:")
        click.echo("-" * 60)
        if not lines:
            click.echo("No bank holds a positive balance.")
        for rank, line in enumerate(lines, start=1):
            click.echo(f"{rank}. {line.bank_name:25s} | {format_money(line.balance):>18s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
