"""Rate book commands."""

import click
from lineform.cli.error_handling import handle_domain_error
from lineform.domain.rate_book import RateBookService
from lineform.utils.amount_parser import parse_amount
from lineform.utils.date_parser import parse_date


def _service(ctx) -> RateBookService:
    return RateBookService(ctx.obj["db"], base_currency=ctx.obj.get("base_currency") or "TRY")


@click.group()
def rate_group():
    """Manage currency rates."""
    pass


@rate_group.command("set")
@click.argument("currency", metavar="CURRENCY")
@click.argument("multiplier", metavar="MULTIPLIER")
@click.option(
    "--date",
    "effective",
    help="Date the rate takes effect (YYYY-MM-DD or relative like 'today'); defaults to today",
)
@click.pass_context
def set_rate(ctx, currency: str, multiplier: str, effective: str | None):
    """Store the rate of CURRENCY in base currency units.

    Examples:
        lineform rate set USD 32.45
        lineform rate set EUR 35.10 --date 2024-01-15
    """
    service = _service(ctx)

    try:
        value = parse_amount(multiplier)
        effective_date = parse_date(effective) if effective else None
        rate_id = service.set_rate(currency, value, effective_date)
    except ValueError as e:
        handle_domain_error(ctx, e)

    stored = service.get_rate(rate_id)
    click.echo(
        f"Stored rate {rate_id}: 1 {stored.currency} = {stored.multiplier} {service.base_currency} "
        f"(effective {stored.effective_date})"
    )


@rate_group.command("list")
@click.option("--currency", help="Only show rates for this currency")
@click.pass_context
def list_rates(ctx, currency: str | None):
    """List stored rates, newest first per currency."""
    service = _service(ctx)

    rates = service.list_rates(currency)
    if not rates:
        click.echo("No rates found.")
        return

    click.echo("\nRates:")
    click.echo("-" * 60)
    for r in rates:
        click.echo(
            f"ID: {r.id:3d} | {r.currency:5s} | {r.multiplier:>14} {service.base_currency} | "
            f"Effective: {r.effective_date}"
        )


@rate_group.command("delete")
@click.argument("rate_id", type=int, metavar="RATE_ID")
@click.pass_context
def delete_rate(ctx, rate_id: int):
    """Delete a stored rate."""
    service = _service(ctx)

    try:
        service.delete_rate(rate_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted rate {rate_id}")


def register_commands(cli):
    """Register rate commands with main CLI."""
    cli.add_command(rate_group, name="rate")
