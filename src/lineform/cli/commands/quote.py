"""Quote command: entry status and totals for a form document."""

import click
from lineform.cli.session_loader import echo_degraded_rates, load_session_or_exit
from lineform.domain.profiles import PROFILES


def _money(value) -> str:
    return f"{value:,.2f}"


@click.command("quote")
@click.argument("file", type=click.Path(), metavar="FILE")
@click.option(
    "--profile",
    type=click.Choice(sorted(PROFILES)),
    help="Engine profile (defaults to the document's profile)",
)
@click.option("--as-of", help="Use the rates in effect on this date (defaults to today)")
@click.pass_context
def quote_form(ctx, file: str, profile: str | None, as_of: str | None):
    """Show the status and total of every entry, group totals and the grand total.

    Totals are shown in the base currency. Nothing is rounded until display.

    Examples:
        lineform quote receive.json
        lineform quote sale.json --profile sale --as-of yesterday
    """
    session = load_session_or_exit(ctx, file, profile, as_of)
    base = session.base_currency

    click.echo(f"Profile: {session.profile.name} (base currency {base})")
    rates = [
        f"1 {code} = {_money(rate)} {base}"
        for code, rate in sorted(session.rate_table.items())
        if code != base
    ]
    if rates:
        click.echo("Rates: " + " | ".join(rates))
    echo_degraded_rates(session)

    for group in session.store.groups:
        click.echo("-" * 72)
        click.echo(
            f"{group.label} ({group.group_id}): {len(group.entries)} "
            f"entr{'y' if len(group.entries) == 1 else 'ies'} | "
            f"Total: {_money(session.group_total(group.group_id))} {base}"
        )
        for entry in group.entries:
            status = session.status(entry.id)
            target = entry.target_id or "-"
            quantity = entry.quantity or "-"
            price = entry.unit_price or "-"
            click.echo(
                f"  {entry.id:10s} | {target:12s} | {status.value:7s} | "
                f"Qty: {quantity:>6s} | Price: {price:>10s} {entry.currency:3s} | "
                f"{_money(session.entry_total(entry.id)):>14s} {base}"
            )

    click.echo("-" * 72)
    click.echo(f"Grand total: {_money(session.grand_total())} {base}")


def register_commands(cli):
    """Register quote command with main CLI."""
    cli.add_command(quote_form)
