"""Propagate command: copy shared fields between entries of a form document."""

import click
from lineform.cli.error_handling import handle_domain_error
from lineform.domain.form_document import (
    open_session,
    read_form_document,
    session_to_document,
    write_form_document,
)
from lineform.domain.profiles import PROFILES


async def _no_rates(currency: str):
    raise LookupError("rates are not needed for propagation")


@click.command("propagate")
@click.argument("file", type=click.Path(), metavar="FILE")
@click.option("--group", "group_id", help="Copy the group's first entry to its other entries")
@click.option(
    "--all", "all_groups", is_flag=True,
    help="Copy the first group's first entry to every entry of every group",
)
@click.option(
    "--profile",
    type=click.Choice(sorted(PROFILES)),
    help="Engine profile (defaults to the document's profile)",
)
@click.option("--output", "-o", type=click.Path(), help="Write to this file instead of FILE")
@click.pass_context
def propagate_form(
    ctx, file: str, group_id: str | None, all_groups: bool, profile: str | None, output: str | None
):
    """Copy pricing, currency, tax, discount, reason and note from a source entry.

    Quantity and target are never copied. In the stock-adjust profile only
    reason and note are copied.

    Examples:
        lineform propagate receive.json --group v1
        lineform propagate receive.json --all -o receive-filled.json
    """
    if bool(group_id) == all_groups:
        click.echo("Error: Specify exactly one of --group or --all.", err=True)
        ctx.exit(1)

    try:
        document = read_form_document(file)
        session = open_session(
            document, _no_rates, profile_name=profile, base_currency=ctx.obj.get("base_currency")
        )
        if all_groups:
            count = session.apply_to_all_groups()
        else:
            count = session.apply_to_siblings(group_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    target_path = output or file
    write_form_document(session_to_document(session), target_path)
    click.echo(f"Updated {count} entr{'y' if count == 1 else 'ies'} in {target_path}")


def register_commands(cli):
    """Register propagate command with main CLI."""
    cli.add_command(propagate_form)
