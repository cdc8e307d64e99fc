"""Submit command: validate a form document and emit submission records."""

import json

import click
from lineform.cli.session_loader import echo_degraded_rates, load_session_or_exit
from lineform.domain.profiles import PROFILES


@click.command("submit")
@click.argument("file", type=click.Path(), metavar="FILE")
@click.option(
    "--profile",
    type=click.Choice(sorted(PROFILES)),
    help="Engine profile (defaults to the document's profile)",
)
@click.option("--as-of", help="Use the rates in effect on this date (defaults to today)")
@click.option("--output", "-o", type=click.Path(), help="Write the records to this JSON file")
@click.pass_context
def submit_form(ctx, file: str, profile: str | None, as_of: str | None, output: str | None):
    """Validate every entry and print the records of the filled ones as JSON.

    Untouched entries are skipped. If any entry is partly filled, nothing is
    emitted: the errors are listed per entry and the command exits with 1.

    Examples:
        lineform submit receive.json
        lineform submit sale.json --profile sale -o payload.json
    """
    session = load_session_or_exit(ctx, file, profile, as_of)
    echo_degraded_rates(session)

    result = session.submit()
    if not result.ok:
        click.echo("Error: Submission blocked by invalid entries:", err=True)
        for group in session.store.groups:
            for entry in group.entries:
                messages = session.store.errors_for(entry.id)
                if not messages:
                    continue
                click.echo(f"  {group.label} / {entry.id}:", err=True)
                for message in messages:
                    click.echo(f"    - {message}", err=True)
        ctx.exit(1)

    records = [record.to_dict() for record in result.payloads]
    text = json.dumps(records, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        click.echo(f"Wrote {len(records)} record{'s' if len(records) != 1 else ''} to {output}")
    else:
        click.echo(text)


def register_commands(cli):
    """Register submit command with main CLI."""
    cli.add_command(submit_form)
