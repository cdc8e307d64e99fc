"""Main CLI entry point."""

import logging

import click
from lineform.database.factories import create_sqlite_database

# Import and register all commands at module level
from lineform.cli.commands import rate, quote, propagate, submit


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to rate book file (overrides LINEFORM_DB_PATH environment variable)",
    envvar="LINEFORM_DB_PATH",
)
@click.option(
    "--base-currency",
    help="Currency all totals are reported in (default: the document's, then TRY)",
    envvar="LINEFORM_BASE_CURRENCY",
)
@click.option("--verbose", "-v", is_flag=True, help="Log rate lookups and submissions")
@click.pass_context
def cli(ctx, db_path: str | None, base_currency: str | None, verbose: bool):
    """Lineform - line-item entry and pricing engine.

    Quote, propagate and validate stock entry and sale line forms, with
    multi-currency totals converted through a local rate book.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["base_currency"] = base_currency.strip().upper() if base_currency else None

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
rate.register_commands(cli)
quote.register_commands(cli)
propagate.register_commands(cli)
submit.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
