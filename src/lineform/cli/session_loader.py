"""CLI helpers for opening a form session from a document."""

from __future__ import annotations

import asyncio

import click
from lineform.cli.error_handling import handle_domain_error
from lineform.domain.form_document import open_session, read_form_document
from lineform.domain.rate_book import RateBookService, RateBookSource
from lineform.domain.session import FormSession
from lineform.utils.date_parser import parse_date


def load_session_or_exit(
    ctx: click.Context, file: str, profile: str | None, as_of: str | None
) -> FormSession:
    """Open a session for a form document with rates resolved, or exit with a CLI error.

    Rates come from the rate book, using the rates in effect on ``as_of``
    (today when omitted).
    """
    try:
        document = read_form_document(file)
        as_of_date = parse_date(as_of) if as_of else None
        base_currency = ctx.obj.get("base_currency") or document.base_currency or "TRY"
        service = RateBookService(ctx.obj["db"], base_currency=base_currency)
        session = open_session(
            document,
            RateBookSource(service, as_of_date),
            profile_name=profile,
            base_currency=base_currency,
        )
    except ValueError as exc:
        handle_domain_error(ctx, exc)

    asyncio.run(session.sync_rates())
    return session


def echo_degraded_rates(session: FormSession) -> None:
    """Warn about currencies whose rate fell back to 1."""
    for code in sorted(session.degraded_currencies):
        click.echo(
            f"Warning: no rate available for {code}; using 1 {code} = 1 {session.base_currency}",
            err=True,
        )
