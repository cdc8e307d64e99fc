"""Rendering of domain and parse errors for lineform commands."""

import logging

import click

from lineform.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` on stderr and end the command with exit code 1.

    The error class is logged at debug level, so ``--verbose`` tells a missing
    rate apart from a malformed form document.
    """
    logger.debug("%s ended command %s", type(error).__name__, ctx.command_path)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
