"""CLI error handling helpers."""

import json
from typing import Any

import click

from farepay.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_json(body: dict[str, Any]) -> None:
    """Print a response body as JSON. Decimals and datetimes become strings."""
    click.echo(json.dumps(body, indent=2, default=str))
