"""Top-up command."""

import click
from farepay.cli.error_handling import handle_domain_error
from farepay.domain.card import CardService
from farepay.domain.errors import DomainError
from farepay.utils.amount_parser import parse_amount


@click.command("topup")
@click.argument("card_id", type=int)
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def topup(ctx, card_id: int, amount: str):
    """Credit a card's balance.

    Records a top_up transaction. Payment collection happens elsewhere.

    Examples:
        farepay topup 3 500
    """
    db = ctx.obj["db"]
    service = CardService(db)

    try:
        topup_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        entry = service.top_up(card_id, topup_amount)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Topped up card {card_id} (transaction {entry.transaction_id})")
    click.echo(f"  Balance: {entry.balance_before:,.2f} -> {entry.balance_after:,.2f}")


def register_commands(cli):
    """Register topup command with main CLI."""
    cli.add_command(topup)
