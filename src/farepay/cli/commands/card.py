"""Card management commands."""

import click
from farepay.cli.error_handling import handle_domain_error
from farepay.domain.card import CardService
from farepay.domain.entities import CardStatus
from farepay.domain.errors import DomainError
from farepay.domain.resolver import CardResolver
from farepay.domain.transaction import TransactionService
from farepay.utils.amount_parser import parse_amount

CARD_STATUSES = [status.value for status in CardStatus]


@click.group()
def card_group():
    """Manage NFC cards."""
    pass


@card_group.command("register")
@click.argument("uid", metavar="CARD_UID")
@click.option("--balance", default="0", help="Opening balance (default 0)")
@click.option("--customer", type=int, help="Owning customer ID")
@click.pass_context
def register_card(ctx, uid: str, balance: str, customer: int | None):
    """Register a new card.

    The UID is stored exactly as given. A card whose UID differs only in
    case or separators from an existing card is refused.

    Examples:
        farepay card register 250E8B1B08
        farepay card register "25:0E:8B:1B:08" --balance 500
    """
    db = ctx.obj["db"]
    service = CardService(db)

    try:
        initial_balance = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        card_id = service.register_card(uid, initial_balance=initial_balance, customer_id=customer)
    except DomainError as e:
        handle_domain_error(ctx, e)

    card = service.get_card(card_id)
    click.echo(f"Registered card '{card.uid}' (ID: {card_id})")
    click.echo(f"  Balance: {card.balance:,.2f}")


@card_group.command("list")
@click.option("--status", type=click.Choice(CARD_STATUSES), help="Only cards with this status")
@click.pass_context
def list_cards(ctx, status: str | None):
    """List cards."""
    db = ctx.obj["db"]
    service = CardService(db)

    cards = service.list_cards(status=CardStatus(status) if status else None)
    if not cards:
        click.echo("No cards found.")
        return

    click.echo("\nCards:")
    click.echo("-" * 70)
    for card in cards:
        click.echo(
            f"ID: {card.id:4d} | {card.uid:24s} | {card.status.value:8s} | "
            f"Balance: {card.balance:,.2f}"
        )


@card_group.command("show")
@click.argument("card_id", type=int)
@click.option("--limit", default=10, show_default=True, help="Recent transactions to show")
@click.pass_context
def show_card(ctx, card_id: int, limit: int):
    """Show a card and its recent transactions."""
    db = ctx.obj["db"]
    service = CardService(db)

    try:
        card = service.require_card(card_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Card {card.id}")
    click.echo(f"  UID: {card.uid}")
    click.echo(f"  Normalized: {card.uid_normalized}")
    click.echo(f"  Status: {card.status.value}")
    click.echo(f"  Balance: {card.balance:,.2f}")

    transactions = TransactionService(db).list_transactions(card_id=card.id, limit=limit)
    if transactions:
        click.echo("\nRecent transactions:")
        for txn in transactions:
            click.echo(
                f"  {txn.id:5d} | {txn.transaction_type.value:12s} | {txn.amount:>10,.2f} | "
                f"{txn.balance_before:,.2f} -> {txn.balance_after:,.2f}"
            )


@card_group.command("status")
@click.argument("card_id", type=int)
@click.argument("status", type=click.Choice(CARD_STATUSES))
@click.pass_context
def set_card_status(ctx, card_id: int, status: str):
    """Change a card's status.

    Examples:
        farepay card status 3 blocked
        farepay card status 3 active
    """
    db = ctx.obj["db"]
    service = CardService(db)

    try:
        service.set_status(card_id, CardStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Card {card_id} is now {status}")


@card_group.command("resolve")
@click.argument("uid", metavar="RAW_UID")
@click.pass_context
def resolve_card(ctx, uid: str):
    """Show which card a reader UID would be charged to.

    Runs the same matching cascade as a fare tap without charging anything.

    Examples:
        farepay card resolve 081b8b0e25
    """
    db = ctx.obj["db"]
    resolver = CardResolver(db)

    try:
        resolution = resolver.resolve(uid)
    except DomainError as e:
        handle_domain_error(ctx, e)

    card = resolution.card
    click.echo(f"Card {card.id} ('{card.uid}', {card.status.value})")
    click.echo(f"  Matched by: {resolution.rule} (key {resolution.key})")


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
