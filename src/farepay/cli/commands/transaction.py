"""Transaction listing commands."""

import click
from farepay.domain.entities import TransactionType
from farepay.domain.transaction import TransactionService

TRANSACTION_TYPES = [t.value for t in TransactionType]


@click.group()
def transaction_group():
    """Inspect ledger transactions."""
    pass


@transaction_group.command("list")
@click.option("--card", "card_id", type=int, help="Only transactions for this card ID")
@click.option("--vehicle", "vehicle_id", type=int, help="Only transactions for this vehicle ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="Transaction type")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum rows")
@click.pass_context
def list_transactions(
    ctx,
    card_id: int | None,
    vehicle_id: int | None,
    transaction_type: str | None,
    limit: int,
) -> None:
    """List transactions, newest first.

    Examples:
        farepay transaction list --card 3
        farepay transaction list --vehicle 1 --type fare_payment
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    transactions = service.list_transactions(
        card_id=card_id,
        vehicle_id=vehicle_id,
        transaction_type=TransactionType(transaction_type) if transaction_type else None,
        limit=limit,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"{'ID':>5} | {'Card':>5} | {'Vehicle':>7} | {'Type':12} | {'Amount':>10} | Balance")
    click.echo("-" * 72)
    for txn in transactions:
        vehicle = str(txn.vehicle_id) if txn.vehicle_id is not None else "-"
        click.echo(
            f"{txn.id:5d} | {txn.card_id:5d} | {vehicle:>7} | {txn.transaction_type.value:12} | "
            f"{txn.amount:>10,.2f} | {txn.balance_before:,.2f} -> {txn.balance_after:,.2f}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
