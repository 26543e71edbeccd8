"""Fare tap command."""

import click
from farepay.cli.error_handling import echo_json
from farepay.domain.errors import FareError
from farepay.domain.fare import FareRequest, FareService
from farepay.utils.amount_parser import parse_amount
from farepay.utils.date_parser import parse_timestamp


def _decimal_or_none(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.command("tap")
@click.option("--uid", "card_uid", help="Card UID exactly as the reader reported it")
@click.option("--vehicle-id", type=int, help="Vehicle ID the validator is mounted on")
@click.option("--fare", "fare_amount", help="Fare amount")
@click.option("--timestamp", help="Device timestamp (ISO-8601; defaults to now)")
@click.option("--lat", "latitude", help="Latitude")
@click.option("--lon", "longitude", help="Longitude")
@click.option("--accuracy", help="Location accuracy in metres")
@click.pass_context
def tap(
    ctx,
    card_uid: str | None,
    vehicle_id: int | None,
    fare_amount: str | None,
    timestamp: str | None,
    latitude: str | None,
    longitude: str | None,
    accuracy: str | None,
):
    """Process a fare tap as a validator would send it.

    Prints the JSON response. Exits with status 1 when the tap is rejected.

    Examples:
        farepay tap --uid 250e8b1b08 --vehicle-id 1 --fare 150
        farepay tap --uid "25:0E:8B:1B:08" --vehicle-id 1 --fare 150 --lat -15.41 --lon 28.28
    """
    db = ctx.obj["db"]
    service = FareService(db)

    device_timestamp = None
    if timestamp is not None:
        try:
            device_timestamp = parse_timestamp(timestamp)
        except ValueError as e:
            click.echo(f"Error: Invalid timestamp: {e}", err=True)
            ctx.exit(1)

    request = FareRequest(
        card_uid=card_uid,
        vehicle_id=vehicle_id,
        fare_amount=_decimal_or_none(ctx, fare_amount, "fare amount"),
        device_timestamp=device_timestamp,
        latitude=_decimal_or_none(ctx, latitude, "latitude"),
        longitude=_decimal_or_none(ctx, longitude, "longitude"),
        location_accuracy=_decimal_or_none(ctx, accuracy, "accuracy"),
    )

    try:
        result = service.process_fare(request)
    except FareError as e:
        echo_json(e.as_dict())
        ctx.exit(1)

    echo_json(result.as_dict())


def register_commands(cli):
    """Register tap command with main CLI."""
    cli.add_command(tap)
