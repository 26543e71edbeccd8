"""Vehicle management commands."""

import click
from farepay.cli.error_handling import handle_domain_error
from farepay.domain.entities import TransportType, VehicleStatus
from farepay.domain.errors import DomainError
from farepay.domain.vehicle import VehicleService

TRANSPORT_TYPES = [t.value for t in TransportType]
VEHICLE_STATUSES = [s.value for s in VehicleStatus]


@click.group()
def vehicle_group():
    """Manage vehicles."""
    pass


@vehicle_group.command("add")
@click.argument("number", metavar="VEHICLE_NUMBER")
@click.option(
    "--type",
    "transport_type",
    type=click.Choice(TRANSPORT_TYPES),
    default="bus",
    show_default=True,
    help="Transport type",
)
@click.option("--owner", type=int, help="Operator (owner) ID")
@click.option("--route", help="Route name")
@click.pass_context
def add_vehicle(ctx, number: str, transport_type: str, owner: int | None, route: str | None):
    """Register a vehicle.

    Examples:
        farepay vehicle add "BUS-101" --route "Town - Airport"
        farepay vehicle add "MV Liemba" --type ship --owner 2
    """
    db = ctx.obj["db"]
    service = VehicleService(db)

    try:
        vehicle_id = service.create_vehicle(
            number=number,
            transport_type=TransportType(transport_type),
            owner_id=owner,
            route_name=route,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added {transport_type} '{number.strip()}' (ID: {vehicle_id})")


@vehicle_group.command("list")
@click.option("--status", type=click.Choice(VEHICLE_STATUSES), help="Only vehicles with this status")
@click.pass_context
def list_vehicles(ctx, status: str | None):
    """List vehicles with their last-known position."""
    db = ctx.obj["db"]
    service = VehicleService(db)

    vehicles = service.list_vehicles(status=VehicleStatus(status) if status else None)
    if not vehicles:
        click.echo("No vehicles found.")
        return

    click.echo("\nVehicles:")
    click.echo("-" * 70)
    for v in vehicles:
        position = "-"
        if v.last_latitude is not None and v.last_longitude is not None:
            position = f"{v.last_latitude}, {v.last_longitude}"
        click.echo(
            f"ID: {v.id:4d} | {v.number:12s} | {v.transport_type.value:5s} | "
            f"{v.status.value:11s} | {position}"
        )


@vehicle_group.command("status")
@click.argument("vehicle", metavar="VEHICLE")
@click.argument("status", type=click.Choice(VEHICLE_STATUSES))
@click.pass_context
def set_vehicle_status(ctx, vehicle: str, status: str):
    """Change a vehicle's status.

    VEHICLE can be a vehicle ID or number. Only active vehicles accept fares.

    Examples:
        farepay vehicle status BUS-101 maintenance
    """
    db = ctx.obj["db"]
    service = VehicleService(db)

    try:
        found = service.resolve_vehicle(vehicle)
        service.set_status(found.id, VehicleStatus(status))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Vehicle '{found.number}' is now {status}")


@vehicle_group.command("locations")
@click.argument("vehicle", metavar="VEHICLE")
@click.option("--limit", default=100, show_default=True, help="Maximum samples to show")
@click.pass_context
def vehicle_locations(ctx, vehicle: str, limit: int):
    """Show a vehicle's position history, newest first.

    VEHICLE can be a vehicle ID or number.
    """
    db = ctx.obj["db"]
    service = VehicleService(db)

    try:
        found = service.resolve_vehicle(vehicle)
        samples = service.location_history(found.id, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not samples:
        click.echo(f"No locations recorded for '{found.number}'.")
        return

    for sample in samples:
        accuracy = f" ±{sample.accuracy}m" if sample.accuracy is not None else ""
        click.echo(f"{sample.recorded_at:%Y-%m-%d %H:%M:%S} | {sample.latitude}, {sample.longitude}{accuracy}")


def register_commands(cli):
    """Register vehicle commands with main CLI."""
    cli.add_command(vehicle_group, name="vehicle")
