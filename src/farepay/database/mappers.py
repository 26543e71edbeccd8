"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain layer never sees
ORM instances or raw status strings.
"""

from farepay.domain import entities as domain
from farepay.database.models import (
    Card as ORMCard,
    Vehicle as ORMVehicle,
    Transaction as ORMTransaction,
    VehicleLocation as ORMVehicleLocation,
)


def card_to_domain(orm_card: ORMCard) -> domain.Card:
    """Convert SQLAlchemy Card model to domain Card entity."""
    return domain.Card(
        id=orm_card.id,
        uid=orm_card.card_uid,
        uid_normalized=orm_card.uid_normalized,
        balance=orm_card.balance,
        status=domain.CardStatus(orm_card.status),
        customer_id=orm_card.customer_id,
        created_at=orm_card.created_at,
    )


def vehicle_to_domain(orm_vehicle: ORMVehicle) -> domain.Vehicle:
    """Convert SQLAlchemy Vehicle model to domain Vehicle entity."""
    return domain.Vehicle(
        id=orm_vehicle.id,
        number=orm_vehicle.number,
        transport_type=domain.TransportType(orm_vehicle.transport_type),
        status=domain.VehicleStatus(orm_vehicle.status),
        owner_id=orm_vehicle.owner_id,
        route_name=orm_vehicle.route_name,
        last_latitude=orm_vehicle.last_latitude,
        last_longitude=orm_vehicle.last_longitude,
        last_location_update=orm_vehicle.last_location_update,
        created_at=orm_vehicle.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        card_id=orm_transaction.card_id,
        vehicle_id=orm_transaction.vehicle_id,
        amount=orm_transaction.amount,
        balance_before=orm_transaction.balance_before,
        balance_after=orm_transaction.balance_after,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        status=domain.TransactionStatus(orm_transaction.status),
        device_timestamp=orm_transaction.device_timestamp,
        synced_at=orm_transaction.synced_at,
        latitude=orm_transaction.latitude,
        longitude=orm_transaction.longitude,
        location_accuracy=orm_transaction.location_accuracy,
    )


def location_sample_to_domain(orm_location: ORMVehicleLocation) -> domain.LocationSample:
    """Convert SQLAlchemy VehicleLocation model to domain LocationSample entity."""
    return domain.LocationSample(
        id=orm_location.id,
        vehicle_id=orm_location.vehicle_id,
        latitude=orm_location.latitude,
        longitude=orm_location.longitude,
        accuracy=orm_location.accuracy,
        recorded_at=orm_location.recorded_at,
    )
