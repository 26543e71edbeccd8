"""Vehicle domain service."""

from typing import Optional

from farepay.database.base import Database
from farepay.domain.entities import (
    LocationSample,
    TransportType,
    Vehicle as VehicleEntity,
    VehicleStatus,
)
from farepay.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_vehicle_number,
    vehicle_not_found,
)


class VehicleService:
    """Service for managing vehicles and reading their position history."""

    def __init__(self, db: Database):
        """Initialize vehicle service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_vehicle(
        self,
        number: str,
        transport_type: TransportType = TransportType.BUS,
        owner_id: Optional[int] = None,
        route_name: Optional[str] = None,
    ) -> int:
        """Register a vehicle. New vehicles start active.

        Raises:
            ValidationError: If the number is empty
            ConflictError: If the number is already taken
        """
        number = number.strip()
        if not number:
            raise ValidationError("Vehicle number is required")
        if self.db.get_vehicle_by_number(number) is not None:
            raise ConflictError(duplicate_vehicle_number(number))

        return self.db.create_vehicle(
            number=number,
            transport_type=transport_type,
            owner_id=owner_id,
            route_name=route_name,
        )

    def get_vehicle(self, vehicle_id: int) -> Optional[VehicleEntity]:
        """Get vehicle by ID."""
        return self.db.get_vehicle(vehicle_id)

    def resolve_vehicle(self, vehicle: str | int) -> VehicleEntity:
        """Find a vehicle by ID or by number.

        Raises:
            NotFoundError: If neither matches
        """
        if isinstance(vehicle, int) or str(vehicle).isdigit():
            found = self.db.get_vehicle(int(vehicle))
            if found is not None:
                return found
        found = self.db.get_vehicle_by_number(str(vehicle))
        if found is None:
            raise NotFoundError(f"Vehicle '{vehicle}' not found")
        return found

    def list_vehicles(self, status: Optional[VehicleStatus] = None) -> list[VehicleEntity]:
        """List vehicles, optionally filtered by status."""
        return self.db.list_vehicles(status=status)

    def set_status(self, vehicle_id: int, status: VehicleStatus) -> None:
        """Change a vehicle's status. Only active vehicles accept fares.

        Raises:
            NotFoundError: If the vehicle does not exist
        """
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
        self.db.update_vehicle_status(vehicle_id, status)

    def location_history(self, vehicle_id: int, limit: int = 100) -> list[LocationSample]:
        """Position history, newest first.

        Raises:
            NotFoundError: If the vehicle does not exist
            ValidationError: If limit is not positive
        """
        if limit < 1:
            raise ValidationError("Limit must be positive")
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(vehicle_not_found(vehicle_id))
        return self.db.list_location_samples(vehicle_id, limit=limit)
