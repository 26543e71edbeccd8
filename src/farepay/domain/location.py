"""Vehicle position recording from tap GPS fixes."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from farepay.database.base import Database
from farepay.domain.entities import Location
from farepay.domain.errors import DomainError, LocationRecordingFailure

logger = logging.getLogger(__name__)


class LocationRecorder:
    """Service updating a vehicle's last-known position and its history."""

    def __init__(self, db: Database):
        """Initialize location recorder.

        Args:
            db: Database instance
        """
        self.db = db

    def record(self, vehicle_id: int, location: Location) -> int:
        """Overwrite the cached position and append a history row.

        Both writes commit together. The latest processed write wins; there
        is no ordering by device time.

        Args:
            vehicle_id: Vehicle ID
            location: GPS fix

        Returns:
            Location sample ID

        Raises:
            LocationRecordingFailure: If either write fails
        """
        try:
            with self.db.transaction():
                self.db.update_vehicle_location(vehicle_id, location.latitude, location.longitude)
                sample_id = self.db.insert_location_sample(
                    vehicle_id=vehicle_id,
                    latitude=location.latitude,
                    longitude=location.longitude,
                    accuracy=location.accuracy,
                )
        except (SQLAlchemyError, DomainError) as e:
            raise LocationRecordingFailure(
                f"Could not record location for vehicle {vehicle_id}: {e}"
            ) from e

        logger.debug("Recorded location sample %s for vehicle %s", sample_id, vehicle_id)
        return sample_id
