"""Domain model entities for farepay.

These are pure data classes representing business concepts, independent of
database schema. Storage rows are converted into these by
``farepay.database.mappers``.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Total and fractional digits kept for currency amounts
AMOUNT_PRECISION = 18
AMOUNT_SCALE = 4


class CardStatus(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"
    EXPIRED = "expired"
    LOST = "lost"


class VehicleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class TransportType(str, Enum):
    BUS = "bus"
    PLANE = "plane"
    SHIP = "ship"


class TransactionType(str, Enum):
    FARE_PAYMENT = "fare_payment"
    TOP_UP = "top_up"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Card:
    """NFC card domain entity.

    ``uid`` is the identifier exactly as it was registered; ``uid_normalized``
    is its hex-only uppercase projection used for matching.
    """

    id: int
    uid: str
    uid_normalized: str
    balance: Decimal
    status: CardStatus
    customer_id: Optional[int]
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == CardStatus.ACTIVE


@dataclass(frozen=True)
class Vehicle:
    """Vehicle (bus, plane or ship) domain entity."""

    id: int
    number: str
    transport_type: TransportType
    status: VehicleStatus
    owner_id: Optional[int]
    route_name: Optional[str]
    last_latitude: Optional[Decimal]
    last_longitude: Optional[Decimal]
    last_location_update: Optional[datetime]
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status == VehicleStatus.ACTIVE


@dataclass(frozen=True)
class Location:
    """GPS fix reported alongside a tap."""

    latitude: Decimal
    longitude: Decimal
    accuracy: Optional[Decimal] = None


@dataclass(frozen=True)
class Transaction:
    """Ledger row domain entity. Immutable once written."""

    id: int
    card_id: int
    vehicle_id: Optional[int]
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    transaction_type: TransactionType
    status: TransactionStatus
    device_timestamp: datetime
    synced_at: datetime
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    location_accuracy: Optional[Decimal] = None

    def as_dict(self) -> dict:
        """Wire representation of the transaction."""
        return {
            "id": self.id,
            "card_id": self.card_id,
            "vehicle_id": self.vehicle_id,
            "amount": self.amount,
            "balance_before": self.balance_before,
            "balance_after": self.balance_after,
            "transaction_type": self.transaction_type.value,
            "status": self.status.value,
            "device_timestamp": self.device_timestamp,
            "synced_at": self.synced_at,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "location_accuracy": self.location_accuracy,
        }


@dataclass(frozen=True)
class LocationSample:
    """Position history row for a vehicle."""

    id: int
    vehicle_id: int
    latitude: Decimal
    longitude: Decimal
    accuracy: Optional[Decimal]
    recorded_at: datetime
