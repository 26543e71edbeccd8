"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from farepay.domain.entities import (
    Card,
    CardStatus,
    Vehicle,
    VehicleStatus,
    TransportType,
    Transaction,
    TransactionType,
    TransactionStatus,
    LocationSample,
)


class UidMatch(Enum):
    """How a UID pattern is compared against stored cards."""

    RAW = "raw"  # card_uid equals the value, byte for byte
    EXACT = "exact"  # normalized UID equals the value
    PREFIX = "prefix"  # either normalized UID or value is a prefix of the other


@dataclass(frozen=True)
class UidPattern:
    """A UID lookup handed to the card store."""

    kind: UidMatch
    value: str


class Database(ABC):
    """Abstract database interface for farepay.

    Every write issued outside ``transaction()`` commits on its own. Writes
    issued inside it commit or roll back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Begin an all-or-nothing unit of work.

        Commits when the block exits normally and rolls back when it raises.
        Nested calls join the outermost unit.
        """
        pass

    # Card operations
    @abstractmethod
    def create_card(
        self,
        uid: str,
        uid_normalized: str,
        balance: Decimal = Decimal("0"),
        customer_id: Optional[int] = None,
        status: CardStatus = CardStatus.ACTIVE,
    ) -> int:
        """Create a card. Returns card ID."""
        pass

    @abstractmethod
    def get_card(self, card_id: int) -> Optional[Card]:
        """Get card by ID."""
        pass

    @abstractmethod
    def lock_card(self, card_id: int) -> Optional[Card]:
        """Re-read a card and hold its row lock until the unit ends."""
        pass

    @abstractmethod
    def find_cards_by_uid(self, pattern: UidPattern, active_only: bool = False) -> list[Card]:
        """Find cards whose UID matches the pattern, ordered by ID."""
        pass

    @abstractmethod
    def list_cards(self, status: Optional[CardStatus] = None) -> list[Card]:
        """List cards, optionally filtered by status."""
        pass

    @abstractmethod
    def update_card_balance(self, card_id: int, new_balance: Decimal) -> None:
        """Overwrite a card's balance."""
        pass

    @abstractmethod
    def update_card_status(self, card_id: int, status: CardStatus) -> None:
        """Change a card's status."""
        pass

    # Vehicle operations
    @abstractmethod
    def create_vehicle(
        self,
        number: str,
        transport_type: TransportType = TransportType.BUS,
        owner_id: Optional[int] = None,
        route_name: Optional[str] = None,
        status: VehicleStatus = VehicleStatus.ACTIVE,
    ) -> int:
        """Create a vehicle. Returns vehicle ID."""
        pass

    @abstractmethod
    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Get vehicle by ID."""
        pass

    @abstractmethod
    def get_vehicle_by_number(self, number: str) -> Optional[Vehicle]:
        """Get vehicle by its human-readable number."""
        pass

    @abstractmethod
    def list_vehicles(self, status: Optional[VehicleStatus] = None) -> list[Vehicle]:
        """List vehicles, optionally filtered by status."""
        pass

    @abstractmethod
    def update_vehicle_status(self, vehicle_id: int, status: VehicleStatus) -> None:
        """Change a vehicle's status."""
        pass

    @abstractmethod
    def update_vehicle_location(
        self, vehicle_id: int, latitude: Decimal, longitude: Decimal
    ) -> None:
        """Overwrite the vehicle's last-known position."""
        pass

    # Location history operations
    @abstractmethod
    def insert_location_sample(
        self,
        vehicle_id: int,
        latitude: Decimal,
        longitude: Decimal,
        accuracy: Optional[Decimal] = None,
    ) -> int:
        """Append a position history row. Returns sample ID."""
        pass

    @abstractmethod
    def list_location_samples(self, vehicle_id: int, limit: int = 100) -> list[LocationSample]:
        """List a vehicle's position history, newest first."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(
        self,
        card_id: int,
        vehicle_id: Optional[int],
        amount: Decimal,
        balance_before: Decimal,
        balance_after: Decimal,
        transaction_type: TransactionType,
        status: TransactionStatus,
        device_timestamp: datetime,
        latitude: Optional[Decimal] = None,
        longitude: Optional[Decimal] = None,
        location_accuracy: Optional[Decimal] = None,
    ) -> int:
        """Append a ledger row. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        card_id: Optional[int] = None,
        vehicle_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass
