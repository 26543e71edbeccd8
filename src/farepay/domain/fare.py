"""Fare tap orchestration.

One tap moves through these states::

    RECEIVED -> VEHICLE_VALIDATED -> CARD_RESOLVED -> FUNDS_CHECKED
             -> DEBITED -> LOCATION_RECORDED (optional) -> COMMITTED

Vehicle validation, card resolution and the debit run inside a single
database unit. Any rejection before DEBITED leaves no trace; a storage
error at or after DEBITED rolls the whole unit back. Location recording
runs after the unit commits and never undoes a fare.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from farepay.database.base import Database
from farepay.domain.entities import Location, Transaction
from farepay.domain.errors import (
    FareError,
    LocationRecordingFailure,
    MissingFields,
    PersistenceFailure,
    VehicleNotFound,
    vehicle_not_active,
    vehicle_not_found,
)
from farepay.domain.ledger import FareLedger, validate_amount
from farepay.domain.location import LocationRecorder
from farepay.domain.resolver import CardResolver
from farepay.utils.date_parser import ensure_utc

logger = logging.getLogger(__name__)


class TapState(str, Enum):
    """Stages of one tap; REJECTED and FAILED are the only exits that do not commit."""

    RECEIVED = "received"
    VEHICLE_VALIDATED = "vehicle_validated"
    CARD_RESOLVED = "card_resolved"
    FUNDS_CHECKED = "funds_checked"
    DEBITED = "debited"
    LOCATION_RECORDED = "location_recorded"
    COMMITTED = "committed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class FareRequest:
    """A tap as reported by a validator.

    Required fields are optional here so that their absence is reported as
    a ``MissingFields`` rejection rather than a type error.
    """

    card_uid: Optional[str] = None
    vehicle_id: Optional[int] = None
    fare_amount: Optional[Decimal] = None
    device_timestamp: Optional[datetime] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    location_accuracy: Optional[Decimal] = None

    def missing_fields(self) -> list[str]:
        missing = []
        if self.card_uid is None or not self.card_uid.strip():
            missing.append("card_uid")
        if self.vehicle_id is None:
            missing.append("vehicle_id")
        if self.fare_amount is None:
            missing.append("fare_amount")
        return missing

    @property
    def location(self) -> Optional[Location]:
        """GPS fix, present only when both coordinates were sent."""
        if self.latitude is None or self.longitude is None:
            return None
        return Location(
            latitude=self.latitude,
            longitude=self.longitude,
            accuracy=self.location_accuracy,
        )


@dataclass(frozen=True)
class FareResult:
    """A committed fare."""

    transaction: Transaction
    new_balance: Decimal
    card_id: int
    matched_by: str
    location_recorded: bool = False
    states: tuple[TapState, ...] = field(default=())

    def as_dict(self) -> dict[str, Any]:
        """Success body returned to the device."""
        return {
            "success": True,
            "transaction": self.transaction.as_dict(),
            "new_balance": self.new_balance,
            "location_recorded": self.location_recorded,
        }


class _TapTrace:
    """Records the states a single tap passed through."""

    def __init__(self, card_uid: Optional[str], vehicle_id: Optional[int]):
        self.card_uid = card_uid
        self.vehicle_id = vehicle_id
        self.states = [TapState.RECEIVED]

    @property
    def current(self) -> TapState:
        return self.states[-1]

    def advance(self, state: TapState) -> None:
        logger.debug(
            "Tap uid=%r vehicle=%s: %s -> %s",
            self.card_uid,
            self.vehicle_id,
            self.current.value,
            state.value,
        )
        self.states.append(state)


class FareService:
    """Service processing fare taps end to end."""

    def __init__(
        self,
        db: Database,
        resolver: Optional[CardResolver] = None,
        ledger: Optional[FareLedger] = None,
        location_recorder: Optional[LocationRecorder] = None,
    ):
        """Initialize fare service.

        Args:
            db: Database instance
            resolver: Card resolver (defaults to the standard cascade)
            ledger: Fare ledger
            location_recorder: Location recorder
        """
        self.db = db
        self.resolver = resolver or CardResolver(db)
        self.ledger = ledger or FareLedger(db)
        self.location_recorder = location_recorder or LocationRecorder(db)

    def process_fare(self, request: FareRequest) -> FareResult:
        """Charge a fare for one tap.

        Args:
            request: Tap request

        Returns:
            FareResult with the new balance and the created transaction

        Raises:
            MissingFields: If card UID, vehicle or fare amount is absent
            InvalidAmount: If the fare is not a positive storable decimal
            VehicleNotFound: If the vehicle is unknown or not active
            CardNotFound: If no card matches the UID
            CardNotActive: If the matched card is blocked, expired or lost
            InsufficientBalance: If the card cannot cover the fare
            PersistenceFailure: If storage fails; nothing was written
        """
        trace = _TapTrace(request.card_uid, request.vehicle_id)
        device_timestamp = (
            ensure_utc(request.device_timestamp)
            if request.device_timestamp is not None
            else datetime.now(UTC)
        )

        try:
            missing = request.missing_fields()
            if missing:
                raise MissingFields(missing)
            amount = validate_amount(request.fare_amount)
            location = request.location

            with self.db.transaction():
                self._validate_vehicle(request.vehicle_id)
                trace.advance(TapState.VEHICLE_VALIDATED)

                resolution = self.resolver.resolve(request.card_uid)
                trace.advance(TapState.CARD_RESOLVED)

                entry = self.ledger.debit(
                    resolution.card,
                    amount,
                    vehicle_id=request.vehicle_id,
                    device_timestamp=device_timestamp,
                    location=location,
                )
                trace.advance(TapState.FUNDS_CHECKED)
                trace.advance(TapState.DEBITED)
                transaction = self.db.get_transaction(entry.transaction_id)
        except FareError as e:
            logger.info(
                "Tap uid=%r vehicle=%s rejected in state %s: %s",
                request.card_uid,
                request.vehicle_id,
                trace.current.value,
                e,
                extra={"card_uid": request.card_uid, "vehicle_id": request.vehicle_id, "error_code": e.code},
            )
            trace.advance(TapState.REJECTED)
            raise
        except SQLAlchemyError as e:
            logger.exception(
                "Tap uid=%r vehicle=%s failed in state %s; rolled back",
                request.card_uid,
                request.vehicle_id,
                trace.current.value,
                extra={"card_uid": request.card_uid, "vehicle_id": request.vehicle_id},
            )
            trace.advance(TapState.FAILED)
            raise PersistenceFailure() from e

        location_recorded = False
        if location is not None:
            try:
                self.location_recorder.record(request.vehicle_id, location)
                location_recorded = True
                trace.advance(TapState.LOCATION_RECORDED)
            except LocationRecordingFailure:
                logger.warning(
                    "Fare committed but location was not recorded for vehicle %s",
                    request.vehicle_id,
                    exc_info=True,
                )

        trace.advance(TapState.COMMITTED)
        return FareResult(
            transaction=transaction,
            new_balance=entry.balance_after,
            card_id=resolution.card.id,
            matched_by=resolution.rule,
            location_recorded=location_recorded,
            states=tuple(trace.states),
        )

    def _validate_vehicle(self, vehicle_id: int) -> None:
        vehicle = self.db.get_vehicle(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(vehicle_not_found(vehicle_id))
        if not vehicle.is_active:
            raise VehicleNotFound(vehicle_not_active(vehicle_id, vehicle.status.value))
