"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class FareError(DomainError):
    """A fare tap failure that is reported back to the validator.

    ``code`` is the stable machine-readable reason.
    """

    code = "fare_error"

    def as_dict(self) -> dict[str, Any]:
        """Failure body returned to the device."""
        return {"success": False, "error": self.code, "message": str(self)}


class MissingFields(FareError, ValidationError):
    code = "missing_fields"

    def __init__(self, fields: list[str], message: Optional[str] = None):
        self.fields = fields
        super().__init__(message or missing_fields(fields))


class InvalidAmount(FareError, ValidationError):
    code = "invalid_amount"


class VehicleNotFound(FareError, NotFoundError):
    code = "vehicle_not_found"


class CardNotFound(FareError, NotFoundError):
    code = "card_not_found"

    def __init__(self, raw_uid: str, suggested_uid: str):
        self.raw_uid = raw_uid
        self.suggested_uid = suggested_uid
        super().__init__(card_not_found(raw_uid, suggested_uid))

    def as_dict(self) -> dict[str, Any]:
        body = super().as_dict()
        body["suggested_uid"] = self.suggested_uid
        return body


class CardNotActive(FareError):
    code = "card_not_active"

    def __init__(self, card_id: int, status: str):
        self.card_id = card_id
        self.status = status
        super().__init__(f"Card is {status}")


class InsufficientBalance(FareError):
    code = "insufficient_balance"

    def __init__(self, card_id: int, balance: Decimal, amount: Decimal):
        self.card_id = card_id
        self.balance = balance
        self.amount = amount
        super().__init__(f"Insufficient balance: {balance} available, {amount} required")


class PersistenceFailure(FareError):
    """Storage error inside the atomic unit. The unit was rolled back."""

    code = "persistence_failure"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class LocationRecordingFailure(DomainError):
    """Position write failed. Never rolls back a committed fare."""


def missing_fields(fields: list[str]) -> str:
    """Return message for a tap request lacking required fields."""
    return f"Missing required fields: {', '.join(fields)}"


def invalid_fields(fields: list[str]) -> str:
    """Return message for a tap request whose fields have the wrong type."""
    return f"Invalid or missing fields: {', '.join(fields)}"


def card_not_found(raw_uid: str, suggested_uid: str) -> str:
    """Return message for a UID that matched no card."""
    if suggested_uid:
        return f"Card not found for UID '{raw_uid}'. Register it as '{suggested_uid}'"
    return f"Card not found for UID '{raw_uid}'"


def vehicle_not_found(vehicle_id: Optional[int]) -> str:
    """Return message for missing vehicle."""
    return f"Vehicle {vehicle_id} not found"


def vehicle_not_active(vehicle_id: int, status: str) -> str:
    """Return message for a vehicle that cannot accept fares."""
    return f"Vehicle {vehicle_id} is {status} and cannot accept fares"


def card_id_not_found(card_id: int) -> str:
    """Return message for missing card by ID."""
    return f"Card {card_id} not found"


def duplicate_card_uid(uid: str, existing_uid: str) -> str:
    """Return message for a UID that collides with a registered card."""
    if uid == existing_uid:
        return f"Card UID '{uid}' already exists"
    return f"Card UID '{uid}' already exists as '{existing_uid}'"


def duplicate_vehicle_number(number: str) -> str:
    """Return message for duplicate vehicle number."""
    return f"Vehicle with number '{number}' already exists"
