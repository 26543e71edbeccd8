"""Tests for domain entities and errors."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, UTC
from decimal import Decimal

from farepay.domain.entities import (
    Card,
    CardStatus,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from farepay.domain.errors import (
    CardNotActive,
    CardNotFound,
    DomainError,
    InsufficientBalance,
    MissingFields,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
    VehicleNotFound,
)
from farepay.domain.fare import FareRequest, FareResult


def make_card(**overrides):
    values = dict(
        id=1,
        uid="250E8B1B08",
        uid_normalized="250E8B1B08",
        balance=Decimal("500"),
        status=CardStatus.ACTIVE,
        customer_id=None,
        created_at=datetime.now(UTC),
    )
    values.update(overrides)
    return Card(**values)


def make_transaction():
    now = datetime(2024, 1, 15, 8, 30, tzinfo=UTC)
    return Transaction(
        id=7,
        card_id=1,
        vehicle_id=2,
        amount=Decimal("150"),
        balance_before=Decimal("500"),
        balance_after=Decimal("350"),
        transaction_type=TransactionType.FARE_PAYMENT,
        status=TransactionStatus.COMPLETED,
        device_timestamp=now,
        synced_at=now,
    )


class TestEntities:
    """Tests for domain entities."""

    def test_card_is_frozen(self):
        card = make_card()
        with pytest.raises(FrozenInstanceError):
            card.balance = Decimal("0")

    @pytest.mark.parametrize(
        "status,active",
        [
            (CardStatus.ACTIVE, True),
            (CardStatus.BLOCKED, False),
            (CardStatus.EXPIRED, False),
            (CardStatus.LOST, False),
        ],
    )
    def test_card_is_active(self, status, active):
        assert make_card(status=status).is_active is active

    def test_transaction_as_dict(self):
        body = make_transaction().as_dict()

        assert body["id"] == 7
        assert body["transaction_type"] == "fare_payment"
        assert body["status"] == "completed"
        assert body["amount"] == Decimal("150")
        assert body["latitude"] is None

    def test_fare_result_as_dict(self):
        result = FareResult(
            transaction=make_transaction(),
            new_balance=Decimal("350"),
            card_id=1,
            matched_by="normalized",
        )

        body = result.as_dict()

        assert set(body) == {"success", "transaction", "new_balance", "location_recorded"}
        assert body["success"] is True
        assert body["new_balance"] == Decimal("350")


class TestFareRequest:
    """Tests for FareRequest."""

    def test_missing_fields(self):
        assert FareRequest().missing_fields() == ["card_uid", "vehicle_id", "fare_amount"]
        assert FareRequest(card_uid="AA", vehicle_id=1, fare_amount=Decimal("1")).missing_fields() == []

    def test_location_requires_both_coordinates(self):
        assert FareRequest(latitude=Decimal("1")).location is None
        assert FareRequest(longitude=Decimal("1")).location is None

        location = FareRequest(
            latitude=Decimal("1"), longitude=Decimal("2"), location_accuracy=Decimal("3")
        ).location
        assert location.latitude == Decimal("1")
        assert location.longitude == Decimal("2")
        assert location.accuracy == Decimal("3")


class TestErrors:
    """Tests for the fare error taxonomy."""

    def test_hierarchy(self):
        assert issubclass(MissingFields, ValidationError)
        assert issubclass(CardNotFound, NotFoundError)
        assert issubclass(VehicleNotFound, NotFoundError)
        assert issubclass(InsufficientBalance, DomainError)
        assert issubclass(DomainError, ValueError)

    def test_missing_fields_message(self):
        error = MissingFields(["card_uid", "fare_amount"])
        assert str(error) == "Missing required fields: card_uid, fare_amount"

    def test_card_not_found_body(self):
        body = CardNotFound("25:0e", "250E").as_dict()
        assert body == {
            "success": False,
            "error": "card_not_found",
            "message": "Card not found for UID '25:0e'. Register it as '250E'",
            "suggested_uid": "250E",
        }

    def test_card_not_active_message(self):
        assert str(CardNotActive(1, "expired")) == "Card is expired"

    def test_insufficient_balance_attributes(self):
        error = InsufficientBalance(1, Decimal("5"), Decimal("10"))
        assert error.balance == Decimal("5")
        assert error.amount == Decimal("10")
        assert error.code == "insufficient_balance"

    def test_persistence_failure_hides_details(self):
        assert PersistenceFailure().as_dict()["message"] == "Internal server error"
