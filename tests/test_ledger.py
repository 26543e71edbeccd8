"""Tests for the fare ledger."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from farepay.domain.entities import CardStatus, Location, TransactionType, TransactionStatus
from farepay.domain.errors import CardNotActive, InsufficientBalance, InvalidAmount, NotFoundError
from farepay.domain.ledger import validate_amount


class TestValidateAmount:
    """Tests for validate_amount."""

    @pytest.mark.parametrize("amount", [Decimal("1"), Decimal("0.0001"), Decimal("150.50")])
    def test_valid(self, amount):
        assert validate_amount(amount) == amount

    @pytest.mark.parametrize(
        "amount",
        [
            Decimal("0"),
            Decimal("-1"),
            Decimal("0.00001"),
            Decimal("NaN"),
            Decimal("Infinity"),
            Decimal("100000000000000"),
        ],
    )
    def test_invalid(self, amount):
        with pytest.raises(InvalidAmount):
            validate_amount(amount)

    def test_zero_allowed_when_requested(self):
        assert validate_amount(Decimal("0"), allow_zero=True) == Decimal("0")

    def test_negative_rejected_even_when_zero_allowed(self):
        with pytest.raises(InvalidAmount):
            validate_amount(Decimal("-0.01"), allow_zero=True)

    def test_float_rejected(self):
        with pytest.raises(InvalidAmount) as excinfo:
            validate_amount(1.5)
        assert "float" in str(excinfo.value)


class TestDebit:
    """Tests for FareLedger.debit."""

    def test_debit_updates_balance_and_records_transaction(self, ledger, temp_db, sample_card, sample_vehicle):
        when = datetime(2024, 1, 15, 8, 30, tzinfo=UTC)
        entry = ledger.debit(
            sample_card,
            Decimal("150"),
            vehicle_id=sample_vehicle.id,
            device_timestamp=when,
            location=Location(Decimal("-15.4167"), Decimal("28.2833"), Decimal("5")),
        )

        assert entry.balance_before == Decimal("500")
        assert entry.balance_after == Decimal("350")
        assert temp_db.get_card(sample_card.id).balance == Decimal("350")

        txn = temp_db.get_transaction(entry.transaction_id)
        assert txn.card_id == sample_card.id
        assert txn.vehicle_id == sample_vehicle.id
        assert txn.amount == Decimal("150")
        assert txn.balance_before == Decimal("500")
        assert txn.balance_after == Decimal("350")
        assert txn.transaction_type == TransactionType.FARE_PAYMENT
        assert txn.status == TransactionStatus.COMPLETED
        assert txn.latitude == Decimal("-15.4167")

    def test_debit_exact_balance(self, ledger, temp_db, sample_card):
        entry = ledger.debit(sample_card, Decimal("500"))

        assert entry.balance_after == Decimal("0")
        assert temp_db.get_card(sample_card.id).balance == Decimal("0")

    def test_debit_fractional_amount(self, ledger, temp_db, sample_card):
        entry = ledger.debit(sample_card, Decimal("0.0001"))

        assert entry.balance_after == Decimal("499.9999")
        assert temp_db.get_card(sample_card.id).balance == Decimal("499.9999")

    def test_debit_keeps_full_precision(self, ledger, card_service, temp_db):
        card = card_service.get_card(
            card_service.register_card("DEADBEEF", initial_balance=Decimal("12345678901234.5678"))
        )

        entry = ledger.debit(card, Decimal("0.0001"))

        assert entry.balance_before == Decimal("12345678901234.5678")
        assert entry.balance_after == Decimal("12345678901234.5677")
        assert temp_db.get_card(card.id).balance == Decimal("12345678901234.5677")

    def test_debit_insufficient_balance(self, ledger, temp_db, sample_card):
        with pytest.raises(InsufficientBalance) as excinfo:
            ledger.debit(sample_card, Decimal("500.01"))

        assert excinfo.value.code == "insufficient_balance"
        assert temp_db.get_card(sample_card.id).balance == Decimal("500")
        assert temp_db.list_transactions(card_id=sample_card.id) == []

    @pytest.mark.parametrize("status", [CardStatus.BLOCKED, CardStatus.EXPIRED, CardStatus.LOST])
    def test_debit_inactive_card(self, ledger, temp_db, card_service, sample_card, status):
        card_service.set_status(sample_card.id, status)

        with pytest.raises(CardNotActive) as excinfo:
            ledger.debit(sample_card, Decimal("10"))

        assert str(excinfo.value) == f"Card is {status.value}"
        assert temp_db.get_card(sample_card.id).balance == Decimal("500")

    def test_debit_rereads_balance(self, ledger, temp_db, sample_card):
        """A stale card snapshot does not allow overdrawing."""
        ledger.debit(sample_card, Decimal("400"))

        with pytest.raises(InsufficientBalance):
            ledger.debit(sample_card, Decimal("400"))

        assert temp_db.get_card(sample_card.id).balance == Decimal("100")

    def test_debit_invalid_amount(self, ledger, sample_card):
        with pytest.raises(InvalidAmount):
            ledger.debit(sample_card, Decimal("-1"))


class TestCredit:
    """Tests for FareLedger.credit."""

    def test_credit(self, ledger, temp_db, sample_card):
        entry = ledger.credit(sample_card, Decimal("250.50"))

        assert entry.balance_before == Decimal("500")
        assert entry.balance_after == Decimal("750.50")
        txn = temp_db.get_transaction(entry.transaction_id)
        assert txn.transaction_type == TransactionType.TOP_UP
        assert txn.vehicle_id is None
        assert txn.amount == Decimal("250.50")

    def test_credit_blocked_card(self, ledger, temp_db, card_service, sample_card):
        """Top-ups are allowed regardless of card status."""
        card_service.set_status(sample_card.id, CardStatus.BLOCKED)

        entry = ledger.credit(sample_card, Decimal("10"))

        assert entry.balance_after == Decimal("510")

    def test_credit_zero(self, ledger, sample_card):
        entry = ledger.credit(sample_card, Decimal("0"))
        assert entry.balance_after == Decimal("500")

    def test_credit_negative(self, ledger, temp_db, sample_card):
        with pytest.raises(InvalidAmount):
            ledger.credit(sample_card, Decimal("-10"))
        assert temp_db.get_card(sample_card.id).balance == Decimal("500")

    def test_credit_unknown_card(self, ledger, sample_card, temp_db):
        from dataclasses import replace

        ghost = replace(sample_card, id=9999)
        with pytest.raises(NotFoundError):
            ledger.credit(ghost, Decimal("10"))
