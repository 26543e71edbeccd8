"""Fare ledger: balance debits and credits with their transaction rows."""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from farepay.database.base import Database
from farepay.domain.entities import (
    AMOUNT_PRECISION,
    AMOUNT_SCALE,
    Card,
    CardStatus,
    Location,
    TransactionStatus,
    TransactionType,
)
from farepay.domain.errors import (
    CardNotActive,
    InsufficientBalance,
    InvalidAmount,
    NotFoundError,
    card_id_not_found,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEntry:
    """Outcome of a balance mutation."""

    transaction_id: int
    balance_before: Decimal
    balance_after: Decimal


def validate_amount(amount: Decimal, allow_zero: bool = False) -> Decimal:
    """Check that an amount can be stored without rounding.

    Raises:
        InvalidAmount: If the amount is not finite, not positive (or negative
            when ``allow_zero``), or has more fractional digits than the
            ledger stores, or more integer digits than it can hold
    """
    if not isinstance(amount, Decimal):
        raise InvalidAmount(f"Amount must be a decimal, got {type(amount).__name__}")
    if not amount.is_finite():
        raise InvalidAmount(f"Invalid amount: {amount}")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidAmount(f"Amount must be positive, got {amount}")
    if amount.as_tuple().exponent < -AMOUNT_SCALE:
        raise InvalidAmount(
            f"Amount {amount} has more than {AMOUNT_SCALE} decimal places"
        )
    if amount != 0 and amount.adjusted() >= AMOUNT_PRECISION - AMOUNT_SCALE:
        raise InvalidAmount(
            f"Amount {amount} exceeds {AMOUNT_PRECISION - AMOUNT_SCALE} integer digits"
        )
    return amount


class FareLedger:
    """Service applying debits and credits to card balances.

    Both operations run inside one database unit: the balance write and the
    transaction row commit together or not at all. The card row is re-read
    under lock, so concurrent taps on the same card are serialized.
    """

    def __init__(self, db: Database):
        """Initialize fare ledger.

        Args:
            db: Database instance
        """
        self.db = db

    def debit(
        self,
        card: Card,
        amount: Decimal,
        vehicle_id: Optional[int] = None,
        device_timestamp: Optional[datetime] = None,
        location: Optional[Location] = None,
    ) -> LedgerEntry:
        """Charge a fare to a card.

        Args:
            card: Resolved card; its balance is re-read under lock
            amount: Fare amount
            vehicle_id: Vehicle the fare is attributed to
            device_timestamp: When the reader saw the tap (defaults to now)
            location: Optional GPS fix stored on the transaction row

        Returns:
            LedgerEntry with both balances and the new transaction ID

        Raises:
            InvalidAmount: If the amount is not a positive storable decimal
            CardNotActive: If the card is blocked, expired or lost
            InsufficientBalance: If the balance is below the amount
        """
        validate_amount(amount)

        with self.db.transaction():
            current = self._lock(card.id)
            if current.status != CardStatus.ACTIVE:
                raise CardNotActive(current.id, current.status.value)
            if current.balance < amount:
                raise InsufficientBalance(current.id, current.balance, amount)

            balance_before = current.balance
            balance_after = balance_before - amount
            self.db.update_card_balance(current.id, balance_after)
            transaction_id = self.db.insert_transaction(
                card_id=current.id,
                vehicle_id=vehicle_id,
                amount=amount,
                balance_before=balance_before,
                balance_after=balance_after,
                transaction_type=TransactionType.FARE_PAYMENT,
                status=TransactionStatus.COMPLETED,
                device_timestamp=device_timestamp or datetime.now(UTC),
                latitude=location.latitude if location else None,
                longitude=location.longitude if location else None,
                location_accuracy=location.accuracy if location else None,
            )

        logger.info(
            "Debited %s from card %s (%s -> %s), transaction %s",
            amount,
            current.id,
            balance_before,
            balance_after,
            transaction_id,
            extra={"card_id": current.id, "vehicle_id": vehicle_id, "transaction_id": transaction_id},
        )
        return LedgerEntry(transaction_id, balance_before, balance_after)

    def credit(
        self,
        card: Card,
        amount: Decimal,
        device_timestamp: Optional[datetime] = None,
    ) -> LedgerEntry:
        """Top up a card.

        No status or balance checks apply beyond a non-negative amount.

        Args:
            card: Card to credit
            amount: Top-up amount
            device_timestamp: When the top-up happened (defaults to now)

        Returns:
            LedgerEntry with both balances and the new transaction ID

        Raises:
            InvalidAmount: If the amount is negative or not storable
        """
        validate_amount(amount, allow_zero=True)

        with self.db.transaction():
            current = self._lock(card.id)
            balance_before = current.balance
            balance_after = balance_before + amount
            self.db.update_card_balance(current.id, balance_after)
            transaction_id = self.db.insert_transaction(
                card_id=current.id,
                vehicle_id=None,
                amount=amount,
                balance_before=balance_before,
                balance_after=balance_after,
                transaction_type=TransactionType.TOP_UP,
                status=TransactionStatus.COMPLETED,
                device_timestamp=device_timestamp or datetime.now(UTC),
            )

        logger.info(
            "Credited %s to card %s (%s -> %s), transaction %s",
            amount,
            current.id,
            balance_before,
            balance_after,
            transaction_id,
            extra={"card_id": current.id, "transaction_id": transaction_id},
        )
        return LedgerEntry(transaction_id, balance_before, balance_after)

    def _lock(self, card_id: int) -> Card:
        current = self.db.lock_card(card_id)
        if current is None:
            raise NotFoundError(card_id_not_found(card_id))
        return current
