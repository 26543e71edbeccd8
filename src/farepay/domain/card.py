"""Card domain service."""

from decimal import Decimal
from typing import Optional

from farepay.database.base import Database, UidMatch, UidPattern
from farepay.domain.entities import Card as CardEntity, CardStatus
from farepay.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    card_id_not_found,
    duplicate_card_uid,
)
from farepay.domain.ledger import FareLedger, LedgerEntry, validate_amount
from farepay.utils.uid_normalizer import normalize_hex


class CardService:
    """Service for registering and administering cards."""

    def __init__(self, db: Database):
        """Initialize card service.

        Args:
            db: Database instance
        """
        self.db = db

    def register_card(
        self,
        uid: str,
        initial_balance: Decimal = Decimal("0"),
        customer_id: Optional[int] = None,
    ) -> int:
        """Register a new card.

        The UID is stored exactly as given. Registration is refused when
        another card already has the same normalized UID, since taps could
        not tell the two apart.

        Args:
            uid: UID as printed by the registering reader
            initial_balance: Opening balance
            customer_id: Optional owning customer

        Returns:
            Card ID

        Raises:
            ValidationError: If the UID has no hex digits
            InvalidAmount: If the balance is negative or not storable
            ConflictError: If the UID collides with an existing card
        """
        uid = uid.strip()
        normalized = normalize_hex(uid)
        if not normalized:
            raise ValidationError(f"Card UID '{uid}' contains no hex digits")
        validate_amount(initial_balance, allow_zero=True)

        existing = self.db.find_cards_by_uid(UidPattern(UidMatch.EXACT, normalized))
        if existing:
            raise ConflictError(duplicate_card_uid(uid, existing[0].uid))

        return self.db.create_card(
            uid=uid,
            uid_normalized=normalized,
            balance=initial_balance,
            customer_id=customer_id,
        )

    def get_card(self, card_id: int) -> Optional[CardEntity]:
        """Get card by ID.

        Args:
            card_id: Card ID

        Returns:
            Card entity or None if not found
        """
        return self.db.get_card(card_id)

    def require_card(self, card_id: int) -> CardEntity:
        """Get card by ID or raise NotFoundError."""
        card = self.db.get_card(card_id)
        if card is None:
            raise NotFoundError(card_id_not_found(card_id))
        return card

    def list_cards(self, status: Optional[CardStatus] = None) -> list[CardEntity]:
        """List cards, optionally filtered by status."""
        return self.db.list_cards(status=status)

    def set_status(self, card_id: int, status: CardStatus) -> None:
        """Change a card's status (block, expire, report lost, reactivate).

        Raises:
            NotFoundError: If the card does not exist
        """
        self.require_card(card_id)
        self.db.update_card_status(card_id, status)

    def top_up(self, card_id: int, amount: Decimal) -> LedgerEntry:
        """Credit a card and record a top-up transaction.

        Raises:
            NotFoundError: If the card does not exist
            InvalidAmount: If the amount is negative or not storable
        """
        card = self.require_card(card_id)
        return FareLedger(self.db).credit(card, amount)
