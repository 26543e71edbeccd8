"""Transaction domain service (read side of the ledger)."""

from typing import Optional

from farepay.database.base import Database
from farepay.domain.entities import Transaction as TransactionEntity, TransactionType


class TransactionService:
    """Service for reading ledger transactions. Rows are never edited."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        card_id: Optional[int] = None,
        vehicle_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions, newest first.

        Args:
            card_id: Optional card filter
            vehicle_id: Optional vehicle filter
            transaction_type: Optional type filter
            limit: Optional maximum number of rows
        """
        transactions = self.db.list_transactions(
            card_id=card_id, vehicle_id=vehicle_id, transaction_type=transaction_type
        )
        if limit is not None:
            transactions = transactions[:limit]
        return transactions
