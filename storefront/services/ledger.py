"""
storefront/services/ledger.py - Transaction ledger.

A transaction is a snapshot of a cart at checkout time plus a status that moves
pending -> completed once. Only `status` ever changes after creation.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List

from storefront.core.errors import NotFound
from storefront.repositories.base import TransactionRepository
from storefront.schemas.cart import CartItem
from storefront.schemas.transaction import PENDING, Transaction, TransactionStatus

logger = logging.getLogger("storefront.ledger")


class TransactionLedger:
    def __init__(self, repository: TransactionRepository):
        self.repository = repository

    def create_transaction(self, user_id: str, items: Iterable[CartItem], total: float) -> Transaction:
        transaction = Transaction(
            id=str(uuid.uuid4()),
            user_id=user_id,
            # copied so later cart mutation can't reach the record
            items=[item.model_copy(deep=True) for item in items],
            total_amount=total,
            status=PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.insert(transaction)
        logger.info("Transaction %s created for user %s (total=%.2f, items=%d)",
                    transaction.id, user_id, total, len(transaction.items))
        return transaction

    def get_transaction(self, transaction_id: str) -> Transaction:
        transaction = self.repository.get(transaction_id)
        if transaction is None:
            raise NotFound(f"Transaction {transaction_id} not found")
        return transaction

    def get_pending_transaction(self, user_id: str) -> Transaction:
        """Most recent pending transaction of the user."""
        pending = self.repository.find_by_user(user_id, status=PENDING)
        if not pending:
            logger.info("No pending transaction found for user %s", user_id)
            raise NotFound("No pending transaction found")
        if len(pending) > 1:
            logger.warning("User %s has %d pending transactions, using the most recent",
                           user_id, len(pending))
        return pending[-1]

    def update_status(self, transaction_id: str, new_status: TransactionStatus) -> Transaction:
        transaction = self.repository.transition_status(transaction_id, new_status)
        logger.info("Transaction %s status is now %s", transaction_id, transaction.status)
        return transaction

    def list_transactions(self, user_id: str) -> List[Transaction]:
        return self.repository.find_by_user(user_id)

    def delete_most_recent(self, user_id: str) -> Transaction:
        # find-then-delete: not atomic, a concurrent checkout can slip in between
        latest = self.repository.latest_for_user(user_id)
        if latest is None:
            raise NotFound("No transaction to delete")
        self.repository.delete(latest.id)
        logger.info("Last transaction %s deleted for user %s", latest.id, user_id)
        return latest
