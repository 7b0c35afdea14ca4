"""
In-process repositories.

Used when STORE_BACKEND=memory (local development) and by the test suite.
Every read and write copies the models so callers never share state with the
store, the same way a round-trip through Firestore would behave.
"""
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from storefront.core.errors import InvalidStatusTransition, NotFound
from storefront.repositories.base import CartRepository, TransactionRepository
from storefront.schemas.cart import Cart, CartItem
from storefront.schemas.transaction import Transaction, TransactionStatus, is_allowed_transition


class MemoryCartRepository(CartRepository):
    def __init__(self):
        self._carts: Dict[str, Cart] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[Cart]:
        with self._lock:
            cart = self._carts.get(user_id)
            return cart.model_copy(deep=True) if cart else None

    def append_item(self, user_id: str, item: CartItem) -> Cart:
        with self._lock:
            cart = self._carts.get(user_id) or Cart(user_id=user_id)
            cart.items.append(item.model_copy(deep=True))
            cart.updated_at = datetime.now(timezone.utc)
            self._carts[user_id] = cart
            return cart.model_copy(deep=True)

    def clear_items(self, user_id: str) -> None:
        with self._lock:
            cart = self._carts.get(user_id)
            if cart is None:
                return
            cart.items = []
            cart.updated_at = datetime.now(timezone.utc)


class MemoryTransactionRepository(TransactionRepository):
    def __init__(self):
        self._records: Dict[str, Transaction] = {}
        self._lock = threading.Lock()

    def insert(self, transaction: Transaction) -> Transaction:
        with self._lock:
            self._records[transaction.id] = transaction.model_copy(deep=True)
        return transaction

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with self._lock:
            record = self._records.get(transaction_id)
            return record.model_copy(deep=True) if record else None

    def find_by_user(self, user_id: str, status: Optional[TransactionStatus] = None) -> List[Transaction]:
        with self._lock:
            matches = [
                t.model_copy(deep=True)
                for t in self._records.values()
                if t.user_id == user_id and (status is None or t.status == status)
            ]
        # dict preserves insertion order, so ties keep creation order
        return sorted(matches, key=lambda t: t.created_at)

    def latest_for_user(self, user_id: str) -> Optional[Transaction]:
        records = self.find_by_user(user_id)
        return records[-1] if records else None

    def transition_status(self, transaction_id: str, new_status: TransactionStatus) -> Transaction:
        with self._lock:
            record = self._records.get(transaction_id)
            if record is None:
                raise NotFound(f"Transaction {transaction_id} not found")
            if not is_allowed_transition(record.status, new_status):
                raise InvalidStatusTransition(
                    f"Transaction {transaction_id} cannot move from {record.status} to {new_status}"
                )
            record.status = new_status
            return record.model_copy(deep=True)

    def delete(self, transaction_id: str) -> None:
        with self._lock:
            self._records.pop(transaction_id, None)
