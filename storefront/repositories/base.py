"""Repository interfaces shared by the Firestore and in-memory backends."""
from abc import ABC, abstractmethod
from typing import List, Optional

from storefront.schemas.cart import Cart, CartItem
from storefront.schemas.transaction import Transaction, TransactionStatus


class CartRepository(ABC):
    """One cart document per user, keyed by user id."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[Cart]:
        ...

    @abstractmethod
    def append_item(self, user_id: str, item: CartItem) -> Cart:
        """Atomically append to the cart's items, creating the cart if absent."""
        ...

    @abstractmethod
    def clear_items(self, user_id: str) -> None:
        """Set items to []. A missing cart is left missing."""
        ...


class TransactionRepository(ABC):

    @abstractmethod
    def insert(self, transaction: Transaction) -> Transaction:
        ...

    @abstractmethod
    def get(self, transaction_id: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    def find_by_user(self, user_id: str, status: Optional[TransactionStatus] = None) -> List[Transaction]:
        """Transactions of a user ordered by created_at, oldest first."""
        ...

    @abstractmethod
    def latest_for_user(self, user_id: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    def transition_status(self, transaction_id: str, new_status: TransactionStatus) -> Transaction:
        """Atomically check and apply a status change.

        Raises NotFound when no record has this id and InvalidStatusTransition
        when the move is not allowed.
        """
        ...

    @abstractmethod
    def delete(self, transaction_id: str) -> None:
        ...
