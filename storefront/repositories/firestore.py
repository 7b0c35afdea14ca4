# storefront/repositories/firestore.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as gexc
from google.cloud import firestore as gcf
from google.cloud.firestore_v1.base_query import FieldFilter

from storefront.core.errors import InvalidStatusTransition, NotFound, StoreUnavailable
from storefront.repositories.base import CartRepository, TransactionRepository
from storefront.schemas.cart import Cart, CartItem
from storefront.schemas.transaction import Transaction, TransactionStatus, is_allowed_transition

logger = logging.getLogger("storefront.store")


@contextmanager
def _store_errors(operation: str):
    """Translate Firestore client failures into StoreUnavailable."""
    try:
        yield
    except (gexc.GoogleAPICallError, gexc.RetryError) as exc:
        logger.error("Firestore %s failed: %s", operation, exc)
        raise StoreUnavailable(f"Store unavailable during {operation}") from exc


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ──────────────────────────────────────────────────────────────────────────────
# Carts
# ──────────────────────────────────────────────────────────────────────────────

@gcf.transactional
def _append_item_txn(transaction, ref, user_id: str, item: Dict[str, Any]) -> Cart:
    snap = ref.get(transaction=transaction)
    data = (snap.to_dict() or {}) if snap.exists else {}
    items = list(data.get("items") or [])
    items.append(item)
    now = _utcnow()
    transaction.set(ref, {"user_id": user_id, "items": items, "updated_at": now}, merge=True)
    return Cart(user_id=user_id, items=items, updated_at=now)


class FirestoreCartRepository(CartRepository):
    def __init__(self, db, collection: str = "carts"):
        self.db = db
        self.collection = collection

    def _ref(self, user_id: str):
        return self.db.collection(self.collection).document(user_id)

    def get(self, user_id: str) -> Optional[Cart]:
        with _store_errors("cart read"):
            snap = self._ref(user_id).get()
        if not snap.exists:
            return None
        data = snap.to_dict() or {}
        return Cart(user_id=user_id, items=data.get("items") or [], updated_at=data.get("updated_at"))

    def append_item(self, user_id: str, item: CartItem) -> Cart:
        with _store_errors("cart append"):
            return _append_item_txn(self.db.transaction(), self._ref(user_id), user_id, item.model_dump())

    def clear_items(self, user_id: str) -> None:
        with _store_errors("cart clear"):
            try:
                self._ref(user_id).update({"items": [], "updated_at": _utcnow()})
            except gexc.NotFound:
                logger.debug("Clear skipped, no cart document for user %s", user_id)


# ──────────────────────────────────────────────────────────────────────────────
# Transactions
# ──────────────────────────────────────────────────────────────────────────────

def _doc_to_transaction(snap) -> Transaction:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return Transaction.model_validate(data)


@gcf.transactional
def _transition_status_txn(transaction, ref, new_status: str) -> Transaction:
    snap = ref.get(transaction=transaction)
    if not snap.exists:
        raise NotFound(f"Transaction {ref.id} not found")
    current = _doc_to_transaction(snap)
    if not is_allowed_transition(current.status, new_status):
        raise InvalidStatusTransition(
            f"Transaction {ref.id} cannot move from {current.status} to {new_status}"
        )
    if current.status != new_status:
        transaction.update(ref, {"status": new_status})
        current.status = new_status
    return current


class FirestoreTransactionRepository(TransactionRepository):
    def __init__(self, db, collection: str = "transactions"):
        self.db = db
        self.collection = collection

    def _col(self):
        return self.db.collection(self.collection)

    def insert(self, transaction: Transaction) -> Transaction:
        data = transaction.model_dump(exclude={"id"})
        with _store_errors("transaction insert"):
            self._col().document(transaction.id).set(data)
        return transaction

    def get(self, transaction_id: str) -> Optional[Transaction]:
        with _store_errors("transaction read"):
            snap = self._col().document(transaction_id).get()
        return _doc_to_transaction(snap) if snap.exists else None

    def find_by_user(self, user_id: str, status: Optional[TransactionStatus] = None) -> List[Transaction]:
        q = self._col().where(filter=FieldFilter("user_id", "==", user_id))
        if status is not None:
            q = q.where(filter=FieldFilter("status", "==", status))
        with _store_errors("transaction query"):
            docs = list(q.stream())
        # Python-side ordering keeps the query index-free
        return sorted((_doc_to_transaction(d) for d in docs), key=lambda t: t.created_at)

    def latest_for_user(self, user_id: str) -> Optional[Transaction]:
        try:
            with _store_errors("latest transaction query"):
                docs = list(
                    self._col()
                    .where(filter=FieldFilter("user_id", "==", user_id))
                    .order_by("created_at", direction=gcf.Query.DESCENDING)
                    .limit(1)
                    .stream()
                )
        except StoreUnavailable as exc:
            # Composite index missing: fall back to an unordered query
            if not isinstance(exc.__cause__, gexc.FailedPrecondition):
                raise
            records = self.find_by_user(user_id)
            return records[-1] if records else None
        return _doc_to_transaction(docs[0]) if docs else None

    def transition_status(self, transaction_id: str, new_status: TransactionStatus) -> Transaction:
        ref = self._col().document(transaction_id)
        with _store_errors("transaction status update"):
            return _transition_status_txn(self.db.transaction(), ref, new_status)

    def delete(self, transaction_id: str) -> None:
        with _store_errors("transaction delete"):
            self._col().document(transaction_id).delete()
