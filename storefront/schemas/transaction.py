# storefront/schemas/transaction.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from storefront.schemas.cart import CartItem

TransactionStatus = Literal["pending", "completed"]

PENDING: TransactionStatus = "pending"
COMPLETED: TransactionStatus = "completed"

# Allowed forward moves; same-status updates are accepted as no-ops
STATUS_TRANSITIONS = {
    PENDING: {COMPLETED},
    COMPLETED: set(),
}


def is_allowed_transition(current: str, new: str) -> bool:
    return current == new or new in STATUS_TRANSITIONS.get(current, set())


class Transaction(BaseModel):
    id: str
    user_id: str
    items: List[CartItem] = Field(default_factory=list)
    total_amount: float = 0.0
    status: TransactionStatus = PENDING
    created_at: datetime


class PaymentForm(BaseModel):
    """Card details posted to /transaction/pay. Never persisted."""
    card_number: str = Field("", alias="cardNumber")
    expiration_date: str = Field("", alias="expirationDate")
    cvv: str = ""
    name: str = ""
    address: str = ""

    model_config = {"populate_by_name": True}

    def masked_card(self) -> str:
        digits = "".join(ch for ch in self.card_number if ch.isdigit())
        return f"**** {digits[-4:]}" if len(digits) >= 4 else "****"


class PaymentResult(BaseModel):
    transaction: Transaction
    payment_id: str
    receipt_sent_to: Optional[str] = None
    redirect: str = "/cart.html"
