"""
storefront/schemas/cart.py - Pydantic models for Cart.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

_INVISIBLE = ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0")


class CartItem(BaseModel):
    product_id: str = Field("", description="ID of the product")
    quantity: int = Field(0, ge=0, description="Quantity of the product in the cart")
    price: float = Field(0.0, ge=0, description="Price per unit at the time of adding to cart")

    @field_validator("product_id", mode="before")
    @classmethod
    def _clean_pid(cls, v):
        if v is None:
            return ""
        if isinstance(v, str):
            for ch in _INVISIBLE:
                v = v.replace(ch, "")
            v = v.strip()
        return v


class Cart(BaseModel):
    user_id: str = Field(..., description="ID of the user who owns this cart")
    items: List[CartItem] = Field(default_factory=list, description="List of cart items")
    updated_at: Optional[datetime] = None
