"""
storefront/routers/carts.py
Cart endpoints (logged-in users): add an item, get the cart, clear it.

Behavior
- Add appends the posted line as-is; the same product added twice shows up twice.
- GET never 404s: a user without a cart gets `{"items": []}`.
- Clear is idempotent.
"""
from fastapi import APIRouter, Depends

from storefront.core.auth import get_principal
from storefront.routers.deps import get_cart_store
from storefront.schemas.cart import Cart, CartItem
from storefront.schemas.principal import Principal
from storefront.services.carts import CartStore

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.post("/add", response_model=Cart)
def add_to_cart(
    item: CartItem,
    principal: Principal = Depends(get_principal),
    carts: CartStore = Depends(get_cart_store),
):
    """Append one line to the caller's cart (cart is created on first add)."""
    return carts.add_item(principal.uid, item)


@router.get("", response_model=Cart)
def get_cart(
    principal: Principal = Depends(get_principal),
    carts: CartStore = Depends(get_cart_store),
):
    return carts.get_cart(principal.uid)


@router.post("/clear", response_model=Cart)
def clear_cart(
    principal: Principal = Depends(get_principal),
    carts: CartStore = Depends(get_cart_store),
):
    """Empty the cart and return it."""
    carts.clear_cart(principal.uid)
    return carts.get_cart(principal.uid)
