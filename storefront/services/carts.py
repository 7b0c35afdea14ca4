"""
storefront/services/carts.py
Cart store: per-user list of line items with append / read / clear semantics.

Behavior
- add_item appends; it never merges lines with the same product_id.
- get_cart never fails for a missing cart: absence is an empty cart.
- clear_cart is idempotent and does not create a cart that never existed.
"""
import logging

from storefront.core.errors import ValidationError
from storefront.repositories.base import CartRepository
from storefront.schemas.cart import Cart, CartItem

logger = logging.getLogger("storefront.cart")


class CartStore:
    def __init__(self, repository: CartRepository):
        self.repository = repository

    def add_item(self, user_id: str, item: CartItem) -> Cart:
        if not item.product_id:
            logger.info("Rejected cart item without product_id for user %s", user_id)
            raise ValidationError("Product ID is required")
        logger.info("Adding item to cart for user %s: %s x%d @ %.2f",
                    user_id, item.product_id, item.quantity, item.price)
        return self.repository.append_item(user_id, item)

    def get_cart(self, user_id: str) -> Cart:
        cart = self.repository.get(user_id)
        if cart is None:
            logger.debug("No cart found for user %s, returning empty cart", user_id)
            return Cart(user_id=user_id, items=[])
        return cart

    def clear_cart(self, user_id: str) -> None:
        self.repository.clear_items(user_id)
        logger.info("Cart cleared for user %s", user_id)
