from typing import Iterable

from storefront.schemas.cart import CartItem


def line_total(item: CartItem) -> float:
    return item.price * float(item.quantity)


def compute_total(items: Iterable[CartItem]) -> float:
    """Sum of price x quantity, accumulated in item order with plain floats."""
    total = 0.0
    for item in items:
        total += line_total(item)
    return total
