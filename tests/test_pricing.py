"""
Tests for cart totals
"""
from storefront.schemas.cart import CartItem
from storefront.services.pricing import compute_total, line_total


def test_total_of_mixed_lines():
    items = [CartItem(product_id="A", price=2.50, quantity=3), CartItem(product_id="B", price=1.00, quantity=1)]
    assert compute_total(items) == 8.50


def test_empty_cart_totals_zero():
    assert compute_total([]) == 0.0


def test_zero_quantity_line_adds_nothing():
    items = [CartItem(product_id="A", price=9.99, quantity=0), CartItem(product_id="B", price=3.0, quantity=2)]
    assert compute_total(items) == 6.0


def test_duplicate_lines_are_summed_separately():
    item = CartItem(product_id="A", price=4.0, quantity=1)
    assert compute_total([item, item]) == 8.0


def test_line_total():
    assert line_total(CartItem(product_id="A", price=5.0, quantity=2)) == 10.0
