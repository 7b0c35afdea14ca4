"""
Tests for the cart store
"""
import pytest

from storefront.core.errors import ValidationError
from storefront.schemas.cart import CartItem


class TestAddItem:

    def test_add_creates_cart(self, cart_store, sample_item):
        cart = cart_store.add_item("user-1", sample_item)

        assert cart.user_id == "user-1"
        assert cart.items == [sample_item]
        assert cart.updated_at is not None

    def test_adds_are_concatenated_in_call_order(self, cart_store):
        calls = [
            CartItem(product_id="A", quantity=1, price=1.0),
            CartItem(product_id="B", quantity=2, price=2.0),
            CartItem(product_id="A", quantity=1, price=1.0),
        ]
        for item in calls:
            cart_store.add_item("user-1", item)

        assert cart_store.get_cart("user-1").items == calls

    def test_same_product_is_not_merged(self, cart_store):
        item = CartItem(product_id="A", quantity=1, price=3.0)
        cart_store.add_item("user-1", item)
        cart_store.add_item("user-1", item)

        items = cart_store.get_cart("user-1").items
        assert len(items) == 2
        assert all(i.quantity == 1 for i in items)

    def test_empty_product_id_rejected(self, cart_store, cart_repo):
        with pytest.raises(ValidationError):
            cart_store.add_item("user-1", CartItem(product_id="", quantity=1, price=1.0))
        assert cart_repo.get("user-1") is None

    def test_whitespace_product_id_rejected(self, cart_store):
        with pytest.raises(ValidationError):
            cart_store.add_item("user-1", CartItem(product_id="  \u200b ", quantity=1, price=1.0))

    def test_carts_are_per_user(self, cart_store, sample_item):
        cart_store.add_item("user-1", sample_item)

        assert cart_store.get_cart("user-2").items == []


class TestGetCart:

    def test_untouched_user_gets_empty_cart(self, cart_store):
        cart = cart_store.get_cart("nobody")

        assert cart.user_id == "nobody"
        assert cart.items == []

    def test_returned_cart_is_a_copy(self, cart_store, sample_item):
        cart_store.add_item("user-1", sample_item)
        cart = cart_store.get_cart("user-1")
        cart.items.clear()

        assert len(cart_store.get_cart("user-1").items) == 1


class TestClearCart:

    def test_clear_empties_items(self, cart_store, sample_item):
        cart_store.add_item("user-1", sample_item)
        cart_store.clear_cart("user-1")

        assert cart_store.get_cart("user-1").items == []

    def test_clear_is_idempotent(self, cart_store, sample_item):
        cart_store.add_item("user-1", sample_item)
        cart_store.clear_cart("user-1")
        first = cart_store.get_cart("user-1").items
        cart_store.clear_cart("user-1")
        second = cart_store.get_cart("user-1").items

        assert first == second == []

    def test_clear_missing_cart_does_not_create_it(self, cart_store, cart_repo):
        cart_store.clear_cart("ghost")

        assert cart_repo.get("ghost") is None

    def test_cart_reusable_after_clear(self, cart_store, sample_item):
        cart_store.add_item("user-1", sample_item)
        cart_store.clear_cart("user-1")
        cart_store.add_item("user-1", CartItem(product_id="B", quantity=1, price=1.0))

        assert [i.product_id for i in cart_store.get_cart("user-1").items] == ["B"]
