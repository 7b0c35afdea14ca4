"""Request-scoped accessors for the components built in `create_app`."""
from fastapi import Request

from storefront.services.carts import CartStore
from storefront.services.checkout import CheckoutService
from storefront.services.ledger import TransactionLedger


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_ledger(request: Request) -> TransactionLedger:
    return request.app.state.ledger


def get_checkout_service(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_mailer(request: Request):
    return request.app.state.mailer
