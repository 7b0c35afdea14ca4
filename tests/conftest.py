"""Pytest configuration and fixtures"""
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app
from storefront.repositories.memory import MemoryCartRepository, MemoryTransactionRepository
from storefront.schemas.cart import CartItem
from storefront.services.carts import CartStore
from storefront.services.checkout import CheckoutService
from storefront.services.ledger import TransactionLedger
from storefront.services.receipts import ReceiptRenderer

USER_EMAIL = "alice@example.com"


class FakeMailer:
    """Mailer that records messages in memory for test assertions."""

    def __init__(self):
        self.sent: List[dict] = []
        self.should_succeed = True

    async def send_mail(self, to: str, subject: str, body: str,
                        attachment: Optional[bytes] = None, attachment_name: str = "receipt.pdf") -> None:
        if not self.should_succeed:
            raise ConnectionError("SMTP server unreachable")
        self.sent.append({
            "to": to,
            "subject": subject,
            "body": body,
            "attachment": attachment,
            "attachment_name": attachment_name,
        })


@pytest.fixture
def settings():
    return Settings(_env_file=None, store_backend="memory", allow_mock_tokens=True,
                    firebase_web_api_key="test-web-key")


@pytest.fixture
def cart_repo():
    return MemoryCartRepository()


@pytest.fixture
def txn_repo():
    return MemoryTransactionRepository()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def cart_store(cart_repo):
    return CartStore(cart_repo)


@pytest.fixture
def ledger(txn_repo):
    return TransactionLedger(txn_repo)


@pytest.fixture
def checkout_service(cart_store, ledger, mailer):
    return CheckoutService(carts=cart_store, ledger=ledger, renderer=ReceiptRenderer(), mailer=mailer)


@pytest.fixture
def app(settings, cart_repo, txn_repo, mailer):
    return create_app(
        settings=settings,
        cart_repository=cart_repo,
        transaction_repository=txn_repo,
        mailer=mailer,
        configure_logging=False,
    )


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer mock_jwt_token_{USER_EMAIL}"}


@pytest.fixture
def sample_item():
    return CartItem(product_id="A", quantity=2, price=5.0)
