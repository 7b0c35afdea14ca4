"""
# `storefront/main.py` - Application entry point

## Overview
Builds the FastAPI application: settings, logging, CORS, error handlers,
routers, and the components every request works with.

---

## Components (`app.state`)
- `settings`: `Settings` (pydantic-settings, `.env` aware)
- `cart_store`: `CartStore`
- `ledger`: `TransactionLedger`
- `checkout`: `CheckoutService`
- `mailer`: `SmtpMailer` (or any object with `async send_mail(...)`)

Repositories come from `STORE_BACKEND`:
- `firestore` → `carts` / `transactions` collections (prefix-aware via
  `FIREBASE_COLLECTION_PREFIX`)
- `memory` → in-process store, for local development

Anything passed to `create_app(...)` explicitly wins over the settings.

---

## Routers
- `/signup`, `/login`
- `/api/cart/add`, `/api/cart`, `/api/cart/clear`
- `/api/transaction/checkout`, `/api/transaction/pay`,
  `/api/transaction/pending`, `/api/transaction/deleteLast`, `/api/transactions`
- `/health`

---
"""
import logging
from typing import Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import Settings, get_settings, init_firestore
from storefront.core.email_utils import SmtpMailer
from storefront.core.errors import register_exception_handlers
from storefront.core.logging_config import setup_logging
from storefront.repositories.base import CartRepository, TransactionRepository
from storefront.repositories.firestore import FirestoreCartRepository, FirestoreTransactionRepository
from storefront.repositories.memory import MemoryCartRepository, MemoryTransactionRepository
from storefront.routers import auth, carts, transactions
from storefront.services.carts import CartStore
from storefront.services.checkout import CheckoutService
from storefront.services.ledger import TransactionLedger
from storefront.services.receipts import ReceiptRenderer

logger = logging.getLogger("storefront")


def build_repositories(settings: Settings) -> Tuple[CartRepository, TransactionRepository]:
    if settings.store_backend == "memory":
        logger.warning("Using the in-memory store; data is lost on restart")
        return MemoryCartRepository(), MemoryTransactionRepository()
    db = init_firestore(settings)
    return (
        FirestoreCartRepository(db, settings.collection("carts")),
        FirestoreTransactionRepository(db, settings.collection("transactions")),
    )


def create_app(
    settings: Optional[Settings] = None,
    cart_repository: Optional[CartRepository] = None,
    transaction_repository: Optional[TransactionRepository] = None,
    mailer=None,
    renderer: Optional[ReceiptRenderer] = None,
    configure_logging: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    app = FastAPI(
        title="Storefront Cart & Checkout API",
        description="Cart, checkout and simulated payment backend with e-mailed PDF receipts.",
        version="1.0.0",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization"],
    )
    register_exception_handlers(app)

    if cart_repository is None or transaction_repository is None:
        default_carts, default_transactions = build_repositories(settings)
        cart_repository = cart_repository or default_carts
        transaction_repository = transaction_repository or default_transactions

    cart_store = CartStore(cart_repository)
    ledger = TransactionLedger(transaction_repository)
    mailer = mailer or SmtpMailer(settings)
    renderer = renderer or ReceiptRenderer(shop_name=settings.receipt_shop_name, tin=settings.receipt_tin)

    app.state.settings = settings
    app.state.cart_store = cart_store
    app.state.ledger = ledger
    app.state.mailer = mailer
    app.state.checkout = CheckoutService(
        carts=cart_store,
        ledger=ledger,
        renderer=renderer,
        mailer=mailer,
        require_non_empty_cart=settings.require_non_empty_cart,
    )

    app.include_router(auth.router)
    app.include_router(carts.router)
    app.include_router(transactions.router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    return app


# uvicorn --factory storefront.main:app
def app() -> FastAPI:
    return create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8080, factory=True, reload=False)
