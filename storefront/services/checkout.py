"""
# `storefront/services/checkout.py` - Checkout & Payment

## Flow
```
[no pending] --checkout--> [pending transaction created, cart cleared]
[pending]    --pay-------> [completed, receipt e-mailed]
```

### `checkout(user_id)`
1. Read the cart (a missing cart is an empty cart).
2. Compute the total.
3. Write a new **pending** transaction holding a copy of the items.
4. Clear the cart.

If step 3 fails the cart is untouched (`TransactionCreateFailed`). If step 4
fails the transaction stays; the failure is only logged. Steps 3 and 4 are two
separate writes, so an item added in between is wiped with the cart.

### `pay(user_id, payment, recipient)`
1. Find the pending transaction (`NoPendingTransaction` otherwise, nothing changes).
2. Check there is an e-mail to send the receipt to (`ValidationError`, nothing changes).
3. Run the simulated charge.
4. Mark the transaction **completed**.
5. Render the PDF receipt and mail it.

A failure in step 5 is reported as `DownstreamFailure` but the transaction is
already completed; there is no rollback.

Two concurrent `pay` calls can both read the same pending transaction in
step 1. The second status update is a same-status no-op and succeeds, so the
charge runs twice and two receipts are sent.
"""
import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from storefront.core.errors import (
    DownstreamFailure,
    EmptyCartError,
    NoPendingTransaction,
    NotFound,
    StoreUnavailable,
    TransactionCreateFailed,
    ValidationError,
)
from storefront.integrations.payment import create_payment
from storefront.schemas.transaction import COMPLETED, PaymentForm, PaymentResult, Transaction
from storefront.services.carts import CartStore
from storefront.services.ledger import TransactionLedger
from storefront.services.pricing import compute_total
from storefront.services.receipts import ReceiptRenderer

logger = logging.getLogger("storefront.checkout")

RECEIPT_SUBJECT = "Your Receipt"
RECEIPT_BODY = "Thank you for your purchase!"


class CheckoutService:
    def __init__(self, carts: CartStore, ledger: TransactionLedger, renderer: ReceiptRenderer,
                 mailer, require_non_empty_cart: bool = False):
        self.carts = carts
        self.ledger = ledger
        self.renderer = renderer
        self.mailer = mailer
        self.require_non_empty_cart = require_non_empty_cart

    def checkout(self, user_id: str) -> Transaction:
        cart = self.carts.get_cart(user_id)
        if not cart.items and self.require_non_empty_cart:
            raise EmptyCartError("Cart is empty, nothing to check out")

        total = compute_total(cart.items)
        try:
            transaction = self.ledger.create_transaction(user_id, cart.items, total)
        except StoreUnavailable as exc:
            logger.error("Unable to create transaction for user %s: %s", user_id, exc)
            raise TransactionCreateFailed() from exc

        try:
            self.carts.clear_cart(user_id)
        except StoreUnavailable as exc:
            logger.error("Transaction %s created but clearing the cart of user %s failed: %s",
                         transaction.id, user_id, exc)
        return transaction

    async def pay(self, user_id: str, payment: PaymentForm, recipient: Optional[str]) -> PaymentResult:
        try:
            pending = await run_in_threadpool(self.ledger.get_pending_transaction, user_id)
        except NotFound as exc:
            raise NoPendingTransaction() from exc

        if not recipient:
            raise ValidationError("No e-mail address on the account to send the receipt to")

        ok, result = create_payment(pending, payment)
        if not ok:
            raise DownstreamFailure(result.get("message") or "Payment failed")

        completed = await run_in_threadpool(self.ledger.update_status, pending.id, COMPLETED)
        logger.info("Payment processed for user %s, transaction %s", user_id, completed.id)

        try:
            pdf = await run_in_threadpool(self.renderer.render, completed, payment.name)
        except Exception as exc:
            logger.exception("Failed to generate receipt for transaction %s", completed.id)
            raise DownstreamFailure("Failed to generate receipt") from exc

        try:
            await self.mailer.send_mail(recipient, RECEIPT_SUBJECT, RECEIPT_BODY, attachment=pdf)
        except Exception as exc:
            logger.exception("Failed to send receipt email for transaction %s", completed.id)
            raise DownstreamFailure("Failed to send receipt email") from exc

        logger.info("Receipt sent to user %s", user_id)
        return PaymentResult(transaction=completed, payment_id=result["paymentId"], receipt_sent_to=recipient)
