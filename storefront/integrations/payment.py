"""
storefront/integrations/payment.py - Simulated payment processing.

No processor is contacted: every charge succeeds and gets a SIMULATED-* payment
id. Only the masked card number is ever logged.
"""
import logging
import uuid
from typing import Dict, Tuple

from storefront.schemas.transaction import PaymentForm, Transaction

logger = logging.getLogger("storefront.payment")


def create_payment(transaction: Transaction, payment: PaymentForm) -> Tuple[bool, Dict[str, str]]:
    """
    Charge the transaction total.

    Returns a tuple: (success: bool, result: dict) with the payment id.
    """
    payment_id = f"SIMULATED-{uuid.uuid4().hex[:12]}"
    logger.info(
        "Payment simulation for transaction %s: %.2f charged to %s (no real charge)",
        transaction.id, transaction.total_amount, payment.masked_card(),
    )
    return True, {"paymentId": payment_id, "status": "success", "message": "Payment simulation: no real charge."}
