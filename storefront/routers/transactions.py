from typing import List

from fastapi import APIRouter, Depends

from storefront.core.auth import get_principal
from storefront.routers.deps import get_checkout_service, get_ledger
from storefront.schemas.principal import Principal
from storefront.schemas.transaction import PaymentForm, PaymentResult, Transaction
from storefront.services.checkout import CheckoutService
from storefront.services.ledger import TransactionLedger

router = APIRouter(prefix="/api", tags=["Transactions"])


@router.post("/transaction/checkout", response_model=Transaction)
def checkout(
    principal: Principal = Depends(get_principal),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Turn the cart into a pending transaction and empty the cart."""
    return service.checkout(principal.uid)


@router.post("/transaction/pay", response_model=PaymentResult)
async def pay(
    payment: PaymentForm,
    principal: Principal = Depends(get_principal),
    service: CheckoutService = Depends(get_checkout_service),
):
    """Complete the pending transaction and e-mail the PDF receipt."""
    return await service.pay(principal.uid, payment, principal.email)


@router.get("/transaction/pending", response_model=Transaction)
def pending_transaction(
    principal: Principal = Depends(get_principal),
    ledger: TransactionLedger = Depends(get_ledger),
):
    return ledger.get_pending_transaction(principal.uid)


@router.delete("/transaction/deleteLast", response_model=Transaction)
def delete_last_transaction(
    principal: Principal = Depends(get_principal),
    ledger: TransactionLedger = Depends(get_ledger),
):
    """Delete the caller's most recent transaction and return it."""
    return ledger.delete_most_recent(principal.uid)


@router.get("/transactions", response_model=List[Transaction])
def list_transactions(
    principal: Principal = Depends(get_principal),
    ledger: TransactionLedger = Depends(get_ledger),
):
    return ledger.list_transactions(principal.uid)
