"""
storefront/core/errors.py - Domain errors and their HTTP mapping.

Services raise these; routers let them propagate and `register_exception_handlers`
turns each one into a single JSON error response `{"detail": ...}`.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("storefront.errors")


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class EmptyCartError(ValidationError):
    default_message = "Cart is empty"


class Unauthorized(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class NoPendingTransaction(NotFound):
    default_message = "No pending transaction"


class InvalidStatusTransition(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Invalid transaction status transition"


class StoreUnavailable(StorefrontError):
    default_message = "Store unavailable"


class TransactionCreateFailed(StorefrontError):
    default_message = "Unable to create transaction"


class DownstreamFailure(StorefrontError):
    default_message = "Downstream service failed"


async def _storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold the raw exception object, which is not JSON serializable
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, _storefront_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
