"""Mapping of domain exceptions to HTTP responses.

Every error body is a JSON list of ``{parameter, message}`` objects.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from deposit_gateway.core.exceptions import FeatureNotImplementedError, GatewayError, InvalidParameterError
from deposit_gateway.modules.invoices.exceptions import StoreError
from deposit_gateway.modules.orders.exceptions import OrderAlreadyPaidError, UnknownOrderError
from deposit_gateway.modules.withdrawals.exceptions import WithdrawalError

logger = logging.getLogger(__name__)

# Request-validation locations FastAPI reports in front of the field name.
_LOCATIONS = {"body", "path", "query", "header"}


def error_body(message: str, parameter: Optional[str] = None) -> list[dict[str, Optional[str]]]:
    return [{"parameter": parameter, "message": message}]


def error_response(status_code: int, message: str, parameter: Optional[str] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, parameter))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if str(part) not in _LOCATIONS]
        errors.append({"parameter": ".".join(loc) or None, "message": error.get("msg", "invalid value")})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)


async def _invalid_parameter_handler(request: Request, exc: InvalidParameterError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.parameter)


async def _withdrawal_handler(request: Request, exc: WithdrawalError) -> JSONResponse:
    logger.info("Withdrawal of order %r refused: %s", exc.order, exc.message)
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, "orderId")


async def _unknown_order_handler(request: Request, exc: UnknownOrderError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, f"order {exc} does not exist", "orderId")


async def _already_paid_handler(request: Request, exc: OrderAlreadyPaidError) -> JSONResponse:
    return error_response(status.HTTP_409_CONFLICT, f"order {exc} is already paid", "orderId")


async def _not_implemented_handler(request: Request, exc: FeatureNotImplementedError) -> JSONResponse:
    return error_response(status.HTTP_501_NOT_IMPLEMENTED, str(exc))


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure while serving %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error("Unhandled gateway error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(InvalidParameterError, _invalid_parameter_handler)
    app.add_exception_handler(WithdrawalError, _withdrawal_handler)
    app.add_exception_handler(UnknownOrderError, _unknown_order_handler)
    app.add_exception_handler(OrderAlreadyPaidError, _already_paid_handler)
    app.add_exception_handler(FeatureNotImplementedError, _not_implemented_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(GatewayError, _gateway_error_handler)


__all__ = ["error_body", "error_response", "register_exception_handlers"]
