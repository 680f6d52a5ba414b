"""Order endpoints: create/fetch, modify, withdraw."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status

from deposit_gateway.core.crypto import Account
from deposit_gateway.core.exceptions import FeatureNotImplementedError
from deposit_gateway.interfaces.http.deps import (
    get_order_engine,
    get_recipient,
    get_withdrawal_coordinator,
)
from deposit_gateway.modules.orders.exceptions import UnknownOrderError
from deposit_gateway.modules.orders.models import OrderKind
from deposit_gateway.modules.orders.service import OrderEngine
from deposit_gateway.modules.withdrawals.service import WithdrawalCoordinator
from deposit_gateway.schemas import OrderRequest, OrderResponse, ParameterError, WithdrawalReceiptResponse

router = APIRouter()

_STATUS_BY_KIND = {
    OrderKind.NEW: status.HTTP_201_CREATED,
    OrderKind.FOUND: status.HTTP_200_OK,
    OrderKind.MODIFIED: status.HTTP_200_OK,
    OrderKind.COLLIDED: status.HTTP_409_CONFLICT,
}

_INVALID = {400: {"model": list[ParameterError]}}
_UNKNOWN = {404: {"model": list[ParameterError]}}
_ALREADY_PAID = {409: {"model": list[ParameterError]}}


@router.post(
    "/{order_id}",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an order or fetch the existing one",
    responses={200: {"model": OrderResponse}, 409: {"model": OrderResponse}, **_INVALID},
)
async def create_or_get_order(
    payload: OrderRequest,
    response: Response,
    order_id: str = Path(..., description="Merchant order identifier"),
    recipient: Account = Depends(get_recipient),
    engine: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    outcome = await engine.create_or_get_order(
        recipient,
        order_id,
        payload.amount,
        currency=payload.currency,
        callback=payload.callback,
    )
    response.status_code = _STATUS_BY_KIND[outcome.kind]
    return OrderResponse.from_outcome(outcome)


@router.patch(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Change the price of an unpaid order",
    responses={**_INVALID, **_UNKNOWN, **_ALREADY_PAID},
)
async def modify_order(
    payload: OrderRequest,
    order_id: str = Path(..., description="Merchant order identifier"),
    recipient: Account = Depends(get_recipient),
    engine: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    outcome = await engine.modify_order(
        recipient,
        order_id,
        payload.amount,
        currency=payload.currency,
        callback=payload.callback,
    )
    return OrderResponse.from_outcome(outcome)


@router.get("/{order_id}", response_model=OrderResponse, summary="Fetch an order", responses=_UNKNOWN)
async def get_order(
    order_id: str = Path(..., description="Merchant order identifier"),
    recipient: Account = Depends(get_recipient),
    engine: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    account, invoice = await engine.get_order(recipient, order_id)
    if invoice is None:
        raise UnknownOrderError(order_id)
    return OrderResponse.from_invoice(account, invoice)


@router.post(
    "/{order_id}/forceWithdrawal",
    response_model=WithdrawalReceiptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Withdraw a paid order to the recipient",
    responses=_INVALID,
)
async def force_withdrawal(
    order_id: str = Path(..., description="Merchant order identifier"),
    recipient: Account = Depends(get_recipient),
    coordinator: WithdrawalCoordinator = Depends(get_withdrawal_coordinator),
) -> WithdrawalReceiptResponse:
    receipt = await coordinator.force_withdrawal(recipient, order_id)
    return WithdrawalReceiptResponse.from_receipt(receipt)


@router.post("/{order_id}/investigate", summary="Investigate a payment (not implemented)")
async def investigate(order_id: str = Path(..., description="Merchant order identifier")) -> None:
    raise FeatureNotImplementedError("investigate")
