"""Reusable FastAPI dependencies."""

from fastapi import Depends, Request

from deposit_gateway.core.container import ApplicationContainer
from deposit_gateway.core.crypto import Account
from deposit_gateway.modules.orders.service import OrderEngine
from deposit_gateway.modules.status.service import StatusAggregator
from deposit_gateway.modules.withdrawals.service import WithdrawalCoordinator


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_order_engine(container: ApplicationContainer = Depends(get_container)) -> OrderEngine:
    return container.orders


def get_withdrawal_coordinator(container: ApplicationContainer = Depends(get_container)) -> WithdrawalCoordinator:
    return container.withdrawals


def get_status_aggregator(container: ApplicationContainer = Depends(get_container)) -> StatusAggregator:
    return container.status


def get_recipient(container: ApplicationContainer = Depends(get_container)) -> Account:
    return container.recipient


__all__ = [
    "get_container",
    "get_order_engine",
    "get_recipient",
    "get_status_aggregator",
    "get_withdrawal_coordinator",
]
