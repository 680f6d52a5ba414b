from fastapi import APIRouter

from deposit_gateway.interfaces.http.routers import orders, service


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(orders.router, prefix="/order", tags=["orders"])
    router.include_router(service.router, tags=["service"])
    return router


__all__ = [
    "create_api_router",
]
