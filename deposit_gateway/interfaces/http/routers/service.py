"""Service-level endpoints: status, health, audit and public lookups."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response, status

from deposit_gateway.core.exceptions import FeatureNotImplementedError
from deposit_gateway.interfaces.http.deps import get_status_aggregator
from deposit_gateway.modules.status.service import StatusAggregator
from deposit_gateway.schemas import ServerStatusResponse

router = APIRouter()


@router.get(
    "/status",
    response_model=ServerStatusResponse,
    summary="Current service status",
    responses={503: {"model": ServerStatusResponse}},
)
async def server_status(
    response: Response,
    aggregator: StatusAggregator = Depends(get_status_aggregator),
) -> ServerStatusResponse:
    snapshot = await aggregator.server_status()
    response.headers["Cache-Control"] = "no-store"
    if not snapshot.store_reachable:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ServerStatusResponse.from_status(snapshot)


@router.get("/health", summary="Health report (not implemented)")
async def health(aggregator: StatusAggregator = Depends(get_status_aggregator)) -> None:
    await aggregator.health()


@router.get("/audit", summary="Audit report (not implemented)")
async def audit(aggregator: StatusAggregator = Depends(get_status_aggregator)) -> None:
    await aggregator.audit()


@router.post("/public/v2/payment/{payment_account}", summary="Public payment lookup (not implemented)")
async def public_payment(payment_account: str = Path(..., description="Deposit account")) -> None:
    raise FeatureNotImplementedError("public payment lookup")
