"""
Admin / observability endpoints
===============================

GET   /api/v1/admin/health                          -- liveness plus a database ping
PATCH /api/v1/admin/sellers/{seller_id}/status       -- activate / suspend a seller
PATCH /api/v1/admin/sellers/{seller_id}/verification -- record document review
POST  /api/v1/admin/subscriptions/sweep              -- run one expiry sweep now
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_seller_service, get_subscription_service
from src.api.middleware import DEFAULT_RATE, limiter
from src.api.routes.sellers import seller_links
from src.api.schemas import (
    HealthResponse,
    SellerEnvelope,
    SellerResponse,
    SellerStatusRequest,
    SweepResponse,
    VerificationRequest,
)
from src.infrastructure.database import ping
from src.services.sellers import SellerService
from src.services.subscriptions import SubscriptionService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch(
    "/sellers/{seller_id}/status",
    response_model=SellerEnvelope,
    summary="Change a seller's account status",
)
@limiter.limit(DEFAULT_RATE)
async def update_seller_status(
    request: Request,
    seller_id: int,
    body: SellerStatusRequest,
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.update_seller_status(seller_id, body.status, body.reason)
    return SellerEnvelope(
        message=f"Seller status updated to {body.status.value}",
        seller=SellerResponse.from_model(seller),
        links=seller_links(seller.id),
    )


@router.patch(
    "/sellers/{seller_id}/verification",
    response_model=SellerEnvelope,
    summary="Record the outcome of document verification",
)
@limiter.limit(DEFAULT_RATE)
async def update_verification(
    request: Request,
    seller_id: int,
    body: VerificationRequest,
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.verify_seller(seller_id, body.verification_status)
    return SellerEnvelope(
        message=f"Verification status set to {body.verification_status.value}",
        seller=SellerResponse.from_model(seller),
        links=seller_links(seller.id),
    )


@router.post(
    "/subscriptions/sweep",
    response_model=SweepResponse,
    summary="Expire lapsed subscriptions immediately",
)
@limiter.limit("10/minute")
async def sweep_subscriptions(
    request: Request,
    service: SubscriptionService = Depends(get_subscription_service),
):
    return SweepResponse(expired=await service.update_subscription_status())


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(response: Response, db: AsyncSession = Depends(get_db)):
    if await ping(db):
        return HealthResponse()
    response.status_code = 503
    return HealthResponse(status="degraded", database="unavailable")
