"""
Subscription endpoints
======================

All routes act on the caller identified by the ``X-User-Id`` header.

GET  /api/v1/subscriptions/status?type=     -- current subscription
GET  /api/v1/subscriptions/active?type=     -- usable right now?
GET  /api/v1/subscriptions/trial-days?type= -- days left in the trial
GET  /api/v1/subscriptions/history?type=    -- payment history
POST /api/v1/subscriptions/create           -- start a free trial (201)
POST /api/v1/subscriptions/renew            -- record a payment, extend a month
POST /api/v1/subscriptions/cancel           -- stop auto-renewal
"""

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies import get_current_user_id, get_subscription_service
from src.api.middleware import DEFAULT_RATE, limiter
from src.api.schemas import (
    PaymentResponse,
    RenewRequest,
    SubscriptionActiveResponse,
    SubscriptionResponse,
    SubscriptionTypeRequest,
    TrialDaysResponse,
)
from src.domain.enums import SubscriptionType
from src.services.subscriptions import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/status", response_model=SubscriptionResponse, summary="Current subscription")
@limiter.limit(DEFAULT_RATE)
async def subscription_status(
    request: Request,
    sub_type: SubscriptionType = Query(..., alias="type"),
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.get_subscription_status(user_id, sub_type)
    payments = await service.get_payments(subscription)
    return SubscriptionResponse.from_model(subscription, payments)


@router.get(
    "/active",
    response_model=SubscriptionActiveResponse,
    summary="Whether the subscription grants access right now",
)
@limiter.limit(DEFAULT_RATE)
async def subscription_active(
    request: Request,
    sub_type: SubscriptionType = Query(..., alias="type"),
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    active = await service.is_subscription_active(user_id, sub_type)
    return SubscriptionActiveResponse(type=sub_type, active=active)


@router.get(
    "/trial-days",
    response_model=TrialDaysResponse,
    summary="Whole days left in the free trial",
)
@limiter.limit(DEFAULT_RATE)
async def trial_days(
    request: Request,
    sub_type: SubscriptionType = Query(..., alias="type"),
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    days = await service.get_trial_days_remaining(user_id, sub_type)
    return TrialDaysResponse(days_remaining=days)


@router.get(
    "/history",
    response_model=list[PaymentResponse],
    summary="Payments recorded against the subscription",
)
@limiter.limit(DEFAULT_RATE)
async def subscription_history(
    request: Request,
    sub_type: SubscriptionType = Query(..., alias="type"),
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    payments = await service.get_subscription_history(user_id, sub_type)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post(
    "/create",
    status_code=201,
    response_model=SubscriptionResponse,
    summary="Start a three-month free trial",
)
@limiter.limit(DEFAULT_RATE)
async def create_subscription(
    request: Request,
    body: SubscriptionTypeRequest,
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.create_subscription(user_id, body.type)
    return SubscriptionResponse.from_model(subscription, [])


@router.post("/renew", response_model=SubscriptionResponse, summary="Renew for one month")
@limiter.limit(DEFAULT_RATE)
async def renew_subscription(
    request: Request,
    body: RenewRequest,
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.renew_subscription(
        user_id, body.type, body.amount, body.transaction_id
    )
    payments = await service.get_payments(subscription)
    return SubscriptionResponse.from_model(subscription, payments)


@router.post("/cancel", response_model=SubscriptionResponse, summary="Stop auto-renewal")
@limiter.limit(DEFAULT_RATE)
async def cancel_subscription(
    request: Request,
    body: SubscriptionTypeRequest,
    user_id: str = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    subscription = await service.cancel_subscription(user_id, body.type)
    payments = await service.get_payments(subscription)
    return SubscriptionResponse.from_model(subscription, payments)
