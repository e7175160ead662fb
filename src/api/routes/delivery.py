"""
Delivery endpoints
==================

POST /api/v1/delivery/route    -- order stops into a greedy delivery route
GET  /api/v1/delivery/estimate -- time, cost and emissions for one distance
GET  /api/v1/delivery/instructions -- delivery instruction labels in one language
"""

from typing import Optional

from fastapi import APIRouter, Query, Request

from src.api.middleware import DEFAULT_RATE, limiter
from src.api.schemas import (
    Coordinates,
    DeliveryEstimateResponse,
    RouteRequest,
    RouteResponse,
)
from src.domain.enums import VehicleType
from src.domain.localization import DELIVERY_INSTRUCTIONS, format_delivery_instructions
from src.services.delivery import estimate_delivery, plan_delivery_route

router = APIRouter(prefix="/delivery", tags=["delivery"])


@router.post(
    "/route",
    response_model=RouteResponse,
    summary="Nearest-neighbour route through the given stops",
)
@limiter.limit(DEFAULT_RATE)
async def delivery_route(request: Request, body: RouteRequest):
    plan = plan_delivery_route(
        [p.to_point() for p in body.points],
        body.vehicle_type,
        body.average_speed_kmh,
    )
    return RouteResponse(
        route=[Coordinates.from_point(p) for p in plan.route],
        distance_km=round(plan.distance_km, 3),
        duration_minutes=plan.duration_minutes,
        carbon_kg=round(plan.carbon_kg, 3),
    )


@router.get(
    "/estimate",
    response_model=DeliveryEstimateResponse,
    summary="Delivery time, cost and carbon footprint for a distance",
)
@limiter.limit(DEFAULT_RATE)
async def delivery_estimate(
    request: Request,
    distance_km: float = Query(..., ge=0, le=1000),
    free_radius_km: Optional[float] = Query(None, ge=0),
    vehicle_type: VehicleType = VehicleType.MOTORCYCLE,
):
    estimate = estimate_delivery(distance_km, free_radius_km, vehicle_type)
    return DeliveryEstimateResponse(
        distance_km=estimate.distance_km,
        delivery_minutes=estimate.delivery_minutes,
        delivery_cost=estimate.delivery_cost,
        carbon_kg=round(estimate.carbon_kg, 3),
    )


@router.get(
    "/instructions",
    response_model=dict[str, str],
    summary="Delivery instruction labels; unknown languages fall back to the key",
)
@limiter.limit(DEFAULT_RATE)
async def delivery_instructions(
    request: Request,
    language: str = Query("en", min_length=2, max_length=3),
):
    return {
        key: format_delivery_instructions(key, language)
        for key in DELIVERY_INSTRUCTIONS["en"]
    }
