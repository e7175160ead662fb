"""
Local seller endpoints
======================

POST   /api/v1/sellers                         -- register a seller (201)
GET    /api/v1/sellers/nearby                  -- active sellers within a radius
GET    /api/v1/sellers/search                  -- name / city text search
GET    /api/v1/sellers/{seller_id}             -- seller details
GET    /api/v1/sellers/{seller_id}/stats       -- product / rating summary
GET    /api/v1/sellers/{seller_id}/availability -- open now, weather, hours
GET    /api/v1/sellers/{seller_id}/reviews     -- list reviews
POST   /api/v1/sellers/{seller_id}/reviews     -- add a review (201)
POST   /api/v1/sellers/{seller_id}/products/{product_id}  -- list a product
DELETE /api/v1/sellers/{seller_id}/products/{product_id}  -- unlist a product
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies import (
    get_current_user_id,
    get_seller_service,
    require_subscription,
)
from src.api.middleware import DEFAULT_RATE, limiter
from src.api.schemas import (
    NearbySellerResponse,
    NearbySellersResponse,
    ReviewRequest,
    ReviewResponse,
    SellerAvailabilityResponse,
    SellerEnvelope,
    SellerListResponse,
    SellerRegisterRequest,
    SellerResponse,
    SellerStatsResponse,
    WeatherOut,
)
from src.domain.entities import GeoPoint, SellerFilters
from src.domain.enums import BusinessType, SubscriptionType, VerificationStatus
from src.services.sellers import SellerService

router = APIRouter(prefix="/sellers", tags=["sellers"])

BASE = "/api/v1/sellers"


def seller_links(seller_id: int) -> dict[str, str]:
    return {
        "self": f"{BASE}/{seller_id}",
        "reviews": f"{BASE}/{seller_id}/reviews",
        "stats": f"{BASE}/{seller_id}/stats",
        "availability": f"{BASE}/{seller_id}/availability",
    }


def seller_filters(
    city: Optional[str] = Query(None, min_length=1),
    business_type: Optional[BusinessType] = None,
    verification_status: Optional[VerificationStatus] = None,
    negotiation_enabled: Optional[bool] = None,
) -> SellerFilters:
    return SellerFilters(
        city=city,
        business_type=business_type,
        verification_status=verification_status,
        negotiation_enabled=negotiation_enabled,
    )


@router.post(
    "",
    status_code=201,
    response_model=SellerEnvelope,
    summary="Register a local seller",
)
@limiter.limit(DEFAULT_RATE)
async def register_seller(
    request: Request,
    body: SellerRegisterRequest,
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.register_seller(body.model_dump())
    return SellerEnvelope(
        message="Seller registered successfully",
        seller=SellerResponse.from_model(seller),
        links={
            **seller_links(seller.id),
            "verification": f"/api/v1/admin/sellers/{seller.id}/verification",
        },
    )


@router.get(
    "/nearby",
    response_model=NearbySellersResponse,
    summary="Active sellers near a point, closest first",
)
@limiter.limit(DEFAULT_RATE)
async def nearby_sellers(
    request: Request,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, le=500, description="Kilometres; default 10"),
    filters: SellerFilters = Depends(seller_filters),
    service: SellerService = Depends(get_seller_service),
):
    results = await service.find_nearby_sellers(
        GeoPoint(latitude, longitude), radius, filters
    )
    return NearbySellersResponse(
        sellers=[
            NearbySellerResponse.from_model(
                r.seller,
                distance_km=r.distance_km,
                delivery_minutes=r.delivery_minutes,
                delivery_cost=r.delivery_cost,
            )
            for r in results
        ],
        links={"self": f"{BASE}/nearby", "search": f"{BASE}/search"},
    )


@router.get(
    "/search",
    response_model=SellerListResponse,
    summary="Case-insensitive search by business name or city",
)
@limiter.limit(DEFAULT_RATE)
async def search_sellers(
    request: Request,
    query: str = Query(..., min_length=1, max_length=100),
    city: str = Query(..., min_length=1, max_length=100),
    business_type: Optional[BusinessType] = None,
    verification_status: Optional[VerificationStatus] = None,
    service: SellerService = Depends(get_seller_service),
):
    sellers = await service.search_sellers(
        query,
        city,
        SellerFilters(
            business_type=business_type, verification_status=verification_status
        ),
    )
    return SellerListResponse(
        sellers=[SellerResponse.from_model(s) for s in sellers],
        links={"self": f"{BASE}/search", "nearby": f"{BASE}/nearby"},
    )


@router.get("/{seller_id}", response_model=SellerEnvelope, summary="Seller details")
@limiter.limit(DEFAULT_RATE)
async def get_seller(
    request: Request,
    seller_id: int,
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.get_seller(seller_id)
    return SellerEnvelope(
        seller=SellerResponse.from_model(seller), links=seller_links(seller.id)
    )


@router.get(
    "/{seller_id}/stats",
    response_model=SellerStatsResponse,
    summary="Product and rating summary",
)
@limiter.limit(DEFAULT_RATE)
async def seller_stats(
    request: Request,
    seller_id: int,
    service: SellerService = Depends(get_seller_service),
):
    return SellerStatsResponse(**await service.get_seller_stats(seller_id))


@router.get(
    "/{seller_id}/availability",
    response_model=SellerAvailabilityResponse,
    summary="Whether the seller is open now, plus local weather",
)
@limiter.limit(DEFAULT_RATE)
async def seller_availability(
    request: Request,
    seller_id: int,
    language: str = Query("en", min_length=2, max_length=3),
    service: SellerService = Depends(get_seller_service),
):
    availability = await service.get_availability(seller_id, language)
    return SellerAvailabilityResponse(
        is_open=availability.is_open,
        time_zone=availability.time_zone,
        working_hours=availability.working_hours,
        weather=WeatherOut(**availability.weather.model_dump()),
    )


@router.post(
    "/{seller_id}/reviews",
    status_code=201,
    response_model=SellerEnvelope,
    summary="Review a seller",
)
@limiter.limit(DEFAULT_RATE)
async def add_review(
    request: Request,
    seller_id: int,
    body: ReviewRequest,
    user_id: str = Depends(get_current_user_id),
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.add_review(seller_id, user_id, body.rating, body.comment)
    return SellerEnvelope(
        message="Review added successfully",
        seller=SellerResponse.from_model(seller),
        links={"self": f"{BASE}/{seller_id}/reviews", "seller": f"{BASE}/{seller_id}"},
    )


@router.get(
    "/{seller_id}/reviews",
    response_model=list[ReviewResponse],
    summary="Reviews for a seller, oldest first",
)
@limiter.limit(DEFAULT_RATE)
async def list_reviews(
    request: Request,
    seller_id: int,
    service: SellerService = Depends(get_seller_service),
):
    return [ReviewResponse.model_validate(r) for r in await service.get_reviews(seller_id)]


@router.post(
    "/{seller_id}/products/{product_id}",
    response_model=SellerEnvelope,
    summary="List a product (requires a seller subscription)",
)
@limiter.limit(DEFAULT_RATE)
async def add_product(
    request: Request,
    seller_id: int,
    product_id: str,
    _: str = Depends(require_subscription(SubscriptionType.SELLER)),
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.add_product(seller_id, product_id)
    return SellerEnvelope(
        seller=SellerResponse.from_model(seller), links=seller_links(seller.id)
    )


@router.delete(
    "/{seller_id}/products/{product_id}",
    response_model=SellerEnvelope,
    summary="Unlist a product",
)
@limiter.limit(DEFAULT_RATE)
async def remove_product(
    request: Request,
    seller_id: int,
    product_id: str,
    _: str = Depends(get_current_user_id),
    service: SellerService = Depends(get_seller_service),
):
    seller = await service.remove_product(seller_id, product_id)
    return SellerEnvelope(
        seller=SellerResponse.from_model(seller), links=seller_links(seller.id)
    )
