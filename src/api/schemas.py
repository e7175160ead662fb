"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import GeoPoint
from src.domain.enums import (
    BusinessType,
    DocumentType,
    PaymentStatus,
    SellerStatus,
    SubscriptionStatus,
    SubscriptionType,
    VehicleType,
    VerificationStatus,
)

ClockTime = Annotated[str, Field(pattern=r"^([01][0-9]|2[0-3]):[0-5][0-9]$")]
DayOfWeek = Annotated[int, Field(ge=0, le=6)]


class LinkedResponse(BaseModel):
    """Adds a ``_links`` map of related resource paths."""

    model_config = ConfigDict(populate_by_name=True)

    links: dict[str, str] = Field(default_factory=dict, serialization_alias="_links")


# ── Shared ────────────────────────────────────────────────────────────


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @classmethod
    def from_point(cls, point: GeoPoint) -> "Coordinates":
        return cls(latitude=point.latitude, longitude=point.longitude)


class ErrorResponse(BaseModel):
    message: str
    code: str
    suggestion: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    database: str = "ok"


# ── Seller requests ───────────────────────────────────────────────────


class AddressIn(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = "India"
    pincode: str = Field(..., min_length=4, max_length=10)
    coordinates: Coordinates


class DocumentIn(BaseModel):
    document_type: DocumentType
    number: str = Field(..., min_length=1, max_length=64)


class DeliveryOptionsIn(BaseModel):
    local_delivery: bool = True
    pickup: bool = True
    cod: bool = True
    free_delivery_radius_km: float = Field(5.0, ge=0)


class WorkingHoursIn(BaseModel):
    start: ClockTime
    end: ClockTime
    days: list[DayOfWeek] = Field(..., min_length=1)


class PreferencesIn(BaseModel):
    languages: list[str] = Field(..., min_length=1)
    negotiation_enabled: bool = True
    delivery_options: DeliveryOptionsIn = Field(default_factory=DeliveryOptionsIn)
    working_hours: WorkingHoursIn


class SellerRegisterRequest(BaseModel):
    business_name: str = Field(..., min_length=1, max_length=200)
    owner_name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    phone: str = Field(..., min_length=6, max_length=20)
    address: AddressIn
    business_type: BusinessType
    documents: list[DocumentIn] = Field(..., min_length=1)
    preferences: PreferencesIn


class ReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class SellerStatusRequest(BaseModel):
    status: SellerStatus
    reason: Optional[str] = Field(None, max_length=500)


class VerificationRequest(BaseModel):
    verification_status: VerificationStatus


# ── Seller responses ──────────────────────────────────────────────────


class AddressOut(BaseModel):
    street: str
    city: str
    state: str
    country: str
    pincode: str
    coordinates: Coordinates


class RatingOut(BaseModel):
    average: float
    count: int


class PreferencesOut(BaseModel):
    languages: list[str]
    negotiation_enabled: bool
    delivery_options: DeliveryOptionsIn
    working_hours: WorkingHoursIn


class SellerResponse(BaseModel):
    id: int
    business_name: str
    owner_name: str
    email: str
    phone: str
    address: AddressOut
    business_type: BusinessType
    verification_status: VerificationStatus
    status: SellerStatus
    preferences: PreferencesOut
    product_ids: list[str] = []
    rating: RatingOut
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, seller, **extra) -> "SellerResponse":
        return cls(
            id=seller.id,
            business_name=seller.business_name,
            owner_name=seller.owner_name,
            email=seller.email,
            phone=seller.phone,
            address=AddressOut(
                street=seller.street,
                city=seller.city,
                state=seller.state,
                country=seller.country,
                pincode=seller.pincode,
                coordinates=Coordinates(
                    latitude=seller.latitude, longitude=seller.longitude
                ),
            ),
            business_type=seller.business_type,
            verification_status=seller.verification_status,
            status=seller.status,
            preferences=PreferencesOut(
                languages=list(seller.languages or []),
                negotiation_enabled=seller.negotiation_enabled,
                delivery_options=DeliveryOptionsIn(
                    local_delivery=seller.local_delivery,
                    pickup=seller.pickup,
                    cod=seller.cod,
                    free_delivery_radius_km=seller.free_delivery_radius_km,
                ),
                working_hours=WorkingHoursIn(
                    start=seller.working_hours_start,
                    end=seller.working_hours_end,
                    days=list(seller.working_days or []),
                ),
            ),
            product_ids=list(seller.product_ids or []),
            rating=RatingOut(average=seller.rating_average, count=seller.rating_count),
            created_at=seller.created_at,
            **extra,
        )


class NearbySellerResponse(SellerResponse):
    distance_km: float
    delivery_minutes: int
    delivery_cost: float


class SellerEnvelope(LinkedResponse):
    message: Optional[str] = None
    seller: SellerResponse


class SellerListResponse(LinkedResponse):
    sellers: list[SellerResponse]


class NearbySellersResponse(LinkedResponse):
    sellers: list[NearbySellerResponse]


class ReviewResponse(BaseModel):
    id: int
    user_id: str
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SellerStatsResponse(BaseModel):
    total_products: int
    average_rating: float
    total_reviews: int
    verification_status: VerificationStatus
    active_since: Optional[datetime] = None


class WeatherOut(BaseModel):
    temperature: float
    conditions: str
    is_delivery_friendly: bool


class SellerAvailabilityResponse(BaseModel):
    is_open: bool
    time_zone: str
    working_hours: str
    weather: WeatherOut


# ── Subscriptions ─────────────────────────────────────────────────────


class SubscriptionTypeRequest(BaseModel):
    type: SubscriptionType


class RenewRequest(BaseModel):
    type: SubscriptionType
    amount: float = Field(..., gt=0)
    transaction_id: str = Field(..., min_length=1, max_length=128)


class PaymentResponse(BaseModel):
    amount: float
    date: datetime = Field(validation_alias="paid_at")
    transaction_id: str
    status: PaymentStatus

    model_config = {"from_attributes": True}


class SubscriptionResponse(BaseModel):
    id: int
    user_id: str
    type: SubscriptionType
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime
    is_trial: bool
    trial_end_date: Optional[datetime] = None
    auto_renew: bool
    last_payment_date: Optional[datetime] = None
    next_payment_date: Optional[datetime] = None
    payment_history: list[PaymentResponse] = []

    model_config = {"from_attributes": True}

    @classmethod
    def from_model(cls, subscription, payments) -> "SubscriptionResponse":
        response = cls.model_validate(subscription)
        response.payment_history = [PaymentResponse.model_validate(p) for p in payments]
        return response


class SubscriptionActiveResponse(BaseModel):
    type: SubscriptionType
    active: bool


class TrialDaysResponse(BaseModel):
    days_remaining: Optional[int] = None


class SweepResponse(BaseModel):
    expired: int


# ── Delivery & locations ──────────────────────────────────────────────


class RouteRequest(BaseModel):
    points: list[Coordinates] = Field(default_factory=list, max_length=100)
    vehicle_type: VehicleType = VehicleType.MOTORCYCLE
    average_speed_kmh: float = Field(30.0, gt=0)


class RouteResponse(BaseModel):
    route: list[Coordinates]
    distance_km: float
    duration_minutes: int
    carbon_kg: float


class DeliveryEstimateResponse(BaseModel):
    distance_km: float
    delivery_minutes: int
    delivery_cost: float
    carbon_kg: float


class LanguageOut(BaseModel):
    key: str
    code: str
    name: str


class LocationInfoResponse(BaseModel):
    name: str
    names: dict[str, str]
    languages: list[str]
    time_zone: str
    weather: WeatherOut
