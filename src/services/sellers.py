"""
Local seller service
====================

Nearby query
------------
1. The repository asks the spatial index for active sellers within the
   radius (PostGIS ``ST_DWithin``), which bounds the candidate set.
2. Every candidate gets an exact Haversine ``distance_km`` plus delivery
   time and cost based on the seller's own free-delivery radius.
3. Candidates are re-checked against the radius and sorted by distance.

Complexity: O(k log k) for k candidates returned by the index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.domain.delivery import delivery_cost, delivery_time
from src.domain.distance import distance, is_within_radius
from src.domain.entities import GeoPoint, Rating, SellerFilters, WorkingHours
from src.domain.enums import DocumentType, SellerStatus, VerificationStatus
from src.domain.errors import ConflictError, NotFoundError, ValidationError
from src.domain.localization import format_working_hours
from src.domain.validators import validate_clock_time, validate_gstin, validate_pan
from src.infrastructure.location_client import (
    LocationClient,
    WeatherReport,
    is_open_in_zone,
)
from src.infrastructure.repositories import SellerRepository

logger = logging.getLogger(__name__)


@dataclass
class NearbySeller:
    seller: Any
    distance_km: float
    delivery_minutes: int
    delivery_cost: float


@dataclass
class SellerAvailability:
    is_open: bool
    time_zone: str
    working_hours: str
    weather: WeatherReport


def seller_point(seller) -> GeoPoint:
    return GeoPoint(seller.latitude, seller.longitude)


def seller_hours(seller) -> WorkingHours:
    return WorkingHours(
        start=seller.working_hours_start,
        end=seller.working_hours_end,
        days=tuple(seller.working_days or ()),
    )


def _validate_documents(documents: list[dict]) -> None:
    for doc in documents:
        doc_type = DocumentType(doc["document_type"])
        if doc_type == DocumentType.GSTIN and not validate_gstin(doc["number"]):
            raise ValidationError(
                "Invalid GSTIN number",
                suggestion="A GSTIN looks like 27AABCU9603R1ZM",
            )
        if doc_type == DocumentType.PAN and not validate_pan(doc["number"]):
            raise ValidationError("Invalid PAN number")


class SellerService:
    def __init__(
        self,
        session: AsyncSession,
        location_client: Optional[LocationClient] = None,
    ):
        self.session = session
        self.repo = SellerRepository(session)
        self.location_client = location_client or LocationClient()

    async def get_seller(self, seller_id: int):
        seller = await self.repo.get_by_id(seller_id)
        if seller is None:
            raise NotFoundError(
                "Seller not found",
                suggestion="Please check the seller ID and try again",
            )
        return seller

    async def register_seller(self, payload: dict):
        """
        Create a seller from the nested registration payload.

        New sellers start ``active`` with verification ``pending``.
        """
        address = payload["address"]
        preferences = payload["preferences"]
        hours = preferences["working_hours"]
        delivery = preferences.get("delivery_options") or {}
        documents = [
            {
                "document_type": DocumentType(d["document_type"]),
                "number": d["number"].strip().upper(),
            }
            for d in payload.get("documents", [])
        ]

        _validate_documents(documents)
        for value in (hours["start"], hours["end"]):
            if not validate_clock_time(value):
                raise ValidationError(f"Invalid working-hours time: {value!r}")

        if await self.repo.get_by_email(payload["email"]) is not None:
            raise ConflictError(
                "A seller with this email is already registered",
                suggestion="Sign in with the existing seller account",
            )

        location = GeoPoint(
            address["coordinates"]["latitude"], address["coordinates"]["longitude"]
        )
        seller = await self.repo.create_seller(
            location=location,
            documents=documents,
            business_name=payload["business_name"],
            owner_name=payload["owner_name"],
            email=payload["email"],
            phone=payload["phone"],
            street=address["street"],
            city=address["city"],
            state=address["state"],
            country=address.get("country") or "India",
            pincode=address["pincode"],
            business_type=payload["business_type"],
            verification_status=VerificationStatus.PENDING,
            status=SellerStatus.ACTIVE,
            languages=list(preferences.get("languages", [])),
            negotiation_enabled=preferences.get("negotiation_enabled", True),
            local_delivery=delivery.get("local_delivery", True),
            pickup=delivery.get("pickup", True),
            cod=delivery.get("cod", True),
            free_delivery_radius_km=delivery.get(
                "free_delivery_radius_km", settings.default_free_delivery_radius_km
            ),
            working_hours_start=hours["start"],
            working_hours_end=hours["end"],
            working_days=sorted(set(hours["days"])),
            product_ids=[],
            rating_average=0.0,
            rating_count=0,
            status_history=[],
        )
        logger.info("Seller %s registered (%s)", seller.id, seller.business_name)
        return seller

    async def find_nearby_sellers(
        self,
        center: GeoPoint,
        radius_km: Optional[float] = None,
        filters: Optional[SellerFilters] = None,
    ) -> list[NearbySeller]:
        radius = settings.default_search_radius_km if radius_km is None else radius_km
        if radius <= 0:
            raise ValidationError("Radius must be positive")

        candidates = await self.repo.find_nearby(center, radius, filters)
        results: list[NearbySeller] = []
        for seller in candidates:
            point = seller_point(seller)
            if not is_within_radius(point, center, radius):
                continue
            d = distance(center, point)
            results.append(
                NearbySeller(
                    seller=seller,
                    distance_km=d,
                    delivery_minutes=delivery_time(d),
                    delivery_cost=delivery_cost(
                        d, seller.free_delivery_radius_km, settings.base_delivery_cost
                    ),
                )
            )
        results.sort(key=lambda r: r.distance_km)
        return results

    async def search_sellers(
        self, query: str, city: str, filters: Optional[SellerFilters] = None
    ) -> list:
        if not query.strip() or not city.strip():
            raise ValidationError("Both a search query and a city are required")
        return await self.repo.search(query.strip(), city.strip(), filters)

    async def update_seller_status(
        self, seller_id: int, status: SellerStatus, reason: Optional[str] = None
    ):
        seller = await self.get_seller(seller_id)
        seller.status = status
        seller.status_history = [
            *(seller.status_history or []),
            {
                "status": status.value,
                "reason": reason,
                "changed_at": datetime.now(timezone.utc).isoformat(),
            },
        ]
        await self.session.flush()
        logger.info("Seller %s status -> %s (%s)", seller_id, status.value, reason)
        return seller

    async def verify_seller(self, seller_id: int, verification: VerificationStatus):
        seller = await self.get_seller(seller_id)
        seller.verification_status = verification
        if verification == VerificationStatus.VERIFIED:
            now = datetime.now(timezone.utc)
            for doc in await self.repo.get_documents(seller_id):
                doc.verified_at = doc.verified_at or now
        await self.session.flush()
        logger.info("Seller %s verification -> %s", seller_id, verification.value)
        return seller

    async def add_product(self, seller_id: int, product_id: str):
        seller = await self.get_seller(seller_id)
        if product_id not in (seller.product_ids or []):
            seller.product_ids = [*(seller.product_ids or []), product_id]
            await self.session.flush()
        return seller

    async def remove_product(self, seller_id: int, product_id: str):
        seller = await self.get_seller(seller_id)
        seller.product_ids = [p for p in (seller.product_ids or []) if p != product_id]
        await self.session.flush()
        return seller

    async def add_review(
        self,
        seller_id: int,
        user_id: str,
        rating: int,
        comment: Optional[str] = None,
    ):
        seller = await self.get_seller(seller_id)
        aggregate = Rating(seller.rating_average, seller.rating_count)
        aggregate.add(rating)

        await self.repo.add_review(seller_id, user_id, rating, comment)
        seller.rating_average = aggregate.average
        seller.rating_count = aggregate.count
        await self.session.flush()
        return seller

    async def get_reviews(self, seller_id: int) -> list:
        await self.get_seller(seller_id)
        return await self.repo.get_reviews(seller_id)

    async def get_seller_stats(self, seller_id: int) -> dict:
        seller = await self.get_seller(seller_id)
        return {
            "total_products": len(seller.product_ids or []),
            "average_rating": seller.rating_average,
            "total_reviews": seller.rating_count,
            "verification_status": seller.verification_status,
            "active_since": seller.created_at,
        }

    async def get_availability(
        self, seller_id: int, language: str = "en"
    ) -> SellerAvailability:
        seller = await self.get_seller(seller_id)
        point, hours = seller_point(seller), seller_hours(seller)
        zone_name = await self.location_client.time_zone(point)
        return SellerAvailability(
            is_open=is_open_in_zone(zone_name, hours),
            time_zone=zone_name,
            working_hours=format_working_hours(hours, language),
            weather=await self.location_client.weather(point),
        )
