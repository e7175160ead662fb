"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  PostGIS-specific features (Geometry columns,
``ST_DWithin``) are replaced by test seller models with a plain String
location and a bounding-box radius predicate.  Subscription tables have no
spatial columns, so the production models are used directly.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from src.domain.distance import bounding_box
from src.domain.entities import GeoPoint
from src.domain.enums import (
    BusinessType,
    DocumentType,
    SellerStatus,
    VerificationStatus,
)
from src.infrastructure.database import Base
from src.infrastructure.location_client import LocationClient
from src.infrastructure.models import PaymentModel, SubscriptionModel
from src.infrastructure.repositories import SellerRepository

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Monday 2026-03-02 10:00 UTC
FIXED_NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


class TestBase(DeclarativeBase):
    pass


# Mirror the production seller models but without PostGIS Geometry columns
# (SQLite doesn't support them).

class TestSellerModel(TestBase):
    __tablename__ = "sellers"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    business_name = Column(String(200), nullable=False)
    owner_name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    country = Column(String(80), nullable=False, default="India")
    pincode = Column(String(10), nullable=False)
    location = Column(String, nullable=False)  # stub for Geometry
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    business_type = Column(Enum(BusinessType), nullable=False)
    verification_status = Column(
        Enum(VerificationStatus), default=VerificationStatus.PENDING, nullable=False
    )
    languages = Column(JSON, default=list, nullable=False)
    negotiation_enabled = Column(Boolean, default=True, nullable=False)
    local_delivery = Column(Boolean, default=True, nullable=False)
    pickup = Column(Boolean, default=True, nullable=False)
    cod = Column(Boolean, default=True, nullable=False)
    free_delivery_radius_km = Column(Float, default=5.0, nullable=False)
    working_hours_start = Column(String(5), nullable=False)
    working_hours_end = Column(String(5), nullable=False)
    working_days = Column(JSON, default=list, nullable=False)
    product_ids = Column(JSON, default=list, nullable=False)
    rating_average = Column(Float, default=0.0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    status = Column(Enum(SellerStatus), default=SellerStatus.ACTIVE, nullable=False)
    status_history = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TestSellerDocumentModel(TestBase):
    __tablename__ = "seller_documents"
    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    document_type = Column(Enum(DocumentType), nullable=False)
    number = Column(String(64), nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)


class TestSellerReviewModel(TestBase):
    __tablename__ = "seller_reviews"
    __mapper_args__ = {"eager_defaults": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    user_id = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SqliteSellerRepository(SellerRepository):
    """``SellerRepository`` over the test models with a box radius filter."""

    seller_model = TestSellerModel
    document_model = TestSellerDocumentModel
    review_model = TestSellerReviewModel

    def location_value(self, point: GeoPoint):
        return f"POINT({point.longitude} {point.latitude})"

    def within_radius(self, center: GeoPoint, radius_km: float):
        box = bounding_box(center, radius_km)
        return (
            self.seller_model.latitude.between(box["min_lat"], box["max_lat"])
            & self.seller_model.longitude.between(box["min_lon"], box["max_lon"])
        )


def seller_payload(**overrides) -> dict:
    """Registration body in the shape ``POST /sellers`` accepts."""
    payload = {
        "business_name": "Sharma Kirana Store",
        "owner_name": "Ramesh Sharma",
        "email": "ramesh@example.com",
        "phone": "+919812345678",
        "business_type": "registered",
        "address": {
            "street": "12 SV Road",
            "city": "Mumbai",
            "state": "Maharashtra",
            "country": "India",
            "pincode": "400053",
            "coordinates": {"latitude": 19.1197, "longitude": 72.8468},
        },
        "documents": [{"document_type": "GSTIN", "number": "27AABCU9603R1ZM"}],
        "preferences": {
            "languages": ["mr", "hi", "en"],
            "negotiation_enabled": True,
            "delivery_options": {
                "local_delivery": True,
                "pickup": True,
                "cod": True,
                "free_delivery_radius_km": 5,
            },
            "working_hours": {"start": "09:00", "end": "18:00", "days": [1, 2, 3, 4, 5, 6]},
        },
    }
    payload.update(overrides)
    return payload


def stub_location_transport(
    zone_name: str = "Asia/Kolkata",
    conditions: str = "Clear",
    temperature: float = 31.5,
    state: str = "Maharashtra",
) -> httpx.MockTransport:
    """Answers the geocoding, time zone and weather calls with fixed JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if "timezone" in url:
            return httpx.Response(200, json={"status": "OK", "zoneName": zone_name})
        if "weather" in url:
            return httpx.Response(
                200,
                json={"main": {"temp": temperature}, "weather": [{"main": conditions}]},
            )
        return httpx.Response(
            200, json={"address": {"city": "Mumbai", "state": state}}
        )

    return httpx.MockTransport(handler)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test; one shared connection."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(TestBase.metadata.create_all)
        await conn.run_sync(
            Base.metadata.create_all,
            tables=[SubscriptionModel.__table__, PaymentModel.__table__],
        )

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def location_client() -> AsyncGenerator[LocationClient, None]:
    async with httpx.AsyncClient(transport=stub_location_transport()) as http:
        yield LocationClient(http)


@pytest.fixture
def clock():
    """Mutable clock: tests advance ``clock.now`` to cross lifecycle edges."""

    class _Clock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

    return _Clock()
