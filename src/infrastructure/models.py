"""
SQLAlchemy ORM models  (maps to PostgreSQL + PostGIS).

Tables
------
* ``sellers``                -- local seller profile, address and preferences
* ``seller_documents``       -- verification documents (GSTIN, PAN, ...)
* ``seller_reviews``         -- individual buyer reviews
* ``subscriptions``          -- one row per (user_id, type)
* ``subscription_payments``  -- append-only payment history

Indexes
-------
* **GIST** on ``sellers.location`` for radius queries.
* **Unique** on ``(user_id, type)`` so a user holds one subscription per role.
* **B-Tree** on ``(status, end_date)`` for the expiry sweep.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from geoalchemy2 import Geometry

from .database import Base
from src.domain.enums import (
    BusinessType,
    DocumentType,
    PaymentStatus,
    SellerStatus,
    SubscriptionStatus,
    SubscriptionType,
    VerificationStatus,
)


class SellerModel(Base):
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

    # Stored as PostGIS geometry for spatial indexing
    location = Column(Geometry("POINT", srid=4326), nullable=False)
    # Also stored as plain floats for fast reads (avoids ST_X / ST_Y)
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
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_sellers_location", "location", postgresql_using="gist"),
        Index("idx_sellers_status", "status"),
        Index("idx_sellers_city", "city"),
    )


class SellerDocumentModel(Base):
    __tablename__ = "seller_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    document_type = Column(Enum(DocumentType), nullable=False)
    number = Column(String(64), nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_seller_documents_seller", "seller_id"),)


class SellerReviewModel(Base):
    __tablename__ = "seller_reviews"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey("sellers.id"), nullable=False)
    user_id = Column(String(64), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_seller_reviews_seller", "seller_id"),)


class SubscriptionModel(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    type = Column(Enum(SubscriptionType), nullable=False)
    status = Column(Enum(SubscriptionStatus), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    is_trial = Column(Boolean, default=False, nullable=False)
    trial_end_date = Column(DateTime(timezone=True), nullable=True)
    auto_renew = Column(Boolean, default=True, nullable=False)
    last_payment_date = Column(DateTime(timezone=True), nullable=True)
    next_payment_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_subscriptions_user_type"),
        Index("idx_subscriptions_status_end", "status", "end_date"),
    )


class PaymentModel(Base):
    __tablename__ = "subscription_payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(
        Integer, ForeignKey("subscriptions.id"), nullable=False
    )
    amount = Column(Float, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=False)
    transaction_id = Column(String(128), nullable=False)
    status = Column(Enum(PaymentStatus), nullable=False)

    __table_args__ = (Index("idx_payments_subscription", "subscription_id"),)
