"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  ``SellerRepository`` keeps its model classes
and spatial predicates as overridable attributes so the same queries can run
against a non-spatial database.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from geoalchemy2 import Geography
from geoalchemy2.functions import ST_DWithin, ST_MakePoint, ST_SetSRID
from sqlalchemy import cast, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    PaymentModel,
    SellerDocumentModel,
    SellerModel,
    SellerReviewModel,
    SubscriptionModel,
)
from src.domain.entities import GeoPoint, SellerFilters
from src.domain.enums import (
    PaymentStatus,
    SellerStatus,
    SubscriptionStatus,
    SubscriptionType,
    USABLE_STATUSES,
)


class SellerRepository:
    seller_model = SellerModel
    document_model = SellerDocumentModel
    review_model = SellerReviewModel

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── spatial hooks ─────────────────────────────────────────────────

    def location_value(self, point: GeoPoint):
        return ST_SetSRID(ST_MakePoint(point.longitude, point.latitude), 4326)

    def within_radius(self, center: GeoPoint, radius_km: float):
        """Index-backed predicate; may over-include, never under-include."""
        return ST_DWithin(
            cast(self.seller_model.location, Geography),
            cast(self.location_value(center), Geography),
            radius_km * 1000,
        )

    # ── writes ────────────────────────────────────────────────────────

    async def create_seller(
        self,
        *,
        location: GeoPoint,
        documents: list[dict],
        **fields,
    ):
        seller = self.seller_model(
            latitude=location.latitude,
            longitude=location.longitude,
            location=self.location_value(location),
            **fields,
        )
        self.session.add(seller)
        await self.session.flush()

        for doc in documents:
            self.session.add(self.document_model(seller_id=seller.id, **doc))
        await self.session.flush()
        return seller

    async def add_review(
        self, seller_id: int, user_id: str, rating: int, comment: Optional[str]
    ):
        review = self.review_model(
            seller_id=seller_id, user_id=user_id, rating=rating, comment=comment
        )
        self.session.add(review)
        await self.session.flush()
        return review

    # ── reads ─────────────────────────────────────────────────────────

    async def get_by_id(self, seller_id: int):
        return await self.session.get(self.seller_model, seller_id)

    async def get_by_email(self, email: str):
        result = await self.session.execute(
            select(self.seller_model).where(self.seller_model.email == email)
        )
        return result.scalar_one_or_none()

    async def get_documents(self, seller_id: int) -> list:
        result = await self.session.execute(
            select(self.document_model)
            .where(self.document_model.seller_id == seller_id)
            .order_by(self.document_model.id)
        )
        return list(result.scalars().all())

    async def get_reviews(self, seller_id: int) -> list:
        result = await self.session.execute(
            select(self.review_model)
            .where(self.review_model.seller_id == seller_id)
            .order_by(self.review_model.id)
        )
        return list(result.scalars().all())

    async def find_nearby(
        self,
        center: GeoPoint,
        radius_km: float,
        filters: SellerFilters | None = None,
    ) -> list:
        query = select(self.seller_model).where(
            self.seller_model.status == SellerStatus.ACTIVE,
            self.within_radius(center, radius_km),
        )
        query = self._apply_filters(query, filters)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def search(
        self, text: str, city: str, filters: SellerFilters | None = None
    ) -> list:
        """Case-insensitive partial match on business name OR city."""
        model = self.seller_model
        query = select(model).where(
            model.status == SellerStatus.ACTIVE,
            or_(
                model.business_name.icontains(text, autoescape=True),
                model.city.icontains(city, autoescape=True),
            ),
        )
        query = self._apply_filters(query, filters).order_by(model.business_name)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    def _apply_filters(self, query, filters: SellerFilters | None):
        if filters is None:
            return query
        model = self.seller_model
        if filters.city:
            query = query.where(model.city.ilike(filters.city))
        if filters.business_type is not None:
            query = query.where(model.business_type == filters.business_type)
        if filters.verification_status is not None:
            query = query.where(
                model.verification_status == filters.verification_status
            )
        if filters.negotiation_enabled is not None:
            query = query.where(
                model.negotiation_enabled.is_(filters.negotiation_enabled)
            )
        return query


class SubscriptionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, user_id: str, sub_type: SubscriptionType
    ) -> Optional[SubscriptionModel]:
        result = await self.session.execute(
            select(SubscriptionModel).where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.type == sub_type,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_update(
        self, user_id: str, sub_type: SubscriptionType
    ) -> Optional[SubscriptionModel]:
        """SELECT ... FOR UPDATE so concurrent renewals serialize."""
        result = await self.session.execute(
            select(SubscriptionModel)
            .where(
                SubscriptionModel.user_id == user_id,
                SubscriptionModel.type == sub_type,
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def create(self, subscription: SubscriptionModel) -> SubscriptionModel:
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def add_payment(
        self,
        subscription_id: int,
        *,
        amount: float,
        paid_at: datetime,
        transaction_id: str,
        status: PaymentStatus = PaymentStatus.SUCCESS,
    ) -> PaymentModel:
        payment = PaymentModel(
            subscription_id=subscription_id,
            amount=amount,
            paid_at=paid_at,
            transaction_id=transaction_id,
            status=status,
        )
        self.session.add(payment)
        await self.session.flush()
        return payment

    async def get_payments(self, subscription_id: int) -> list[PaymentModel]:
        """Payment history in the order payments were recorded."""
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.subscription_id == subscription_id)
            .order_by(PaymentModel.paid_at, PaymentModel.id)
        )
        return list(result.scalars().all())

    async def expire_overdue(self, now: datetime) -> int:
        """Bulk ``status = inactive`` for lapsed trial/active rows."""
        result = await self.session.execute(
            update(SubscriptionModel)
            .where(
                SubscriptionModel.end_date < now,
                SubscriptionModel.status.in_(list(USABLE_STATUSES)),
            )
            .values(status=SubscriptionStatus.INACTIVE)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
