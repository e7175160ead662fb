"""
Subscription lifecycle service.

Orchestrates ``SubscriptionRepository`` with the pure rules in
``src.domain.subscription``.  The clock is injectable so lifecycle edges
(trial expiry, renewal periods) can be exercised deterministically.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.domain import subscription as rules
from src.domain.enums import SubscriptionStatus, SubscriptionType
from src.domain.errors import ConflictError, NotFoundError, SubscriptionRequiredError
from src.infrastructure.models import PaymentModel, SubscriptionModel
from src.infrastructure.repositories import SubscriptionRepository

logger = logging.getLogger(__name__)

SUBSCRIBE_MESSAGES = {
    SubscriptionType.SELLER: "Please subscribe to continue listing your products.",
    SubscriptionType.BUYER: "Please subscribe to access product details and negotiations.",
}


def monthly_price(sub_type: SubscriptionType) -> int:
    if sub_type == SubscriptionType.SELLER:
        return settings.seller_monthly_price
    return settings.buyer_monthly_price


class SubscriptionService:
    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = rules.utcnow,
    ):
        self.session = session
        self.repo = SubscriptionRepository(session)
        self.clock = clock

    async def _get_or_404(
        self, user_id: str, sub_type: SubscriptionType, *, for_update: bool = False
    ) -> SubscriptionModel:
        lookup = self.repo.get_for_update if for_update else self.repo.get
        subscription = await lookup(user_id, sub_type)
        if subscription is None:
            raise NotFoundError(
                f"No {sub_type.value} subscription for this user",
                suggestion="Start a free trial first",
            )
        return subscription

    async def create_subscription(
        self, user_id: str, sub_type: SubscriptionType
    ) -> SubscriptionModel:
        """Start the free trial; a user holds one subscription per type."""
        if await self.repo.get(user_id, sub_type) is not None:
            raise ConflictError(
                f"A {sub_type.value} subscription already exists",
                suggestion="Renew the existing subscription instead",
            )

        window = rules.trial_window(self.clock(), settings.trial_months)
        subscription = SubscriptionModel(
            user_id=user_id,
            type=sub_type,
            status=SubscriptionStatus.TRIAL,
            start_date=window.start_date,
            end_date=window.end_date,
            is_trial=True,
            trial_end_date=window.trial_end_date,
            auto_renew=True,
        )
        try:
            await self.repo.create(subscription)
        except IntegrityError:
            # lost a race with a concurrent create for the same key
            await self.session.rollback()
            raise ConflictError(
                f"A {sub_type.value} subscription already exists"
            ) from None

        logger.info(
            "Trial started for user %s (%s) until %s",
            user_id, sub_type.value, window.trial_end_date.isoformat(),
        )
        return subscription

    async def get_subscription_status(
        self, user_id: str, sub_type: SubscriptionType
    ) -> SubscriptionModel:
        return await self._get_or_404(user_id, sub_type)

    async def is_subscription_active(
        self, user_id: str, sub_type: SubscriptionType
    ) -> bool:
        subscription = await self.repo.get(user_id, sub_type)
        if subscription is None:
            return False
        return rules.is_active(
            subscription.status, subscription.end_date, self.clock()
        )

    async def require_active(
        self, user_id: str, sub_type: SubscriptionType
    ) -> None:
        if not await self.is_subscription_active(user_id, sub_type):
            price = monthly_price(sub_type)
            raise SubscriptionRequiredError(
                "Subscription required",
                suggestion=f"{SUBSCRIBE_MESSAGES[sub_type]} ₹{price}/month",
                details={"subscription_type": sub_type.value, "price": price},
            )

    async def renew_subscription(
        self,
        user_id: str,
        sub_type: SubscriptionType,
        amount: float,
        transaction_id: str,
    ) -> SubscriptionModel:
        rules.validate_payment(amount, transaction_id)
        subscription = await self._get_or_404(user_id, sub_type, for_update=True)
        rules.check_transition(subscription.status, SubscriptionStatus.ACTIVE)

        now = self.clock()
        new_end = rules.renewal_end(now, settings.renewal_months)

        subscription.status = SubscriptionStatus.ACTIVE
        subscription.is_trial = False
        subscription.end_date = new_end
        subscription.last_payment_date = now
        subscription.next_payment_date = new_end
        await self.repo.add_payment(
            subscription.id,
            amount=amount,
            paid_at=now,
            transaction_id=transaction_id.strip(),
        )

        logger.info(
            "Subscription renewed for user %s (%s) until %s [txn=%s]",
            user_id, sub_type.value, new_end.isoformat(), transaction_id,
        )
        return subscription

    async def cancel_subscription(
        self, user_id: str, sub_type: SubscriptionType
    ) -> SubscriptionModel:
        """Stop auto-renewal; access continues until ``end_date``."""
        subscription = await self._get_or_404(user_id, sub_type, for_update=True)
        subscription.auto_renew = False
        await self.session.flush()
        logger.info("Auto-renew cancelled for user %s (%s)", user_id, sub_type.value)
        return subscription

    async def get_trial_days_remaining(
        self, user_id: str, sub_type: SubscriptionType
    ) -> Optional[int]:
        """``None`` when the subscription is no longer a trial."""
        subscription = await self._get_or_404(user_id, sub_type)
        if not subscription.is_trial or subscription.trial_end_date is None:
            return None
        return rules.trial_days_remaining(subscription.trial_end_date, self.clock())

    async def get_subscription_history(
        self, user_id: str, sub_type: SubscriptionType
    ) -> list[PaymentModel]:
        subscription = await self._get_or_404(user_id, sub_type)
        return await self.repo.get_payments(subscription.id)

    async def get_payments(self, subscription: SubscriptionModel) -> list[PaymentModel]:
        return await self.repo.get_payments(subscription.id)

    async def update_subscription_status(self) -> int:
        """Expiry sweep.  Safe to repeat; returns rows flipped to inactive."""
        expired = await self.repo.expire_overdue(self.clock())
        if expired:
            logger.info("Subscription sweep: %d subscriptions expired", expired)
        return expired
