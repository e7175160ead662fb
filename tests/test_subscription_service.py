"""
Subscription lifecycle tests against SQLite.

The service clock is injected, so trial expiry and renewal periods are
crossed by advancing ``clock.now`` instead of sleeping.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from src.domain.enums import SubscriptionStatus, SubscriptionType
from src.domain.errors import (
    ConflictError,
    NotFoundError,
    SubscriptionRequiredError,
    ValidationError,
)
from src.domain.subscription import as_utc
from src.services.subscriptions import SubscriptionService
from src.workers.sweeper import run_sweep

SELLER = SubscriptionType.SELLER
BUYER = SubscriptionType.BUYER


@pytest_asyncio.fixture
async def service(db_session, clock):
    return SubscriptionService(db_session, clock=clock)


class TestCreate:
    @pytest.mark.asyncio
    async def test_starts_three_month_trial(self, service, clock):
        sub = await service.create_subscription("u1", SELLER)
        assert sub.status == SubscriptionStatus.TRIAL
        assert sub.is_trial is True
        assert sub.auto_renew is True
        assert as_utc(sub.start_date) == clock.now
        assert as_utc(sub.end_date) == datetime(2026, 6, 2, 10, 0, tzinfo=timezone.utc)
        assert sub.trial_end_date == sub.end_date

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self, service):
        await service.create_subscription("u1", SELLER)
        with pytest.raises(ConflictError):
            await service.create_subscription("u1", SELLER)

    @pytest.mark.asyncio
    async def test_types_are_independent(self, service):
        seller = await service.create_subscription("u1", SELLER)
        buyer = await service.create_subscription("u1", BUYER)
        assert seller.id != buyer.id
        assert await service.is_subscription_active("u1", BUYER)


class TestStatus:
    @pytest.mark.asyncio
    async def test_missing_subscription_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_subscription_status("nobody", SELLER)

    @pytest.mark.asyncio
    async def test_missing_subscription_is_not_active(self, service):
        assert await service.is_subscription_active("nobody", SELLER) is False

    @pytest.mark.asyncio
    async def test_trial_expires_without_sweep(self, service, clock):
        await service.create_subscription("u1", SELLER)
        clock.now = clock.now + timedelta(days=92)
        # stored status is still trial; the check trusts end_date
        sub = await service.get_subscription_status("u1", SELLER)
        assert sub.status == SubscriptionStatus.TRIAL
        assert await service.is_subscription_active("u1", SELLER) is False

    @pytest.mark.asyncio
    async def test_require_active_raises_with_price(self, service):
        with pytest.raises(SubscriptionRequiredError) as exc_info:
            await service.require_active("nobody", BUYER)
        err = exc_info.value
        assert err.status_code == 403
        assert err.details == {"subscription_type": "buyer", "price": 59}
        assert "₹59/month" in err.suggestion

    @pytest.mark.asyncio
    async def test_require_active_passes_during_trial(self, service):
        await service.create_subscription("u1", SELLER)
        await service.require_active("u1", SELLER)


class TestRenew:
    @pytest.mark.asyncio
    async def test_trial_to_active(self, service, clock):
        await service.create_subscription("u1", SELLER)
        clock.now = clock.now + timedelta(days=10)
        sub = await service.renew_subscription("u1", SELLER, 79, "txn_1")

        assert sub.status == SubscriptionStatus.ACTIVE
        assert sub.is_trial is False
        assert as_utc(sub.end_date) == datetime(2026, 4, 12, 10, 0, tzinfo=timezone.utc)
        assert as_utc(sub.last_payment_date) == clock.now
        assert sub.next_payment_date == sub.end_date

        history = await service.get_subscription_history("u1", SELLER)
        assert [(p.amount, p.transaction_id) for p in history] == [(79, "txn_1")]

    @pytest.mark.asyncio
    async def test_inactive_can_be_renewed(self, service, session_factory, clock):
        await service.create_subscription("u1", SELLER)
        await service.session.commit()
        clock.now = clock.now + timedelta(days=100)
        assert await run_sweep(session_factory, clock=clock) == 1

        service.session.expire_all()
        sub = await service.renew_subscription("u1", SELLER, 79, "txn_2")
        assert sub.status == SubscriptionStatus.ACTIVE
        assert await service.is_subscription_active("u1", SELLER)

    @pytest.mark.asyncio
    async def test_history_keeps_payment_order(self, service, clock):
        await service.create_subscription("u1", BUYER)
        for n in range(3):
            clock.now = clock.now + timedelta(days=30)
            await service.renew_subscription("u1", BUYER, 59, f"txn_{n}")
        history = await service.get_subscription_history("u1", BUYER)
        assert [p.transaction_id for p in history] == ["txn_0", "txn_1", "txn_2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount,txn", [(0, "txn"), (-5, "txn"), (79, ""), (79, "  ")])
    async def test_invalid_payment_rejected(self, service, amount, txn):
        await service.create_subscription("u1", SELLER)
        with pytest.raises(ValidationError):
            await service.renew_subscription("u1", SELLER, amount, txn)
        assert await service.get_subscription_history("u1", SELLER) == []

    @pytest.mark.asyncio
    async def test_renew_missing_subscription(self, service):
        with pytest.raises(NotFoundError):
            await service.renew_subscription("nobody", SELLER, 79, "txn")


class TestCancelAndTrialDays:
    @pytest.mark.asyncio
    async def test_cancel_keeps_access_until_end(self, service):
        await service.create_subscription("u1", SELLER)
        sub = await service.cancel_subscription("u1", SELLER)
        assert sub.auto_renew is False
        assert sub.status == SubscriptionStatus.TRIAL
        assert await service.is_subscription_active("u1", SELLER)

    @pytest.mark.asyncio
    async def test_cancel_missing_subscription(self, service):
        with pytest.raises(NotFoundError):
            await service.cancel_subscription("nobody", SELLER)

    @pytest.mark.asyncio
    async def test_trial_days_count_down(self, service, clock):
        await service.create_subscription("u1", SELLER)
        assert await service.get_trial_days_remaining("u1", SELLER) == 92
        clock.now = clock.now + timedelta(days=30, hours=1)
        assert await service.get_trial_days_remaining("u1", SELLER) == 62
        clock.now = clock.now + timedelta(days=200)
        assert await service.get_trial_days_remaining("u1", SELLER) == 0

    @pytest.mark.asyncio
    async def test_trial_days_none_after_renewal(self, service):
        await service.create_subscription("u1", SELLER)
        await service.renew_subscription("u1", SELLER, 79, "txn")
        assert await service.get_trial_days_remaining("u1", SELLER) is None


class TestSweep:
    @pytest.mark.asyncio
    async def test_expires_only_lapsed_rows_and_is_idempotent(self, service, clock):
        await service.create_subscription("old", SELLER)
        clock.now = clock.now + timedelta(days=60)
        await service.create_subscription("new", SELLER)
        clock.now = clock.now + timedelta(days=40)

        assert await service.update_subscription_status() == 1
        assert await service.update_subscription_status() == 0

        service.session.expire_all()
        old = await service.get_subscription_status("old", SELLER)
        new = await service.get_subscription_status("new", SELLER)
        assert old.status == SubscriptionStatus.INACTIVE
        assert new.status == SubscriptionStatus.TRIAL
