"""FastAPI dependency injection helpers."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import SubscriptionType
from src.infrastructure.database import async_session_factory
from src.infrastructure.location_client import LocationClient, get_location_client
from src.services.sellers import SellerService
from src.services.subscriptions import SubscriptionService


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id", min_length=1, max_length=64),
) -> str:
    """Caller identity, set by the authenticating gateway in front of the API."""
    return x_user_id


def get_seller_service(
    db: AsyncSession = Depends(get_db),
    location_client: LocationClient = Depends(get_location_client),
) -> SellerService:
    return SellerService(db, location_client)


def get_subscription_service(
    db: AsyncSession = Depends(get_db),
) -> SubscriptionService:
    return SubscriptionService(db)


def require_subscription(sub_type: SubscriptionType):
    """Dependency factory: reject callers without a usable subscription."""

    async def _check(
        user_id: str = Depends(get_current_user_id),
        service: SubscriptionService = Depends(get_subscription_service),
    ) -> str:
        await service.require_active(user_id, sub_type)
        return user_id

    return _check
