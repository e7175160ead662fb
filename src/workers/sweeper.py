"""
Background Subscription Sweep
=============================

Runs every ``SWEEP_INTERVAL_SECONDS`` (default 1 h) when ``SWEEP_ENABLED``.

Each pass flips lapsed ``trial`` / ``active`` subscriptions to
``inactive`` with a single bulk UPDATE.  Until a pass runs the stored
status may be stale; request paths therefore check ``end_date`` directly.

Concurrency safety
------------------
* **Redis distributed lock** keeps multiple API processes from sweeping at
  the same time.  The UPDATE is idempotent, so a lost lock only costs a
  redundant pass.

Deployments that prefer an external scheduler can disable the loop and run
one pass from cron::

    python -m src.workers.sweeper
"""

from __future__ import annotations

import asyncio
import logging

from src.config import settings
from src.domain.subscription import utcnow
from src.infrastructure.database import async_session_factory
from src.infrastructure.locks import DistributedLock, get_redis
from src.services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

_task: asyncio.Task | None = None
_stop_event: asyncio.Event | None = None


# ── Public API ────────────────────────────────────────────────────────


async def start_sweep_loop() -> None:
    global _task, _stop_event
    if not settings.sweep_enabled:
        logger.info("Subscription sweep disabled")
        return
    _stop_event = asyncio.Event()
    _task = asyncio.create_task(_loop())
    logger.info(
        "Subscription sweep started (interval=%ds)", settings.sweep_interval_seconds
    )


async def stop_sweep_loop() -> None:
    if _stop_event:
        _stop_event.set()
    if _task:
        _task.cancel()
        try:
            await _task
        except asyncio.CancelledError:
            pass
    logger.info("Subscription sweep stopped")


async def run_sweep(session_factory=async_session_factory, clock=utcnow) -> int:
    """Execute one sweep pass.  Returns the number of subscriptions expired."""
    async with session_factory() as session:
        try:
            expired = await SubscriptionService(
                session, clock=clock
            ).update_subscription_status()
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    return expired


async def run_locked_sweep() -> int:
    """One pass guarded by the Redis lock; skipped if another process holds it."""
    redis = await get_redis()
    lock = DistributedLock(redis, "subscription_sweep", ttl_seconds=300)

    if not await lock.acquire():
        logger.debug("Sweep lock held by another worker - skipping pass")
        return 0
    try:
        return await run_sweep()
    finally:
        await lock.release()


# ── Internals ─────────────────────────────────────────────────────────


async def _loop() -> None:
    """Periodic loop: run a sweep then sleep."""
    assert _stop_event is not None
    while not _stop_event.is_set():
        try:
            await run_locked_sweep()
        except Exception:
            logger.exception("Unhandled error in subscription sweep")
        try:
            await asyncio.wait_for(
                _stop_event.wait(), timeout=settings.sweep_interval_seconds
            )
            break
        except asyncio.TimeoutError:
            pass  # next pass


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    count = asyncio.run(run_sweep())
    logger.info("Sweep finished: %d subscriptions expired", count)
