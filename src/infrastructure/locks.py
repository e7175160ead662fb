"""
Redis-based distributed lock.

The subscription sweep may be scheduled in every API process; the lock
ensures a single process runs each pass.  The sweep is idempotent, so the
lock only saves duplicate work, it does not protect correctness.

Acquire uses SET NX EX; release is an atomic check-and-delete in Lua so a
process never deletes a lock that expired and was taken over by another.
"""

from __future__ import annotations

import uuid

import redis.asyncio as aioredis

from src.config import settings

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""

_pool: aioredis.ConnectionPool | None = None


class LockNotAcquired(Exception):
    """Another holder owns the lock."""


async def get_redis() -> aioredis.Redis:
    """Return a Redis client backed by a lazily created shared pool."""
    global _pool
    if _pool is None:
        _pool = aioredis.ConnectionPool.from_url(
            settings.redis_url, decode_responses=True
        )
    return aioredis.Redis(connection_pool=_pool)


class DistributedLock:
    def __init__(
        self, client: aioredis.Redis, name: str, ttl_seconds: int = 60
    ):
        self.redis = client
        self.key = f"maala:lock:{name}"
        self.ttl = ttl_seconds
        self.token = uuid.uuid4().hex

    async def acquire(self) -> bool:
        return bool(
            await self.redis.set(self.key, self.token, nx=True, ex=self.ttl)
        )

    async def release(self) -> bool:
        """Release only if we still own the lock.  Returns ownership."""
        return bool(await self.redis.eval(_RELEASE_SCRIPT, 1, self.key, self.token))

    async def __aenter__(self) -> "DistributedLock":
        if not await self.acquire():
            raise LockNotAcquired(self.key)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()
