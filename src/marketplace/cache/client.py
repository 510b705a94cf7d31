"""
marketplace.cache.client

Async cache client over `redis.asyncio`.

Responsibilities:
- get/set by key with TTL; `None` is the miss signal.
- Bound every call by a timeout and surface any failure as `CacheUnavailable`.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import redis.asyncio as redis
from redis.exceptions import RedisError


class CacheUnavailable(Exception):
    """Connection failure, timeout or protocol error talking to the cache."""


class CacheClient(Protocol):
    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes, *, ttl_seconds: int) -> None: ...

    async def ping(self) -> bool: ...


class RedisCache:
    def __init__(self, client: redis.Redis, *, timeout_seconds: float) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_url(cls, url: str, *, timeout_seconds: float) -> RedisCache:
        # redis-py's pool is safe for concurrent use by many in-flight requests.
        client = redis.from_url(
            url,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client, timeout_seconds=timeout_seconds)

    async def get(self, key: str) -> bytes | None:
        try:
            async with asyncio.timeout(self._timeout_seconds):
                return await self._client.get(key)
        except (RedisError, OSError, TimeoutError) as e:
            raise CacheUnavailable(f"get failed: {type(e).__name__}") from e

    async def set(self, key: str, value: bytes, *, ttl_seconds: int) -> None:
        try:
            async with asyncio.timeout(self._timeout_seconds):
                await self._client.set(key, value, ex=ttl_seconds)
        except (RedisError, OSError, TimeoutError) as e:
            raise CacheUnavailable(f"set failed: {type(e).__name__}") from e

    async def ping(self) -> bool:
        try:
            async with asyncio.timeout(self._timeout_seconds):
                return bool(await self._client.ping())
        except (RedisError, OSError, TimeoutError):
            return False

    async def close(self) -> None:
        await self._client.aclose()


# --- Module Notes -----------------------------------------------------------
# Cancellation (CancelledError) is not caught here; only the cache's own
# timeout is turned into a miss by the decorator.
