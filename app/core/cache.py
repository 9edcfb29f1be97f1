"""Key-value cache backends (in-memory and Redis)."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, Protocol

from app.core.config import Settings, get_settings


class CacheBackend(Protocol):
    """Protocol for cache providers (Redis, memory, etc.)."""

    async def get(self, key: str) -> str | None:
        """Get cached value by key."""

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Set cached value with optional TTL."""

    async def delete(self, key: str) -> None:
        """Delete cached value by key."""


class InMemoryCacheBackend:
    """Process-local cache with lazy TTL eviction."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._items: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()
        self._now = now_provider or time.monotonic

    async def get(self, key: str) -> str | None:
        async with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and expires_at <= self._now():
                del self._items[key]
                return None
            return value

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        expires_at = self._now() + ttl_seconds if ttl_seconds else None
        async with self._lock:
            self._items[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._items.pop(key, None)


class RedisCacheBackend:
    """Redis-backed cache shared across app instances."""

    def __init__(self, *, redis_url: str) -> None:
        self._redis_url = redis_url
        self._init_lock = asyncio.Lock()
        self._client: Any | None = None

    async def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client

        async with self._init_lock:
            if self._client is None:
                from redis.asyncio import from_url

                self._client = from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
        return self._client

    async def get(self, key: str) -> str | None:
        client = await self._ensure_client()
        return await client.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        client = await self._ensure_client()
        await client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        client = await self._ensure_client()
        await client.delete(key)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_cache_backend: CacheBackend | None = None
_cache_backend_signature: tuple[str, str | None] | None = None


def _build_cache_backend(settings: Settings) -> CacheBackend:
    if settings.pending_booking_backend == "redis":
        return RedisCacheBackend(redis_url=settings.redis_url or "")
    return InMemoryCacheBackend()


def get_cache_backend() -> CacheBackend:
    """Return shared cache instance for configured backend."""
    global _cache_backend, _cache_backend_signature
    settings = get_settings()
    signature = (settings.pending_booking_backend, settings.redis_url)
    if _cache_backend is None or _cache_backend_signature != signature:
        _cache_backend = _build_cache_backend(settings)
        _cache_backend_signature = signature
    return _cache_backend


async def close_cache_backend() -> None:
    """Release the shared Redis connection pool, if one was opened."""
    global _cache_backend, _cache_backend_signature
    if isinstance(_cache_backend, RedisCacheBackend):
        await _cache_backend.close()
    _cache_backend = None
    _cache_backend_signature = None
