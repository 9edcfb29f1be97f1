"""Pending-booking marker persistence."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from app.core.cache import CacheBackend, get_cache_backend
from app.core.config import get_settings
from app.modules.sessions.schemas import PendingBookingMarker

logger = logging.getLogger(__name__)


class PendingBookingStore:
    """Keeps one pending-booking marker per user under a well-known key."""

    def __init__(self, cache: CacheBackend, key_name: str, ttl_seconds: int) -> None:
        self.cache = cache
        self.key_name = key_name
        self.ttl_seconds = ttl_seconds

    def _key(self, user_id: int) -> str:
        return f"{self.key_name}:{user_id}"

    async def save(self, user_id: int, marker: PendingBookingMarker) -> None:
        await self.cache.set(
            self._key(user_id),
            marker.model_dump_json(by_alias=True),
            ttl_seconds=self.ttl_seconds,
        )

    async def load(self, user_id: int) -> PendingBookingMarker | None:
        raw = await self.cache.get(self._key(user_id))
        if raw is None:
            return None
        try:
            return PendingBookingMarker.model_validate_json(raw)
        except ValidationError:
            logger.warning("Dropping malformed pending booking marker for user %s", user_id)
            await self.cache.delete(self._key(user_id))
            return None

    async def clear(self, user_id: int) -> None:
        await self.cache.delete(self._key(user_id))


def get_pending_booking_store() -> PendingBookingStore:
    """Dependency provider for the marker store."""
    settings = get_settings()
    return PendingBookingStore(
        get_cache_backend(),
        key_name=settings.pending_booking_key,
        ttl_seconds=settings.pending_booking_ttl_seconds,
    )
