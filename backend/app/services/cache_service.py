from __future__ import annotations

import json
import logging
from typing import Any

from redis import Redis

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_sync_redis: Redis | None = None


class _Missing:
    def __repr__(self) -> str:
        return "CACHE_MISS"


# Returned by `CacheService.get` when no entry exists. A stored JSON `null`
# comes back as `None`, which callers treat as a confirmed absence.
CACHE_MISS: Any = _Missing()


def get_sync_redis() -> Redis:
    global _sync_redis
    if _sync_redis is None:
        settings = get_settings()
        _sync_redis = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    return _sync_redis


class CacheService:
    """JSON values in Redis under the configured key namespace."""

    def __init__(self, client: Redis, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or get_settings()

    @property
    def default_ttl(self) -> int:
        return self._settings.cache_default_ttl_seconds

    @property
    def negative_ttl(self) -> int:
        return self._settings.cache_negative_ttl_seconds

    def get(self, key: str) -> Any:
        raw = self._client.get(self._settings.cache_key(key))
        if raw is None:
            return CACHE_MISS
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry %s", key)
            self.delete(key)
            return CACHE_MISS

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        seconds = ttl if ttl is not None else self.default_ttl
        self._client.set(self._settings.cache_key(key), json.dumps(value, default=str), ex=max(1, seconds))

    def delete(self, key: str) -> None:
        self._client.delete(self._settings.cache_key(key))


def get_cache_service() -> CacheService:
    return CacheService(client=get_sync_redis())
