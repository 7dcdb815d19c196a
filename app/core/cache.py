"""Redis-backed JSON cache used for cache-aside reads.

Failures talking to Redis are logged and treated as misses; the database stays the
source of truth.
"""

import json
import logging
from functools import lru_cache
from typing import Any

import redis

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class Cache:
    """Thin JSON get/set/delete wrapper over a redis client."""

    def __init__(self, client: "redis.Redis | None", default_ttl: int) -> None:
        self._client = client
        self.default_ttl = default_ttl

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def get(self, key: str) -> Any | None:
        if self._client is None:
            return None
        try:
            raw = self._client.get(key)
        except redis.RedisError as e:
            logger.warning("Cache get failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        if self._client is None:
            return
        try:
            self._client.set(key, json.dumps(value), ex=ttl or self.default_ttl)
        except redis.RedisError as e:
            logger.warning("Cache set failed for %s: %s", key, e)

    def delete(self, *keys: str) -> None:
        """Delete one or more keys in a single round-trip."""
        if self._client is None or not keys:
            return
        try:
            self._client.delete(*keys)
        except redis.RedisError as e:
            logger.warning("Cache delete failed for %s: %s", ", ".join(keys), e)

    def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False


@lru_cache
def get_cache() -> Cache:
    """Dependency returning the process-wide cache (disabled when CACHE_ENABLED is false)."""
    settings = get_settings()
    client = None
    if settings.CACHE_ENABLED:
        client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return Cache(client, default_ttl=settings.CACHE_TTL_SECONDS)
