"""
Redis cache client with connection pooling and JSON serialization.

Every operation degrades to a miss/no-op when Redis is unreachable or the
cache is disabled, so reads always fall through to the database.
"""
import json
from typing import Optional, Any
import redis
from redis.connection import ConnectionPool
from sportshub.core.config import settings
from sportshub.core.logging import logger

EVENTS_KEY_PATTERN = "events:*"


class RedisCache:
    """Redis cache client with connection pooling."""

    def __init__(self, url: str, enabled: bool = True):
        self.url = url
        self.enabled = enabled
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        """Get or create Redis client with connection pooling."""
        if self._client is None:
            self._pool = redis.ConnectionPool.from_url(
                self.url,
                decode_responses=True,
                max_connections=20
            )
            self._client = redis.Redis(connection_pool=self._pool)
            logger.info("Redis connection pool created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under ``key`` or None."""
        if not self.enabled:
            return None
        try:
            value = self._get_client().get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """
        Set value in cache with expiration.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            expire: Expiration time in seconds

        Returns:
            True if successful, False otherwise
        """
        if not self.enabled:
            return False
        try:
            serialized = json.dumps(value, default=str)
            self._get_client().setex(key, expire, serialized)
            return True
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching ``pattern``; returns the number deleted."""
        if not self.enabled:
            return 0
        try:
            client = self._get_client()
            keys = list(client.scan_iter(match=pattern))
            if keys:
                return client.delete(*keys)
            return 0
        except Exception as e:
            logger.error(f"Redis DELETE_PATTERN error for pattern {pattern}: {e}")
            return 0

    def close(self):
        """Close Redis connection pool."""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("Redis connection pool closed")


async def invalidate_event_cache() -> None:
    """Drop cached event reads after any event, sport or review mutation."""
    await cache.delete_pattern(EVENTS_KEY_PATTERN)


# Create a single instance to be imported throughout the app
cache = RedisCache(settings.REDIS_URL, enabled=settings.CACHE_ENABLED)
