"""Redis-backed response cache."""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisCache:
    """Response cache shared between processes through Redis.

    Cache operations are best-effort: if Redis is unavailable, reads behave as
    misses and writes are skipped rather than failing the request.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "yt_proxy:"):
        self._client = client
        self._key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        """Create a cache from a Redis URL.

        Args:
            url: Redis connection URL

        Returns:
            RedisCache instance
        """
        client = redis.from_url(url, decode_responses=True)
        logger.info("Redis client created")
        return cls(client)

    async def get(self, key: str) -> str | None:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or Redis error occurs
        """
        try:
            value = await self._client.get(self._key_prefix + key)
        except RedisError as exc:
            logger.warning("Redis error reading cache key '%s': %s", key, exc)
            return None
        if value is not None:
            logger.debug("Cache hit for key: %s", key)
        else:
            logger.debug("Cache miss for key: %s", key)
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Set value in cache with TTL.

        Args:
            key: Cache key
            value: Serialized response body
            ttl: Time to live in seconds
        """
        try:
            await self._client.set(self._key_prefix + key, value, ex=ttl)
            logger.debug("Cached key: %s with TTL: %d", key, ttl)
        except RedisError as exc:
            logger.warning(
                "Failed to cache key '%s' with TTL %d due to Redis error: %s",
                key,
                ttl,
                exc,
            )

    async def close(self) -> None:
        """Close Redis client connection."""
        await self._client.aclose()
        logger.info("Redis client closed")
