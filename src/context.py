"""Per-process server context shared by request handlers."""

import logging
from dataclasses import dataclass

from src.cache.base import ResponseCache
from src.cache.memory import MemoryCache
from src.cache.redis_client import RedisCache
from src.clients.youtube_client import VideoPlatformClient, YouTubeClient
from src.config import Settings
from src.middleware import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


def create_cache(settings: Settings) -> ResponseCache:
    """Pick the cache backend: Redis when configured, in-process otherwise."""
    if settings.redis_url:
        return RedisCache.from_url(settings.redis_url)
    logger.info("Using in-memory response cache")
    return MemoryCache()


@dataclass
class ServerContext:
    """Upstream client, response cache and rate limiter built once at startup."""

    settings: Settings
    client: VideoPlatformClient
    cache: ResponseCache
    rate_limiter: FixedWindowRateLimiter

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerContext":
        return cls(
            settings=settings,
            client=YouTubeClient.from_settings(settings),
            cache=create_cache(settings),
            rate_limiter=FixedWindowRateLimiter(
                settings.rate_limit_max_requests, settings.rate_limit_window_seconds
            ),
        )

    async def aclose(self) -> None:
        """Release the HTTP connection pool and cache connections."""
        await self.client.aclose()
        await self.cache.close()
