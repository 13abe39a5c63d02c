"""In-process response cache."""

import logging
import math
import time
from collections.abc import Callable
from typing import NamedTuple

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: str
    ttl: int


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class MemoryCache:
    """Per-entry TTL cache with no capacity limit.

    Expiry is fixed at insertion time. Expired entries are purged on writes.
    """

    def __init__(self, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache = TLRUCache(maxsize=math.inf, ttu=_time_to_use, timer=timer)

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> str | None:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if absent or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for key: %s", key)
            return None
        logger.debug("Cache hit for key: %s", key)
        return entry.value

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Set value in cache.

        Args:
            key: Cache key
            value: Serialized response body
            ttl: Time to live in seconds
        """
        self._entries.expire()
        self._entries[key] = _Entry(value, ttl)
        logger.debug("Cached key: %s with TTL: %d", key, ttl)

    async def close(self) -> None:
        self._entries.clear()
