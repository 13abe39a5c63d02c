"""Business logic for video search and details retrieval with caching."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from src.cache.base import ResponseCache
from src.clients.youtube_client import VideoPlatformClient
from src.config import Settings
from src.exceptions import InvalidArgument
from src.models.schemas import FilterCriteria, SearchResponse
from src.services.enrichment import enrich

logger = logging.getLogger(__name__)

SEARCH_CACHE_KEY_PREFIX = "search:"
VIDEOS_CACHE_KEY_PREFIX = "videos:"


@dataclass(frozen=True)
class SearchParams:
    """Normalized search request."""

    query: str
    page_token: str
    page_size: int
    channels: tuple[str, ...]


@dataclass(frozen=True)
class CachedBody:
    """Serialized JSON response body and the max-age to advertise for it."""

    body: str
    max_age: int
    cache_hit: bool = False


def _get_search_cache_key(params: SearchParams) -> str:
    """Generate cache key for a search request.

    Fields are JSON-encoded so separators inside the query or page token
    cannot make two requests share a key. Channel order and duplicates do
    not change the key.

    Args:
        params: Normalized search request

    Returns:
        Cache key string
    """
    fields = [params.query, params.page_token, params.page_size, sorted(set(params.channels))]
    return SEARCH_CACHE_KEY_PREFIX + json.dumps(fields, ensure_ascii=False)


def _get_videos_cache_key(ids: Sequence[str]) -> str:
    """Generate cache key for a details batch."""
    return f"{VIDEOS_CACHE_KEY_PREFIX}{','.join(ids)}"


def _serialize(response: SearchResponse) -> str:
    return response.model_dump_json(by_alias=True)


async def search_videos(
    client: VideoPlatformClient,
    cache: ResponseCache,
    params: SearchParams,
    settings: Settings,
) -> CachedBody:
    """Search videos, keeping only long, embeddable videos from allowed channels.

    Logic:
    1. Check cache for a serialized response
    2. Run the upstream search
    3. Fetch details for the hits (skipped when there are none)
    4. Join and filter, then cache the serialized response

    Args:
        client: Upstream platform client
        cache: Response cache
        params: Normalized search request
        settings: Application settings

    Returns:
        CachedBody holding the `{originalSearch, items}` JSON document

    Raises:
        UpstreamError: If either upstream call fails
    """
    cache_key = _get_search_cache_key(params)
    cached = await cache.get(cache_key)
    if cached is not None:
        logger.info("Returning cached search for %r", params.query)
        return CachedBody(cached, settings.search_max_age_seconds, cache_hit=True)

    page = await client.search(
        params.query, params.page_token, params.page_size, settings.region_code
    )
    original_search = {**page.payload, "items": page.items}

    if not page.hits:
        body = _serialize(SearchResponse(original_search=original_search, items=[]))
        await cache.set(cache_key, body, settings.empty_search_cache_ttl_seconds)
        logger.info("No search hits for %r", params.query)
        return CachedBody(body, settings.empty_search_max_age_seconds)

    details = await client.get_details(page.video_ids)
    criteria = FilterCriteria(
        allowed_channels=frozenset(params.channels),
        min_duration_seconds=settings.min_duration_seconds,
    )
    items = enrich(page, details, criteria)

    body = _serialize(SearchResponse(original_search=original_search, items=items))
    await cache.set(cache_key, body, settings.search_cache_ttl_seconds)
    logger.info(
        "Fetched and cached search for %r: %d of %d hits kept",
        params.query,
        len(items),
        len(page.hits),
    )
    return CachedBody(body, settings.search_max_age_seconds)


async def get_videos(
    client: VideoPlatformClient,
    cache: ResponseCache,
    ids: Sequence[str],
    settings: Settings,
) -> CachedBody:
    """Get the raw details payload for a batch of video ids with caching.

    Args:
        client: Upstream platform client
        cache: Response cache
        ids: Normalized video ids
        settings: Application settings

    Returns:
        CachedBody holding the upstream videos payload

    Raises:
        InvalidArgument: If no ids are given
        UpstreamError: If the upstream call fails
    """
    if not ids:
        raise InvalidArgument("ids required")

    cache_key = _get_videos_cache_key(ids)
    cached = await cache.get(cache_key)
    if cached is not None:
        logger.info("Returning cached details for %d videos", len(ids))
        return CachedBody(cached, settings.videos_max_age_seconds, cache_hit=True)

    data = await client.get_details_payload(ids)
    body = json.dumps(data)
    await cache.set(cache_key, body, settings.videos_cache_ttl_seconds)
    logger.info("Fetched and cached details for %d videos", len(ids))
    return CachedBody(body, settings.videos_max_age_seconds)
