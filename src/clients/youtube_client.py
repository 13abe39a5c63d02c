"""HTTP client for the YouTube Data API v3."""

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from src.config import Settings
from src.exceptions import InvalidArgument, UpstreamError
from src.models.schemas import SearchResultPage, VideoDetail

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50
MAX_BATCH_SIZE = 50
VIDEO_PARTS = "snippet,contentDetails,status,statistics"
_MAX_ERROR_BODY_LENGTH = 200


class VideoPlatformClient(Protocol):
    """Upstream operations the search service depends on."""

    async def search(
        self, query: str, page_token: str, page_size: int, region_code: str
    ) -> SearchResultPage: ...

    async def get_details_payload(self, ids: Sequence[str]) -> dict[str, Any]: ...

    async def get_details(self, ids: Sequence[str]) -> dict[str, VideoDetail]: ...

    async def aclose(self) -> None: ...


def _handle_request_error(error: httpx.RequestError, endpoint: str) -> UpstreamError:
    """Convert a network/transport error to UpstreamError.

    Args:
        error: Request error (timeout, DNS, connection refused, etc.)
        endpoint: Upstream endpoint that was called

    Returns:
        UpstreamError with transport error details
    """
    logger.error("YouTube API request to /%s failed: %s", endpoint, error)
    message = f"YouTube API request to /{endpoint} failed: {error}"
    return UpstreamError(message, payload={"error": {"message": message}})


def _decode(response: httpx.Response, endpoint: str) -> dict[str, Any]:
    """Decode a YouTube API response, raising on error payloads.

    The API reports failures as a JSON body with an `error` member; that body
    is kept as the error payload so callers can pass it through.

    Args:
        response: Upstream HTTP response
        endpoint: Upstream endpoint that was called

    Returns:
        Decoded JSON payload

    Raises:
        UpstreamError: If the body is not a JSON object or carries an error
    """
    try:
        data = response.json()
    except ValueError:
        body = response.text[:_MAX_ERROR_BODY_LENGTH] if response.text else "no body"
        logger.error(
            "YouTube API /%s returned non-JSON body (HTTP %d)", endpoint, response.status_code
        )
        message = f"YouTube API /{endpoint} returned HTTP {response.status_code}: {body}"
        raise UpstreamError(
            message,
            payload={"error": {"code": response.status_code, "message": message}},
            status_code=response.status_code,
        )

    if not isinstance(data, dict):
        raise UpstreamError(f"YouTube API /{endpoint} returned an unexpected payload")
    if data.get("error"):
        logger.error(
            "YouTube API /%s returned error (HTTP %d): %s",
            endpoint,
            response.status_code,
            data["error"],
        )
        raise UpstreamError(
            f"YouTube API /{endpoint} returned an error",
            payload=data,
            status_code=response.status_code,
        )
    return data


class YouTubeClient:
    """YouTube Data API client over a shared httpx AsyncClient."""

    def __init__(self, http_client: httpx.AsyncClient, api_key: str):
        self._http_client = http_client
        self._api_key = api_key

    @classmethod
    def from_settings(cls, settings: Settings) -> "YouTubeClient":
        """Create a client with its own connection pool.

        Args:
            settings: Application settings

        Returns:
            YouTubeClient instance
        """
        http_client = httpx.AsyncClient(
            base_url=settings.youtube_api_base_url,
            timeout=settings.upstream_timeout_seconds,
        )
        logger.info("HTTP client created")
        return cls(http_client, settings.yt_api_key)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http_client.aclose()
        logger.info("HTTP client closed")

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http_client.get(
                f"/{endpoint}", params={**params, "key": self._api_key}
            )
        except httpx.RequestError as e:
            raise _handle_request_error(e, endpoint) from e
        return _decode(response, endpoint)

    async def search(
        self, query: str, page_token: str, page_size: int, region_code: str
    ) -> SearchResultPage:
        """Run a keyword video search.

        Args:
            query: Search text
            page_token: Opaque cursor from a previous page, empty for the first
            page_size: Requested hits, clamped to 1..50
            region_code: ISO 3166-1 region to bias results

        Returns:
            SearchResultPage with the raw payload and parsed hits

        Raises:
            UpstreamError: If the API call fails or returns an error body
        """
        params = {
            "part": "snippet",
            "type": "video",
            "maxResults": max(1, min(page_size, MAX_PAGE_SIZE)),
            "q": query,
            "regionCode": region_code,
        }
        if page_token:
            params["pageToken"] = page_token
        data = await self._get("search", params)
        page = SearchResultPage.from_payload(data)
        logger.info("Fetched %d search hits for %r from YouTube API", len(page.hits), query)
        return page

    async def get_details_payload(self, ids: Sequence[str]) -> dict[str, Any]:
        """Fetch the raw videos payload for a batch of ids.

        Args:
            ids: Between 1 and 50 video ids

        Returns:
            Decoded videos payload

        Raises:
            InvalidArgument: If no ids or more than 50 ids are given
            UpstreamError: If the API call fails or returns an error body
        """
        if not ids:
            raise InvalidArgument("ids required")
        if len(ids) > MAX_BATCH_SIZE:
            raise InvalidArgument(f"at most {MAX_BATCH_SIZE} ids per request")
        data = await self._get("videos", {"part": VIDEO_PARTS, "id": ",".join(ids)})
        logger.info("Fetched details for %d videos from YouTube API", len(ids))
        return data

    async def get_details(self, ids: Sequence[str]) -> dict[str, VideoDetail]:
        """Fetch video details keyed by id.

        Raises:
            InvalidArgument: If no ids or more than 50 ids are given
            UpstreamError: If the API call fails or returns an error body
        """
        data = await self.get_details_payload(ids)
        return {
            item["id"]: VideoDetail.from_resource(item)
            for item in data.get("items") or []
            if item.get("id")
        }
