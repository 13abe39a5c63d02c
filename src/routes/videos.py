"""Video routes for YouTube Search Proxy."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response

from src.cache.base import ResponseCache
from src.clients.youtube_client import MAX_BATCH_SIZE, VideoPlatformClient
from src.config import Settings
from src.dependencies import get_cache, get_client, get_settings, parse_id_list
from src.exceptions import InvalidArgument, UpstreamError
from src.services import video_service
from src.services.video_service import CachedBody, SearchParams

router = APIRouter(prefix="/api", tags=["videos"])


def _json_response(result: CachedBody) -> Response:
    return Response(
        content=result.body,
        media_type="application/json",
        headers={"Cache-Control": f"public, max-age={result.max_age}"},
    )


@router.get(
    "/search",
    summary="Search long embeddable videos",
    description=(
        "Keyword search joined with video details, filtered by channel allow-list, "
        "minimum duration and embeddability. Cached per query."
    ),
)
async def search_endpoint(
    q: str | None = Query(None, description="Search text"),
    page_token: str = Query("", alias="pageToken", description="Cursor from originalSearch"),
    max_results: int | None = Query(None, alias="maxResults", description="Page size, 1..50"),
    channels: str | None = Query(None, description="Comma-separated allowed channel ids"),
    client: VideoPlatformClient = Depends(get_client),
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Search videos through the YouTube Data API.

    - Missing `q` falls back to the default sample query
    - `items` holds the filtered video resources; `originalSearch` keeps the
      unfiltered page so callers can follow `nextPageToken`
    - Upstream error bodies are passed through with status 500
    """
    query = (q or "").strip() or settings.default_query
    page_size = max_results if max_results is not None else settings.default_page_size
    allowed = parse_id_list(channels) or list(settings.default_allowed_channels)
    params = SearchParams(
        query=query,
        page_token=page_token.strip(),
        page_size=max(1, min(page_size, settings.max_page_size)),
        channels=tuple(allowed),
    )
    try:
        result = await video_service.search_videos(client, cache, params, settings)
    except UpstreamError as e:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=e.payload)
    return _json_response(result)


@router.get(
    "/videos",
    summary="Get video details",
    description="Proxy for the YouTube videos endpoint, cached per id list.",
)
async def videos_endpoint(
    ids: str | None = Query(None, description="Comma-separated video ids, at most 50"),
    client: VideoPlatformClient = Depends(get_client),
    cache: ResponseCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Get full video resources for up to 50 ids.

    - Returns 400 when no ids are given, without calling the API
    - Ids beyond the first 50 are ignored
    """
    try:
        result = await video_service.get_videos(
            client, cache, parse_id_list(ids, limit=MAX_BATCH_SIZE), settings
        )
    except InvalidArgument as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": e.message})
    except UpstreamError as e:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=e.payload)
    return _json_response(result)
