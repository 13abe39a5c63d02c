"""FastAPI dependency injection: server context and query parsing."""

from fastapi import Request

from src.cache.base import ResponseCache
from src.clients.youtube_client import VideoPlatformClient
from src.config import Settings
from src.context import ServerContext


def parse_id_list(raw: str | None, limit: int | None = None) -> list[str]:
    """Split a comma-separated id list.

    Blank entries and repeats are dropped; first-seen order is kept.

    Args:
        raw: Query parameter value, e.g. "a, b,,c"
        limit: Maximum number of ids to keep

    Returns:
        List of ids
    """
    ids: list[str] = []
    for part in (raw or "").split(","):
        value = part.strip()
        if value and value not in ids:
            ids.append(value)
    return ids[:limit] if limit is not None else ids


def get_context(request: Request) -> ServerContext:
    """Return the server context attached to the app."""
    return request.app.state.context


def get_settings(request: Request) -> Settings:
    return get_context(request).settings


def get_client(request: Request) -> VideoPlatformClient:
    return get_context(request).client


def get_cache(request: Request) -> ResponseCache:
    return get_context(request).cache
