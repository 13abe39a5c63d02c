"""Pydantic schemas for upstream resources and API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchHit(BaseModel):
    """A lightweight video hit from the upstream search call."""

    id: str
    title: str | None = None
    channel_id: str | None = None
    channel_title: str | None = None
    thumbnails: dict[str, str] = {}
    rank: int
    resource: dict[str, Any]

    @classmethod
    def from_resource(cls, resource: dict[str, Any], rank: int) -> "SearchHit | None":
        """Build a hit from a search `items` entry.

        Args:
            resource: Raw search result resource
            rank: Position of the resource in the search page

        Returns:
            SearchHit, or None if the resource carries no video id
        """
        raw_id = resource.get("id")
        video_id = raw_id.get("videoId") if isinstance(raw_id, dict) else raw_id
        if not video_id:
            return None
        snippet = resource.get("snippet") or {}
        thumbnails = {
            name: thumb["url"]
            for name, thumb in (snippet.get("thumbnails") or {}).items()
            if isinstance(thumb, dict) and thumb.get("url")
        }
        return cls(
            id=video_id,
            title=snippet.get("title"),
            channel_id=snippet.get("channelId"),
            channel_title=snippet.get("channelTitle"),
            thumbnails=thumbnails,
            rank=rank,
            resource=resource,
        )


class SearchResultPage(BaseModel):
    """Decoded search payload with its hits in rank order."""

    payload: dict[str, Any]
    hits: list[SearchHit] = []

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SearchResultPage":
        """Parse hits out of a raw search payload."""
        hits = []
        for rank, item in enumerate(payload.get("items") or []):
            hit = SearchHit.from_resource(item, rank)
            if hit is not None:
                hits.append(hit)
        return cls(payload=payload, hits=hits)

    @property
    def items(self) -> list[dict[str, Any]]:
        return self.payload.get("items") or []

    @property
    def video_ids(self) -> list[str]:
        return [hit.id for hit in self.hits]


class VideoDetail(BaseModel):
    """Full metadata for a single video from the upstream videos call."""

    id: str
    duration: str | None = None
    embeddable: bool | None = None
    channel_id: str | None = None
    statistics: dict[str, Any] = {}
    resource: dict[str, Any]

    @classmethod
    def from_resource(cls, resource: dict[str, Any]) -> "VideoDetail":
        """Build a detail from a videos `items` entry."""
        return cls(
            id=resource["id"],
            duration=(resource.get("contentDetails") or {}).get("duration"),
            embeddable=(resource.get("status") or {}).get("embeddable"),
            channel_id=(resource.get("snippet") or {}).get("channelId"),
            statistics=resource.get("statistics") or {},
            resource=resource,
        )


class FilterCriteria(BaseModel):
    """Inclusion rules applied to enriched results."""

    allowed_channels: frozenset[str] = frozenset()
    min_duration_seconds: int = 60
    require_embeddable: bool = True


class SearchResponse(BaseModel):
    """Response schema for the search endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    original_search: dict[str, Any] = Field(alias="originalSearch")
    items: list[dict[str, Any]]
