"""Join search hits to their video details and apply inclusion rules."""

import logging
import re
from collections.abc import Mapping
from typing import Any

from src.models.schemas import FilterCriteria, SearchHit, SearchResultPage, VideoDetail

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


def parse_duration(iso: str | None) -> int:
    """Convert an ISO-8601 `PT#H#M#S` duration to seconds.

    Missing or unparseable values count as zero so they never pass the
    minimum-duration rule.

    Args:
        iso: Duration string such as "PT4M13S"

    Returns:
        Total seconds, 0 if the value cannot be read
    """
    if not iso:
        return 0
    match = _DURATION_PATTERN.search(iso)
    if not match:
        return 0
    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def _rejection_reason(hit: SearchHit, detail: VideoDetail | None, criteria: FilterCriteria) -> str | None:
    if detail is None:
        return "no details"
    if criteria.allowed_channels:
        channel_id = detail.channel_id or hit.channel_id
        if channel_id not in criteria.allowed_channels:
            return f"channel {channel_id} not allowed"
    if criteria.require_embeddable and detail.embeddable is False:
        return "not embeddable"
    if parse_duration(detail.duration) <= criteria.min_duration_seconds:
        return f"too short ({detail.duration})"
    return None


def enrich(
    page: SearchResultPage,
    details: Mapping[str, VideoDetail],
    criteria: FilterCriteria,
) -> list[dict[str, Any]]:
    """Keep the video resources whose search hits pass every inclusion rule.

    Output follows search rank order; hits are only dropped, never reordered.

    Args:
        page: Search page in rank order
        details: Video details keyed by video id
        criteria: Inclusion rules

    Returns:
        Full video resources of the accepted hits
    """
    results = []
    for hit in page.hits:
        detail = details.get(hit.id)
        reason = _rejection_reason(hit, detail, criteria)
        if reason is not None:
            logger.debug("Dropping video %s: %s", hit.id, reason)
            continue
        results.append(detail.resource)
    return results
