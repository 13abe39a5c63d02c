"""Tests for the duration parser and the enrichment pipeline."""

import pytest

from src.models.schemas import FilterCriteria, SearchResultPage, VideoDetail
from src.services.enrichment import enrich, parse_duration
from tests.factories import search_item, search_payload, video_resource


def _page(*items) -> SearchResultPage:
    return SearchResultPage.from_payload(search_payload(list(items)))


def _details(*resources) -> dict[str, VideoDetail]:
    return {resource["id"]: VideoDetail.from_resource(resource) for resource in resources}


def _ids(results) -> list[str]:
    return [result["id"] for result in results]


class TestParseDuration:
    """Tests for ISO-8601 duration parsing."""

    @pytest.mark.parametrize(
        ("iso", "expected"),
        [
            ("PT1M5S", 65),
            ("PT2H", 7200),
            ("PT1H2M3S", 3723),
            ("PT45S", 45),
            ("PT10M", 600),
        ],
    )
    def test_parses_hours_minutes_seconds(self, iso, expected):
        """Each component contributes to the total."""
        assert parse_duration(iso) == expected

    @pytest.mark.parametrize("iso", ["", None, "garbage", "1:05"])
    def test_unreadable_duration_is_zero(self, iso):
        """Missing or unparseable values count as zero seconds."""
        assert parse_duration(iso) == 0

    def test_live_stream_zero_duration(self):
        """Live streams report P0D, which is never long enough."""
        assert parse_duration("P0D") == 0


class TestEnrich:
    """Tests for joining and filtering search hits."""

    def test_mixed_page_keeps_only_long_embeddable_video(self):
        """30s and non-embeddable 120s videos are dropped; the 90s one stays."""
        page = _page(search_item("short"), search_item("ok"), search_item("locked"))
        details = _details(
            video_resource("short", duration="PT30S", embeddable=True),
            video_resource("ok", duration="PT1M30S", embeddable=True),
            video_resource("locked", duration="PT2M", embeddable=False),
        )

        results = enrich(page, details, FilterCriteria())

        assert _ids(results) == ["ok"]

    def test_emits_full_video_resource(self):
        """The detail resource, not the search hit, is emitted."""
        resource = video_resource("a")
        results = enrich(_page(search_item("a")), _details(resource), FilterCriteria())

        assert results == [resource]

    def test_hit_without_detail_is_dropped(self):
        """Search hits with no matching detail never appear."""
        page = _page(search_item("a"), search_item("missing"), search_item("b"))
        details = _details(video_resource("a"), video_resource("b"))

        assert _ids(enrich(page, details, FilterCriteria())) == ["a", "b"]

    def test_output_preserves_search_rank_order(self):
        """Output order follows the search page, not the details mapping."""
        page = _page(*(search_item(video_id) for video_id in ["c", "a", "d", "b"]))
        details = _details(
            video_resource("b"),
            video_resource("a"),
            video_resource("d", duration="PT59S"),
            video_resource("c"),
        )

        assert _ids(enrich(page, details, FilterCriteria())) == ["c", "a", "b"]

    def test_exactly_sixty_seconds_is_too_short(self):
        """The minimum duration is exclusive."""
        page = _page(search_item("sixty"), search_item("sixty-one"))
        details = _details(
            video_resource("sixty", duration="PT1M"),
            video_resource("sixty-one", duration="PT1M1S"),
        )

        assert _ids(enrich(page, details, FilterCriteria())) == ["sixty-one"]

    def test_missing_duration_is_dropped(self):
        """A detail without duration is treated as too short."""
        page = _page(search_item("a"))
        details = _details(video_resource("a", duration=None))

        assert enrich(page, details, FilterCriteria()) == []

    def test_missing_embeddable_flag_is_accepted(self):
        """Only an explicit false embeddable flag rejects a video."""
        page = _page(search_item("a"))
        details = _details(video_resource("a", embeddable=None))

        assert _ids(enrich(page, details, FilterCriteria())) == ["a"]

    def test_allowed_channels_restrict_output(self):
        """With a non-empty allow-list only member channels survive."""
        page = _page(search_item("a", "UC1"), search_item("b", "UC2"), search_item("c", "UC3"))
        details = _details(
            video_resource("a", channel_id="UC1"),
            video_resource("b", channel_id="UC2"),
            video_resource("c", channel_id="UC3"),
        )
        criteria = FilterCriteria(allowed_channels=frozenset({"UC1", "UC3"}))

        assert _ids(enrich(page, details, criteria)) == ["a", "c"]

    def test_empty_allow_list_imposes_no_channel_restriction(self):
        """An empty allow-list lets every channel through."""
        page = _page(search_item("a", "UC1"), search_item("b", "UC2"))
        details = _details(
            video_resource("a", channel_id="UC1"), video_resource("b", channel_id="UC2")
        )

        assert _ids(enrich(page, details, FilterCriteria())) == ["a", "b"]

    def test_channel_falls_back_to_search_hit(self):
        """The hit's channel is used when the detail has none."""
        resource = video_resource("a")
        del resource["snippet"]["channelId"]
        criteria = FilterCriteria(allowed_channels=frozenset({"UC1"}))

        results = enrich(_page(search_item("a", "UC1")), _details(resource), criteria)

        assert _ids(results) == ["a"]

    def test_everything_filtered_returns_empty_list(self):
        """No survivors yields an empty list, not an error."""
        page = _page(search_item("a"), search_item("b"))
        details = _details(
            video_resource("a", duration="PT10S"), video_resource("b", embeddable=False)
        )

        assert enrich(page, details, FilterCriteria()) == []

    def test_empty_page_returns_empty_list(self):
        """A page with no hits yields no results."""
        assert enrich(_page(), {}, FilterCriteria()) == []


class TestSearchResultPage:
    """Tests for parsing search payloads."""

    def test_hits_keep_rank_and_snippet_fields(self):
        """Hits carry id, channel, thumbnails and rank."""
        page = _page(search_item("a", "UC1"), search_item("b", "UC2"))

        assert page.video_ids == ["a", "b"]
        assert page.hits[1].rank == 1
        assert page.hits[0].channel_id == "UC1"
        assert page.hits[0].thumbnails["medium"].endswith("/a/mqdefault.jpg")

    def test_plain_string_id_is_accepted(self):
        """Resources whose id is a bare string are still parsed."""
        item = search_item("a")
        item["id"] = "a"

        assert _page(item).video_ids == ["a"]

    def test_items_without_video_id_are_skipped(self):
        """Channel or playlist results without a videoId are ignored."""
        channel_item = {"id": {"kind": "youtube#channel", "channelId": "UC1"}, "snippet": {}}

        page = _page(channel_item, search_item("a"))

        assert page.video_ids == ["a"]
        assert len(page.items) == 2
