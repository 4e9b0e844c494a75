"""Tests for the youtube_discovery adapter."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from youtube_tools_mcp.adapters.discovery import (
    DiscoveryAdapter,
    DiscoveryRequest,
    filter_and_sort,
    parse_search_input,
    parse_search_params,
)
from youtube_tools_mcp.errors import InvalidReference
from youtube_tools_mcp.models.search import SearchParameters
from youtube_tools_mcp.models.youtube import SearchResultItem


def _entry(video_id: str, views=None, duration=None, upload_date=None, title="t") -> dict:
    return {
        "id": video_id,
        "title": title,
        "view_count": views,
        "duration": duration,
        "upload_date": upload_date,
        "channel": "Chan",
        "channel_id": "UCchan",
        "thumbnails": [{"url": "https://i.ytimg.com/small.jpg"}, {"url": "https://i.ytimg.com/big.jpg"}],
    }


def _item(video_id: str, views=None, duration=None, uploaded_at=None) -> SearchResultItem:
    return SearchResultItem(
        video_id=video_id, views=views, duration=duration, uploaded_at=uploaded_at,
        url=f"https://www.youtube.com/watch?v={video_id}",
    )


@pytest.fixture()
def adapter(cache):
    return DiscoveryAdapter(cache)


# ── Parameter parsing ───────────────────────────────────────────────────────


class TestParseSearchInput:
    def test_documented_example(self):
        query, params, warnings = parse_search_input("cats | count=10, sort=views, recent=true")
        assert query == "cats"
        assert params.as_dict() == {
            "count": 10, "sort": "views", "recent": True, "minViews": 0, "duration": None,
        }
        assert warnings == []

    def test_defaults_without_suffix(self):
        query, params, warnings = parse_search_input("  lofi beats ")
        assert query == "lofi beats"
        assert params == SearchParameters()
        assert warnings == []

    def test_pipe_separated_params(self):
        _, params, _ = parse_search_input("cats | count=3 | duration=short | minviews=1.2M")
        assert params.count == 3
        assert params.duration == "short"
        assert params.min_views == 1_200_000

    def test_count_clamped_with_warning(self):
        _, params, warnings = parse_search_input("cats | count=50")
        assert params.count == 20
        assert len(warnings) == 1
        assert "clamped" in warnings[0]

    def test_unknown_and_malformed_tokens_ignored_with_warnings(self):
        _, params, warnings = parse_search_input(
            "cats | color=red, count=abc, sort=loudest, recent=maybe, duration=epic, orphan"
        )
        assert params == SearchParameters()
        assert len(warnings) == 6

    def test_min_views_alias(self):
        params, warnings = parse_search_params("min_views=10,000")
        # the comma splits the token, leaving "min_views=10" and a stray "000"
        assert params.min_views == 10
        assert len(warnings) == 1


class TestDiscoveryRequest:
    def test_channel_prefix(self):
        request = DiscoveryRequest.for_query("channel:UCabc")
        assert request.search_type == "channel"
        assert request.target_id == "UCabc"

    def test_playlist_prefix(self):
        request = DiscoveryRequest.for_query("playlist: PLxyz")
        assert request.search_type == "playlist"
        assert request.target_id == "PLxyz"

    def test_free_text(self):
        request = DiscoveryRequest.for_query("channel surfing tips")
        assert request.search_type == "search"

    @pytest.mark.parametrize("query", ["Channel: best goals of 2020", "PLAYLIST:PLxyz"])
    def test_prefix_match_is_case_sensitive(self, query):
        """GIVEN a capitalised prefix THEN the query is treated as free text."""
        request = DiscoveryRequest.for_query(query)
        assert request.search_type == "search"
        assert request.target_id == ""
        assert request.query == query

    def test_empty_query_rejected(self):
        with pytest.raises(InvalidReference):
            DiscoveryRequest.for_query("   ")

    def test_prefix_without_id_rejected(self):
        with pytest.raises(InvalidReference, match="Missing channel ID"):
            DiscoveryRequest.for_query("channel:")


# ── Client-side filtering ───────────────────────────────────────────────────


class TestFilterAndSort:
    NOW = datetime(2025, 6, 15, tzinfo=timezone.utc)

    def test_recent_drops_old_items_keeps_undated(self):
        items = [
            _item("aaaaaaaaaaa", uploaded_at="20240101"),
            _item("bbbbbbbbbbb", uploaded_at="20200101"),
            _item("ccccccccccc"),
        ]
        out = filter_and_sort(items, SearchParameters(recent=True), now=self.NOW)
        assert [i.video_id for i in out] == ["aaaaaaaaaaa", "ccccccccccc"]

    def test_min_views(self):
        items = [_item("aaaaaaaaaaa", views=50), _item("bbbbbbbbbbb", views=5000), _item("ccccccccccc")]
        out = filter_and_sort(items, SearchParameters(min_views=100))
        assert [i.video_id for i in out] == ["bbbbbbbbbbb"]

    @pytest.mark.parametrize(
        ("bucket", "expected"),
        [("short", ["aaaaaaaaaaa"]), ("medium", ["bbbbbbbbbbb"]), ("long", ["ccccccccccc"])],
    )
    def test_duration_buckets(self, bucket, expected):
        items = [
            _item("aaaaaaaaaaa", duration=120),
            _item("bbbbbbbbbbb", duration=600),
            _item("ccccccccccc", duration=3600),
            _item("ddddddddddd"),
        ]
        out = filter_and_sort(items, SearchParameters(duration=bucket))
        assert [i.video_id for i in out] == expected

    def test_sort_by_views_missing_last(self):
        items = [_item("aaaaaaaaaaa"), _item("bbbbbbbbbbb", views=10), _item("ccccccccccc", views=99)]
        out = filter_and_sort(items, SearchParameters(sort="views"))
        assert [i.video_id for i in out] == ["ccccccccccc", "bbbbbbbbbbb", "aaaaaaaaaaa"]

    def test_sort_by_date(self):
        items = [
            _item("aaaaaaaaaaa", uploaded_at="20200101"),
            _item("bbbbbbbbbbb"),
            _item("ccccccccccc", uploaded_at="20240101"),
        ]
        out = filter_and_sort(items, SearchParameters(sort="date"))
        assert [i.video_id for i in out] == ["ccccccccccc", "aaaaaaaaaaa", "bbbbbbbbbbb"]

    def test_relevance_keeps_native_order(self):
        items = [_item("bbbbbbbbbbb", views=1), _item("aaaaaaaaaaa", views=2)]
        assert filter_and_sort(items, SearchParameters()) == items


# ── Adapter ─────────────────────────────────────────────────────────────────


class TestDiscoveryAdapter:
    async def test_free_text_search(self, adapter, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = [
            _entry("aaaaaaaaaaa", views=100, duration=65, upload_date="20240101"),
            {"id": "UCnotavideo123", "title": "a channel", "ie_key": "YoutubeTab"},
            _entry("bbbbbbbbbbb", views=5000, duration=3700),
        ]

        out = await adapter.run("lofi | count=2, sort=views")

        mock_ytdlp["search_videos"].assert_awaited_once_with("lofi", 4)
        assert out["query"] == "lofi"
        assert out["searchType"] == "search"
        assert [r["videoId"] for r in out["results"]] == ["bbbbbbbbbbb", "aaaaaaaaaaa"]
        assert out["totalResults"] == 2
        assert out["resultCount"] == 2
        assert out["searchParams"]["duration"] is None
        first = out["results"][0]
        assert first["viewsFormatted"] == "5.0K"
        assert first["durationFormatted"] == "1:01:40"
        assert first["thumbnail"] == "https://i.ytimg.com/big.jpg"
        assert first["channelTitle"] == "Chan"

    async def test_results_sliced_to_count(self, adapter, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = [
            _entry(f"video{i:06d}") for i in range(6)
        ]
        out = await adapter.run("x | count=3")
        assert out["resultCount"] == 3
        assert out["totalResults"] == 6

    async def test_warnings_attached_but_not_cached(self, adapter, mock_ytdlp, cache):
        mock_ytdlp["search_videos"].return_value = [_entry("aaaaaaaaaaa")]

        out = await adapter.run("cats | colour=red")

        assert out["warnings"] == ["Ignored unknown parameter: colour"]
        cached = cache.get(adapter.cache_key(adapter.parse_input("cats")))
        assert "warnings" not in cached

    async def test_no_results_is_not_found(self, adapter, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = []

        out = await adapter.run("zxqv nothing")

        assert out["kind"] == "NotFound"
        assert out["type"] == "search_error"
        assert out["query"] == "zxqv nothing"

    async def test_channel_listing(self, adapter, mock_youtube_client):
        mock_youtube_client["channel_videos"].return_value = [
            {
                "id": {"kind": "youtube#video", "videoId": "aaaaaaaaaaa"},
                "snippet": {
                    "title": "Tom &amp; Jerry",
                    "channelId": "UCabc",
                    "channelTitle": "Cartoons",
                    "publishedAt": "2023-03-01T12:00:00Z",
                    "thumbnails": {"medium": {"url": "https://i.ytimg.com/m.jpg"}},
                },
            },
        ]

        out = await adapter.run("channel:UCabc | count=5, sort=date")

        mock_youtube_client["channel_videos"].assert_awaited_once_with(
            "UCabc", max_results=5, sort="date",
        )
        assert out["searchType"] == "channel"
        assert out["channelId"] == "UCabc"
        result = out["results"][0]
        assert result["title"] == "Tom & Jerry"
        assert result["uploadedAt"] == "20230301"
        assert result["thumbnail"] == "https://i.ytimg.com/m.jpg"

    async def test_playlist_listing(self, adapter, mock_youtube_client):
        mock_youtube_client["playlist_items"].return_value = [
            {
                "snippet": {"title": "Part 1", "position": 0, "thumbnails": {}},
                "contentDetails": {"videoId": "aaaaaaaaaaa", "videoPublishedAt": "2022-01-02T00:00:00Z"},
            },
            {"snippet": {"title": "Deleted video", "position": 1}, "contentDetails": {}},
        ]

        out = await adapter.run("playlist:PLxyz")

        mock_youtube_client["playlist_items"].assert_awaited_once_with("PLxyz", max_results=5)
        assert out["playlistId"] == "PLxyz"
        assert out["resultCount"] == 1
        assert out["results"][0]["position"] == 0
        assert out["results"][0]["uploadedAt"] == "20220102"

    async def test_same_query_and_params_cached(self, adapter, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = [_entry("aaaaaaaaaaa")]

        await adapter.run("cats | count=5")
        await adapter.run("cats")
        await adapter.run("cats | count=6")

        assert mock_ytdlp["search_videos"].await_count == 2

    async def test_prefix_without_id_is_error(self, adapter, mock_youtube_client):
        out = await adapter.run("playlist:")
        assert out["kind"] == "InvalidReference"
        assert out["type"] == "search_error"
        mock_youtube_client["playlist_items"].assert_not_awaited()

    async def test_capitalised_prefix_searches_free_text(self, adapter, mock_ytdlp, mock_youtube_client):
        mock_ytdlp["search_videos"].return_value = [_entry("aaaaaaaaaaa")]

        out = await adapter.run("Channel: best goals of 2020")

        assert out["searchType"] == "search"
        mock_ytdlp["search_videos"].assert_awaited_once_with("Channel: best goals of 2020", 10)
        mock_youtube_client["channel_videos"].assert_not_awaited()
