"""Tests for the HTTP API routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

import youtube_tools_mcp.config as cfg_mod
from youtube_tools_mcp.adapters import TranscriptAdapter
from youtube_tools_mcp.api.app import create_app
from youtube_tools_mcp.dependencies import get_transcript_adapter
from youtube_tools_mcp.errors import NotFound, UpstreamError
from youtube_tools_mcp.models.transcript import TranscriptSegment
from youtube_tools_mcp.transcripts import FetchedTrack

VIDEO_ID = "dQw4w9WgXcQ"


@pytest.fixture()
def app():
    return create_app()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def transcript_source(app, cache):
    """Route transcript requests through an adapter with a mocked source."""
    source = MagicMock()
    source.fetch = AsyncMock(return_value=FetchedTrack(
        segments=[TranscriptSegment(text="hello world", start=0.0, duration=1.0)],
        language_code="en",
        is_generated=False,
    ))
    adapter = TranscriptAdapter(cache, source=source)
    app.dependency_overrides[get_transcript_adapter] = lambda: adapter
    yield source
    app.dependency_overrides.clear()


@pytest.fixture()
def api_token(monkeypatch):
    monkeypatch.setenv("YT_TOOLS_API_TOKEN", "s3cret")
    cfg_mod._config = None
    return "s3cret"


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


class TestTranscriptRoute:
    def test_success(self, client, transcript_source):
        resp = client.get("/api/youtube/transcript", params={"videoId": VIDEO_ID, "language": "de"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["videoId"] == VIDEO_ID
        assert body["transcript"] == "hello world"
        transcript_source.fetch.assert_awaited_once_with(VIDEO_ID, "de", any_language=False)

    def test_accepts_url(self, client, transcript_source):
        resp = client.get(
            "/api/youtube/transcript", params={"videoId": f"https://youtu.be/{VIDEO_ID}"},
        )
        assert resp.status_code == 200
        assert resp.json()["videoId"] == VIDEO_ID

    def test_missing_video_id_is_400(self, client, transcript_source):
        resp = client.get("/api/youtube/transcript")

        assert resp.status_code == 400
        assert resp.json()["type"] == "transcript_error"
        transcript_source.fetch.assert_not_awaited()

    def test_invalid_reference_is_400(self, client, transcript_source):
        resp = client.get("/api/youtube/transcript", params={"videoId": "not a video"})

        assert resp.status_code == 400
        assert resp.json()["kind"] == "InvalidReference"

    def test_not_found_is_404(self, client, transcript_source):
        transcript_source.fetch.side_effect = NotFound("No transcript available for this video")

        resp = client.get("/api/youtube/transcript", params={"videoId": VIDEO_ID})

        assert resp.status_code == 404
        body = resp.json()
        assert body["kind"] == "NotFound"
        assert body["videoId"] == VIDEO_ID


class TestVideoRoute:
    def test_success(self, client, mock_youtube_client):
        mock_youtube_client["video"].return_value = {
            "id": VIDEO_ID,
            "snippet": {"title": "Clip", "channelTitle": "Chan", "publishedAt": "2020-01-02T00:00:00Z"},
            "contentDetails": {"duration": "PT1M"},
            "statistics": {"viewCount": "1200"},
        }

        resp = client.get("/api/youtube/video", params={"videoId": VIDEO_ID})

        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Clip"
        assert body["viewsFormatted"] == "1.2K"
        assert body["durationFormatted"] == "1:00"

    def test_upstream_error_is_500(self, client, mock_youtube_client):
        mock_youtube_client["video"].side_effect = UpstreamError("quotaExceeded", upstream_status=403)

        resp = client.get("/api/youtube/video", params={"videoId": VIDEO_ID})

        assert resp.status_code == 500
        body = resp.json()
        assert body["kind"] == "UpstreamError"
        assert body["type"] == "video_info_error"
        assert body["upstreamStatus"] == 403

    def test_missing_video_is_404(self, client, mock_youtube_client):
        mock_youtube_client["video"].return_value = None
        resp = client.get("/api/youtube/video", params={"videoId": VIDEO_ID})
        assert resp.status_code == 404


class TestDownloadRoute:
    def test_formats_mode(self, client, mock_ytdlp):
        mock_ytdlp["dump_video_info"].return_value = {
            "id": VIDEO_ID,
            "title": "Clip",
            "formats": [
                {"format_id": "251", "resolution": "audio only", "acodec": "opus", "vcodec": "none"},
                {"format_id": "22", "resolution": "1280x720", "acodec": "mp4a", "vcodec": "avc1"},
            ],
        }

        resp = client.get("/api/youtube/download", params={"videoId": VIDEO_ID, "mode": "formats"})

        assert resp.status_code == 200
        assert resp.json()["bestQuality"]["bestCombined"]["formatId"] == "22"

    def test_invalid_mode_is_400(self, client, mock_ytdlp):
        resp = client.get("/api/youtube/download", params={"videoId": VIDEO_ID, "mode": "mp3"})

        assert resp.status_code == 400
        assert "Invalid mode" in resp.json()["error"]
        mock_ytdlp["dump_video_info"].assert_not_awaited()

    def test_missing_video_id_is_400(self, client, mock_ytdlp):
        resp = client.get("/api/youtube/download", params={"mode": "formats"})
        assert resp.status_code == 400


class TestSearchRoute:
    def test_free_text(self, client, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = [
            {"id": "aaaaaaaaaaa", "title": "A", "view_count": 10},
            {"id": "bbbbbbbbbbb", "title": "B", "view_count": 500},
        ]

        resp = client.get(
            "/api/youtube/search", params={"q": "lofi", "count": "2", "sort": "views"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert [r["videoId"] for r in body["results"]] == ["bbbbbbbbbbb", "aaaaaaaaaaa"]
        assert body["searchParams"]["count"] == 2
        mock_ytdlp["search_videos"].assert_awaited_once_with("lofi", 4)

    def test_lenient_params_become_warnings(self, client, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = [{"id": "aaaaaaaaaaa", "title": "A"}]

        resp = client.get("/api/youtube/search", params={"q": "lofi", "count": "99"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["searchParams"]["count"] == 20
        assert len(body["warnings"]) == 1

    def test_missing_query_is_400(self, client, mock_ytdlp):
        resp = client.get("/api/youtube/search")
        assert resp.status_code == 400
        assert resp.json()["type"] == "search_error"

    def test_channel_requires_channel_id(self, client, mock_youtube_client):
        resp = client.get("/api/youtube/search", params={"type": "channel"})
        assert resp.status_code == 400
        assert "channelId" in resp.json()["error"]

    def test_playlist_requires_playlist_id(self, client, mock_youtube_client):
        resp = client.get("/api/youtube/search", params={"type": "playlist", "q": "ignored"})
        assert resp.status_code == 400

    def test_unknown_type_is_400(self, client):
        resp = client.get("/api/youtube/search", params={"type": "user", "q": "x"})
        assert resp.status_code == 400

    def test_channel_listing(self, client, mock_youtube_client):
        mock_youtube_client["channel_videos"].return_value = [
            {"id": {"videoId": "aaaaaaaaaaa"}, "snippet": {"title": "A", "channelId": "UCabc"}},
        ]

        resp = client.get(
            "/api/youtube/search", params={"type": "channel", "channelId": "UCabc", "count": "3"},
        )

        assert resp.status_code == 200
        assert resp.json()["channelId"] == "UCabc"
        mock_youtube_client["channel_videos"].assert_awaited_once_with(
            "UCabc", max_results=3, sort="relevance",
        )

    def test_no_results_is_404(self, client, mock_ytdlp):
        mock_ytdlp["search_videos"].return_value = []
        resp = client.get("/api/youtube/search", params={"q": "zxqv"})
        assert resp.status_code == 404


class TestSession:
    def test_no_token_configured_allows_anonymous(self, client, transcript_source):
        resp = client.get("/api/youtube/transcript", params={"videoId": VIDEO_ID})
        assert resp.status_code == 200

    def test_missing_token_is_401(self, client, transcript_source, api_token):
        resp = client.get("/api/youtube/transcript", params={"videoId": VIDEO_ID})

        assert resp.status_code == 401
        transcript_source.fetch.assert_not_awaited()

    def test_wrong_token_is_401(self, client, transcript_source, api_token):
        resp = client.get(
            "/api/youtube/transcript",
            params={"videoId": VIDEO_ID},
            headers={"Authorization": "Bearer nope"},
        )
        assert resp.status_code == 401

    def test_bearer_token_accepted(self, client, transcript_source, api_token):
        resp = client.get(
            "/api/youtube/transcript",
            params={"videoId": VIDEO_ID},
            headers={"Authorization": f"Bearer {api_token}"},
        )
        assert resp.status_code == 200

    def test_session_header_accepted(self, client, transcript_source, api_token):
        resp = client.get(
            "/api/youtube/transcript",
            params={"videoId": VIDEO_ID},
            headers={"X-Session-Token": api_token},
        )
        assert resp.status_code == 200

    def test_health_is_public(self, client, api_token):
        assert client.get("/health").status_code == 200
