"""Shared test fixtures for youtube-tools-mcp."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from youtube_tools_mcp.cache import TTLCache


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _disable_tracing(monkeypatch):
    """Disable MLflow tracing in all tests to avoid real tracking-server calls."""
    monkeypatch.setenv("YT_TOOLS_TRACING_ENABLED", "false")


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/youtube-tools-mcp/.env."""
    monkeypatch.setattr(
        "youtube_tools_mcp.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Reset the config singleton, shared adapters and API client between tests."""
    import youtube_tools_mcp.config as cfg_mod
    from youtube_tools_mcp.dependencies import reset_adapters
    from youtube_tools_mcp.youtube import YouTubeClient

    monkeypatch.setenv("YOUTUBE_API_KEY", "test-key-not-real")
    monkeypatch.delenv("YT_TOOLS_API_TOKEN", raising=False)
    cfg_mod._config = None
    reset_adapters()
    YouTubeClient.reset()
    yield
    cfg_mod._config = None
    reset_adapters()
    YouTubeClient.reset()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return TTLCache(ttl_seconds=3600, clock=clock, name="test")


@pytest.fixture()
def mock_ytdlp():
    """Patch the yt-dlp wrapper functions used by the adapters."""
    with (
        patch("youtube_tools_mcp.ytdlp.dump_video_info", new_callable=AsyncMock) as dump,
        patch("youtube_tools_mcp.ytdlp.search_videos", new_callable=AsyncMock) as search,
    ):
        yield {"dump_video_info": dump, "search_videos": search}


@pytest.fixture()
def mock_youtube_client():
    """Patch the YouTube Data API classmethods used by the adapters."""
    with (
        patch("youtube_tools_mcp.youtube.YouTubeClient.video", new_callable=AsyncMock) as video,
        patch(
            "youtube_tools_mcp.youtube.YouTubeClient.channel_videos", new_callable=AsyncMock
        ) as channel,
        patch(
            "youtube_tools_mcp.youtube.YouTubeClient.playlist_items", new_callable=AsyncMock
        ) as playlist,
    ):
        yield {"video": video, "channel_videos": channel, "playlist_items": playlist}
