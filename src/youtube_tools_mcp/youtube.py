"""YouTube Data API v3 client — video lookup, channel search, playlist items.

Thin async-compatible wrapper using google-api-python-client (sync)
wrapped in asyncio.to_thread(). Reads YOUTUBE_API_KEY from config once,
on first use.
"""

from __future__ import annotations

import asyncio
import logging

from googleapiclient.errors import HttpError

from .config import get_config
from .errors import NotFound, ToolFailure, UpstreamError

logger = logging.getLogger(__name__)

_YT_403_HINT = (
    "YouTube Data API returned 403. Common causes:\n"
    "1. YOUTUBE_API_KEY is missing or restricted to other Google APIs\n"
    "2. YouTube Data API v3 is not enabled in your GCP project\n"
    "Fix: visit https://console.cloud.google.com/apis/library/youtube.googleapis.com "
    "to enable it, or set YOUTUBE_API_KEY to a key with YouTube Data API v3 scope."
)
_YT_429_HINT = "YouTube Data API quota exhausted — wait for the daily reset or use another key"

# Discovery sort → search.list ``order``.
_ORDER_BY_SORT: dict[str, str] = {
    "relevance": "relevance",
    "date": "date",
    "views": "viewCount",
    "rating": "rating",
}


def _http_status(exc: Exception) -> int | None:
    """Return the HTTP status of a googleapiclient ``HttpError``, else None."""
    if isinstance(exc, HttpError):
        return int(exc.resp.status)
    return None


def translate_api_error(exc: Exception, **context) -> Exception:
    """Map a YouTube API exception to UpstreamError/NotFound with hints.

    Exceptions that are not API HTTP errors are returned unchanged.
    """
    status = _http_status(exc)
    if status is None:
        return exc
    if status == 404:
        return NotFound(str(exc), upstream_status=status, **context)
    if status == 403:
        return UpstreamError(str(exc), hint=_YT_403_HINT, upstream_status=status, **context)
    if status == 429:
        return UpstreamError(str(exc), hint=_YT_429_HINT, upstream_status=status, **context)
    return UpstreamError(str(exc), upstream_status=status, **context)


class YouTubeClient:
    """Singleton YouTube Data API v3 client."""

    _service = None

    @classmethod
    def get(cls):
        """Get or create the YouTube API service (lazy singleton)."""
        if cls._service is None:
            from googleapiclient.discovery import build

            api_key = get_config().youtube_api_key
            if not api_key:
                raise UpstreamError(
                    "YOUTUBE_API_KEY is not configured",
                    hint="Set YOUTUBE_API_KEY in the environment or ~/.config/youtube-tools-mcp/.env",
                )
            cls._service = build(
                "youtube", "v3", developerKey=api_key, cache_discovery=False,
            )
        return cls._service

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._service = None

    @classmethod
    async def _call(cls, fetch, **context) -> dict:
        try:
            return await asyncio.to_thread(fetch)
        except ToolFailure:
            raise
        except Exception as exc:
            translated = translate_api_error(exc, **context)
            if translated is exc:
                raise
            logger.warning("YouTube API call failed: %s", exc)
            raise translated from exc

    @classmethod
    async def video(cls, video_id: str) -> dict | None:
        """Fetch the raw videos.list item (snippet, contentDetails, statistics).

        Args:
            video_id: YouTube video ID (e.g. 'dQw4w9WgXcQ').

        Returns:
            The first item of the response, or None when the video does not exist.
        """

        def _fetch():
            svc = cls.get()
            return svc.videos().list(
                part="snippet,contentDetails,statistics",
                id=video_id,
            ).execute()

        resp = await cls._call(_fetch, videoId=video_id)
        items = resp.get("items", [])
        return items[0] if items else None

    @classmethod
    async def channel_videos(
        cls, channel_id: str, max_results: int = 5, sort: str = "relevance"
    ) -> list[dict]:
        """Search a channel's videos via search.list.

        Args:
            channel_id: YouTube channel ID (``UC...``).
            max_results: Maximum number of videos (1-50).
            sort: Discovery sort order, mapped to the API ``order`` value.

        Returns:
            Raw search.list items.
        """

        def _fetch():
            svc = cls.get()
            return svc.search().list(
                part="snippet",
                channelId=channel_id,
                maxResults=max_results,
                order=_ORDER_BY_SORT.get(sort, "relevance"),
                type="video",
            ).execute()

        resp = await cls._call(_fetch, channelId=channel_id)
        return resp.get("items", [])

    @classmethod
    async def playlist_items(cls, playlist_id: str, max_results: int = 5) -> list[dict]:
        """Get raw playlistItems.list items (snippet, contentDetails).

        Args:
            playlist_id: YouTube playlist ID (e.g. 'PLrAXtmErZgOe...').
            max_results: Maximum items to return (1-50).
        """

        def _fetch():
            svc = cls.get()
            return svc.playlistItems().list(
                part="snippet,contentDetails",
                playlistId=playlist_id,
                maxResults=max_results,
            ).execute()

        resp = await cls._call(_fetch, playlistId=playlist_id)
        return resp.get("items", [])
