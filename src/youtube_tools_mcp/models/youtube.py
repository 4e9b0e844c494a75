"""YouTube Data API models — video info and discovery schemas.

Populated from YouTube Data API v3 responses (video info, channel and
playlist listings) and from yt-dlp flat search entries (free-text search).
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from ._base import CamelModel

# YouTube video category IDs → human-readable labels (static, rarely changes).
YOUTUBE_CATEGORIES: dict[str, str] = {
    "1": "Film & Animation",
    "2": "Autos & Vehicles",
    "10": "Music",
    "15": "Pets & Animals",
    "17": "Sports",
    "19": "Travel & Events",
    "20": "Gaming",
    "22": "People & Blogs",
    "23": "Comedy",
    "24": "Entertainment",
    "25": "News & Politics",
    "26": "Howto & Style",
    "27": "Education",
    "28": "Science & Technology",
    "29": "Nonprofits & Activism",
}


class VideoInfo(CamelModel):
    """Output schema for youtube_video_info.

    ``duration`` is total seconds parsed from the ISO 8601 content duration;
    ``upload_date`` is ``YYYYMMDD``. The ``*_formatted`` siblings are
    display strings and are only set when the raw value is non-zero.
    """

    video_id: str
    title: str = ""
    description: str = ""
    channel_id: str = ""
    channel_title: str = ""
    views: int = 0
    likes: int = 0
    comments: int = 0
    duration: int = 0
    upload_date: str = ""
    thumbnail: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    definition: str = ""
    has_captions: bool = False
    default_language: str = ""
    url: str = ""
    views_formatted: str | None = None
    likes_formatted: str | None = None
    comments_formatted: str | None = None
    duration_formatted: str | None = None
    upload_date_formatted: str | None = None


class SearchResultItem(CamelModel):
    """A single video in a discovery result list."""

    video_id: str
    title: str = ""
    description: str | None = None
    channel_id: str | None = None
    channel_title: str | None = None
    views: int | None = None
    views_formatted: str | None = None
    duration: int | None = None
    duration_formatted: str | None = None
    uploaded_at: str | None = None
    thumbnail: str | None = None
    position: int | None = None
    url: str = ""


class SearchResults(CamelModel):
    """Output schema for youtube_discovery.

    ``search_params`` is a plain dict; the adapter re-attaches it after
    ``to_payload()`` so that unset parameters (``duration: null``) survive.
    """

    query: str
    search_type: str = "search"
    channel_id: str | None = None
    playlist_id: str | None = None
    results: list[SearchResultItem] = Field(default_factory=list)
    total_results: int = 0
    result_count: int = 0
    search_params: dict[str, Any] = Field(default_factory=dict)
