"""youtube_video_info adapter — YouTube Data API metadata with display fields."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..errors import NotFound
from ..formatting import (
    format_date,
    format_duration,
    format_number,
    iso_to_yyyymmdd,
    parse_iso8601_duration,
)
from ..models.youtube import YOUTUBE_CATEGORIES, VideoInfo
from ..video_url import canonical_url, extract_video_id
from ..youtube import YouTubeClient
from .base import ToolAdapter

logger = logging.getLogger(__name__)

_CLICKBAIT_RE = re.compile(r"\((?:NOT CLICKBAIT|MUST WATCH|SHOCKING|GONE WRONG)\)", re.IGNORECASE)
_HASHTAG_RUN_RE = re.compile(r"(?:#\w+\s*){5,}")
_BLANK_LINES_RE = re.compile(r"\n\s*\n+")
_SPACES_RE = re.compile(r"[ \t]+")


@dataclass
class VideoRequest:
    video_id: str
    warnings: list[str] = field(default_factory=list)


def clean_title(title: str) -> str:
    """Strip clickbait markers and collapse whitespace."""
    title = _CLICKBAIT_RE.sub("", title or "")
    return re.sub(r"\s+", " ", title).strip()


def clean_description(description: str) -> str:
    """Collapse hashtag walls, blank lines and repeated spaces; keep line breaks."""
    text = _HASHTAG_RUN_RE.sub("[Multiple hashtags] ", description or "")
    text = _BLANK_LINES_RE.sub("\n", text)
    text = _SPACES_RE.sub(" ", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()


def _int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _thumbnail(snippet: dict) -> str | None:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("maxres", "high", "medium", "default"):
        if size in thumbs:
            return thumbs[size].get("url")
    return None


class VideoInfoAdapter(ToolAdapter[VideoRequest]):
    """Fetch video metadata. Input syntax: ``<video url or id>``."""

    name = "video"
    tool_type = "video_info_error"

    def parse_input(self, raw: str) -> VideoRequest:
        return VideoRequest(video_id=extract_video_id(raw))

    def cache_key(self, request: VideoRequest) -> str:
        return request.video_id

    def context(self, request: VideoRequest | None) -> dict:
        return {"videoId": request.video_id} if request else {}

    async def fetch(self, request: VideoRequest) -> dict:
        logger.info("Fetching video info for %s", request.video_id)
        item = await YouTubeClient.video(request.video_id)
        if item is None:
            raise NotFound("Video not found", videoId=request.video_id)
        return item

    def shape(self, request: VideoRequest, raw: dict) -> dict:
        snippet = raw.get("snippet", {})
        stats = raw.get("statistics", {})
        content = raw.get("contentDetails", {})

        views = _int(stats.get("viewCount"))
        likes = _int(stats.get("likeCount"))
        comments = _int(stats.get("commentCount"))
        duration = parse_iso8601_duration(content.get("duration"))
        upload_date = iso_to_yyyymmdd(snippet.get("publishedAt"))

        info = VideoInfo(
            video_id=request.video_id,
            title=clean_title(snippet.get("title", "")),
            description=clean_description(snippet.get("description", "")),
            channel_id=snippet.get("channelId", ""),
            channel_title=snippet.get("channelTitle", ""),
            views=views,
            likes=likes,
            comments=comments,
            duration=duration,
            upload_date=upload_date,
            thumbnail=_thumbnail(snippet),
            tags=snippet.get("tags", []),
            category=YOUTUBE_CATEGORIES.get(snippet.get("categoryId", ""), ""),
            definition=content.get("definition", ""),
            has_captions=content.get("caption") == "true",
            default_language=snippet.get("defaultLanguage") or snippet.get("defaultAudioLanguage", ""),
            url=canonical_url(request.video_id),
            views_formatted=format_number(views) if views else None,
            likes_formatted=format_number(likes) if likes else None,
            comments_formatted=format_number(comments) if comments else None,
            duration_formatted=format_duration(duration) if duration else None,
            upload_date_formatted=format_date(upload_date) if upload_date else None,
        )
        return info.to_payload()
