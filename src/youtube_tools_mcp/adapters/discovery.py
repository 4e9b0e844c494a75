"""youtube_discovery adapter — channel uploads, playlist items and free-text search.

Input syntax::

    <query> [| key=value, key=value ...]
    channel:<channel_id> [| ...]
    playlist:<playlist_id> [| ...]

Recognised keys: ``count`` (1-20), ``sort`` (relevance/date/views/rating),
``recent`` (true/false), ``min_views`` / ``minviews`` and ``duration``
(short/medium/long). Anything unrecognised is ignored with a warning.
"""

from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .. import ytdlp
from ..cache import make_key
from ..errors import InvalidReference, NotFound
from ..formatting import format_duration, format_number, iso_to_yyyymmdd, parse_view_count
from ..models.search import MAX_SEARCH_COUNT, SearchParameters
from ..models.youtube import SearchResultItem, SearchResults
from ..types import DURATION_FILTERS, SORT_ORDERS, SearchType
from ..video_url import canonical_url, is_video_id
from ..youtube import YouTubeClient
from .base import ToolAdapter

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "channel:"
PLAYLIST_PREFIX = "playlist:"
RECENT_YEARS = 2

# Duration buckets in seconds: short < 4 min, long > 20 min.
SHORT_MAX_SECONDS = 4 * 60
LONG_MIN_SECONDS = 20 * 60

_PARAM_SPLIT_RE = re.compile(r"[,|]")
_TRUE_VALUES = {"true", "yes", "1"}
_FALSE_VALUES = {"false", "no", "0"}


@dataclass
class DiscoveryRequest:
    query: str
    search_type: SearchType = "search"
    target_id: str = ""
    params: SearchParameters = field(default_factory=SearchParameters)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def for_query(cls, query: str, params: SearchParameters | None = None,
                  warnings: list[str] | None = None) -> DiscoveryRequest:
        """Build a request, detecting the lowercase ``channel:`` / ``playlist:`` prefixes.

        Raises:
            InvalidReference: Empty query, or a prefix with no ID after it.
        """
        query = query.strip()
        if not query:
            raise InvalidReference("Search query is required", query=query)
        search_type, target_id = "search", ""
        if query.startswith(CHANNEL_PREFIX):
            search_type, target_id = "channel", query[len(CHANNEL_PREFIX):].strip()
        elif query.startswith(PLAYLIST_PREFIX):
            search_type, target_id = "playlist", query[len(PLAYLIST_PREFIX):].strip()
        if search_type != "search" and not target_id:
            raise InvalidReference(f"Missing {search_type} ID after '{search_type}:'", query=query)
        return cls(
            query=query,
            search_type=search_type,
            target_id=target_id,
            params=params or SearchParameters(),
            warnings=warnings or [],
        )


def parse_search_params(text: str) -> tuple[SearchParameters, list[str]]:
    """Parse ``key=value`` tokens separated by commas or ``|``.

    Never raises: malformed or unknown tokens are skipped and reported in the
    returned warnings list; ``count`` is clamped into 1..20.
    """
    values: dict = {}
    warnings: list[str] = []

    for token in _PARAM_SPLIT_RE.split(text):
        token = token.strip()
        if not token:
            continue
        if "=" not in token:
            warnings.append(f"Ignored parameter without a value: {token}")
            continue
        key, _, value = token.partition("=")
        key = key.strip().lower()
        value = value.strip().lower()

        if key == "count":
            try:
                count = int(value)
            except ValueError:
                warnings.append(f"Ignored non-numeric count: {value}")
                continue
            if count > MAX_SEARCH_COUNT:
                warnings.append(f"count={count} clamped to {MAX_SEARCH_COUNT}")
                count = MAX_SEARCH_COUNT
            elif count < 1:
                warnings.append(f"count={count} clamped to 1")
                count = 1
            values["count"] = count
        elif key == "sort":
            if value in SORT_ORDERS:
                values["sort"] = value
            else:
                warnings.append(f"Ignored unknown sort: {value}")
        elif key == "recent":
            if value in _TRUE_VALUES:
                values["recent"] = True
            elif value in _FALSE_VALUES:
                values["recent"] = False
            else:
                warnings.append(f"Ignored invalid recent flag: {value}")
        elif key in ("min_views", "minviews"):
            min_views = parse_view_count(value)
            if min_views is None:
                warnings.append(f"Ignored invalid min_views: {value}")
            else:
                values["min_views"] = min_views
        elif key == "duration":
            if value in DURATION_FILTERS:
                values["duration"] = value
            else:
                warnings.append(f"Ignored unknown duration: {value}")
        else:
            warnings.append(f"Ignored unknown parameter: {key}")

    return SearchParameters(**values), warnings


def parse_search_input(raw: str) -> tuple[str, SearchParameters, list[str]]:
    """Split ``"<query> | params"`` into (query, parameters, warnings)."""
    query, _, rest = raw.partition("|")
    params, warnings = parse_search_params(rest)
    return query.strip(), params, warnings


def _recent_cutoff(now: datetime | None = None) -> str:
    """``YYYYMMDD`` of the same calendar day two years ago."""
    now = now or datetime.now(timezone.utc)
    try:
        cutoff = now.replace(year=now.year - RECENT_YEARS)
    except ValueError:  # Feb 29
        cutoff = now.replace(year=now.year - RECENT_YEARS, day=28)
    return cutoff.strftime("%Y%m%d")


def _matches_duration(seconds: int | None, bucket: str) -> bool:
    if seconds is None:
        return False
    if bucket == "short":
        return seconds < SHORT_MAX_SECONDS
    if bucket == "long":
        return seconds > LONG_MIN_SECONDS
    return SHORT_MAX_SECONDS <= seconds <= LONG_MIN_SECONDS


def filter_and_sort(
    items: list[SearchResultItem], params: SearchParameters, now: datetime | None = None
) -> list[SearchResultItem]:
    """Apply recent/minViews/duration filters, then the optional date/views sort."""
    if params.recent:
        cutoff = _recent_cutoff(now)
        items = [i for i in items if not i.uploaded_at or i.uploaded_at >= cutoff]
    if params.min_views:
        items = [i for i in items if (i.views or 0) >= params.min_views]
    if params.duration:
        items = [i for i in items if _matches_duration(i.duration, params.duration)]

    if params.sort == "date":
        items = sorted(items, key=lambda i: i.uploaded_at or "", reverse=True)
    elif params.sort == "views":
        items = sorted(items, key=lambda i: i.views if i.views is not None else -1, reverse=True)
    return items


def _api_thumbnail(snippet: dict) -> str | None:
    thumbs = snippet.get("thumbnails") or {}
    for size in ("high", "medium", "default"):
        if size in thumbs:
            return thumbs[size].get("url")
    return None


def _item_from_search_entry(entry: dict) -> SearchResultItem:
    """Shape one yt-dlp flat search entry."""
    video_id = entry["id"]
    views = parse_view_count(entry.get("view_count"))
    duration = entry.get("duration")
    duration = int(duration) if duration is not None else None
    uploaded_at = entry.get("upload_date")
    if not uploaded_at and entry.get("timestamp"):
        uploaded_at = datetime.fromtimestamp(entry["timestamp"], tz=timezone.utc).strftime("%Y%m%d")
    thumbnails = entry.get("thumbnails") or []
    return SearchResultItem(
        video_id=video_id,
        title=entry.get("title") or "",
        description=entry.get("description"),
        channel_id=entry.get("channel_id"),
        channel_title=entry.get("channel") or entry.get("uploader"),
        views=views,
        views_formatted=format_number(views) if views is not None else None,
        duration=duration,
        duration_formatted=format_duration(duration) if duration is not None else None,
        uploaded_at=uploaded_at or None,
        thumbnail=thumbnails[-1].get("url") if thumbnails else None,
        url=canonical_url(video_id),
    )


def _item_from_channel_search(item: dict) -> SearchResultItem | None:
    video_id = (item.get("id") or {}).get("videoId")
    if not video_id:
        return None
    snippet = item.get("snippet", {})
    return SearchResultItem(
        video_id=video_id,
        title=html.unescape(snippet.get("title", "")),
        description=html.unescape(snippet.get("description", "")),
        channel_id=snippet.get("channelId"),
        channel_title=snippet.get("channelTitle"),
        uploaded_at=iso_to_yyyymmdd(snippet.get("publishedAt")) or None,
        thumbnail=_api_thumbnail(snippet),
        url=canonical_url(video_id),
    )


def _item_from_playlist(item: dict) -> SearchResultItem | None:
    snippet = item.get("snippet", {})
    content = item.get("contentDetails", {})
    video_id = content.get("videoId") or (snippet.get("resourceId") or {}).get("videoId")
    if not video_id:
        return None
    published = content.get("videoPublishedAt") or snippet.get("publishedAt")
    return SearchResultItem(
        video_id=video_id,
        title=snippet.get("title", ""),
        description=snippet.get("description", ""),
        channel_id=snippet.get("videoOwnerChannelId") or snippet.get("channelId"),
        channel_title=snippet.get("videoOwnerChannelTitle") or snippet.get("channelTitle"),
        uploaded_at=iso_to_yyyymmdd(published) or None,
        thumbnail=_api_thumbnail(snippet),
        position=snippet.get("position"),
        url=canonical_url(video_id),
    )


class DiscoveryAdapter(ToolAdapter[DiscoveryRequest]):
    """Discover videos by free-text query, channel or playlist."""

    name = "discovery"
    tool_type = "search_error"

    def parse_input(self, raw: str) -> DiscoveryRequest:
        query, params, warnings = parse_search_input(raw)
        return DiscoveryRequest.for_query(query, params, warnings)

    def cache_key(self, request: DiscoveryRequest) -> str:
        return make_key(request.query, json.dumps(request.params.as_dict()))

    def context(self, request: DiscoveryRequest | None) -> dict:
        if request is None:
            return {}
        ctx = {"query": request.query}
        if request.search_type == "channel":
            ctx["channelId"] = request.target_id
        elif request.search_type == "playlist":
            ctx["playlistId"] = request.target_id
        return ctx

    async def fetch(self, request: DiscoveryRequest) -> list[dict]:
        params = request.params
        logger.info("Discovery %s: %s", request.search_type, request.query)
        if request.search_type == "channel":
            return await YouTubeClient.channel_videos(
                request.target_id, max_results=params.count, sort=params.sort,
            )
        if request.search_type == "playlist":
            return await YouTubeClient.playlist_items(request.target_id, max_results=params.count)
        # Over-fetch so client-side filters still leave enough results.
        return await ytdlp.search_videos(request.query, params.count * 2)

    def shape(self, request: DiscoveryRequest, raw: list[dict]) -> dict:
        params = request.params
        if request.search_type == "channel":
            items = [i for i in map(_item_from_channel_search, raw) if i]
        elif request.search_type == "playlist":
            items = [i for i in map(_item_from_playlist, raw) if i]
        else:
            entries = [e for e in raw if is_video_id(str(e.get("id") or ""))]
            items = filter_and_sort([_item_from_search_entry(e) for e in entries], params)

        if not items:
            raise NotFound("No videos found", **self.context(request))

        results = items[:params.count]
        payload = SearchResults(
            query=request.query,
            search_type=request.search_type,
            channel_id=request.target_id if request.search_type == "channel" else None,
            playlist_id=request.target_id if request.search_type == "playlist" else None,
            results=results,
            total_results=len(items),
            result_count=len(results),
        ).to_payload()
        # to_payload drops None values; keep ``duration: null`` visible.
        payload["searchParams"] = params.as_dict()
        return payload
