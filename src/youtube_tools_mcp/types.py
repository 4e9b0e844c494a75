"""Shared type aliases for tool and route parameters."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

# ── Literal enums ────────────────────────────────────────────────────────────

DownloadMode = Literal["metadata_only", "audio_info", "formats"]
SortOrder = Literal["relevance", "date", "views", "rating"]
DurationFilter = Literal["short", "medium", "long"]
SearchType = Literal["search", "channel", "playlist"]
CacheAction = Literal["stats", "list", "clear"]
ToolName = Literal["transcript", "video", "discovery", "download"]

DOWNLOAD_MODES: tuple[str, ...] = ("metadata_only", "audio_info", "formats")
SORT_ORDERS: tuple[str, ...] = ("relevance", "date", "views", "rating")
DURATION_FILTERS: tuple[str, ...] = ("short", "medium", "long")

# ── Annotated aliases ────────────────────────────────────────────────────────

TranscriptInput = Annotated[str, Field(
    min_length=1,
    description='YouTube video URL or ID, optionally with a language code: "video_url|language_code"',
)]
VideoInput = Annotated[str, Field(min_length=1, description="YouTube video URL or ID")]
DiscoveryInput = Annotated[str, Field(
    min_length=1,
    description=(
        'Search query with optional parameters, e.g. "machine learning | count=10, sort=views", '
        '"channel:<channel_id> | count=5" or "playlist:<playlist_id>"'
    ),
)]
DownloadInput = Annotated[str, Field(
    min_length=1,
    description='YouTube video URL or ID with optional mode: "video_url | formats"',
)]
