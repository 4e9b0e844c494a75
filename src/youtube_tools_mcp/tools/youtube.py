"""YouTube tools — transcript, video info, discovery and download info on a FastMCP sub-server."""

from __future__ import annotations

import logging

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..dependencies import (
    get_discovery_adapter,
    get_download_adapter,
    get_transcript_adapter,
    get_video_adapter,
)
from ..tracing import trace
from ..types import DiscoveryInput, DownloadInput, TranscriptInput, VideoInput

logger = logging.getLogger(__name__)
youtube_server = FastMCP("youtube")

_READ_ONLY = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    idempotentHint=True,
    openWorldHint=True,
)


@youtube_server.tool(annotations=_READ_ONLY)
@trace(name="youtube_transcript", span_type="TOOL")
async def youtube_transcript(input: TranscriptInput) -> dict:
    """Fetch the transcript of a YouTube video.

    Falls back to the auto-generated track when the requested language is
    missing. Returns the cleaned transcript, a version with ``[m:ss]``
    markers each minute, word/segment counts and a 100-word summary.

    Args:
        input: Video URL or ID, optionally ``"<url>|<language code>"``.

    Returns:
        Dict with videoId, transcript, formattedTranscript, language,
        isGenerated, length, wordCount, segmentCount and summary, or an
        error dict with type ``transcript_error``.
    """
    return await get_transcript_adapter().run(input)


@youtube_server.tool(annotations=_READ_ONLY)
@trace(name="youtube_video_info", span_type="TOOL")
async def youtube_video_info(input: VideoInput) -> dict:
    """Fetch YouTube video metadata: title, channel, counts, duration, tags.

    Costs 1 YouTube API unit.

    Args:
        input: Video URL or ID.

    Returns:
        Dict with raw values and ``*Formatted`` display siblings, or an error
        dict with type ``video_info_error``.
    """
    return await get_video_adapter().run(input)


@youtube_server.tool(annotations=_READ_ONLY)
@trace(name="youtube_discovery", span_type="TOOL")
async def youtube_discovery(input: DiscoveryInput) -> dict:
    """Search YouTube, or list a channel's or a playlist's videos.

    Prefix the query with ``channel:`` or ``playlist:`` to list that
    collection. Optional parameters after ``|``: count (max 20), sort
    (relevance/date/views/rating), recent, min_views, duration
    (short/medium/long). Unrecognised parameters are reported in
    ``warnings``.

    Args:
        input: e.g. ``"rust async | count=10, sort=views, recent=true"``.

    Returns:
        Dict with query, searchType, results, totalResults, resultCount and
        searchParams, or an error dict with type ``search_error``.
    """
    return await get_discovery_adapter().run(input)


@youtube_server.tool(annotations=_READ_ONLY)
@trace(name="youtube_download", span_type="TOOL")
async def youtube_download(input: DownloadInput) -> dict:
    """Describe a video's downloadable streams via yt-dlp (nothing is downloaded).

    Modes: ``metadata_only`` (default), ``audio_info`` (audio-only streams)
    or ``formats`` (combined/videoOnly/audioOnly catalogue with best picks).

    Args:
        input: Video URL or ID, optionally ``"<url>|<mode>"``.

    Returns:
        Mode-specific dict, or an error dict with type ``download_error``.
    """
    return await get_download_adapter().run(input)
