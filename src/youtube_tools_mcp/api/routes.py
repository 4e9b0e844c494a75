"""HTTP route handlers — thin wrappers mapping adapter results to status codes."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import JSONResponse

from ..adapters import (
    DiscoveryAdapter,
    DiscoveryRequest,
    DownloadInfoAdapter,
    DownloadRequest,
    ToolAdapter,
    TranscriptAdapter,
    TranscriptRequest,
    VideoInfoAdapter,
    VideoRequest,
)
from ..adapters.discovery import CHANNEL_PREFIX, PLAYLIST_PREFIX, parse_search_params
from ..config import get_config
from ..dependencies import (
    get_discovery_adapter,
    get_download_adapter,
    get_transcript_adapter,
    get_video_adapter,
)
from ..errors import ErrorKind, ToolFailure, make_tool_error
from ..types import DOWNLOAD_MODES
from ..video_url import extract_video_id

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REFERENCE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM_ERROR: 500,
    ErrorKind.SYSTEM_ERROR: 500,
}


def require_session(
    authorization: Annotated[str | None, Header()] = None,
    x_session_token: Annotated[str | None, Header()] = None,
) -> None:
    """Pass when no API token is configured, or when the request presents it."""
    token = get_config().api_token
    if not token:
        return
    presented = x_session_token
    if authorization and authorization.lower().startswith("bearer "):
        presented = authorization[7:].strip()
    if presented != token:
        raise HTTPException(status_code=401, detail="Unauthorized")


router = APIRouter(prefix="/api/youtube", tags=["youtube"], dependencies=[Depends(require_session)])


def _bad_request(message: str, tool_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": message, "type": tool_type, "kind": ErrorKind.INVALID_REFERENCE.value},
    )


async def _respond(adapter: ToolAdapter, build_request) -> Any:
    """Build the typed request, execute it, and map failures to status codes."""
    request = None
    try:
        request = build_request()
        payload = await adapter.execute(request)
    except ToolFailure as exc:
        return JSONResponse(
            status_code=STATUS_BY_KIND[exc.kind],
            content=make_tool_error(exc, adapter.tool_type, **adapter.context(request)),
        )
    except Exception as exc:
        logger.exception("Unhandled %s route failure", adapter.name)
        return JSONResponse(
            status_code=500,
            content=make_tool_error(exc, adapter.tool_type, **adapter.context(request)),
        )
    warnings = getattr(request, "warnings", None)
    if warnings:
        payload["warnings"] = list(warnings)
    return payload


@router.get("/transcript", operation_id="youtube_transcript")
async def get_transcript(
    adapter: Annotated[TranscriptAdapter, Depends(get_transcript_adapter)],
    video_id: Annotated[str | None, Query(alias="videoId")] = None,
    language: str | None = None,
) -> Any:
    if not video_id:
        return _bad_request("Video ID is required", adapter.tool_type)
    return await _respond(adapter, lambda: TranscriptRequest(
        video_id=extract_video_id(video_id), language=language or None,
    ))


@router.get("/video", operation_id="youtube_video_info")
async def get_video(
    adapter: Annotated[VideoInfoAdapter, Depends(get_video_adapter)],
    video_id: Annotated[str | None, Query(alias="videoId")] = None,
) -> Any:
    if not video_id:
        return _bad_request("Video ID is required", adapter.tool_type)
    return await _respond(adapter, lambda: VideoRequest(video_id=extract_video_id(video_id)))


@router.get("/download", operation_id="youtube_download")
async def get_download(
    adapter: Annotated[DownloadInfoAdapter, Depends(get_download_adapter)],
    video_id: Annotated[str | None, Query(alias="videoId")] = None,
    mode: str = "metadata_only",
) -> Any:
    if not video_id:
        return _bad_request("Video ID is required", adapter.tool_type)
    if mode not in DOWNLOAD_MODES:
        return _bad_request(
            f"Invalid mode '{mode}'. Must be one of: {', '.join(DOWNLOAD_MODES)}",
            adapter.tool_type,
        )
    return await _respond(adapter, lambda: DownloadRequest(
        video_id=extract_video_id(video_id), mode=mode,
    ))


@router.get("/search", operation_id="youtube_search")
async def get_search(
    adapter: Annotated[DiscoveryAdapter, Depends(get_discovery_adapter)],
    q: str | None = None,
    search_type: Annotated[str, Query(alias="type")] = "search",
    channel_id: Annotated[str | None, Query(alias="channelId")] = None,
    playlist_id: Annotated[str | None, Query(alias="playlistId")] = None,
    count: str | None = None,
    sort: str | None = None,
    recent: str | None = None,
    min_views: Annotated[str | None, Query(alias="minViews")] = None,
    duration: str | None = None,
) -> Any:
    if search_type == "channel":
        if not channel_id:
            return _bad_request("channelId is required for channel search", adapter.tool_type)
        query = f"{CHANNEL_PREFIX}{channel_id}"
    elif search_type == "playlist":
        if not playlist_id:
            return _bad_request("playlistId is required for playlist search", adapter.tool_type)
        query = f"{PLAYLIST_PREFIX}{playlist_id}"
    elif search_type == "search":
        if not q:
            return _bad_request("Search query is required", adapter.tool_type)
        query = q
    else:
        return _bad_request(
            f"Invalid type '{search_type}'. Must be one of: search, channel, playlist",
            adapter.tool_type,
        )

    raw_params = {
        "count": count, "sort": sort, "recent": recent,
        "min_views": min_views, "duration": duration,
    }
    params, warnings = parse_search_params(
        ",".join(f"{k}={v}" for k, v in raw_params.items() if v is not None)
    )
    return await _respond(adapter, lambda: DiscoveryRequest.for_query(query, params, warnings))
