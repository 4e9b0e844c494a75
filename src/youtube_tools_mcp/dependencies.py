"""Shared adapter instances used by both the MCP tools and the HTTP routes."""

from __future__ import annotations

from functools import lru_cache

from .adapters import DiscoveryAdapter, DownloadInfoAdapter, TranscriptAdapter, VideoInfoAdapter
from .cache import TTLCache
from .config import get_config


def _cache(name: str) -> TTLCache:
    return TTLCache(ttl_seconds=get_config().cache_ttl_seconds, name=name)


@lru_cache(maxsize=1)
def get_transcript_adapter() -> TranscriptAdapter:
    return TranscriptAdapter(_cache("transcript"))


@lru_cache(maxsize=1)
def get_video_adapter() -> VideoInfoAdapter:
    return VideoInfoAdapter(_cache("video"))


@lru_cache(maxsize=1)
def get_discovery_adapter() -> DiscoveryAdapter:
    return DiscoveryAdapter(_cache("discovery"))


@lru_cache(maxsize=1)
def get_download_adapter() -> DownloadInfoAdapter:
    return DownloadInfoAdapter(_cache("download"))


def all_caches() -> dict[str, TTLCache]:
    """Adapter caches keyed by tool name."""
    return {
        "transcript": get_transcript_adapter().cache,
        "video": get_video_adapter().cache,
        "discovery": get_discovery_adapter().cache,
        "download": get_download_adapter().cache,
    }


def reset_adapters() -> None:
    get_transcript_adapter.cache_clear()
    get_video_adapter.cache_clear()
    get_discovery_adapter.cache_clear()
    get_download_adapter.cache_clear()
