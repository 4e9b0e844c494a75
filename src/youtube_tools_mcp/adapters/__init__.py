"""Tool adapters — one per YouTube tool, shared by the MCP and HTTP transports."""

from .base import ToolAdapter
from .discovery import DiscoveryAdapter, DiscoveryRequest
from .download import DownloadInfoAdapter, DownloadRequest
from .transcript import TranscriptAdapter, TranscriptRequest
from .video import VideoInfoAdapter, VideoRequest

__all__ = [
    "DiscoveryAdapter",
    "DiscoveryRequest",
    "DownloadInfoAdapter",
    "DownloadRequest",
    "ToolAdapter",
    "TranscriptAdapter",
    "TranscriptRequest",
    "VideoInfoAdapter",
    "VideoRequest",
]
