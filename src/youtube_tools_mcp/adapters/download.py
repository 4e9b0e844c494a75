"""youtube_download adapter — yt-dlp metadata, audio streams and format catalogue.

Never downloads media; every mode is served from one ``--dump-single-json``
call per cache miss.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .. import ytdlp
from ..cache import make_key
from ..formatting import format_date, format_duration, format_filesize, format_number
from ..models.download import (
    AudioInfo,
    AudioStream,
    BestQuality,
    DownloadMetadata,
    FormatCatalogue,
    FormatInfo,
    FormatsInfo,
)
from ..types import DOWNLOAD_MODES, DownloadMode
from ..video_url import canonical_url, extract_video_id
from .base import ToolAdapter

logger = logging.getLogger(__name__)

DEFAULT_MODE = "metadata_only"
AUDIO_ONLY = "audio only"


@dataclass
class DownloadRequest:
    video_id: str
    mode: DownloadMode = DEFAULT_MODE
    warnings: list[str] = field(default_factory=list)


def parse_mode(text: str) -> tuple[DownloadMode, list[str]]:
    """Resolve a mode keyword; unknown modes fall back to ``metadata_only``."""
    mode = text.strip().lower()
    if not mode:
        return DEFAULT_MODE, []
    if mode in DOWNLOAD_MODES:
        return mode, []
    return DEFAULT_MODE, [
        f"Unknown mode '{mode}', using {DEFAULT_MODE} (valid: {', '.join(DOWNLOAD_MODES)})"
    ]


def _int_or_none(value) -> int | None:
    return int(value) if value is not None else None


def _filesize(fmt: dict) -> int | None:
    return _int_or_none(fmt.get("filesize") or fmt.get("filesize_approx"))


def _resolution(fmt: dict) -> str | None:
    if fmt.get("resolution"):
        return fmt["resolution"]
    if fmt.get("vcodec") == "none":
        return AUDIO_ONLY
    if fmt.get("width") and fmt.get("height"):
        return f"{fmt['width']}x{fmt['height']}"
    return None


def format_info(fmt: dict) -> FormatInfo:
    """Shape one raw yt-dlp format entry."""
    size = _filesize(fmt)
    return FormatInfo(
        format_id=str(fmt.get("format_id", "")),
        ext=fmt.get("ext"),
        resolution=_resolution(fmt),
        fps=fmt.get("fps"),
        vcodec=fmt.get("vcodec"),
        acodec=fmt.get("acodec"),
        abr=fmt.get("abr"),
        vbr=fmt.get("vbr"),
        asr=_int_or_none(fmt.get("asr")),
        filesize=size,
        filesize_formatted=format_filesize(size) if size else None,
        format_note=fmt.get("format_note"),
    )


def partition_formats(formats: list[FormatInfo]) -> FormatCatalogue:
    """Bucket formats: ``audio only`` resolution, then ``acodec == "none"``, else combined."""
    catalogue = FormatCatalogue()
    for fmt in formats:
        if fmt.resolution == AUDIO_ONLY:
            catalogue.audio_only.append(fmt)
        elif fmt.acodec == "none":
            catalogue.video_only.append(fmt)
        else:
            catalogue.combined.append(fmt)
    return catalogue


def select_best(
    formats: list[FormatInfo], catalogue: FormatCatalogue, selected_id: str | None
) -> BestQuality:
    """Pick yt-dlp's own selection, the last combined format and the highest-``abr`` audio.

    yt-dlp lists formats worst to best, so "last" means best.
    """
    best = None
    if selected_id:
        best = next((f for f in formats if f.format_id == selected_id), None)
    if best is None and formats:
        best = formats[-1]
    best_audio = max(
        catalogue.audio_only, key=lambda f: f.abr or 0.0, default=None,
    )
    return BestQuality(
        best=best,
        best_combined=catalogue.combined[-1] if catalogue.combined else None,
        best_audio=best_audio,
    )


class DownloadInfoAdapter(ToolAdapter[DownloadRequest]):
    """Describe a video's downloadable streams without downloading them.

    Input syntax: ``<video url or id>`` or ``<video url or id>|<mode>`` where
    mode is ``metadata_only`` (default), ``audio_info`` or ``formats``.
    """

    name = "download"
    tool_type = "download_error"

    def parse_input(self, raw: str) -> DownloadRequest:
        reference, _, mode_text = raw.partition("|")
        video_id = extract_video_id(reference)
        mode, warnings = parse_mode(mode_text)
        return DownloadRequest(video_id=video_id, mode=mode, warnings=warnings)

    def cache_key(self, request: DownloadRequest) -> str:
        return make_key(request.video_id, request.mode)

    def context(self, request: DownloadRequest | None) -> dict:
        if request is None:
            return {}
        return {"videoId": request.video_id, "mode": request.mode}

    async def fetch(self, request: DownloadRequest) -> dict:
        return await ytdlp.dump_video_info(request.video_id)

    def shape(self, request: DownloadRequest, raw: dict) -> dict:
        if request.mode == "audio_info":
            return self._audio_info(request.video_id, raw)
        if request.mode == "formats":
            return self._formats(request.video_id, raw)
        return self._metadata(request.video_id, raw)

    @staticmethod
    def _metadata(video_id: str, info: dict) -> dict:
        views = _int_or_none(info.get("view_count"))
        likes = _int_or_none(info.get("like_count"))
        duration = _int_or_none(info.get("duration"))
        upload_date = info.get("upload_date")
        return DownloadMetadata(
            video_id=video_id,
            title=info.get("title") or "",
            description=info.get("description"),
            channel_id=info.get("channel_id"),
            channel_title=info.get("channel") or info.get("uploader"),
            view_count=views,
            like_count=likes,
            duration=duration,
            upload_date=upload_date,
            thumbnail=info.get("thumbnail"),
            categories=info.get("categories") or [],
            tags=info.get("tags") or [],
            url=info.get("webpage_url") or canonical_url(video_id),
            view_count_formatted=format_number(views) if views is not None else None,
            like_count_formatted=format_number(likes) if likes is not None else None,
            duration_formatted=format_duration(duration) if duration is not None else None,
            upload_date_formatted=format_date(upload_date) if upload_date else None,
        ).to_payload()

    @staticmethod
    def _audio_info(video_id: str, info: dict) -> dict:
        streams = []
        for fmt in info.get("formats") or []:
            if _resolution(fmt) != AUDIO_ONLY:
                continue
            size = _filesize(fmt)
            streams.append(AudioStream(
                format_id=str(fmt.get("format_id", "")),
                ext=fmt.get("ext"),
                acodec=fmt.get("acodec"),
                abr=fmt.get("abr"),
                asr=_int_or_none(fmt.get("asr")),
                filesize=size,
                filesize_formatted=format_filesize(size) if size else None,
                url=fmt.get("url"),
            ))
        duration = _int_or_none(info.get("duration"))
        return AudioInfo(
            video_id=video_id,
            title=info.get("title") or "",
            channel_title=info.get("channel") or info.get("uploader"),
            duration=duration,
            duration_formatted=format_duration(duration) if duration is not None else None,
            audio_streams=streams,
        ).to_payload()

    @staticmethod
    def _formats(video_id: str, info: dict) -> dict:
        formats = [format_info(f) for f in info.get("formats") or []]
        catalogue = partition_formats(formats)
        duration = _int_or_none(info.get("duration"))
        return FormatsInfo(
            video_id=video_id,
            title=info.get("title") or "",
            duration=duration,
            duration_formatted=format_duration(duration) if duration is not None else None,
            formats=catalogue,
            best_quality=select_best(formats, catalogue, info.get("format_id")),
        ).to_payload()
