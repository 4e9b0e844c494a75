"""yt-dlp derived schemas for youtube_download (one per mode)."""

from __future__ import annotations

from pydantic import Field

from ._base import CamelModel


class FormatInfo(CamelModel):
    """A single media format from the yt-dlp format list."""

    format_id: str
    ext: str | None = None
    resolution: str | None = None
    fps: float | None = None
    vcodec: str | None = None
    acodec: str | None = None
    abr: float | None = None
    vbr: float | None = None
    asr: int | None = None
    filesize: int | None = None
    filesize_formatted: str | None = None
    format_note: str | None = None


class AudioStream(CamelModel):
    """An audio-only stream (``audio_info`` mode)."""

    format_id: str
    ext: str | None = None
    acodec: str | None = None
    abr: float | None = None
    asr: int | None = None
    filesize: int | None = None
    filesize_formatted: str | None = None
    url: str | None = None


class FormatCatalogue(CamelModel):
    """Formats partitioned by which streams they carry."""

    combined: list[FormatInfo] = Field(default_factory=list)
    video_only: list[FormatInfo] = Field(default_factory=list)
    audio_only: list[FormatInfo] = Field(default_factory=list)


class BestQuality(CamelModel):
    """Best picks: yt-dlp's own selection, best combined, highest-bitrate audio."""

    best: FormatInfo | None = None
    best_combined: FormatInfo | None = None
    best_audio: FormatInfo | None = None


class DownloadMetadata(CamelModel):
    """Output schema for ``metadata_only`` mode."""

    video_id: str
    title: str = ""
    description: str | None = None
    channel_id: str | None = None
    channel_title: str | None = None
    view_count: int | None = None
    like_count: int | None = None
    duration: int | None = None
    upload_date: str | None = None
    thumbnail: str | None = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    url: str | None = None
    view_count_formatted: str | None = None
    like_count_formatted: str | None = None
    duration_formatted: str | None = None
    upload_date_formatted: str | None = None


class AudioInfo(CamelModel):
    """Output schema for ``audio_info`` mode."""

    video_id: str
    title: str = ""
    channel_title: str | None = None
    duration: int | None = None
    duration_formatted: str | None = None
    audio_streams: list[AudioStream] = Field(default_factory=list)


class FormatsInfo(CamelModel):
    """Output schema for ``formats`` mode."""

    video_id: str
    title: str = ""
    duration: int | None = None
    duration_formatted: str | None = None
    formats: FormatCatalogue = Field(default_factory=FormatCatalogue)
    best_quality: BestQuality = Field(default_factory=BestQuality)
