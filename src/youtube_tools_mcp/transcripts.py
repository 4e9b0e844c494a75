"""Transcript source — youtube-transcript-api track lookup with auto-generated fallback."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from .errors import NotFound, UpstreamError
from .models.transcript import TranscriptSegment

logger = logging.getLogger(__name__)


@dataclass
class FetchedTrack:
    """Segments of one caption track plus its provenance."""

    segments: list[TranscriptSegment]
    language_code: str
    is_generated: bool


class TranscriptSource:
    """Fetch caption tracks for a video.

    Args:
        api: A ``YouTubeTranscriptApi`` instance; created lazily when omitted.
    """

    def __init__(self, api: YouTubeTranscriptApi | None = None) -> None:
        self._api = api

    @property
    def api(self) -> YouTubeTranscriptApi:
        if self._api is None:
            self._api = YouTubeTranscriptApi()
        return self._api

    def _fetch_sync(self, video_id: str, language: str, any_language: bool) -> FetchedTrack:
        transcript_list = self.api.list(video_id)
        codes = [language]
        if any_language:
            codes += [
                t.language_code for t in transcript_list
                if not t.is_generated and t.language_code != language
            ]
        try:
            track = transcript_list.find_transcript(codes)
        except NoTranscriptFound:
            generated = [t for t in transcript_list if t.is_generated]
            if not generated:
                raise
            track = generated[0]
            logger.info(
                "No %r transcript for %s, using auto-generated %r",
                language, video_id, track.language_code,
            )

        fetched = track.fetch()
        segments = [
            TranscriptSegment(text=s.text, start=s.start, duration=s.duration)
            for s in fetched
        ]
        return FetchedTrack(
            segments=segments,
            language_code=track.language_code,
            is_generated=track.is_generated,
        )

    async def fetch(
        self, video_id: str, language: str, *, any_language: bool = False
    ) -> FetchedTrack:
        """Fetch the *language* track, or the first auto-generated track if it is missing.

        With *any_language*, a manual track in another language is preferred
        over the auto-generated fallback.

        Raises:
            NotFound: Transcripts are disabled, the video is unavailable, or no
                matching or auto-generated track exists.
            UpstreamError: Any other retrieval failure.
        """
        try:
            return await asyncio.to_thread(self._fetch_sync, video_id, language, any_language)
        except (NoTranscriptFound, TranscriptsDisabled, VideoUnavailable) as exc:
            raise NotFound(
                "No transcript available for this video",
                hint="This video likely does not have available transcripts or subtitles.",
                videoId=video_id,
                language=language,
            ) from exc
        except CouldNotRetrieveTranscript as exc:
            logger.warning("Transcript retrieval failed for %s: %s", video_id, exc)
            raise UpstreamError(
                f"Failed to retrieve transcript: {type(exc).__name__}",
                videoId=video_id,
                language=language,
            ) from exc
