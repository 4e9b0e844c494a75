"""youtube_transcript adapter — caption text, timestamped rendering and summary."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from ..cache import TTLCache, make_key
from ..config import get_config
from ..errors import NotFound
from ..models.transcript import TranscriptResult, TranscriptSegment
from ..transcripts import FetchedTrack, TranscriptSource
from ..video_url import extract_video_id
from .base import ToolAdapter

logger = logging.getLogger(__name__)

SUMMARY_WORDS = 100

_ANNOTATION_RE = re.compile(r"\[.*?\]")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s([.,;!?])")


@dataclass
class TranscriptRequest:
    video_id: str
    language: str | None = None
    warnings: list[str] = field(default_factory=list)


def clean_transcript_text(text: str) -> str:
    """Drop ``[Music]``-style annotations, collapse whitespace, tighten punctuation."""
    text = _ANNOTATION_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    return text.strip()


def format_with_timestamps(segments: list[TranscriptSegment]) -> str:
    """Render segments with a ``[m:ss]`` marker each time the minute advances.

    >>> format_with_timestamps([TranscriptSegment(text="hi", start=0.0)])
    '[0:00] hi'
    """
    parts: list[str] = []
    current_minute = -1
    for seg in segments:
        text = clean_transcript_text(seg.text)
        if not text:
            continue
        minute = int(seg.start // 60)
        if minute > current_minute:
            current_minute = minute
            seconds = int(seg.start % 60)
            marker = f"[{minute}:{seconds:02d}] "
            parts.append(marker + text if not parts else f"\n{marker}{text}")
        else:
            parts.append(f" {text}")
    return "".join(parts)


def summarize(text: str, max_words: int = SUMMARY_WORDS) -> str:
    """First *max_words* words, with ``...`` appended when truncated."""
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + "..."


class TranscriptAdapter(ToolAdapter[TranscriptRequest]):
    """Fetch and shape a video transcript.

    Input syntax: ``<video url or id>`` or ``<video url or id>|<language>``.
    """

    name = "transcript"
    tool_type = "transcript_error"

    def __init__(self, cache: TTLCache, source: TranscriptSource | None = None) -> None:
        super().__init__(cache)
        self.source = source or TranscriptSource()

    def parse_input(self, raw: str) -> TranscriptRequest:
        reference, _, language = raw.partition("|")
        return TranscriptRequest(
            video_id=extract_video_id(reference),
            language=language.strip() or None,
        )

    def cache_key(self, request: TranscriptRequest) -> str:
        return make_key(request.video_id, request.language)

    def context(self, request: TranscriptRequest | None) -> dict:
        if request is None:
            return {}
        return {"videoId": request.video_id, "language": request.language}

    async def fetch(self, request: TranscriptRequest) -> FetchedTrack:
        language = request.language or get_config().default_transcript_language
        logger.info("Fetching transcript for %s (%s)", request.video_id, language)
        return await self.source.fetch(
            request.video_id, language, any_language=request.language is None,
        )

    def shape(self, request: TranscriptRequest, raw: FetchedTrack) -> dict:
        if not raw.segments:
            raise NotFound("Transcript is empty", **self.context(request))

        transcript = clean_transcript_text(" ".join(s.text for s in raw.segments))
        if not transcript:
            raise NotFound("Transcript has no spoken content", **self.context(request))

        return TranscriptResult(
            video_id=request.video_id,
            transcript=transcript,
            formatted_transcript=format_with_timestamps(raw.segments),
            language=raw.language_code or request.language or "auto",
            is_generated=raw.is_generated,
            length=len(transcript),
            word_count=len(transcript.split()),
            segment_count=len(raw.segments),
            summary=summarize(transcript),
        ).to_payload()
