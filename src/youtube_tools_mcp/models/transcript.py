"""Transcript schemas — raw segments and the shaped tool output."""

from __future__ import annotations

from pydantic import BaseModel

from ._base import CamelModel


class TranscriptSegment(BaseModel):
    """One caption cue as returned by the transcript source."""

    text: str
    start: float = 0.0
    duration: float = 0.0


class TranscriptResult(CamelModel):
    """Output schema for youtube_transcript."""

    video_id: str
    transcript: str
    formatted_transcript: str
    language: str = "auto"
    is_generated: bool = False
    length: int = 0
    word_count: int = 0
    segment_count: int = 0
    summary: str = ""
