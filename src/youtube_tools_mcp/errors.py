"""Structured error handling — error kinds, tool failures, and the error result model."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorKind(str, Enum):
    """Coarse failure kinds shared by every adapter."""

    INVALID_REFERENCE = "InvalidReference"
    UPSTREAM_ERROR = "UpstreamError"
    NOT_FOUND = "NotFound"
    SYSTEM_ERROR = "SystemError"


SYSTEM_ERROR_TYPE = "system_error"


class ToolFailure(Exception):
    """Base class for failures an adapter reports as data.

    Args:
        message: Human-readable message surfaced as ``error``.
        hint: Optional remediation hint.
        upstream_status: HTTP status returned by the upstream service, if any.
        **context: Correlation identifiers (``videoId``, ``query``, ...).
    """

    kind: ErrorKind = ErrorKind.SYSTEM_ERROR

    def __init__(
        self,
        message: str,
        *,
        hint: str = "",
        upstream_status: int | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.upstream_status = upstream_status
        self.context = {k: v for k, v in context.items() if v is not None}


class InvalidReference(ToolFailure, ValueError):
    """The input could not be resolved to a canonical video identifier."""

    kind = ErrorKind.INVALID_REFERENCE


class UpstreamError(ToolFailure):
    """An external collaborator failed or returned nothing usable."""

    kind = ErrorKind.UPSTREAM_ERROR


class NotFound(ToolFailure):
    """The reference is valid but no transcript, video or results exist."""

    kind = ErrorKind.NOT_FOUND


class ToolError(BaseModel):
    """Structured error returned from any tool or route."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: str
    type: str
    kind: ErrorKind
    hint: str = ""
    upstream_status: int | None = None
    context: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict:
        """Flatten ``context`` into the top level so callers can correlate on ``videoId``/``query``."""
        payload = self.model_dump(mode="json", by_alias=True, exclude={"context"}, exclude_none=True)
        if not payload.get("hint"):
            payload.pop("hint", None)
        for key, value in self.context.items():
            payload.setdefault(key, value)
        return payload


def _default_hint(kind: ErrorKind) -> str:
    if kind == ErrorKind.INVALID_REFERENCE:
        return "Pass a YouTube URL (watch, youtu.be, embed, shorts) or an 11-character video ID"
    if kind == ErrorKind.NOT_FOUND:
        return "The video exists but has no matching content, or it was removed"
    return ""


def make_tool_error(error: Exception, tool_type: str, **context: Any) -> dict:
    """Create a serialisable error payload from an exception.

    ``ToolFailure`` subclasses keep their kind and carry ``tool_type`` as the
    ``type`` tag; anything else is an uncaught fault and becomes a
    ``system_error``.

    Args:
        error: The exception to serialise.
        tool_type: Tool tag such as ``"transcript_error"``.
        **context: Extra correlation identifiers merged under the error's own.

    Returns:
        Dict with ``error``, ``type``, ``kind`` and correlation keys.
    """
    if isinstance(error, ToolFailure):
        merged = {k: v for k, v in context.items() if v is not None}
        merged.update(error.context)
        return ToolError(
            error=error.message,
            type=tool_type,
            kind=error.kind,
            hint=error.hint or _default_hint(error.kind),
            upstream_status=error.upstream_status,
            context=merged,
        ).to_payload()

    return ToolError(
        error=str(error) or type(error).__name__,
        type=SYSTEM_ERROR_TYPE,
        kind=ErrorKind.SYSTEM_ERROR,
        context={k: v for k, v in context.items() if v is not None},
    ).to_payload()
