"""Search parameter schema for youtube_discovery."""

from __future__ import annotations

from pydantic import Field

from ..types import DurationFilter, SortOrder
from ._base import CamelModel

MAX_SEARCH_COUNT = 20
DEFAULT_SEARCH_COUNT = 5


class SearchParameters(CamelModel):
    """Parsed discovery parameters.

    Serialises as ``{count, sort, recent, minViews, duration}``; the
    discovery cache key is derived from this dump, so field order matters.
    """

    count: int = Field(default=DEFAULT_SEARCH_COUNT, ge=1, le=MAX_SEARCH_COUNT)
    sort: SortOrder = "relevance"
    recent: bool = False
    min_views: int = Field(default=0, ge=0)
    duration: DurationFilter | None = None

    def as_dict(self) -> dict:
        """Dump every field, including ``duration: None``."""
        return self.model_dump(mode="json", by_alias=True)
