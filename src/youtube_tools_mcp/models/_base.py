"""Shared base model — camelCase JSON keys for display payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (``views_formatted`` → ``viewsFormatted``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Dump to a JSON-ready dict, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
