"""Common adapter pipeline — parse, cache lookup, one upstream call, shape, cache write."""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from ..cache import TTLCache
from ..errors import ToolFailure, UpstreamError, make_tool_error

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")


class ToolAdapter(Generic[RequestT]):
    """Base class for the four YouTube tool adapters.

    Subclasses implement ``parse_input``, ``cache_key``, ``fetch`` (exactly
    one upstream call) and ``shape``. Transports call ``run`` with a raw tool
    string, or build a request themselves and call ``execute``.

    Args:
        cache: The adapter's own cache instance.
    """

    name: str = ""
    tool_type: str = ""

    def __init__(self, cache: TTLCache) -> None:
        self.cache = cache

    def parse_input(self, raw: str) -> RequestT:
        raise NotImplementedError

    def cache_key(self, request: RequestT) -> str:
        raise NotImplementedError

    async def fetch(self, request: RequestT) -> Any:
        raise NotImplementedError

    def shape(self, request: RequestT, raw: Any) -> dict:
        raise NotImplementedError

    def context(self, request: RequestT | None) -> dict[str, Any]:
        """Correlation identifiers echoed on error payloads."""
        return {}

    async def execute(self, request: RequestT) -> dict:
        """Return the shaped payload for *request*, from cache when fresh.

        Only successful payloads are cached.

        Raises:
            ToolFailure: NotFound/UpstreamError from the upstream call.
        """
        key = self.cache_key(request)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            raw = await self.fetch(request)
        except ToolFailure:
            raise
        except Exception as exc:
            logger.warning("%s upstream call failed: %s", self.name, exc)
            raise UpstreamError(str(exc) or type(exc).__name__, **self.context(request)) from exc

        payload = self.shape(request, raw)
        self.cache.set(key, payload)
        return payload

    async def run(self, raw: str) -> dict:
        """Tool entry point: never raises, errors come back as data."""
        request: RequestT | None = None
        try:
            request = self.parse_input(raw)
            result = await self.execute(request)
        except ToolFailure as exc:
            return make_tool_error(exc, self.tool_type, **self.context(request))
        except Exception as exc:
            logger.exception("Unexpected %s failure for input %r", self.name, raw)
            return make_tool_error(exc, self.tool_type, **self.context(request))

        warnings = getattr(request, "warnings", None)
        if warnings:
            result["warnings"] = list(warnings)
        return result
