"""Infrastructure tools — adapter cache inspection on a FastMCP sub-server."""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import get_config
from ..dependencies import all_caches
from ..errors import make_tool_error
from ..tracing import trace
from ..types import CacheAction, ToolName

infra_server = FastMCP("infra")


def _enforce_mutation_policy(auth_token: str | None) -> None:
    """Require the shared API token for cache clears when one is configured."""
    token = get_config().api_token
    if token and auth_token != token:
        raise PermissionError("Invalid or missing auth token for cache clear.")


@infra_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=True,
        openWorldHint=False,
    )
)
@trace(name="youtube_cache", span_type="TOOL")
async def youtube_cache(
    action: CacheAction = "stats",
    tool: Annotated[ToolName | None, Field(description="Limit to one adapter's cache")] = None,
    prefix: Annotated[str | None, Field(
        description="When clearing, only remove keys for this video ID or query",
    )] = None,
    auth_token: Annotated[str | None, Field(
        description="Auth token (required for clear when YT_TOOLS_API_TOKEN is configured)",
    )] = None,
) -> dict:
    """Inspect or clear the in-memory response caches.

    Args:
        action: "stats", "list" or "clear".
        tool: Restrict to the transcript, video, discovery or download cache.
        prefix: For "clear", drop only keys equal to or starting with ``<prefix>_``.

    Returns:
        Per-cache stats, entry listings, or removed counts.
    """
    caches = all_caches()
    if tool is not None:
        caches = {tool: caches[tool]}

    if action == "stats":
        return {"caches": {name: c.stats() for name, c in caches.items()}}
    if action == "list":
        return {"caches": {name: c.list_entries() for name, c in caches.items()}}
    if action == "clear":
        try:
            _enforce_mutation_policy(auth_token)
        except PermissionError as exc:
            return make_tool_error(exc, "cache_error")
        removed = {name: c.clear(prefix) for name, c in caches.items()}
        return {"removed": removed, "total": sum(removed.values())}
    return {"error": f"Unknown action: {action}", "valid_actions": ["stats", "list", "clear"]}
