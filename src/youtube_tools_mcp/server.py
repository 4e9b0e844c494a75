"""Main FastMCP server — mounts the YouTube and infra sub-servers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from . import tracing
from .config import configure_logging
from .dependencies import all_caches
from .tools.infra import infra_server
from .tools.youtube import youtube_server
from .youtube import YouTubeClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook — tracing setup, trace flush, client teardown."""
    tracing.setup()
    yield {}
    tracing.shutdown()
    YouTubeClient.reset()
    entries = sum(len(c) for c in all_caches().values())
    logger.info("Lifespan shutdown: dropped %d cached response(s)", entries)


app = FastMCP(
    "youtube-tools",
    instructions=(
        "YouTube tools for chat assistants — transcripts, video metadata, "
        "search/channel/playlist discovery and download format info. "
        "Responses are cached in memory for an hour."
    ),
    lifespan=_lifespan,
)

app.mount(youtube_server)
app.mount(infra_server)


def main() -> None:
    """Entry-point for ``youtube-tools-mcp`` console script."""
    configure_logging()
    app.run()


if __name__ == "__main__":
    main()
