"""yt-dlp subprocess wrapper — metadata dumps and flat search listings.

Never downloads media. Calls the ``yt-dlp`` executable that the yt-dlp
package installs and parses its ``--dump-single-json`` output.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shutil

from .config import get_config
from .errors import NotFound, UpstreamError
from .video_url import canonical_url

logger = logging.getLogger(__name__)

_COMMON_FLAGS = ["--dump-single-json", "--no-warnings", "--skip-download"]

# stderr fragments that mean the video itself is gone, not that yt-dlp broke.
_NOT_FOUND_MARKERS = (
    "video unavailable",
    "private video",
    "has been removed",
    "does not exist",
    "is not available",
)

_INSTALL_HINT = "Install it: brew install yt-dlp (macOS) or pip install yt-dlp, or set YT_DLP_PATH"


def _binary() -> str:
    """Resolve the yt-dlp executable, raising UpstreamError if it is missing."""
    configured = get_config().ytdlp_path
    resolved = shutil.which(configured)
    if not resolved:
        raise UpstreamError(f"yt-dlp not found ({configured})", hint=_INSTALL_HINT)
    return resolved


async def _run_json(args: list[str], **context) -> dict:
    """Run yt-dlp with *args* and return its parsed JSON document."""
    cmd = [_binary(), *_COMMON_FLAGS, *args]
    logger.info("Running yt-dlp %s", args[-1])
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()

    if proc.returncode != 0:
        err_msg = stderr.decode(errors="replace").strip() if stderr else "unknown error"
        logger.warning("yt-dlp exited %s: %s", proc.returncode, err_msg)
        if any(marker in err_msg.lower() for marker in _NOT_FOUND_MARKERS):
            raise NotFound(err_msg, **context)
        raise UpstreamError(f"yt-dlp failed: {err_msg}", **context)

    try:
        return json.loads(stdout.decode(errors="replace"))
    except json.JSONDecodeError as exc:
        raise UpstreamError(f"yt-dlp returned invalid JSON: {exc}", **context) from exc


async def dump_video_info(video_id: str) -> dict:
    """Dump full metadata and the format list for one video.

    Args:
        video_id: YouTube video ID (e.g. "dQw4w9WgXcQ").

    Returns:
        The yt-dlp info dict (``title``, ``formats``, ``format_id``, ...).

    Raises:
        NotFound: The video is unavailable, private or removed.
        UpstreamError: yt-dlp is missing, failed, or printed invalid JSON.
    """
    return await _run_json(
        ["--no-playlist", "--prefer-free-formats", canonical_url(video_id)],
        videoId=video_id,
    )


async def search_videos(query: str, limit: int) -> list[dict]:
    """List up to *limit* search hits via ``ytsearchN:`` in flat mode.

    Flat entries carry id, title, channel, view_count and duration but
    usually no upload date.
    """
    data = await _run_json(["--flat-playlist", f"ytsearch{limit}:{query}"], query=query)
    return [e for e in data.get("entries") or [] if isinstance(e, dict)]
