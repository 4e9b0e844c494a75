"""YouTube video reference parsing — URLs, short links and bare IDs."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from .errors import InvalidReference

VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

# Loose fallback for references embedded in surrounding text.
_EMBEDDED_RE = re.compile(
    r"(?:youtube\.com/(?:[^/\s]+/\S+/|(?:v|e(?:mbed)?|shorts|live)/|watch\?(?:\S*&)?v=)"
    r"|youtu\.be/)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"
)

_PATH_PREFIXES = {"shorts", "embed", "live", "v", "e"}


def _is_youtube_host(host: str) -> bool:
    """Check if host is a youtube.com domain (including subdomains like www.youtube.com)."""
    host = host.lower().split(":", 1)[0]
    return host == "youtube.com" or host.endswith(".youtube.com")


def _is_youtu_be_host(host: str) -> bool:
    """Check if host is the youtu.be short-link domain."""
    host = host.lower().split(":", 1)[0]
    return host == "youtu.be" or host == "www.youtu.be"


def _extract_video_id_from_parsed(parsed) -> str | None:
    """Extract the raw video ID candidate from a pre-parsed YouTube URL.

    Handles:
    - youtu.be/<id> (short links)
    - youtube.com/watch?v=<id> (standard, any query order)
    - youtube.com/shorts/<id>, /embed/<id>, /live/<id>, /v/<id>, /e/<id>

    Returns:
        Candidate ID string, or None if the URL is not a recognized YouTube format.
    """
    host = parsed.netloc.lower().split(":", 1)[0]
    if _is_youtu_be_host(host):
        return parsed.path.strip("/").split("/", 1)[0] or None

    if not _is_youtube_host(host):
        return None

    video_id = parse_qs(parsed.query).get("v", [None])[0]
    if video_id:
        return video_id

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) >= 2 and parts[0] in _PATH_PREFIXES:
        return parts[1]
    return None


def is_video_id(value: str) -> bool:
    """Return True when *value* is exactly one canonical 11-character ID."""
    return bool(VIDEO_ID_RE.match(value or ""))


def extract_video_id(value: str) -> str:
    """Resolve a video reference to its canonical 11-character identifier.

    Accepts watch URLs, youtu.be short links, embed/shorts/live paths
    (scheme optional) and bare IDs. Backslash escapes are stripped.

    Raises:
        InvalidReference: If no identifier can be derived.
    """
    raw = (value or "").strip().replace("\\", "")
    if is_video_id(raw):
        return raw

    candidate = raw if "://" in raw else f"https://{raw}"
    try:
        vid = _extract_video_id_from_parsed(urlparse(candidate))
    except ValueError:
        vid = None
    if vid:
        vid = vid.split("&")[0].split("?")[0].split("#")[0]
        if is_video_id(vid):
            return vid

    match = _EMBEDDED_RE.search(raw)
    if match:
        return match.group(1)

    raise InvalidReference(
        f"Could not extract valid YouTube video ID from: {value}",
        input=value,
    )


def canonical_url(video_id: str) -> str:
    """Return ``https://www.youtube.com/watch?v=VIDEO_ID``."""
    return f"https://www.youtube.com/watch?v={video_id}"
