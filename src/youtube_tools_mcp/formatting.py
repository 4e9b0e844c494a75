"""Display formatting helpers — counts, durations, dates, sizes.

Pure functions; every ``format_*`` helper returns ``"Unknown"`` for a
missing value rather than raising.
"""

from __future__ import annotations

import re
from datetime import datetime

_ISO_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
_ABBREVIATED_COUNT_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*([KMB])\b", re.IGNORECASE)
_COUNT_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}

UNKNOWN = "Unknown"


def parse_iso8601_duration(duration: str | None) -> int:
    """Parse ISO 8601 duration (PT4M13S) into total seconds.

    Absent hour/minute/second groups count as zero; an unmatched string is 0.
    """
    match = _ISO_DURATION_RE.match(duration or "")
    if not match:
        return 0
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    seconds = int(match.group(3) or 0)
    return hours * 3600 + minutes * 60 + seconds


def iso_to_yyyymmdd(timestamp: str | None) -> str:
    """Normalize an ISO timestamp (``2021-06-15T10:00:00Z``) to ``20210615``.

    The calendar date is taken as written in the timestamp, without
    converting to local time. Returns ``""`` for empty or unparseable input.
    """
    if not timestamp:
        return ""
    value = timestamp.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value).strftime("%Y%m%d")
    except ValueError:
        digits = re.sub(r"\D", "", timestamp[:10])
        return digits if len(digits) == 8 else ""


def format_number(num: int | float | None) -> str:
    """Abbreviate large counts: 1500 → ``1.5K``, 2_300_000 → ``2.3M``."""
    if num is None:
        return UNKNOWN
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.1f}B"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(int(num)) if float(num).is_integer() else str(num)


def format_duration(seconds: int | float | None) -> str:
    """Format seconds as ``m:ss`` or ``h:mm:ss`` (e.g. 4:13 or 1:02:03)."""
    if seconds is None:
        return UNKNOWN
    total = int(seconds)
    if total <= 0:
        return "0:00"
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_date(date_str: str | None) -> str:
    """Format ``YYYYMMDD`` as ``YYYY-MM-DD``."""
    if not date_str or len(date_str) != 8 or not date_str.isdigit():
        return UNKNOWN
    return f"{date_str[:4]}-{date_str[4:6]}-{date_str[6:]}"


def format_filesize(size_bytes: int | float | None) -> str:
    """Format a byte count with binary units: 1536 → ``1.50 KB``."""
    if size_bytes is None:
        return UNKNOWN
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1
    return f"{size:.2f} {units[unit_index]}"


def parse_view_count(value: str | int | float | None) -> int | None:
    """Parse a view count that may be human-formatted.

    Integers pass through. Strings with an abbreviation suffix
    (``"1.2M views"``) are expanded; otherwise every non-digit is stripped
    (``"1,234,567 views"`` → 1234567). Returns None when no digits remain.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value)
    match = _ABBREVIATED_COUNT_RE.search(text)
    if match:
        number = float(match.group(1).replace(",", "."))
        return int(round(number * _COUNT_MULTIPLIERS[match.group(2).upper()]))
    digits = re.sub(r"\D", "", text)
    return int(digits) if digits else None
