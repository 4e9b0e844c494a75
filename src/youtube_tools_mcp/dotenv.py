"""Load ``~/.config/youtube-tools-mcp/.env`` into the process environment.

Lets the MCP server and the HTTP API share one YouTube API key without
every host repeating it. Values already present in the environment win.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

DEFAULT_ENV_PATH = Path.home() / ".config" / "youtube-tools-mcp" / ".env"

_LINE_RE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def _needs_value(key: str) -> bool:
    """True when ``key`` is unset, blank, or an unresolved ``${KEY}`` self-reference."""
    current = _unquote((os.environ.get(key) or "").strip()).strip()
    if not current:
        return True
    return current in {f"${key}", f"${{{key}}}"} or (
        current.startswith(f"${{{key}:-") and current.endswith("}")
    )


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines (optionally quoted or ``export``-prefixed).

    Blank lines, ``#`` comments and malformed lines are skipped. No
    variable expansion.
    """
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    for line in path.read_text().splitlines():
        match = _LINE_RE.match(line.strip())
        if match:
            values[match.group(1)] = _unquote(match.group(2).strip())
    return values


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Inject vars from *path* (default :data:`DEFAULT_ENV_PATH`) that the environment lacks.

    Returns:
        Dict of vars that were actually injected.
    """
    injected = {
        key: value
        for key, value in parse_dotenv(path or DEFAULT_ENV_PATH).items()
        if _needs_value(key)
    }
    os.environ.update(injected)
    return injected
