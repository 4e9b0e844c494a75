"""In-memory response cache with a fixed time-to-live.

One ``TTLCache`` per adapter. Expiry is lazy: a stale entry is bypassed on
read and stays in memory until a later ``set`` overwrites the same key.
There is no size bound and no locking; concurrent misses may both fetch
upstream and both write equivalent payloads.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


@dataclass
class CacheEntry:
    """A cached payload and the clock reading at which it was stored."""

    payload: Any
    stored_at: float


def make_key(*parts: object) -> str:
    """Join non-empty key parts with ``_`` (``dQw4w9WgXcQ_en``)."""
    return "_".join(str(p) for p in parts if p not in (None, ""))


class TTLCache:
    """Key → (payload, stored_at) map honoring a fixed TTL.

    Args:
        ttl_seconds: Entries are hits only while ``clock() - stored_at < ttl``.
        clock: Monotonic seconds source; injectable for deterministic tests.
        name: Label used in logs and stats.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        name: str = "",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0

    def _is_live(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.stored_at < self.ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return a copy of the cached payload, or None on miss/expiry."""
        entry = self._entries.get(key)
        if entry is None or not self._is_live(entry, self._clock()):
            self.misses += 1
            if entry is not None:
                logger.debug("Cache expired [%s]: %s", self.name, key)
            return None
        self.hits += 1
        logger.debug("Cache hit [%s]: %s", self.name, key)
        return copy.deepcopy(entry.payload)

    def set(self, key: str, payload: Any) -> None:
        """Store a copy of *payload* stamped with the current clock reading."""
        self._entries[key] = CacheEntry(payload=copy.deepcopy(payload), stored_at=self._clock())
        logger.debug("Cached [%s]: %s", self.name, key)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self, prefix: str | None = None) -> int:
        """Remove entries (all, or those whose key starts with *prefix*)."""
        if prefix is None:
            removed = len(self._entries)
            self._entries.clear()
            return removed
        doomed = [k for k in self._entries if k == prefix or k.startswith(f"{prefix}_")]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def stats(self) -> dict:
        """Return entry counts (total and unexpired), TTL and hit/miss counters."""
        now = self._clock()
        live = sum(1 for e in self._entries.values() if self._is_live(e, now))
        return {
            "name": self.name,
            "entries": len(self._entries),
            "live_entries": live,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
        }

    def list_entries(self) -> list[dict]:
        """List cached keys with their age, newest first."""
        now = self._clock()
        rows = [
            {
                "key": key,
                "age_seconds": round(now - entry.stored_at, 3),
                "expired": not self._is_live(entry, now),
            }
            for key, entry in self._entries.items()
        ]
        return sorted(rows, key=lambda r: r["age_seconds"])
