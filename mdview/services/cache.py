"""In-memory Markdown cache with revalidation-time and build-id invalidation."""

import logging
import re
import threading
import time
from typing import Callable, Dict, Mapping, Optional

from mdview.models.cache_entry import CacheEntry
from mdview.services.path_filter import normalize_path

logger = logging.getLogger(__name__)

REVALIDATE_HEADER = "x-next-revalidate"

_S_MAXAGE_RE = re.compile(r"s-maxage=(\d+)", re.IGNORECASE)
_REVALIDATE_RE = re.compile(r"(?<![\w-])revalidate=(\d+)", re.IGNORECASE)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    # httpx.Headers is already case-insensitive; plain dicts are not
    value = headers.get(name)
    if value is None:
        for key, candidate in headers.items():
            if key.lower() == name:
                return candidate
    return value


def revalidate_seconds(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    """Derive a time-to-live from origin response headers.

    Checks, in order: the revalidation-seconds header (positive integers
    only), ``s-maxage=N`` in Cache-Control, then ``revalidate=N`` in
    Cache-Control. Returns None when none applies.
    """
    if not headers:
        return None

    raw = _header(headers, REVALIDATE_HEADER)
    if raw is not None:
        try:
            seconds = int(raw.strip())
        except ValueError:
            seconds = 0
        if seconds > 0:
            return seconds

    cache_control = _header(headers, "cache-control")
    if cache_control:
        match = _S_MAXAGE_RE.search(cache_control) or _REVALIDATE_RE.search(cache_control)
        if match:
            return int(match.group(1))

    return None


class MarkdownCache:
    """
    Process-local cache of rendered Markdown keyed by normalized path.

    Entries written under one build are misses for any other build, and
    entries with an expiry become misses once it passes. Stale entries are
    removed by the read that finds them. Nothing is persisted.

    The store is guarded by a lock so one instance can be shared by
    concurrent requests. Two requests missing on the same path may both
    recompute it; the later ``put`` wins.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def get(self, path: str, build_id: Optional[str] = None, enabled: bool = True) -> Optional[str]:
        """Return cached Markdown for *path*, or None on a miss."""
        if not enabled:
            return None
        key = normalize_path(path)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_valid(build_id, self._now_ms()):
                del self._entries[key]
                logger.debug("Evicted stale cache entry for %s", key)
                return None
            return entry.markdown

    def put(
        self,
        path: str,
        markdown: str,
        headers: Optional[Mapping[str, str]] = None,
        build_id: Optional[str] = None,
        enabled: bool = True,
    ) -> Optional[CacheEntry]:
        """Store *markdown* for *path*, expiring per the origin's revalidation headers."""
        if not enabled:
            return None
        ttl = revalidate_seconds(headers)
        entry = CacheEntry(
            markdown=markdown,
            expires_at=self._now_ms() + ttl * 1000 if ttl else None,
            build_id=build_id,
        )
        key = normalize_path(path)
        with self._lock:
            self._entries[key] = entry
        logger.debug("Cached markdown for %s", key, extra={"ttl": ttl, "build_id": build_id})
        return entry

    def invalidate(self, path: str) -> bool:
        with self._lock:
            return self._entries.pop(normalize_path(path), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return normalize_path(path) in self._entries
