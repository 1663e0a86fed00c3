"""
Statistics Cache

Small in-process TTL cache for admin dashboard aggregates and the event
settings row. The TTL and clock are injected, and entries are dropped
explicitly by the writes that change the underlying data (round,
applicant and settings mutations).

One instance lives on ``app.state.stats_cache`` and is handed to routes
through the ``get_stats_cache`` dependency.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Cache keys used by the stats module
DASHBOARD_STATS_KEY = "stats:dashboard"
STAGE_STATS_KEY = "stats:stages"

# Event settings row, dropped on every settings write
EVENT_SETTINGS_KEY = "settings:event"


@dataclass
class _Entry:
    value: Any
    expires_at: float


class StatsCache:
    """TTL cache with explicit invalidation."""

    def __init__(
        self,
        default_ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        ttl_seconds: float | None = None,
    ) -> T:
        """
        Return the cached value for ``key`` or compute and store it.

        Args:
            key: Cache key
            loader: Coroutine factory producing a fresh value
            ttl_seconds: Override for the default TTL

        Returns:
            Cached or freshly loaded value
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Stats cache hit: {key}")
            return cached

        logger.debug(f"Stats cache miss: {key}")
        value = await loader()
        self.set(key, value, ttl_seconds)
        return value

    def invalidate(self, *keys: str) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``. Returns the number removed."""
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def invalidate_stats(self) -> None:
        """Drop all admin statistics entries."""
        removed = self.invalidate_prefix("stats:")
        if removed:
            logger.info(f"Invalidated {removed} stats cache entries")

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def get_stats_cache(request: Request) -> StatsCache:
    """FastAPI dependency returning the application's stats cache."""
    return request.app.state.stats_cache
