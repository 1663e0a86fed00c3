"""
Unit tests for the statistics cache.
"""

from unittest.mock import AsyncMock

import pytest

from hackhub.core.cache import DASHBOARD_STATS_KEY, STAGE_STATS_KEY, StatsCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return StatsCache(default_ttl_seconds=300, clock=clock)


class TestStatsCache:
    """Tests for StatsCache."""

    def test_value_expires_after_ttl(self, cache, clock):
        cache.set("stats:dashboard", {"total": 3})

        clock.advance(299)
        assert cache.get("stats:dashboard") == {"total": 3}

        clock.advance(1)
        assert cache.get("stats:dashboard") is None
        assert len(cache) == 0

    def test_per_entry_ttl_override(self, cache, clock):
        cache.set(STAGE_STATS_KEY, [1], ttl_seconds=180)

        clock.advance(180)

        assert cache.get(STAGE_STATS_KEY) is None

    @pytest.mark.asyncio
    async def test_get_or_load_loads_once_within_ttl(self, cache):
        loader = AsyncMock(return_value={"total": 7})

        first = await cache.get_or_load(DASHBOARD_STATS_KEY, loader)
        second = await cache.get_or_load(DASHBOARD_STATS_KEY, loader)

        assert first == second == {"total": 7}
        loader.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_or_load_reloads_after_invalidation(self, cache):
        loader = AsyncMock(side_effect=[{"total": 1}, {"total": 2}])

        await cache.get_or_load(DASHBOARD_STATS_KEY, loader)
        cache.invalidate_stats()
        result = await cache.get_or_load(DASHBOARD_STATS_KEY, loader)

        assert result == {"total": 2}

    def test_invalidate_stats_only_drops_stats_keys(self, cache):
        cache.set(DASHBOARD_STATS_KEY, 1)
        cache.set(STAGE_STATS_KEY, 2)
        cache.set("settings:email", 3)

        cache.invalidate_stats()

        assert cache.get(DASHBOARD_STATS_KEY) is None
        assert cache.get(STAGE_STATS_KEY) is None
        assert cache.get("settings:email") == 3

    def test_invalidate_specific_keys(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a", "missing")

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear()

        assert len(cache) == 0
