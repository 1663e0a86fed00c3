"""
Unit tests for the rate limiter's in-memory fallback.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hackhub.core.rate_limit import (
    RateLimitExceeded,
    check_rate_limit,
    enforce_rate_limit,
    reset_memory_store,
)


@pytest.fixture(autouse=True)
def clean_store():
    reset_memory_store()
    yield
    reset_memory_store()


@pytest.fixture
def no_redis():
    with patch("hackhub.core.rate_limit.get_redis", AsyncMock(return_value=None)):
        yield


class TestRateLimit:
    """Tests for check_rate_limit and enforce_rate_limit."""

    @pytest.mark.asyncio
    async def test_memory_window_blocks_after_limit(self, no_redis):
        results = [await check_rate_limit("otp:send:a@example.com", 3, 60) for _ in range(4)]

        assert results == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, no_redis):
        for _ in range(3):
            await check_rate_limit("otp:send:a@example.com", 3, 60)

        assert await check_rate_limit("otp:send:b@example.com", 3, 60)

    @pytest.mark.asyncio
    async def test_enforce_raises_429(self, no_redis):
        await enforce_rate_limit("otp:verify:a@example.com", 1, 60)

        with pytest.raises(RateLimitExceeded) as exc_info:
            await enforce_rate_limit("otp:verify:a@example.com", 1, 60)

        assert exc_info.value.status_code == 429
        assert exc_info.value.headers["Retry-After"] == "60"

    @pytest.mark.asyncio
    async def test_redis_errors_fall_back_to_memory(self):
        client = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=RedisConnectionError("gone"))
        client.pipeline.return_value = pipe

        with patch("hackhub.core.rate_limit.get_redis", AsyncMock(return_value=client)):
            assert await check_rate_limit("otp:send:c@example.com", 1, 60)
            assert not await check_rate_limit("otp:send:c@example.com", 1, 60)
