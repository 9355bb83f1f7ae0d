"""Tests for the async retry helper."""

from unittest.mock import AsyncMock

import pytest

from taskbot.core.retry import RetryConfig, is_rate_limited, retry_async, status_code_of


class RateLimited(Exception):
    """Provider-style exception carrying a status code."""

    status_code = 429


class _Response:
    def __init__(self, status_code):
        self.status_code = status_code


class ResponseError(Exception):
    """httpx-style exception carrying a response."""

    def __init__(self, status_code):
        super().__init__(f"HTTP {status_code}")
        self.response = _Response(status_code)


class TestStatusCode:
    """Tests for status code extraction."""

    def test_status_code_attribute(self):
        """Test status read from the exception itself."""
        assert status_code_of(RateLimited()) == 429

    def test_status_code_from_response(self):
        """Test status read from an attached response."""
        assert status_code_of(ResponseError(503)) == 503

    def test_no_status(self):
        """Test plain exceptions have no status."""
        assert status_code_of(ValueError("boom")) is None

    def test_is_rate_limited(self):
        """Test only 429 counts as rate limited."""
        assert is_rate_limited(RateLimited()) is True
        assert is_rate_limited(ResponseError(429)) is True
        assert is_rate_limited(ResponseError(500)) is False


class TestRetryConfig:
    """Tests for backoff delays."""

    def test_exponential_delays(self):
        """Test delay doubles per attempt."""
        config = RetryConfig(base_delay=1.0)

        assert [config.delay_for(i) for i in range(3)] == [1.0, 2.0, 4.0]

    def test_delay_is_capped(self):
        """Test delay never exceeds max_delay."""
        config = RetryConfig(base_delay=10.0, max_delay=15.0)

        assert config.delay_for(3) == 15.0


class TestRetryAsync:
    """Tests for retry_async."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        """Test a successful call is not retried."""
        fn = AsyncMock(return_value="ok")
        sleep = AsyncMock()

        assert await retry_async(fn, sleep=sleep) == "ok"
        fn.assert_awaited_once()
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_rate_limits_with_backoff(self):
        """Test 429s are retried with growing delays until success."""
        fn = AsyncMock(side_effect=[RateLimited(), RateLimited(), "ok"])
        sleep = AsyncMock()

        result = await retry_async(fn, RetryConfig(base_delay=1.0), sleep=sleep)

        assert result == "ok"
        assert fn.await_count == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        """Test the last error propagates once retries are exhausted."""
        fn = AsyncMock(side_effect=RateLimited())
        sleep = AsyncMock()

        with pytest.raises(RateLimited):
            await retry_async(fn, RetryConfig(max_retries=3), sleep=sleep)

        assert fn.await_count == 4
        assert sleep.await_count == 3

    @pytest.mark.asyncio
    async def test_non_retryable_raises_immediately(self):
        """Test errors that aren't rate limits are not retried."""
        fn = AsyncMock(side_effect=ValueError("bad"))
        sleep = AsyncMock()

        with pytest.raises(ValueError):
            await retry_async(fn, sleep=sleep)

        fn.assert_awaited_once()
        sleep.assert_not_awaited()
