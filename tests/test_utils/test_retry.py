"""
Tests for building-stage retry with backoff.

Tests cover:
- Delay calculation with doubling backoff and jitter
- Retryable error filtering
- Scenario-level use with NetworkQueryError
"""

from unittest.mock import AsyncMock, patch

import pytest

from feeprobe.errors import EncodingError, NetworkQueryError
from feeprobe.utils.retry import RetryConfig, calculate_delay, retry_async


# =============================================================================
# Delay Calculation Tests
# =============================================================================


class TestDelayCalculation:
    """Tests for calculate_delay function."""

    def test_delay_doubles(self) -> None:
        config = RetryConfig(base_delay_ms=1000, jitter=False)

        delays = [calculate_delay(i, config) for i in range(4)]

        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_jitter_stays_within_bounds(self) -> None:
        config = RetryConfig(base_delay_ms=1000, jitter=True)

        delays = [calculate_delay(0, config) for _ in range(100)]

        assert min(delays) != max(delays)
        assert all(0 <= d <= 1.0 for d in delays)

    def test_zero_base_delay(self) -> None:
        assert calculate_delay(3, RetryConfig(base_delay_ms=0)) == 0


# =============================================================================
# Async Retry Tests
# =============================================================================


class TestRetryAsync:
    """Tests for retry_async function."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self) -> None:
        fn = AsyncMock(return_value="ok")

        assert await retry_async(fn) == "ok"
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_network_query_errors(self) -> None:
        fn = AsyncMock(side_effect=[NetworkQueryError("timeout"), NetworkQueryError("timeout"), 42])
        config = RetryConfig(max_attempts=3, base_delay_ms=1, jitter=False, retryable_errors=(NetworkQueryError,))

        assert await retry_async(fn, config) == 42
        assert fn.await_count == 3

    @pytest.mark.asyncio
    async def test_raises_last_error_when_exhausted(self) -> None:
        fn = AsyncMock(side_effect=NetworkQueryError("endpoint down"))
        config = RetryConfig(max_attempts=2, base_delay_ms=1, retryable_errors=(NetworkQueryError,))

        with pytest.raises(NetworkQueryError, match="endpoint down"):
            await retry_async(fn, config)
        assert fn.await_count == 2

    @pytest.mark.asyncio
    async def test_non_retryable_error_raised_immediately(self) -> None:
        fn = AsyncMock(side_effect=EncodingError("bad label"))
        config = RetryConfig(max_attempts=5, base_delay_ms=1, retryable_errors=(NetworkQueryError,))

        with pytest.raises(EncodingError):
            await retry_async(fn, config)
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_single_attempt_means_no_retry(self) -> None:
        fn = AsyncMock(side_effect=NetworkQueryError("timeout"))

        with pytest.raises(NetworkQueryError):
            await retry_async(fn, RetryConfig(max_attempts=1))
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_default_config_does_not_retry(self) -> None:
        fn = AsyncMock(side_effect=NetworkQueryError("timeout"))

        with pytest.raises(NetworkQueryError):
            await retry_async(fn)
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_sleeps_between_attempts(self) -> None:
        fn = AsyncMock(side_effect=[NetworkQueryError("first attempt fails"), "success"])

        with patch("feeprobe.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await retry_async(fn, RetryConfig(max_attempts=2))

        assert result == "success"
        sleep.assert_awaited_once()
