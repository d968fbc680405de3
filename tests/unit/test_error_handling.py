"""
Unit tests for retry helpers.
"""
import pytest
from unittest.mock import AsyncMock

from kidskills.exceptions import (
    AuthError,
    MalformedResponseError,
    QuestionValidationError,
    RateLimitError,
    TransportError,
)
from kidskills.utils.error_handling import (
    RetryConfig,
    calculate_retry_delay,
    is_retryable,
    retry_async,
)


class TestCalculateRetryDelay:
    """Test cases for backoff delay calculation."""

    @pytest.mark.unit
    def test_exponential_growth(self):
        """Delay doubles with each attempt."""
        config = RetryConfig(base_delay=1.0, backoff_factor=2.0, max_delay=30.0)
        assert calculate_retry_delay(0, config) == 1.0
        assert calculate_retry_delay(1, config) == 2.0
        assert calculate_retry_delay(2, config) == 4.0

    @pytest.mark.unit
    def test_capped_by_max_delay(self):
        config = RetryConfig(base_delay=1.0, max_delay=3.0)
        assert calculate_retry_delay(5, config) == 3.0

    @pytest.mark.unit
    def test_rate_limit_minimum_delay(self):
        """Rate-limit errors wait at least the configured minimum."""
        config = RetryConfig(base_delay=1.0, rate_limit_min_delay=5.0)
        assert calculate_retry_delay(0, config, RateLimitError("slow down")) == 5.0
        assert calculate_retry_delay(0, config, TransportError("oops")) == 1.0

    @pytest.mark.unit
    def test_delay_is_deterministic(self):
        """Backoff has no random component."""
        config = RetryConfig(base_delay=0.5)
        assert [calculate_retry_delay(1, config) for _ in range(5)] == [1.0] * 5
        with pytest.raises(TypeError):
            RetryConfig(jitter=True)


class TestIsRetryable:
    """Test cases for retry classification."""

    @pytest.mark.unit
    @pytest.mark.parametrize("error,expected", [
        (RateLimitError("429"), True),
        (MalformedResponseError("bad json"), True),
        (QuestionValidationError("two correct"), True),
        (TransportError("connection reset"), True),
        (TransportError("server error", status_code=503), True),
        (TransportError("bad request", status_code=400), False),
        (AuthError("401"), False),
        (ValueError("bug"), False),
    ])
    def test_classification(self, error, expected):
        assert is_retryable(error) is expected


class TestRetryAsync:
    """Test cases for retry_async."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        operation = AsyncMock(return_value="ok")
        sleep = AsyncMock()

        result = await retry_async(operation, RetryConfig(), sleep=sleep)

        assert result == "ok"
        assert operation.call_count == 1
        sleep.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_succeeds_after_transient_failures(self):
        """Retryable errors are retried with growing delays."""
        operation = AsyncMock(side_effect=[TransportError("a"), TransportError("b"), "ok"])
        sleep = AsyncMock()

        result = await retry_async(operation, RetryConfig(max_retries=2), sleep=sleep)

        assert result == "ok"
        assert operation.call_count == 3
        assert [call.args[0] for call in sleep.call_args_list] == [1.0, 2.0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        """Exactly max_retries + 1 attempts are made before the last error propagates."""
        operation = AsyncMock(side_effect=MalformedResponseError("still bad"))
        sleep = AsyncMock()

        with pytest.raises(MalformedResponseError):
            await retry_async(operation, RetryConfig(max_retries=2), sleep=sleep)

        assert operation.call_count == 3
        assert sleep.call_count == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_retryable_raises_immediately(self):
        operation = AsyncMock(side_effect=AuthError("401"))
        sleep = AsyncMock()

        with pytest.raises(AuthError):
            await retry_async(operation, RetryConfig(max_retries=2), sleep=sleep)

        assert operation.call_count == 1
        sleep.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_zero_retries(self):
        operation = AsyncMock(side_effect=RateLimitError("429"))

        with pytest.raises(RateLimitError):
            await retry_async(operation, RetryConfig(max_retries=0), sleep=AsyncMock())

        assert operation.call_count == 1
