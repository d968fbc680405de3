"""
Retry helpers for calls to the remote model provider.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from kidskills.exceptions import (
    MalformedResponseError,
    QuestionValidationError,
    RateLimitError,
    TransportError,
)
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass
class RetryConfig:
    """Bounded exponential backoff: delay = base_delay * backoff_factor ** attempt."""
    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_factor: float = 2.0
    rate_limit_min_delay: float = 5.0

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        return cls(
            max_retries=settings.AI_MAX_RETRIES,
            base_delay=settings.AI_RETRY_BASE_DELAY,
            max_delay=settings.AI_RETRY_MAX_DELAY,
            rate_limit_min_delay=settings.RATE_LIMIT_MIN_DELAY,
        )


def calculate_retry_delay(attempt: int, config: RetryConfig, error: Exception = None) -> float:
    """Calculate the delay before retry number ``attempt + 1``."""
    delay = min(config.base_delay * (config.backoff_factor ** attempt), config.max_delay)

    if isinstance(error, RateLimitError):
        delay = max(delay, config.rate_limit_min_delay)

    return delay


def is_retryable(error: Exception) -> bool:
    """Transient provider failures worth repeating the whole request for."""
    if isinstance(error, (RateLimitError, MalformedResponseError, QuestionValidationError)):
        return True
    if isinstance(error, TransportError):
        return error.status_code is None or error.status_code in RETRYABLE_STATUS_CODES
    return False


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    should_retry: Callable[[Exception], bool] = is_retryable,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    description: str = "operation",
) -> T:
    """
    Run ``operation`` with at most ``config.max_retries`` additional attempts.

    Non-retryable errors and the error of the final attempt propagate unchanged.
    """
    attempt = 0
    total_delay = 0.0

    while True:
        try:
            result = await operation()
            if attempt:
                logger.info(f"{description} succeeded after {attempt} retries ({total_delay:.1f}s backoff)")
            return result
        except Exception as e:
            if attempt >= config.max_retries or not should_retry(e):
                if attempt:
                    logger.error(f"All {attempt + 1} attempts failed for {description}: {e}")
                raise

            delay = calculate_retry_delay(attempt, config, e)
            attempt += 1
            total_delay += delay
            logger.warning(
                f"{description} failed ({type(e).__name__}: {e}). "
                f"Retrying in {delay:.1f}s (attempt {attempt}/{config.max_retries})"
            )
            await sleep(delay)
