"""Retry with exponential backoff for external calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior with exponential backoff."""

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    exponential_base: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-based)."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


def status_code_of(exc: BaseException) -> int | None:
    """Best-effort HTTP status extraction from provider and httpx exceptions."""
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def is_rate_limited(exc: BaseException) -> bool:
    """True for HTTP 429 style failures."""
    return status_code_of(exc) == 429


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    is_retryable: Callable[[BaseException], bool] = is_rate_limited,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    operation: str = "operation",
) -> T:
    """Await ``fn`` and retry it on retryable failures.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt.
        config: Retry configuration (defaults to 3 retries, 1s base delay).
        is_retryable: Classifies an exception as worth retrying.
        sleep: Awaitable sleep, injectable for tests.
        operation: Label used in log messages.

    Returns:
        The first successful result.

    Raises:
        The last exception once retries are exhausted, or immediately for a
        non-retryable exception.
    """
    cfg = config or RetryConfig()
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt >= cfg.max_retries or not is_retryable(e):
                raise
            delay = cfg.delay_for(attempt)
            attempt += 1
            logger.warning(
                f"{operation} failed ({e.__class__.__name__}), "
                f"retrying in {delay:.1f}s (attempt {attempt}/{cfg.max_retries})"
            )
            await sleep(delay)
