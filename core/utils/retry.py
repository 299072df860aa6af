"""Retry utilities."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    backoff_factor: float = 2.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    should_retry: Callable[[BaseException], bool] | None = None,
    sleep: Sleep = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Execute async function with exponential backoff retry.

    The last error is re-raised unchanged once attempts are exhausted, or
    immediately when ``should_retry`` rejects it.

    Args:
        fn: Zero-argument coroutine factory
        max_attempts: Total attempts including the first
        backoff_factor: Wait ``backoff_factor ** attempt`` seconds between attempts
        retry_on: Exception types eligible for retry
        should_retry: Optional predicate narrowing ``retry_on``
        sleep: Awaitable sleep (injectable for tests)
        label: Name used in log messages
    """
    for attempt in range(max_attempts):
        try:
            return await fn()
        except retry_on as e:
            if should_retry is not None and not should_retry(e):
                raise
            if attempt >= max_attempts - 1:
                raise
            wait_time = backoff_factor**attempt
            logger.warning(
                f"{label} failed (attempt {attempt + 1}/{max_attempts}), "
                f"retrying in {wait_time:.1f}s: {e}"
            )
            await sleep(wait_time)
    raise RuntimeError("max_attempts must be at least 1")
