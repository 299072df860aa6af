"""Bounded poll loop for asynchronous generation tasks."""

import asyncio
import logging
from typing import Awaitable, Callable

from .errors import PollTimeoutError, ProviderError, task_failure
from .types import GeneratedImage, TaskState, TaskStatus

logger = logging.getLogger(__name__)


async def poll_until_complete(
    poll_once: Callable[[], Awaitable[TaskStatus]],
    *,
    interval: float,
    max_attempts: int,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    provider: str | None = None,
) -> GeneratedImage:
    """Poll until the task reaches a terminal state.

    The first poll happens immediately; every non-terminal observation is
    followed by one ``sleep(interval)`` unless the ceiling has been reached,
    so N polls cost N-1 sleeps.

    Args:
        poll_once: Coroutine factory performing a single status check
        interval: Seconds between polls
        max_attempts: Poll ceiling
        sleep: Cancellable sleep (asyncio.sleep by default)
        provider: Provider name for error attribution

    Returns:
        The finished image

    Raises:
        PollTimeoutError: Ceiling reached without a terminal state
        ProviderError: Provider reported failure, or success without an image
    """
    for attempt in range(1, max_attempts + 1):
        status = await poll_once()

        if status.state == TaskState.SUCCEEDED:
            image = status.image
            if image is None or not (image.image_base64 or image.image_url):
                raise ProviderError(
                    status.error or "No image URL returned", provider=provider
                )
            logger.debug(f"Task completed after {attempt} polls")
            return image

        if status.state == TaskState.FAILED:
            raise task_failure(status.error, provider or "provider")

        logger.debug(f"Task pending (poll {attempt}/{max_attempts})")
        if attempt < max_attempts:
            await sleep(interval)

    raise PollTimeoutError(
        f"Timeout waiting for image generation after {max_attempts} polls",
        provider=provider,
    )
