"""Bounded exponential-backoff retry for async operations."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay_ms(attempt_number: int, base_delay_ms: int) -> int:
    """Delay before ``attempt_number`` (2-based): base, 2*base, 4*base, ..."""
    if attempt_number < 2:
        return 0
    return base_delay_ms * 2 ** (attempt_number - 2)


async def with_retry(
    operation: Callable[[int], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``operation(attempt_number)`` until it succeeds or attempts run out.

    The exception from the final attempt is re-raised as-is. Cancellation is
    never retried: ``asyncio.CancelledError`` is not an ``Exception`` and
    propagates out of the current attempt or backoff sleep.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        if attempt > 1:
            await sleep(backoff_delay_ms(attempt, base_delay_ms) / 1000)
        try:
            return await operation(attempt)
        except Exception as exc:
            if attempt == max_attempts:
                raise
            logger.warning(
                "Attempt %d/%d failed, retrying in %dms: %s",
                attempt,
                max_attempts,
                backoff_delay_ms(attempt + 1, base_delay_ms),
                exc,
            )
