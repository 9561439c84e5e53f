"""Async utility functions and helpers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar

from .types import AsyncTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_timeout(
    coro: Awaitable[T], timeout: float, timeout_message: Optional[str] = None
) -> T:
    """Run a coroutine with a timeout."""
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except asyncio.TimeoutError as e:
        msg = timeout_message or f"Operation timed out after {timeout}s"
        logger.warning(msg)
        raise AsyncTimeoutError(msg) from e


async def poll_until(
    condition: Callable[[], Awaitable[bool]],
    timeout: float,
    interval: float = 0.25,
) -> bool:
    """Poll ``condition`` until it returns True or ``timeout`` seconds elapse.

    Returns whether the condition was met. When it never is, the call takes
    the full ``timeout``, so a caller that used to sleep for a fixed period
    observes the same worst-case delay. Exceptions raised by the condition
    count as "not ready yet".
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + max(0.0, timeout)

    while True:
        try:
            if await condition():
                return True
        except Exception as e:
            logger.debug(f"Readiness probe raised, retrying: {e}")

        remaining = deadline - loop.time()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(interval, remaining))
