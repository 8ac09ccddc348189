from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")


async def async_retry_invoke(
        call: Callable[[], Awaitable[T]],
        *,
        max_retries: int,
        backoff_initial_seconds: float,
        backoff_multiplier: float,
        timeout_seconds: Optional[float] = None,
) -> T:
    """Await ``call()`` with retries and exponential backoff.

    max_retries is the number of retries after the initial attempt.
    When timeout_seconds is set, every attempt is bounded by it and an
    expired attempt counts as a failure like any other exception.
    """
    attempt = 0
    delay = backoff_initial_seconds

    while True:
        try:
            if timeout_seconds is None:
                return await call()
            return await asyncio.wait_for(call(), timeout=timeout_seconds)
        except Exception:
            if attempt >= max_retries:
                raise
            await asyncio.sleep(delay)
            delay *= backoff_multiplier
            attempt += 1
