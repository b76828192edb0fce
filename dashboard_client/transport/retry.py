"""Bounded exponential backoff for read-only requests."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
import logging
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
BASE_DELAY_MS = 1000
MAX_DELAY_MS = 5000


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt ``attempt`` (1-indexed)."""
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    return min(BASE_DELAY_MS * 2 ** (attempt - 1), MAX_DELAY_MS) / 1000


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Run ``operation`` up to ``max_attempts`` times, re-raising the last error.

    Only wrap idempotent reads; mutating requests must never be replayed.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception:
            if attempt == max_attempts:
                raise
            delay = backoff_delay(attempt)
            logger.info(
                "Retrying request in %dms (attempt %d/%d)",
                int(delay * 1000),
                attempt,
                max_attempts,
            )
            await sleep(delay)

    raise RuntimeError("Retry loop exited without a result")
