from __future__ import annotations
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, TypeVar

from .config import cfg
from .errors import NotFound

T = TypeVar("T")


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


async def wait_until(
    probe: Callable[[], Awaitable[Optional[T]]],
    *,
    description: str,
    timeout_seconds: Optional[float] = None,
    poll_interval_seconds: Optional[float] = None,
) -> T:
    """Poll ``probe`` until it returns a truthy value, or raise NotFound.

    The probe runs at least once, even with a zero timeout.
    """
    if timeout_seconds is None:
        timeout_seconds = cfg.ELEMENT_WAIT_S
    if poll_interval_seconds is None:
        poll_interval_seconds = cfg.POLL_INTERVAL_S

    start = time.perf_counter()
    attempts = 0
    while True:
        attempts += 1
        result = await probe()
        if result:
            return result
        if (time.perf_counter() - start) >= timeout_seconds:
            break
        await asyncio.sleep(poll_interval_seconds)

    logging.getLogger(__name__).debug(
        "Gave up waiting for %s after %d attempts", description, attempts
    )
    raise NotFound(f"{description} did not appear within {timeout_seconds:.2f}s")
