"""Response timing floor."""
import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable


@asynccontextmanager
async def enforce_min_duration(
    min_seconds: float,
    clock: Callable[[], float] = time.perf_counter,
) -> AsyncIterator[None]:
    """
    Pad the wrapped block so it never completes in less than min_seconds.

    The padding is applied whether the block returns or raises, so every
    branch of a handler takes the same minimum time to answer.

    Example:
        async with enforce_min_duration(0.1):
            result = record_event_entry(db, user_id, operator_id)
    """
    started = clock()
    try:
        yield
    finally:
        remaining = min_seconds - (clock() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
