# ABOUTME: Rate limiting for Notion API calls made from asyncio code.
# ABOUTME: Provides RateLimiter to throttle requests to stay within API limits.

import asyncio
import time


class RateLimiter:
    """Task-safe rate limiter using simple timing.

    Ensures requests don't exceed a specified rate by suspending callers
    until enough time has passed since the last request.
    """

    def __init__(self, calls_per_second: float = 2.5):
        """Initialize rate limiter.

        Args:
            calls_per_second: Maximum requests per second. Default 2.5 leaves
                headroom below Notion's 3/sec limit.
        """
        self._min_interval = 1.0 / calls_per_second
        self._lock = asyncio.Lock()
        self._last_call = 0.0

    async def acquire(self) -> None:
        """Wait until a request slot is available.

        Cancelling a waiting caller releases its place in the queue.
        """
        async with self._lock:
            now = time.monotonic()
            wait_time = self._last_call + self._min_interval - now
            if wait_time > 0:
                await asyncio.sleep(wait_time)
            self._last_call = time.monotonic()
