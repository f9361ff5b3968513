"""Per-client request throttling."""

import asyncio
import logging
import time
from collections.abc import Awaitable
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Default delay between dispatches (1 second)
DEFAULT_RATE_LIMIT_DELAY = 1.0


class RequestThrottle:
    """
    Enforces a minimum delay between consecutive dispatches of one client.

    The throttle keeps a single last-request timestamp. ``wait()`` sleeps
    for whatever is left of the delay window; the client calls ``mark()``
    once a request has completed successfully.

    Best-effort, non-atomic: the check in ``wait()`` and the update in
    ``mark()`` are not guarded by a lock. Concurrent requests issued on
    the same client can all observe the same stale timestamp and proceed
    together without waiting.

    Example:
        throttle = RequestThrottle(delay=0.5)

        await throttle.wait()
        response = await transport(url, options)
        throttle.mark()

        await throttle.wait()  # sleeps until 0.5s after mark()
    """

    def __init__(
        self,
        delay: float = DEFAULT_RATE_LIMIT_DELAY,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the throttle.

        Args:
            delay: Minimum seconds between dispatches
            clock: Time source for timestamps
            sleep: Coroutine used to wait (replaceable in tests)
        """
        self.delay = delay
        self.last_request: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def remaining(self) -> float:
        """Seconds left before the next dispatch may start (0 if none)."""
        if self.last_request is None:
            return 0.0
        elapsed = self._clock() - self.last_request
        return max(0.0, self.delay - elapsed)

    async def wait(self) -> float:
        """
        Sleep until the delay window since the last request has passed.

        Returns:
            Seconds slept (0 if no wait was needed)
        """
        wait_time = self.remaining()
        if wait_time > 0:
            logger.debug(f"Rate limited, waiting {wait_time:.3f}s")
            await self._sleep(wait_time)
        return wait_time

    def mark(self) -> None:
        """Record now as the time of the last request."""
        self.last_request = self._clock()

    def get_stats(self) -> dict:
        """Get throttle statistics."""
        return {
            "delay": self.delay,
            "last_request": self.last_request,
        }
