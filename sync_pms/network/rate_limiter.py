"""Single-slot rate limiter for outbound PMS requests."""

import time
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_MIN_INTERVAL = 0.5  # 2 req/sec


class RateLimiter:
    """
    Enforce a minimum interval between consecutive calls.

    This is not a token bucket: there is one slot, and every caller waits
    until ``min_interval`` has passed since the previous call. Callers are
    expected to issue requests sequentially.

    Attributes:
        min_interval: Minimum number of seconds between two calls

    Example:
        >>> limiter = RateLimiter(min_interval=0.5)
        >>> limiter.wait()  # returns immediately
        >>> limiter.wait()  # sleeps ~0.5s
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            min_interval: Minimum seconds between calls
            clock: Monotonic clock, injectable for tests
            sleep: Sleep function, injectable for tests
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None

    def wait(self) -> float:
        """
        Block until the next call is allowed, then record it.

        Returns:
            Number of seconds slept (0.0 when no wait was needed)
        """
        slept = 0.0
        if self._last_call is not None:
            elapsed = self._clock() - self._last_call
            if elapsed < self.min_interval:
                slept = self.min_interval - elapsed
                logger.debug("Rate limit: sleeping %.3fs", slept)
                self._sleep(slept)

        self._last_call = self._clock()
        return slept
