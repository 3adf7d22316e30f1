#!/usr/bin/env python3
"""
throttle.py
-----------
Retry and rate-limit helpers.

Functions:
    with_retry: Call a function again on transient failures with backoff

Classes:
    RateLimiter: Fixed-window request counter keyed by client identifier
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import threading
import time
from typing import Callable, Dict, Optional, Tuple, TypeVar

# --- Local imports ---
from folio.core.exceptions import RateLimitError, is_operational_error

T = TypeVar("T")


def with_retry(
    operation: Callable[[], T],
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run an operation, retrying on non-operational failures.

    Operational errors (validation, not found, conflicts) are raised
    immediately: repeating them cannot succeed.

    Args:
        operation: Zero-argument callable
        max_retries: Total number of attempts
        delay: Wait before the second attempt, in seconds
        backoff: Multiplier applied to the wait after each failure
        sleep: Sleep function (injectable for tests)

    Returns:
        The operation's result

    Raises:
        The last exception once attempts are exhausted
    """
    wait = delay
    for attempt in range(1, max_retries + 1):
        try:
            return operation()
        except Exception as e:
            if is_operational_error(e) or attempt == max_retries:
                raise
            sleep(wait)
            wait *= backoff

    raise RuntimeError("with_retry called with max_retries < 1")


class RateLimiter:
    """
    Fixed-window rate limiter.

    Attributes:
        limit: Requests allowed per window
        window: Window length in seconds
    """

    def __init__(
        self,
        limit: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window = window
        self._clock = clock
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str) -> int:
        """
        Count a request for identifier.

        Returns:
            Requests remaining in the current window

        Raises:
            RateLimitError: When the limit is already reached
        """
        now = self._clock()
        with self._lock:
            count, reset_at = self._hits.get(identifier, (0, now + self.window))
            if now >= reset_at:
                count, reset_at = 0, now + self.window

            if count >= self.limit:
                raise RateLimitError(
                    f"Too many requests. Try again in {int(reset_at - now) + 1} seconds.",
                    limit=self.limit,
                    window=self.window,
                )

            self._hits[identifier] = (count + 1, reset_at)
            return self.limit - count - 1

    def reset(self, identifier: Optional[str] = None) -> None:
        """Forget one identifier, or every identifier when None."""
        with self._lock:
            if identifier is None:
                self._hits.clear()
            else:
                self._hits.pop(identifier, None)


def create_rate_limiter(limit: int, window: float) -> RateLimiter:
    """Build a RateLimiter allowing limit requests per window seconds."""
    return RateLimiter(limit, window)
