#!/usr/bin/env python3
"""
test_throttle.py
----------------
Tests for with_retry and the fixed-window RateLimiter.

Usage:
    python -m pytest tests/unit/core/test_throttle.py -v
"""
# --- Third-party imports ---
import pytest

# --- Local imports ---
from folio.core.exceptions import NotFoundError, RateLimitError
from folio.core.throttle import RateLimiter, create_rate_limiter, with_retry


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now


class TestWithRetry:
    """Test with_retry()."""

    def test_returns_first_success(self):
        """Test the result is returned without sleeping."""
        sleeps = []
        assert with_retry(lambda: "ok", sleep=sleeps.append) == "ok"
        assert sleeps == []

    def test_retries_transient_failures_with_backoff(self):
        """Test waits double between attempts until the call succeeds."""
        attempts = []
        sleeps = []

        def flaky():
            attempts.append(1)
            if len(attempts) < 3:
                raise ConnectionError("database is locked")
            return "done"

        result = with_retry(flaky, max_retries=3, delay=0.5, sleep=sleeps.append)

        assert result == "done"
        assert len(attempts) == 3
        assert sleeps == [0.5, 1.0]

    def test_raises_last_error_when_exhausted(self):
        """Test the final exception propagates."""
        def always_fails():
            raise ConnectionError("still locked")

        with pytest.raises(ConnectionError):
            with_retry(always_fails, max_retries=2, sleep=lambda _: None)

    def test_operational_errors_are_not_retried(self):
        """Test expected failures are raised on the first attempt."""
        attempts = []

        def missing():
            attempts.append(1)
            raise NotFoundError("Project", 9)

        with pytest.raises(NotFoundError):
            with_retry(missing, sleep=lambda _: None)
        assert len(attempts) == 1


class TestRateLimiter:
    """Test RateLimiter windows and resets."""

    def test_counts_down_remaining(self):
        """Test remaining requests decrease per call."""
        limiter = RateLimiter(3, 60, clock=FakeClock())
        assert limiter.check("10.0.0.1") == 2
        assert limiter.check("10.0.0.1") == 1
        assert limiter.check("10.0.0.1") == 0

    def test_blocks_after_limit(self):
        """Test the request over the limit raises RateLimitError."""
        limiter = RateLimiter(2, 60, clock=FakeClock())
        limiter.check("ip")
        limiter.check("ip")

        with pytest.raises(RateLimitError) as exc_info:
            limiter.check("ip")
        assert exc_info.value.limit == 2
        assert exc_info.value.status_code == 429

    def test_identifiers_are_independent(self):
        """Test one client's budget does not affect another's."""
        limiter = RateLimiter(1, 60, clock=FakeClock())
        limiter.check("a")
        assert limiter.check("b") == 0

    def test_window_expiry_resets_count(self):
        """Test a new window starts once the old one has passed."""
        clock = FakeClock()
        limiter = RateLimiter(1, 60, clock=clock)
        limiter.check("ip")

        clock.now += 61
        assert limiter.check("ip") == 0

    def test_reset_identifier(self):
        """Test reset() forgets a single identifier."""
        limiter = RateLimiter(1, 60, clock=FakeClock())
        limiter.check("a")
        limiter.check("b")

        limiter.reset("a")

        assert limiter.check("a") == 0
        with pytest.raises(RateLimitError):
            limiter.check("b")

    def test_reset_all(self):
        """Test reset() without an identifier clears every counter."""
        limiter = create_rate_limiter(1, 60)
        limiter.check("a")
        limiter.reset()
        assert limiter.check("a") == 0
