# tests/risk/test_rate_limiter.py
"""Tests for the sliding-window rate limiter."""

import pytest

from src.risk.rate_limiter import RateLimiter, parse_duration


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestParseDuration:
    """Test suite for parse_duration."""

    @pytest.mark.parametrize(
        "duration,seconds",
        [("30s", 30.0), ("5m", 300.0), ("1h", 3600.0), ("2d", 172800.0)],
    )
    def test_units(self, duration, seconds):
        """Test each supported unit."""
        assert parse_duration(duration) == seconds

    @pytest.mark.parametrize("duration", ["5x", "m", "", "1.5h"])
    def test_invalid_falls_back_to_five_minutes(self, duration):
        """Test malformed durations use the default window."""
        assert parse_duration(duration) == 300.0


class TestRateLimiter:
    """Test suite for RateLimiter."""

    def test_allows_up_to_limit(self):
        """Test remaining counts down and the next request is refused."""
        clock = FakeClock()
        limiter = RateLimiter(limit=2, duration="1m", clock=clock)

        first = limiter.check("user-1")
        second = limiter.check("user-1")
        third = limiter.check("user-1")

        assert (first.success, first.remaining) == (True, 1)
        assert (second.success, second.remaining) == (True, 0)
        assert third.success is False
        assert third.remaining == 0
        assert third.reset == 1060.0

    def test_window_slides(self):
        """Test requests leave the window after its duration."""
        clock = FakeClock()
        limiter = RateLimiter(limit=1, duration="1m", clock=clock)

        assert limiter.check().success is True
        clock.now += 59
        assert limiter.check().success is False
        clock.now += 1
        assert limiter.check().success is True

    def test_refused_requests_are_not_recorded(self):
        """Test a denied request does not extend the window."""
        clock = FakeClock()
        limiter = RateLimiter(limit=1, duration="1m", clock=clock)

        limiter.check()
        clock.now += 30
        limiter.check()
        clock.now += 30

        assert limiter.check().success is True

    def test_identifiers_are_independent(self):
        """Test each identifier has its own window."""
        limiter = RateLimiter(limit=1, duration="1m", clock=FakeClock())

        assert limiter.check("user-1").success is True
        assert limiter.check("user-2").success is True
        assert limiter.check("user-1").success is False

    def test_reset(self):
        """Test reset for one identifier and for all."""
        limiter = RateLimiter(limit=1, duration="1m", clock=FakeClock())
        limiter.check("user-1")
        limiter.check("user-2")

        limiter.reset("user-1")
        assert limiter.check("user-1").success is True
        assert limiter.check("user-2").success is False

        limiter.reset()
        assert limiter.check("user-2").success is True

    def test_invalid_limit(self):
        """Test the limit must be at least one."""
        with pytest.raises(ValueError):
            RateLimiter(limit=0)
