# src/risk/rate_limiter.py
"""Sliding-window rate limiter keyed by identifier."""

import logging
import time
from collections import defaultdict, deque
from typing import Callable

from src.risk.models import RateLimitResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 300.0

_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(duration: str) -> float:
    """Convert a duration like "30s", "5m", "1h" or "2d" to seconds.

    Unknown units or malformed values fall back to five minutes.
    """
    value, unit = duration[:-1], duration[-1:]
    if unit not in _UNIT_SECONDS or not value.isdigit():
        logger.warning(f"Unrecognised rate limit duration {duration!r}, using 5m")
        return DEFAULT_WINDOW_SECONDS
    return float(int(value) * _UNIT_SECONDS[unit])


class RateLimiter:
    """Allows at most ``limit`` requests per identifier in any sliding window.

    State is kept in memory, one deque of request times per identifier.
    """

    def __init__(
        self,
        limit: int = 10,
        duration: str = "5m",
        clock: Callable[[], float] = time.time,
    ):
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self.limit = limit
        self.window_seconds = parse_duration(duration)
        self._clock = clock
        self._requests: dict[str, deque[float]] = defaultdict(deque)

    def check(self, identifier: str = "global") -> RateLimitResult:
        """Record a request for ``identifier`` if it fits in the window.

        Returns:
            RateLimitResult; ``success`` is False when the limit is reached,
            in which case the request is not recorded.
        """
        now = self._clock()
        requests = self._requests[identifier]

        while requests and requests[0] <= now - self.window_seconds:
            requests.popleft()

        if len(requests) >= self.limit:
            return RateLimitResult(
                success=False,
                limit=self.limit,
                remaining=0,
                reset=requests[0] + self.window_seconds,
            )

        requests.append(now)
        return RateLimitResult(
            success=True,
            limit=self.limit,
            remaining=self.limit - len(requests),
            reset=requests[0] + self.window_seconds,
        )

    def reset(self, identifier: str | None = None) -> None:
        """Forget recorded requests for one identifier, or for all."""
        if identifier is None:
            self._requests.clear()
        else:
            self._requests.pop(identifier, None)
