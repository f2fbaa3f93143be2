# src/risk/models.py
"""Data models for position sizing and rate limiting."""

from dataclasses import dataclass
from enum import Enum


class SizingMethod(str, Enum):
    """How the amount put at risk on a trade is chosen."""

    PERCENT = "percent"
    FIXED = "fixed"


@dataclass
class PositionSize:
    """Result of sizing a position from an entry, stop and target.

    Attributes:
        risk_amount: Dollars put at risk on the trade.
        risk_per_share: Distance from entry to stop.
        shares: Whole shares that keep the loss at the stop within risk_amount.
        reward_amount: Dollars gained if the target is hit with ``shares``.
        risk_reward_ratio: reward_amount / risk_amount.
        position_value: Cost of ``shares`` at the entry price.
    """

    risk_amount: float
    risk_per_share: float
    shares: int
    reward_amount: float
    risk_reward_ratio: float
    position_value: float


@dataclass
class RateLimitResult:
    """Outcome of a rate limit check.

    Attributes:
        success: Whether the request is allowed.
        limit: Requests allowed per window.
        remaining: Requests left in the current window.
        reset: Epoch seconds when the oldest request leaves the window.
    """

    success: bool
    limit: int
    remaining: int
    reset: float
