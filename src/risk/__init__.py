# src/risk/__init__.py
"""Risk module: position sizing and request rate limiting."""

from src.risk.models import PositionSize, RateLimitResult, SizingMethod
from src.risk.position_sizer import PositionSizer
from src.risk.rate_limiter import RateLimiter, parse_duration
from src.risk.settings import RiskSettings

__all__ = [
    "PositionSize",
    "PositionSizer",
    "RateLimitResult",
    "RateLimiter",
    "RiskSettings",
    "SizingMethod",
    "parse_duration",
]
