# src/risk/position_sizer.py
"""Position size calculator."""

import math

from src.risk.models import PositionSize, SizingMethod
from src.risk.settings import RiskSettings


class PositionSizer:
    """Sizes positions so that a stop-out loses a fixed share of the account.

    The maximum risk is either a percentage of the account or a fixed dollar
    amount. Shares are the whole number of shares whose loss at the stop
    stays within that risk.
    """

    def __init__(self, settings: RiskSettings | None = None):
        """Initialize the sizer.

        Args:
            settings: Default account size and risk parameters. Defaults to
                RiskSettings().
        """
        self._settings = settings or RiskSettings()

    def risk_amount(
        self,
        account_size: float | None = None,
        method: SizingMethod | None = None,
        risk_percent: float | None = None,
        fixed_risk: float | None = None,
    ) -> float:
        """Dollars at risk per trade for the chosen sizing method."""
        method = method or self._settings.sizing_method
        if method == SizingMethod.FIXED:
            return fixed_risk if fixed_risk is not None else self._settings.fixed_risk_amount

        account_size = account_size if account_size is not None else self._settings.account_size
        risk_percent = risk_percent if risk_percent is not None else self._settings.risk_percent
        return account_size * risk_percent / 100

    def calculate(
        self,
        entry_price: float,
        stop_price: float,
        target_price: float,
        account_size: float | None = None,
        method: SizingMethod | None = None,
        risk_percent: float | None = None,
        fixed_risk: float | None = None,
    ) -> PositionSize:
        """Calculate position size and reward for a planned trade.

        Works for longs and shorts alike: distances are absolute.

        Args:
            entry_price: Planned entry.
            stop_price: Planned stop loss.
            target_price: Planned profit target.
            account_size: Account value; defaults to the configured size.
            method: Percent-of-account or fixed-dollar risk.
            risk_percent: Percent of the account to risk.
            fixed_risk: Dollar amount to risk with the fixed method.

        Returns:
            PositionSize. With entry equal to stop nothing can be sized and
            shares, reward and ratio are zero.

        Raises:
            ValueError: If a price or the account size is not positive.
        """
        for name, value in (
            ("entry_price", entry_price),
            ("stop_price", stop_price),
            ("target_price", target_price),
        ):
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        max_risk = self.risk_amount(account_size, method, risk_percent, fixed_risk)
        if max_risk < 0:
            raise ValueError(f"Risk amount cannot be negative, got {max_risk}")

        risk_per_share = abs(entry_price - stop_price)
        if risk_per_share == 0:
            return PositionSize(
                risk_amount=max_risk,
                risk_per_share=0.0,
                shares=0,
                reward_amount=0.0,
                risk_reward_ratio=0.0,
                position_value=0.0,
            )

        # Float noise such as 49.99999999 must still floor to 50
        shares = math.floor(round(max_risk / risk_per_share, 9))
        reward_amount = shares * abs(target_price - entry_price)
        ratio = reward_amount / max_risk if max_risk > 0 else 0.0

        return PositionSize(
            risk_amount=max_risk,
            risk_per_share=risk_per_share,
            shares=shares,
            reward_amount=reward_amount,
            risk_reward_ratio=ratio,
            position_value=shares * entry_price,
        )

    def target_for_ratio(
        self, entry_price: float, stop_price: float, ratio: float | None = None
    ) -> float:
        """Price target that gives a reward/risk ratio.

        A stop below the entry is treated as a long, otherwise as a short.
        """
        ratio = ratio if ratio is not None else self._settings.default_risk_reward
        risk_per_share = abs(entry_price - stop_price)
        if entry_price > stop_price:
            return entry_price + risk_per_share * ratio
        return entry_price - risk_per_share * ratio
