# src/trades/pnl.py
"""Profit and loss arithmetic for trades."""
from src.trades.models import Direction


def calculate_profit_loss(
    direction: Direction,
    entry_price: float,
    exit_price: float | None,
    quantity: float,
    fees: float = 0.0,
) -> float | None:
    """Calculate dollar P&L net of fees.

    Args:
        direction: Long or short.
        entry_price: Fill price on entry.
        exit_price: Fill price on exit, or None while the trade is open.
        quantity: Number of shares/contracts.
        fees: Total commissions and fees.

    Returns:
        Net P&L in dollars, or None if there is no exit price.
    """
    if exit_price is None:
        return None

    if direction == Direction.LONG:
        return (exit_price - entry_price) * quantity - fees
    return (entry_price - exit_price) * quantity - fees


def calculate_profit_loss_percent(
    direction: Direction,
    entry_price: float,
    exit_price: float | None,
) -> float | None:
    """Calculate P&L as a percentage of the entry price (fees excluded)."""
    if exit_price is None:
        return None
    if not entry_price:
        return 0.0

    if direction == Direction.LONG:
        return (exit_price - entry_price) / entry_price * 100
    return (entry_price - exit_price) / entry_price * 100


def calculate_r_multiple(
    direction: Direction,
    entry_price: float,
    exit_price: float | None,
    stop_loss: float | None,
) -> float:
    """Calculate the R multiple of a closed trade.

    Returns:
        Gain per share divided by risk per share, or 0.0 without a usable stop.
    """
    if exit_price is None or stop_loss is None:
        return 0.0

    if direction == Direction.LONG:
        risk_per_share = entry_price - stop_loss
        gain_per_share = exit_price - entry_price
    else:
        risk_per_share = stop_loss - entry_price
        gain_per_share = entry_price - exit_price

    if risk_per_share <= 0:
        return 0.0

    return round(gain_per_share / risk_per_share, 3)
