"""Pure functions for trade calculations."""
from datetime import datetime

from journal.schemas import Trade, TradeSide, TradeStatus


def calculate_gross_pnl(trade: Trade) -> float:
    """
    Price-driven P&L before fees.

    LONG:  (exit - entry) * qty
    SHORT: (entry - exit) * qty

    Open trades, and closed trades without an exit price, contribute 0.
    """
    if trade.status != TradeStatus.CLOSED or not trade.exit_price:
        return 0.0

    if trade.side == TradeSide.LONG:
        diff = trade.exit_price - trade.entry_price
    else:
        diff = trade.entry_price - trade.exit_price

    return diff * trade.quantity


def calculate_net_pnl(trade: Trade) -> float:
    """Gross P&L minus fees.

    Fees subtract unconditionally, so an open trade with fees nets ``-fees``.
    """
    return calculate_gross_pnl(trade) - trade.fees


def determine_win_loss(pnl: float) -> str:
    """Determine if a P&L is a WIN, LOSS, or BREAKEVEN."""
    if pnl > 0:
        return "WIN"
    elif pnl < 0:
        return "LOSS"
    else:
        return "BREAKEVEN"


def calculate_holding_days(entry_date: datetime, exit_date: datetime) -> int:
    """Calculate holding period in days."""
    delta = exit_date - entry_date
    return max(delta.days, 0)
