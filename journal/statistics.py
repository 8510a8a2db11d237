"""Statistics calculation module."""
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd
from loguru import logger

from analytics.constants import RATIO_SENTINEL
from journal.calculator import calculate_gross_pnl, calculate_net_pnl
from journal.filters import TimeWindow, closed_trades, filter_by_window, option_trades
from journal.schemas import Trade
from utils.timeutils import to_local


@dataclass
class PerformanceSummary:
    """Whole-set statistics over closed trades. Money values are unrounded."""

    closed_count: int = 0
    win_count: int = 0
    loss_count: int = 0
    win_rate: float = 0.0
    total_win_amount: float = 0.0
    total_loss_amount: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    risk_reward_ratio: float = 0.0
    profit_factor: float = 0.0
    total_gross_pnl: float = 0.0
    total_fees: float = 0.0
    total_net_pnl: float = 0.0
    best_trade_pnl: float = 0.0
    worst_trade_pnl: float = 0.0
    best_trade: Optional[Trade] = field(default=None, repr=False)
    worst_trade: Optional[Trade] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["best_trade"] = self.best_trade.id if self.best_trade else None
        data["worst_trade"] = self.worst_trade.id if self.worst_trade else None
        return data


@dataclass
class OptionSummary:
    """Option-only statistics alongside their share of the portfolio result."""

    summary: PerformanceSummary
    option_count: int = 0
    option_win_rate: float = 0.0
    option_net_pnl: float = 0.0
    option_pnl_ratio: float = 0.0


@dataclass(frozen=True)
class EquityPoint:
    date: Optional[datetime]
    trade_id: str
    pnl: float
    cumulative_pnl: float


def guarded_ratio(numerator: float, denominator: float, has_wins: bool) -> float:
    """
    numerator / denominator, or the sentinel when the denominator is zero:
    99 if there is a winning side, else 0.
    """
    if denominator != 0:
        return numerator / denominator
    return RATIO_SENTINEL if has_wins else 0.0


class StatisticsEngine:
    """Calculates trade statistics."""

    @staticmethod
    def best_and_worst(trades: List[Trade]) -> Tuple[Optional[Trade], Optional[Trade]]:
        """Best and worst closed trade by net P&L (None, None when empty)."""
        ranked = sorted(closed_trades(trades), key=calculate_net_pnl, reverse=True)
        if not ranked:
            return None, None
        return ranked[0], ranked[-1]

    @staticmethod
    def calculate_summary(trades: List[Trade]) -> PerformanceSummary:
        """
        Calculate summary stats over the closed trades of a list.

        Wins and losses are split on gross P&L; breakeven trades count
        toward ``closed_count`` only.
        """
        closed = closed_trades(trades)
        if not closed:
            return PerformanceSummary()

        gross = [calculate_gross_pnl(t) for t in closed]
        total_gross = sum(gross)
        total_fees = sum(t.fees for t in closed)

        win_amounts = [p for p in gross if p > 0]
        loss_amounts = [p for p in gross if p < 0]
        win_count = len(win_amounts)
        loss_count = len(loss_amounts)

        total_win_amount = sum(win_amounts)
        total_loss_amount = abs(sum(loss_amounts))

        avg_win = total_win_amount / win_count if win_count > 0 else 0.0
        avg_loss = total_loss_amount / loss_count if loss_count > 0 else 0.0

        best, worst = StatisticsEngine.best_and_worst(closed)

        return PerformanceSummary(
            closed_count=len(closed),
            win_count=win_count,
            loss_count=loss_count,
            win_rate=(win_count / len(closed)) * 100,
            total_win_amount=total_win_amount,
            total_loss_amount=total_loss_amount,
            avg_win=avg_win,
            avg_loss=avg_loss,
            risk_reward_ratio=guarded_ratio(avg_win, avg_loss, win_count > 0),
            profit_factor=guarded_ratio(total_win_amount, total_loss_amount, total_win_amount > 0),
            total_gross_pnl=total_gross,
            total_fees=total_fees,
            total_net_pnl=total_gross - total_fees,
            best_trade_pnl=calculate_net_pnl(best),
            worst_trade_pnl=calculate_net_pnl(worst),
            best_trade=best,
            worst_trade=worst,
        )

    @staticmethod
    def option_summary(trades: List[Trade]) -> OptionSummary:
        """Option-only statistics, and option net P&L as a share of |total net P&L|."""
        closed = closed_trades(trades)
        options = option_trades(closed)
        summary = StatisticsEngine.calculate_summary(options)

        total_net = sum(calculate_net_pnl(t) for t in closed)
        option_net = sum(calculate_net_pnl(t) for t in options)
        ratio = (option_net / abs(total_net)) * 100 if total_net != 0 else 0.0

        return OptionSummary(
            summary=summary,
            option_count=len(options),
            option_win_rate=summary.win_rate,
            option_net_pnl=option_net,
            option_pnl_ratio=ratio,
        )

    @staticmethod
    def equity_curve(trades: List[Trade]) -> List[EquityPoint]:
        """
        Running net P&L in exit order.

        Closed trades missing an exit date are placed last.
        """
        def exit_order(t: Trade):
            if t.exit_date is None:
                return (1, 0.0)
            return (0, to_local(t.exit_date).timestamp())

        curve = []
        cumulative = 0.0
        for t in sorted(closed_trades(trades), key=exit_order):
            pnl = calculate_net_pnl(t)
            cumulative += pnl
            curve.append(EquityPoint(date=t.exit_date, trade_id=t.id, pnl=pnl, cumulative_pnl=cumulative))
        return curve

    @staticmethod
    def performance_series(trades: List[Trade]) -> pd.DataFrame:
        """
        Returns a time-series of cumulative net P&L.
        """
        data = [
            {"date": p.date, "pnl": p.pnl, "cumulative_pnl": p.cumulative_pnl}
            for p in StatisticsEngine.equity_curve(trades)
        ]
        if not data:
            return pd.DataFrame()

        return pd.DataFrame(data)

    @staticmethod
    def asset_distribution(trades: List[Trade]) -> Dict[str, int]:
        """Number of trades per instrument type, open trades included."""
        counts: Dict[str, int] = {}
        for t in trades:
            counts[t.type.value] = counts.get(t.type.value, 0) + 1
        return counts

    @staticmethod
    def dashboard_stats(
        trades: List[Trade],
        window: Union[TimeWindow, str, int] = TimeWindow.ALL,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Everything the dashboard shows for one look-back window."""
        window = TimeWindow.parse(window)
        selected = filter_by_window(trades, window, now=now)
        logger.debug(f"Dashboard stats for {window.name}: {len(selected)} closed trades")

        return {
            "window": window,
            "summary": StatisticsEngine.calculate_summary(selected),
            "options": StatisticsEngine.option_summary(selected),
            "equity_curve": StatisticsEngine.equity_curve(selected),
            "asset_distribution": StatisticsEngine.asset_distribution(trades),
        }
