"""Export module for Journal."""
import csv
import io
from typing import Iterable, List

from analytics.buckets import BucketStats
from journal.calculator import calculate_gross_pnl, calculate_holding_days, calculate_net_pnl
from journal.schemas import Trade
from journal.statistics import PerformanceSummary
from utils.exceptions import ExportError


def _money(value: float) -> str:
    return f"{value:.2f}"


class Exporter:
    """Exports trades and computed aggregates to CSV."""

    @staticmethod
    def to_csv(trades: List[Trade]) -> io.StringIO:
        """Convert list of trades to CSV string buffer."""
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow([
            "ID", "Symbol", "Type", "Side", "Status",
            "Entry Date", "Exit Date", "Holding Days",
            "Qty", "Entry Price", "Exit Price", "Fees",
            "Gross PnL", "Net PnL", "Strategies", "Emotions", "Mistakes",
        ])

        for t in trades:
            exit_date = t.exit_date.strftime("%Y-%m-%d") if t.exit_date else ""
            exit_price = _money(t.exit_price) if t.exit_price else ""
            holding = ""
            if t.exit_date:
                try:
                    holding = calculate_holding_days(t.entry_date, t.exit_date)
                except TypeError as e:
                    raise ExportError(f"Trade {t.id} mixes naive and aware timestamps") from e

            writer.writerow([
                t.id,
                t.symbol,
                t.type.value,
                t.side.value,
                t.status.value,
                t.entry_date.strftime("%Y-%m-%d"),
                exit_date,
                holding,
                f"{t.quantity:g}",
                _money(t.entry_price),
                exit_price,
                _money(t.fees),
                _money(calculate_gross_pnl(t)),
                _money(calculate_net_pnl(t)),
                "; ".join(t.strategies),
                "; ".join(t.emotions),
                "; ".join(t.mistakes),
            ])

        output.seek(0)
        return output

    @staticmethod
    def buckets_to_csv(buckets: Iterable[BucketStats], key_header: str = "Bucket") -> io.StringIO:
        """Flat table of bucket results, one row per bucket."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow([key_header, "Trades", "Wins", "Losses", "Win Rate (%)", "PnL", "Avg PnL"])

        for b in buckets:
            writer.writerow([
                b.label,
                b.count,
                b.wins,
                b.losses,
                f"{b.win_rate:.1f}",
                _money(b.pnl),
                _money(b.avg_pnl),
            ])

        output.seek(0)
        return output

    @staticmethod
    def summary_to_csv(summary: PerformanceSummary) -> io.StringIO:
        """Metric/value rows for a performance summary."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["Metric", "Value"])

        rows = [
            ("Closed Trades", summary.closed_count),
            ("Wins", summary.win_count),
            ("Losses", summary.loss_count),
            ("Win Rate (%)", f"{summary.win_rate:.1f}"),
            ("Avg Win", _money(summary.avg_win)),
            ("Avg Loss", _money(summary.avg_loss)),
            ("Risk Reward", _money(summary.risk_reward_ratio)),
            ("Profit Factor", _money(summary.profit_factor)),
            ("Gross PnL", _money(summary.total_gross_pnl)),
            ("Fees", _money(summary.total_fees)),
            ("Net PnL", _money(summary.total_net_pnl)),
            ("Best Trade", _money(summary.best_trade_pnl)),
            ("Worst Trade", _money(summary.worst_trade_pnl)),
        ]
        writer.writerows(rows)

        output.seek(0)
        return output
