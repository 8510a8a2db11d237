from typing import List

from loguru import logger

from analytics.breakdown import daily_breakdown, hourly_breakdown, strategy_breakdown
from analytics.buckets import buckets_to_frame
from analytics.psychology import emotion_breakdown, mistake_breakdown
from analytics.ranking import (
    best_bucket,
    disciplined_win_rate,
    mistake_cost_ranking,
    most_frequent_mistake,
    ranked_emotions,
    ranked_strategies,
    worst_bucket,
)
from config.settings import settings
from journal.filters import closed_trades
from journal.schemas import Trade
from journal.statistics import StatisticsEngine
from utils.timeutils import to_local

TABLE_COLUMNS = ["label", "count", "win_rate", "pnl"]


def _monthly_trades(trades: List[Trade], month: int, year: int) -> List[Trade]:
    selected = []
    for t in closed_trades(trades):
        if t.exit_date is None:
            continue
        local = to_local(t.exit_date)
        if local.month == month and local.year == year:
            selected.append(t)
    return selected


def _table(buckets) -> str:
    df = buckets_to_frame(buckets)
    if df.empty:
        return "No data."
    df = df[TABLE_COLUMNS].copy()
    df["win_rate"] = df["win_rate"].round(1)
    df["pnl"] = df["pnl"].round(2)
    return df.to_string(index=False)


def _bucket_line(title: str, bucket) -> str:
    if bucket is None or bucket.is_empty:
        return f"- **{title}**: --"
    return f"- **{title}**: {bucket.label} ({settings.CURRENCY_SYMBOL}{bucket.pnl:,.2f}, {bucket.count} trades)"


def generate_markdown_report(trades: List[Trade], month: int, year: int) -> str:
    """
    Generate markdown report for the trades closed in a given month.
    """
    monthly = _monthly_trades(trades, month, year)
    if not monthly:
        return f"No trades found for {month}/{year}."

    logger.debug(f"Building report for {month}/{year} over {len(monthly)} trades")
    cur = settings.CURRENCY_SYMBOL
    summary = StatisticsEngine.calculate_summary(monthly)

    hours = hourly_breakdown(monthly)
    days = daily_breakdown(monthly)
    mistakes = mistake_breakdown(monthly)
    frequent = most_frequent_mistake(mistakes)

    report = [
        f"# Monthly Trading Report: {month}/{year}",
        "",
        "## Performance Summary",
        f"- **Net PnL**: {cur}{summary.total_net_pnl:,.2f} "
        f"(gross {cur}{summary.total_gross_pnl:,.2f}, fees {cur}{summary.total_fees:,.2f})",
        f"- **Win Rate**: {summary.win_rate:.1f}% ({summary.win_count}/{summary.closed_count})",
        f"- **Profit Factor**: {summary.profit_factor:.2f}",
        f"- **Risk Reward**: {summary.risk_reward_ratio:.2f}",
        f"- **Best / Worst Trade**: {cur}{summary.best_trade_pnl:,.2f} / {cur}{summary.worst_trade_pnl:,.2f}",
        "",
        "## Best Time to Trade",
        _bucket_line("Best Hour", best_bucket(hours)),
        _bucket_line("Worst Hour", worst_bucket(hours)),
        _bucket_line("Best Day", best_bucket(days)),
        _bucket_line("Worst Day", worst_bucket(days)),
        "",
        "## Strategy Performance",
        _table(ranked_strategies(strategy_breakdown(monthly))),
        "",
        "## Emotional States",
        _table(ranked_emotions(emotion_breakdown(monthly))),
        "",
        "## Mistake Cost",
        _table(mistake_cost_ranking(mistakes)),
        f"- **Most Frequent Mistake**: {frequent.label if frequent else '--'}",
        f"- **Disciplined Win Rate**: {disciplined_win_rate(mistakes):.1f}%",
    ]

    return "\n".join(report)
