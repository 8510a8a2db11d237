"""Main entry point for the trade journal analytics CLI.

Commands read a JSON file holding a list of trade records (storage or
client field names) and print or export the computed analytics.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from analytics.breakdown import daily_breakdown, hourly_breakdown, strategy_breakdown, symbol_breakdown
from analytics.monthly_report import generate_markdown_report
from analytics.psychology import emotion_breakdown, mistake_breakdown
from analytics.ranking import (
    mistake_cost_ranking,
    ranked_emotions,
    ranked_strategies,
    top_symbols,
)
from config.logging import setup_logging
from journal.exporter import Exporter
from journal.schemas import Trade
from journal.statistics import StatisticsEngine
from utils.exceptions import TradeJournalError
from utils.timeutils import local_now

BREAKDOWNS = {
    "hourly": hourly_breakdown,
    "daily": daily_breakdown,
    "strategy": lambda trades: ranked_strategies(strategy_breakdown(trades)),
    "symbol": lambda trades: top_symbols(symbol_breakdown(trades)),
    "emotion": lambda trades: ranked_emotions(emotion_breakdown(trades)),
    "mistake": lambda trades: mistake_cost_ranking(mistake_breakdown(trades)),
}


def load_trades(path: str) -> List[Trade]:
    """Load trade records from a JSON file.

    Raises:
        TradeJournalError: If the file is missing or holds invalid records
    """
    source = Path(path)
    if not source.exists():
        raise TradeJournalError(f"Trade file not found: {path}")

    try:
        records = json.loads(source.read_text(encoding="utf-8"))
        trades = [Trade.from_record(r) for r in records]
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError, TypeError) as e:
        raise TradeJournalError(f"Invalid trade file {path}: {e}") from e

    logger.info(f"Loaded {len(trades)} trades from {path}")
    return trades


def run_summary(trades: List[Trade], window: str) -> None:
    stats = StatisticsEngine.dashboard_stats(trades, window)
    print(Exporter.summary_to_csv(stats["summary"]).getvalue(), end="")
    options = stats["options"]
    print(f"Option Trades,{options.option_count}")
    print(f"Option Win Rate (%),{options.option_win_rate:.1f}")
    print(f"Option PnL Share (%),{options.option_pnl_ratio:.1f}")


def run_report(trades: List[Trade], month: Optional[int] = None, year: Optional[int] = None) -> None:
    """Print the markdown report, defaulting to the current month in the configured timezone."""
    now = local_now()
    print(generate_markdown_report(trades, month or now.month, year or now.year))


def run_export(trades: List[Trade], what: str) -> None:
    if what == "trades":
        print(Exporter.to_csv(trades).getvalue(), end="")
    else:
        print(Exporter.buckets_to_csv(BREAKDOWNS[what](trades), key_header=what.title()).getvalue(), end="")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Trade journal analytics")
    parser.add_argument("trades", help="Path to a JSON list of trade records")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    summary_parser = subparsers.add_parser("summary", help="Print performance summary")
    summary_parser.add_argument("--window", default="ALL", help="WEEK, MONTH, 3MONTHS, 6MONTHS, 1YEAR or ALL")

    report_parser = subparsers.add_parser("report", help="Print monthly markdown report")
    report_parser.add_argument("--month", type=int, help="Month of exit (default: current local month)")
    report_parser.add_argument("--year", type=int, help="Year of exit (default: current local year)")

    export_parser = subparsers.add_parser("export", help="Export trades or a breakdown as CSV")
    export_parser.add_argument("what", choices=["trades", *BREAKDOWNS])

    args = parser.parse_args()
    setup_logging()

    try:
        trades = load_trades(args.trades)
        if args.command == "summary":
            run_summary(trades, args.window)
        elif args.command == "report":
            run_report(trades, args.month, args.year)
        elif args.command == "export":
            run_export(trades, args.what)
        else:
            parser.print_help()
    except TradeJournalError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
