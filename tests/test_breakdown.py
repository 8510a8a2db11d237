"""Tests for hour/day/week/calendar/strategy/symbol breakdowns."""

from datetime import datetime, timedelta

import pandas as pd
import pytest

from analytics.breakdown import (
    calendar_breakdown,
    calendar_key,
    daily_breakdown,
    hourly_breakdown,
    month_calendar,
    strategy_breakdown,
    symbol_breakdown,
    week_key,
    weekly_breakdown,
)
from analytics.buckets import BucketStats, accumulate, buckets_to_frame
from journal.calculator import calculate_gross_pnl


class TestBucketStats:
    def test_breakeven_counts_in_neither_side(self):
        bucket = BucketStats(key="x", label="x")
        for pnl in (10.0, -5.0, 0.0):
            bucket.add(pnl)
        assert (bucket.count, bucket.wins, bucket.losses) == (3, 1, 1)
        assert bucket.pnl == 5.0

    def test_empty_bucket_rates_are_zero(self):
        bucket = BucketStats(key="x", label="x")
        assert bucket.win_rate == 0.0
        assert bucket.avg_pnl == 0.0
        assert bucket.is_empty

    def test_win_rate_percent(self):
        bucket = BucketStats(key="x", label="x")
        for pnl in (1.0, 1.0, -1.0, 0.0):
            bucket.add(pnl)
        assert bucket.win_rate == 50.0

    def test_accumulate_keeps_first_seen_order(self, make_trade):
        trades = [make_trade(symbol="B"), make_trade(symbol="A"), make_trade(symbol="B")]
        buckets = accumulate(trades, key_fn=lambda t: [t.symbol])
        assert list(buckets) == ["B", "A"]
        assert buckets["B"].count == 2

    def test_buckets_to_frame(self, tagged_trades):
        df = buckets_to_frame(symbol_breakdown(tagged_trades).values())
        assert list(df["label"]) == ["INFY", "TCS", "HDFC"]
        assert {"count", "pnl", "win_rate", "avg_pnl"} <= set(df.columns)

    def test_buckets_to_frame_empty(self):
        df = buckets_to_frame([])
        assert isinstance(df, pd.DataFrame)
        assert df.empty
        assert "pnl" in df.columns


class TestHourlyBreakdown:
    def test_fixed_session_domain_and_labels(self):
        buckets = hourly_breakdown([])
        assert [b.key for b in buckets] == [9, 10, 11, 12, 13, 14, 15]
        assert [b.label for b in buckets] == ["9 AM", "10 AM", "11 AM", "12 PM", "1 PM", "2 PM", "3 PM"]
        assert all(b.count == 0 for b in buckets)

    def test_trades_outside_session_are_dropped(self, make_trade):
        trades = [
            make_trade(entry_date=datetime(2024, 3, 4, 9, 5)),
            make_trade(entry_date=datetime(2024, 3, 4, 15, 59), exit_price=90),
            make_trade(entry_date=datetime(2024, 3, 4, 8, 59)),
            make_trade(entry_date=datetime(2024, 3, 4, 16, 0)),
            make_trade(entry_date=datetime(2024, 3, 4, 10, 0), status="OPEN", exit_price=None),
        ]
        buckets = {b.key: b for b in hourly_breakdown(trades)}

        assert sum(b.count for b in buckets.values()) == 2
        assert buckets[9].pnl == 100
        assert buckets[15].pnl == -100
        assert buckets[15].losses == 1

    def test_aware_entries_use_local_hour(self, make_trade):
        # 04:45 UTC is 10:15 in Kolkata
        trade = make_trade(entry_date="2024-03-04T04:45:00Z")
        buckets = {b.key: b for b in hourly_breakdown([trade])}
        assert buckets[10].count == 1


class TestDailyBreakdown:
    def test_monday_to_friday(self):
        labels = [b.label for b in daily_breakdown([])]
        assert labels == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

    def test_weekend_entries_are_dropped(self, make_trade):
        trades = [
            make_trade(entry_date=datetime(2024, 3, 4, 10)),  # Monday
            make_trade(entry_date=datetime(2024, 3, 8, 10)),  # Friday
            make_trade(entry_date=datetime(2024, 3, 9, 10)),  # Saturday
            make_trade(entry_date=datetime(2024, 3, 10, 10)),  # Sunday
        ]
        buckets = {b.label: b for b in daily_breakdown(trades)}
        assert buckets["Monday"].count == 1
        assert buckets["Friday"].count == 1
        assert sum(b.count for b in buckets.values()) == 2


class TestWeekKey:
    @pytest.mark.parametrize(
        "exit_date, expected",
        [
            # 2024-01-01 is a Monday (weekday offset 1)
            (datetime(2024, 1, 1, 10, 0), "2024-W01"),
            (datetime(2024, 1, 6, 0, 0), "2024-W01"),
            # Fractional days push Saturday afternoon into the next week
            (datetime(2024, 1, 6, 12, 0), "2024-W02"),
            (datetime(2024, 1, 7, 0, 0), "2024-W02"),
            # 2023-01-01 is a Sunday (weekday offset 0)
            (datetime(2023, 1, 7, 0, 0), "2023-W01"),
            (datetime(2023, 12, 31, 12, 0), "2023-W53"),
        ],
    )
    def test_formula(self, exit_date, expected):
        assert week_key(exit_date) == expected

    def test_aware_exit_uses_local_date(self):
        # 2023-12-31T20:00Z is 2024-01-01 01:30 in Kolkata
        assert week_key(datetime.fromisoformat("2023-12-31T20:00:00+00:00")) == "2024-W01"


class TestWeeklyBreakdown:
    def test_newest_week_first_with_win_loss_split(self, make_trade):
        trades = [
            make_trade(exit_date=datetime(2024, 1, 2, 12), exit_price=120),
            make_trade(exit_date=datetime(2024, 1, 3, 12), exit_price=90),
            make_trade(exit_date=datetime(2024, 1, 3, 13), exit_price=100),
            make_trade(exit_date=datetime(2024, 1, 10, 12), exit_price=105),
        ]
        weeks = weekly_breakdown(trades)

        assert [w.key for w in weeks] == ["2024-W02", "2024-W01"]
        first_week = weeks[1]
        assert (first_week.count, first_week.wins, first_week.losses) == (3, 1, 1)
        assert first_week.pnl == 100

    def test_keeps_twelve_most_recent_weeks(self, make_trade):
        start = datetime(2024, 1, 2, 12)
        trades = [make_trade(exit_date=start + timedelta(weeks=i)) for i in range(13)]
        weeks = weekly_breakdown(trades)
        all_keys = sorted({w.key for w in weekly_breakdown(trades, limit=100)}, reverse=True)

        assert len(all_keys) == 13
        assert [w.key for w in weeks] == all_keys[:12]

    def test_orders_by_key_string_across_years(self, make_trade):
        trades = [
            make_trade(exit_date=datetime(2023, 12, 31, 12)),
            make_trade(exit_date=datetime(2024, 1, 2, 12)),
        ]
        assert [w.key for w in weekly_breakdown(trades)] == ["2024-W01", "2023-W53"]

    def test_undated_closed_trades_are_skipped(self, make_trade):
        assert weekly_breakdown([make_trade(exit_date=None)]) == []


class TestCalendar:
    def test_key_is_utc_date(self):
        # 03:00 in Kolkata is 21:30 UTC on the previous day
        assert calendar_key(datetime(2024, 3, 5, 3, 0)) == "2024-03-04"
        assert calendar_key(datetime(2024, 3, 5, 14, 0)) == "2024-03-05"

    def test_breakdown_by_exit_date(self, make_trade):
        trades = [
            make_trade(exit_date=datetime(2024, 3, 5, 14), exit_price=120),
            make_trade(exit_date=datetime(2024, 3, 5, 15), exit_price=90),
            make_trade(exit_date=datetime(2024, 3, 6, 14)),
            make_trade(status="OPEN", exit_price=None, exit_date=None),
        ]
        data = calendar_breakdown(trades)
        assert set(data) == {"2024-03-05", "2024-03-06"}
        assert data["2024-03-05"].pnl == 100
        assert data["2024-03-05"].count == 2

    def test_month_grid(self, make_trade):
        data = calendar_breakdown([make_trade(exit_date=datetime(2024, 3, 5, 14))])
        cells = month_calendar(data, 2024, 3)

        assert len(cells) == 42
        # March 1st 2024 is a Friday: five empty Sunday-first slots before it
        assert cells[:5] == [None] * 5
        assert cells[5].day == 1
        assert cells[5].date_key == "2024-03-01"
        assert cells[35].day == 31
        assert cells[36:] == [None] * 6
        assert cells[9].date_key == "2024-03-05"
        assert cells[9].stats.count == 1
        assert cells[10].stats is None

    def test_other_months_have_no_entries(self, make_trade):
        data = calendar_breakdown([make_trade(exit_date=datetime(2024, 3, 5, 14))])
        cells = month_calendar(data, 2024, 4)
        assert all(c is None or c.stats is None for c in cells)


class TestStrategyAndSymbol:
    def test_multi_strategy_trade_counts_fully_in_each(self, tagged_trades):
        strategies = strategy_breakdown(tagged_trades)

        assert strategies["Breakout"].pnl == 50  # 100 - 50
        assert strategies["Breakout"].count == 2
        assert strategies["Scalp"].pnl == -50  # -50 + 0, open trade excluded
        assert strategies["Scalp"].count == 2

    def test_untagged_trades_have_no_strategy_bucket(self, tagged_trades):
        strategies = strategy_breakdown(tagged_trades)
        assert set(strategies) == {"Breakout", "Scalp"}

    def test_strategy_total_can_exceed_portfolio_total(self, make_trade):
        trade = make_trade(strategies=["A", "B"])
        strategies = strategy_breakdown([trade])
        total = calculate_gross_pnl(trade)
        assert sum(b.pnl for b in strategies.values()) == 2 * total

    def test_symbols(self, tagged_trades):
        symbols = symbol_breakdown(tagged_trades)
        assert symbols["INFY"].pnl == -100
        assert symbols["INFY"].wins == 1
        assert symbols["HDFC"].count == 1

    def test_idempotent(self, tagged_trades):
        assert strategy_breakdown(tagged_trades) == strategy_breakdown(tagged_trades)
        assert hourly_breakdown(tagged_trades) == hourly_breakdown(tagged_trades)
