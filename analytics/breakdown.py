"""Time and instrument breakdowns of closed-trade performance.

Every function takes the full trade list and only considers closed trades.
Hour, weekday and week keys use local time; the calendar key is the UTC
date of the exit.
"""
import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional

import pytz
from loguru import logger

from analytics.buckets import BucketStats, accumulate, accumulate_fixed
from analytics.constants import MARKET_HOURS, TRADING_WEEKDAYS, WEEKDAY_LABELS, hour_label
from config.settings import settings
from journal.filters import closed_trades
from journal.schemas import Trade
from utils.timeutils import local_timezone, to_local, to_utc


def hourly_breakdown(trades: List[Trade], tz: Optional[pytz.BaseTzInfo] = None) -> List[BucketStats]:
    """P&L by entry hour over the market session (9 AM to 3 PM).

    All session hours are returned, empty ones included. Entries outside
    the session are not counted.
    """
    return accumulate_fixed(
        closed_trades(trades),
        key_fn=lambda t: to_local(t.entry_date, tz).hour,
        domain=MARKET_HOURS,
        label_fn=hour_label,
    )


def daily_breakdown(trades: List[Trade], tz: Optional[pytz.BaseTzInfo] = None) -> List[BucketStats]:
    """P&L by entry weekday, Monday to Friday. Weekend entries are not counted."""
    return accumulate_fixed(
        closed_trades(trades),
        key_fn=lambda t: to_local(t.entry_date, tz).weekday(),
        domain=TRADING_WEEKDAYS,
        label_fn=WEEKDAY_LABELS.get,
    )


def week_key(exit_date: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> str:
    """
    Week label ``"{year}-W{NN}"`` for an exit timestamp.

    NN = ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7), where days
    since Jan 1 is fractional (time of day included) and weekdays count
    from Sunday = 0. This is not ISO-8601 week numbering.
    """
    tzinfo = local_timezone(tz)
    local = to_local(exit_date, tzinfo)
    first_day = tzinfo.localize(datetime(local.year, 1, 1))

    past_days = (local - first_day).total_seconds() / 86400
    first_weekday = (first_day.weekday() + 1) % 7
    week_num = math.ceil((past_days + first_weekday + 1) / 7)

    return f"{local.year}-W{week_num:02d}"


def weekly_breakdown(
    trades: List[Trade],
    limit: Optional[int] = None,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> List[BucketStats]:
    """Most recent weeks by exit date, newest week key first."""
    limit = settings.WEEKLY_WINDOW if limit is None else limit

    dated = [t for t in closed_trades(trades) if t.exit_date is not None]
    skipped = len(closed_trades(trades)) - len(dated)
    if skipped:
        logger.debug(f"Weekly breakdown skipped {skipped} closed trades without exit date")

    buckets = accumulate(dated, key_fn=lambda t: [week_key(t.exit_date, tz)])
    ordered = sorted(buckets.values(), key=lambda b: b.key, reverse=True)
    return ordered[:limit]


def calendar_key(exit_date: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> str:
    """``YYYY-MM-DD`` of the exit timestamp in UTC."""
    return to_utc(exit_date, tz).date().isoformat()


def calendar_breakdown(trades: List[Trade], tz: Optional[pytz.BaseTzInfo] = None) -> Dict[str, BucketStats]:
    """P&L per exit date, keyed ``YYYY-MM-DD``."""
    dated = [t for t in closed_trades(trades) if t.exit_date is not None]
    return accumulate(dated, key_fn=lambda t: [calendar_key(t.exit_date, tz)])


@dataclass(frozen=True)
class CalendarCell:
    day: int
    date_key: str
    stats: Optional[BucketStats] = None


def month_calendar(data: Dict[str, BucketStats], year: int, month: int) -> List[Optional[CalendarCell]]:
    """
    Six-week, Sunday-first grid for one month.

    Returns 42 slots; slots before the 1st and after the last day are None.
    Days without trades carry ``stats=None``.
    """
    days_in_month = calendar.monthrange(year, month)[1]
    first_weekday = (date(year, month, 1).weekday() + 1) % 7

    cells: List[Optional[CalendarCell]] = []
    for i in range(42):
        day = i - first_weekday + 1
        if day <= 0 or day > days_in_month:
            cells.append(None)
            continue
        key = f"{year}-{month:02d}-{day:02d}"
        cells.append(CalendarCell(day=day, date_key=key, stats=data.get(key)))
    return cells


def strategy_breakdown(trades: List[Trade]) -> Dict[str, BucketStats]:
    """P&L per strategy tag. A trade counts fully toward each of its strategies."""
    return accumulate(closed_trades(trades), key_fn=lambda t: t.strategies)


def symbol_breakdown(trades: List[Trade]) -> Dict[str, BucketStats]:
    """P&L per ticker symbol."""
    return accumulate(closed_trades(trades), key_fn=lambda t: [t.symbol])
