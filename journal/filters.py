"""Trade selection: closed-trade filter, date windows and drill-downs."""
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Union

from loguru import logger

from analytics.tags import emotions_of
from journal.schemas import Trade, TradeStatus, TradeType
from utils.exceptions import InvalidTimeWindowError
from utils.timeutils import local_now, to_local


class TimeWindow(int, Enum):
    """Look-back windows offered by the dashboard, in days (0 = everything)."""

    WEEK = 7
    MONTH = 30
    THREE_MONTHS = 90
    SIX_MONTHS = 180
    ONE_YEAR = 365
    ALL = 0

    @property
    def days(self) -> int:
        return self.value

    @classmethod
    def parse(cls, value: Union["TimeWindow", str, int]) -> "TimeWindow":
        """Resolve a window from an enum, a name/label or a day count.

        Raises:
            InvalidTimeWindowError: If the value matches no window
        """
        if isinstance(value, TimeWindow):
            return value

        if isinstance(value, int):
            for window in cls:
                if window.value == value:
                    return window
            raise InvalidTimeWindowError(f"No time window spans {value} days")

        label = str(value).strip().upper()
        if label in _WINDOW_LABELS:
            return _WINDOW_LABELS[label]
        if label.isdigit():
            return cls.parse(int(label))

        raise InvalidTimeWindowError(
            f"Unknown time window '{value}'. "
            f"Expected one of: {', '.join(sorted(_WINDOW_LABELS))}"
        )


_WINDOW_LABELS = {
    "WEEK": TimeWindow.WEEK,
    "MONTH": TimeWindow.MONTH,
    "3MONTHS": TimeWindow.THREE_MONTHS,
    "THREE_MONTHS": TimeWindow.THREE_MONTHS,
    "6MONTHS": TimeWindow.SIX_MONTHS,
    "SIX_MONTHS": TimeWindow.SIX_MONTHS,
    "1YEAR": TimeWindow.ONE_YEAR,
    "ONE_YEAR": TimeWindow.ONE_YEAR,
    "ALL": TimeWindow.ALL,
}


def closed_trades(trades: Iterable[Trade]) -> List[Trade]:
    """Trades eligible for performance analytics, in input order."""
    return [t for t in trades if t.status == TradeStatus.CLOSED]


def filter_by_window(
    trades: Iterable[Trade],
    window: Union[TimeWindow, str, int] = TimeWindow.ALL,
    now: Optional[datetime] = None,
) -> List[Trade]:
    """
    Closed trades whose exit falls within the last N days.

    ``ALL`` returns every closed trade. For any other window, trades
    without an exit date are excluded.
    """
    window = TimeWindow.parse(window)
    closed = closed_trades(trades)
    if window == TimeWindow.ALL:
        return closed

    now = to_local(now) if now is not None else local_now()
    cutoff = now - timedelta(days=window.days)

    selected = [
        t for t in closed
        if t.exit_date is not None and to_local(t.exit_date) >= cutoff
    ]
    logger.debug(
        f"Window {window.name}: {len(selected)}/{len(closed)} closed trades since {cutoff.isoformat()}"
    )
    return selected


def option_trades(trades: Iterable[Trade]) -> List[Trade]:
    """Trades on option contracts."""
    return [t for t in trades if t.type == TradeType.OPTION]


def filter_by_emotions(trades: Iterable[Trade], selected: Iterable[str]) -> List[Trade]:
    """
    Emotion drill-down: closed trades carrying any selected emotion.

    Untagged trades match the neutral sentinel. Newest entry first; an
    empty selection yields no trades.
    """
    wanted = set(selected)
    if not wanted:
        return []

    matches = [
        t for t in closed_trades(trades)
        if any(e in wanted for e in emotions_of(t))
    ]
    return sorted(matches, key=lambda t: to_local(t.entry_date), reverse=True)
