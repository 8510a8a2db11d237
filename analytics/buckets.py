"""Bucket accumulators shared by every breakdown."""
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, List

import pandas as pd

from journal.calculator import calculate_gross_pnl
from journal.schemas import Trade


@dataclass
class BucketStats:
    """Running totals for one grouping key.

    Breakeven trades count toward ``count`` only.
    """

    key: Any
    label: str
    count: int = 0
    pnl: float = 0.0
    wins: int = 0
    losses: int = 0

    def add(self, gross_pnl: float) -> None:
        self.count += 1
        self.pnl += gross_pnl
        if gross_pnl > 0:
            self.wins += 1
        elif gross_pnl < 0:
            self.losses += 1

    @property
    def win_rate(self) -> float:
        """Winning share in percent, 0 for an empty bucket."""
        return (self.wins / self.count) * 100 if self.count > 0 else 0.0

    @property
    def avg_pnl(self) -> float:
        return self.pnl / self.count if self.count > 0 else 0.0

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["win_rate"] = self.win_rate
        data["avg_pnl"] = self.avg_pnl
        return data


KeyFn = Callable[[Trade], Iterable[Hashable]]


def accumulate(
    trades: Iterable[Trade],
    key_fn: KeyFn,
    label_fn: Callable[[Hashable], str] = str,
) -> Dict[Hashable, BucketStats]:
    """
    Fold trades into buckets.

    ``key_fn`` returns every key a trade belongs to, so one trade can feed
    several buckets with its full P&L. Buckets keep first-seen order.
    """
    buckets: Dict[Hashable, BucketStats] = {}
    for trade in trades:
        pnl = calculate_gross_pnl(trade)
        for key in key_fn(trade):
            if key not in buckets:
                buckets[key] = BucketStats(key=key, label=label_fn(key))
            buckets[key].add(pnl)
    return buckets


def accumulate_fixed(
    trades: Iterable[Trade],
    key_fn: Callable[[Trade], Hashable],
    domain: Iterable[Hashable],
    label_fn: Callable[[Hashable], str] = str,
) -> List[BucketStats]:
    """
    Fold trades into a fixed set of buckets.

    Every key of ``domain`` gets a bucket (possibly empty), in domain order.
    Trades keyed outside the domain are dropped.
    """
    buckets = {key: BucketStats(key=key, label=label_fn(key)) for key in domain}
    for trade in trades:
        key = key_fn(trade)
        if key in buckets:
            buckets[key].add(calculate_gross_pnl(trade))
    return list(buckets.values())


def buckets_to_frame(buckets: Iterable[BucketStats]) -> pd.DataFrame:
    """Tabular projection of buckets for reports and display."""
    rows = [b.to_dict() for b in buckets]
    if not rows:
        return pd.DataFrame(
            columns=["key", "label", "count", "pnl", "wins", "losses", "win_rate", "avg_pnl"]
        )
    return pd.DataFrame(rows)
