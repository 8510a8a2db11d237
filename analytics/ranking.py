"""Selection and ordering of bucket results ("best hour", "top symbols", ...)."""
from typing import Dict, Iterable, List, Optional, Union

from analytics.buckets import BucketStats
from analytics.constants import DISCIPLINED_MISTAKE
from config.settings import settings

Buckets = Union[Dict[str, BucketStats], Iterable[BucketStats]]


def _as_list(buckets: Buckets) -> List[BucketStats]:
    if isinstance(buckets, dict):
        return list(buckets.values())
    return list(buckets)


def rank_by_pnl(buckets: Buckets, descending: bool = True) -> List[BucketStats]:
    """Stable sort by total P&L."""
    return sorted(_as_list(buckets), key=lambda b: b.pnl, reverse=descending)


def best_bucket(buckets: Buckets) -> Optional[BucketStats]:
    """Highest-P&L bucket, first one on ties. None when there are no buckets."""
    ranked = rank_by_pnl(buckets, descending=True)
    return ranked[0] if ranked else None


def worst_bucket(buckets: Buckets) -> Optional[BucketStats]:
    """Lowest-P&L bucket, first one on ties. None when there are no buckets."""
    ranked = rank_by_pnl(buckets, descending=False)
    return ranked[0] if ranked else None


def top_symbols(symbols: Buckets, limit: Optional[int] = None) -> List[BucketStats]:
    """Symbols by total P&L, best first, truncated to ``limit`` (default from settings)."""
    limit = settings.TOP_SYMBOLS_LIMIT if limit is None else limit
    return rank_by_pnl(symbols)[:limit]


def ranked_strategies(strategies: Buckets) -> List[BucketStats]:
    """Every strategy by total P&L, best first."""
    return rank_by_pnl(strategies)


def ranked_emotions(emotions: Buckets) -> List[BucketStats]:
    """Every emotion by total P&L, best first."""
    return rank_by_pnl(emotions)


def mistake_cost_ranking(mistakes: Buckets) -> List[BucketStats]:
    """Mistakes by total P&L ascending: the costliest mistake first."""
    return rank_by_pnl(mistakes, descending=False)


def _real_mistakes(mistakes: Buckets) -> List[BucketStats]:
    return [b for b in _as_list(mistakes) if b.key != DISCIPLINED_MISTAKE]


def most_frequent_mistake(mistakes: Buckets) -> Optional[BucketStats]:
    """Most repeated mistake, ignoring disciplined trades. None if no mistakes were tagged."""
    ranked = sorted(_real_mistakes(mistakes), key=lambda b: b.count, reverse=True)
    return ranked[0] if ranked else None


def total_mistake_loss(mistakes: Buckets) -> float:
    """Sum of P&L over losing mistake buckets (a negative number or 0)."""
    return sum((b.pnl for b in _real_mistakes(mistakes) if b.pnl < 0), 0.0)


def disciplined_win_rate(mistakes: Buckets) -> float:
    """Win rate of trades tagged with no mistake, 0 when there are none."""
    for bucket in _as_list(mistakes):
        if bucket.key == DISCIPLINED_MISTAKE:
            return bucket.win_rate
    return 0.0
