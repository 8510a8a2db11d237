from typing import Dict, List

from analytics.buckets import BucketStats, accumulate
from analytics.tags import emotions_of, mistakes_of
from journal.filters import closed_trades
from journal.schemas import Trade


def emotion_breakdown(trades: List[Trade]) -> Dict[str, BucketStats]:
    """
    Performance by emotion tag.

    Untagged trades land in the "Neutral" bucket. Repeated tags on one
    trade are counted once per occurrence.
    """
    return accumulate(closed_trades(trades), key_fn=emotions_of)


def mistake_breakdown(trades: List[Trade]) -> Dict[str, BucketStats]:
    """Performance by mistake tag; untagged trades are "No Mistake (Disciplined)"."""
    return accumulate(closed_trades(trades), key_fn=mistakes_of)
