"""Tag lists of a trade, with the sentinel used when a list is empty."""
from typing import List

from analytics.constants import DISCIPLINED_MISTAKE, NEUTRAL_EMOTION
from journal.schemas import Trade


def emotions_of(trade: Trade) -> List[str]:
    """Emotion tags of a trade, or the neutral sentinel when untagged."""
    return list(trade.emotions) if trade.emotions else [NEUTRAL_EMOTION]


def mistakes_of(trade: Trade) -> List[str]:
    """Mistake tags of a trade, or the disciplined sentinel when untagged."""
    return list(trade.mistakes) if trade.mistakes else [DISCIPLINED_MISTAKE]
