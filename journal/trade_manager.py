"""Manager for Trade Logic."""
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from journal.calculator import calculate_net_pnl, determine_win_loss
from journal.schemas import Trade, TradeStatus
from utils.exceptions import DuplicateTradeError, TradeNotFoundError, TradeStateError
from utils.timeutils import to_local


class TradeLedger:
    """In-memory trade collection supplying snapshots to the analytics engine."""

    def __init__(self, trades: Optional[Iterable[Trade]] = None):
        self._trades: Dict[str, Trade] = {}
        for trade in trades or []:
            self.insert(trade)

    def insert(self, trade: Trade) -> str:
        if trade.id in self._trades:
            raise DuplicateTradeError(f"Trade {trade.id} already exists")
        self._trades[trade.id] = trade
        return trade.id

    def get(self, trade_id: str) -> Optional[Trade]:
        return self._trades.get(trade_id)

    def replace(self, trade: Trade) -> None:
        if trade.id not in self._trades:
            raise TradeNotFoundError(trade.id)
        self._trades[trade.id] = trade

    def remove(self, trade_id: str) -> bool:
        return self._trades.pop(trade_id, None) is not None

    def snapshot(self) -> Tuple[Trade, ...]:
        """Immutable view of the ledger, newest entry first."""
        return tuple(
            sorted(self._trades.values(), key=lambda t: to_local(t.entry_date).timestamp(), reverse=True)
        )

    def __len__(self) -> int:
        return len(self._trades)


class TradeManager:
    """Orchestrates trade operations."""

    def __init__(self, ledger: Optional[TradeLedger] = None):
        self.ledger = ledger if ledger is not None else TradeLedger()

    def _require(self, trade_id: str) -> Trade:
        trade = self.ledger.get(trade_id)
        if trade is None:
            raise TradeNotFoundError(f"Trade {trade_id} not found")
        return trade

    def create_trade(self, data: Dict[str, Any]) -> Trade:
        """Create a new trade. Trades with exit data must be closed explicitly."""
        payload = dict(data)
        payload.setdefault("id", str(uuid.uuid4()))
        payload["status"] = TradeStatus.OPEN
        payload.pop("exit_price", None)
        payload.pop("exitPrice", None)
        payload.pop("exit_date", None)
        payload.pop("exitDate", None)

        trade = Trade.model_validate(payload)
        self.ledger.insert(trade)
        logger.info(f"Opened trade {trade.id} ({trade.side.value} {trade.symbol})")
        return trade

    def close_trade(
        self,
        trade_id: str,
        exit_price: float,
        exit_date: datetime,
        fees: Optional[float] = None,
    ) -> Trade:
        """
        Close an open trade with its exit data.
        ``fees`` replaces the recorded fees when given.
        """
        trade = self._require(trade_id)
        if trade.status != TradeStatus.OPEN:
            raise TradeStateError(f"Trade {trade_id} is not open")

        updates: Dict[str, Any] = {
            "status": TradeStatus.CLOSED,
            "exit_price": exit_price,
            "exit_date": exit_date,
        }
        if fees is not None:
            updates["fees"] = fees

        closed = Trade.model_validate({**trade.model_dump(), **updates})
        self.ledger.replace(closed)

        net = calculate_net_pnl(closed)
        logger.info(f"Closed trade {trade_id}: {determine_win_loss(net)} net {net:.2f}")
        return closed

    def update_trade(self, trade_id: str, updates: Dict[str, Any]) -> Trade:
        """Edit trade fields. Status changes go through ``close_trade``."""
        trade = self._require(trade_id)
        if "status" in updates or "id" in updates:
            raise TradeStateError("Trade id and status cannot be edited directly")

        updated = Trade.model_validate({**trade.model_dump(), **updates})
        self.ledger.replace(updated)
        return updated

    def delete_trade(self, trade_id: str) -> None:
        if not self.ledger.remove(trade_id):
            raise TradeNotFoundError(f"Trade {trade_id} not found")
        logger.info(f"Deleted trade {trade_id}")

    def snapshot(self) -> Tuple[Trade, ...]:
        return self.ledger.snapshot()

    def load(self, records: List[Dict[str, Any]]) -> int:
        """Bulk load stored records as-is (any status)."""
        for record in records:
            self.ledger.insert(Trade.from_record(record))
        return len(records)
