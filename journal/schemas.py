"""Pydantic models for journal trades.

Trades arrive from the ledger either in storage shape (``entry_price``,
``user_id``) or in the client shape (``entryPrice``, ``userId``); both
load into the same model.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TradeType(str, Enum):
    """Instrument type."""

    STOCK = "STOCK"
    OPTION = "OPTION"


class OptionType(str, Enum):
    """Option contract type."""

    CALL = "CALL"
    PUT = "PUT"


class TradeSide(str, Enum):
    """Position direction; decides the P&L sign convention."""

    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(str, Enum):
    """Trade lifecycle state."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class OptionDetails(BaseModel):
    """Option contract details. Carried on the trade, never aggregated."""

    strike: float
    expiration: str
    option_type: OptionType
    delta: Optional[float] = None
    iv: Optional[float] = None
    dte: Optional[int] = None


class Attachment(BaseModel):
    """Screenshot or file reference attached to a trade."""

    id: str
    name: str
    type: str
    url: str


class GroundingSource(BaseModel):
    title: str
    uri: str


class AIReview(BaseModel):
    """Stored coach review. Opaque to the analytics engine."""

    score: float
    well: str
    wrong: str
    violations: bool
    improvement: str
    timestamp: int
    sources: list[GroundingSource] = Field(default_factory=list)


class Trade(BaseModel):
    """Trade record for the journal."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=False,
    )

    id: str
    user_id: str = ""
    symbol: str
    type: TradeType = TradeType.STOCK
    side: TradeSide = TradeSide.LONG
    entry_price: float
    exit_price: Optional[float] = None
    quantity: float
    entry_date: datetime
    exit_date: Optional[datetime] = None
    fees: float = 0.0
    status: TradeStatus

    tags: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)
    mistakes: list[str] = Field(default_factory=list)
    strategies: list[str] = Field(default_factory=list)

    notes: str = ""
    option_details: Optional[OptionDetails] = None
    ai_review: Optional[AIReview] = None
    attachments: list[Attachment] = Field(default_factory=list)

    @field_validator("exit_price", mode="before")
    @classmethod
    def blank_exit_price(cls, v: Any) -> Any:
        """A missing or zero exit price means the trade has no exit."""
        if not v:
            return None
        return v

    @field_validator("exit_date", mode="before")
    @classmethod
    def blank_exit_date(cls, v: Any) -> Any:
        if v == "" or v is None:
            return None
        return v

    @field_validator("fees", mode="before")
    @classmethod
    def default_fees(cls, v: Any) -> Any:
        if v is None or v == "":
            return 0.0
        return v

    @field_validator("tags", "emotions", "mistakes", "strategies", "attachments", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> Any:
        if not isinstance(v, (list, tuple)):
            return []
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, v: Any) -> Any:
        return v or ""

    @property
    def is_closed(self) -> bool:
        return self.status == TradeStatus.CLOSED

    @classmethod
    def from_record(cls, record: dict) -> "Trade":
        """Build a trade from a storage row or client payload."""
        return cls.model_validate(record)
