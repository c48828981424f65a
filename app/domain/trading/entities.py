"""
Domain entities for the trading bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class TradeType(Enum):
    """Direction of a spot simulator trade."""

    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class MarketType(Enum):
    """Where a trade was recorded."""

    SIMULATOR = "SIMULATOR"


class PositionSide(Enum):
    """Direction of a futures position."""

    LONG = "LONG"
    SHORT = "SHORT"


class PositionStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    LIQUIDATED = "LIQUIDATED"


class MovementType(Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


@dataclass
class Trade:
    """A spot simulator trade.

    The virtual balance is not debited when the trade opens; the
    realized PnL is credited when it closes.
    """

    user_id: UUID
    symbol: str
    type: TradeType
    quantity: Decimal
    entry_price: Decimal
    entry_date: datetime
    id: UUID = field(default_factory=uuid4)
    status: TradeStatus = TradeStatus.OPEN
    market_type: MarketType = MarketType.SIMULATOR
    exit_price: Optional[Decimal] = None
    exit_date: Optional[datetime] = None
    pnl: Optional[Decimal] = None
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None
    notes: Optional[str] = None
    strategy: Optional[str] = None
    emotion: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status is TradeStatus.OPEN


@dataclass
class FuturesPosition:
    """A leveraged futures position backed by an isolated margin."""

    user_id: UUID
    symbol: str
    side: PositionSide
    quantity: Decimal
    leverage: int
    entry_price: Decimal
    margin: Decimal
    liquidation_price: Decimal
    id: UUID = field(default_factory=uuid4)
    status: PositionStatus = PositionStatus.OPEN
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None
    pnl: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    notes: Optional[str] = None
    strategy: Optional[str] = None
    emotion: Optional[str] = None


@dataclass(frozen=True)
class AggregatedPosition:
    """Open futures positions of one user merged by symbol and side."""

    ids: list[UUID]
    symbol: str
    side: PositionSide
    quantity: Decimal
    leverage: int
    entry_price: Decimal
    liquidation_price: Decimal
    margin: Decimal
    stop_loss: Optional[Decimal]
    take_profit: Optional[Decimal]
    created_at: Optional[datetime]


@dataclass(frozen=True)
class CapitalMovement:
    """A deposit into or withdrawal from the tracked portfolio."""

    user_id: UUID
    amount: Decimal
    type: MovementType
    date: datetime
    id: UUID = field(default_factory=uuid4)

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type is MovementType.DEPOSIT else -self.amount


@dataclass(frozen=True)
class ClosedResult:
    """A realized PnL record used by statistics and leaderboards.

    Spot trades and futures positions both reduce to this shape.
    """

    pnl: Optional[Decimal]
    closed: bool
    exit_date: Optional[datetime]
    entry_date: Optional[datetime]
    symbol: str = ""
