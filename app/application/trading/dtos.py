"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from app.domain.trading.entities import MovementType, PositionSide, TradeType
from app.domain.trading.portfolio_curve import Granularity


@dataclass(frozen=True)
class OpenTradeCommand:
    """Input DTO for opening a spot simulator trade.

    Attributes:
        user_id: Owner of the trade.
        symbol: Exchange pair, e.g. BTCUSDT.
        quantity: Amount of the base asset (> 0).
        type: BUY or SELL.
        stop_loss: Optional automatic exit level.
        take_profit: Optional automatic exit level.
    """

    user_id: UUID
    symbol: str
    quantity: Decimal
    type: TradeType
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None


@dataclass(frozen=True)
class JournalCommand:
    """Free-form journal fields of a trade or position."""

    user_id: UUID
    target_id: UUID
    notes: Optional[str] = None
    strategy: Optional[str] = None
    emotion: Optional[str] = None


@dataclass(frozen=True)
class CloseSymbolResult:
    symbol: str
    exit_price: Decimal
    closed: int
    total_pnl: Decimal


@dataclass(frozen=True)
class ProcessTradeExitsResult:
    """Summary of one stop-loss / take-profit sweep.

    Attributes:
        processed: Open trades inspected.
        closed: Trades closed by the sweep.
        errors: One message per trade whose price could not be fetched.
    """

    processed: int
    closed: int
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OpenPositionCommand:
    """Input DTO for opening a futures position.

    Attributes:
        user_id: Owner of the position.
        symbol: Perpetual contract symbol.
        side: LONG or SHORT.
        quantity: Contract quantity (> 0).
        leverage: 1 to 125.
        entry_price: Price the order is filled at (> 0).
        stop_loss: Optional exit level.
        take_profit: Optional exit level.
    """

    user_id: UUID
    symbol: str
    side: PositionSide
    quantity: Decimal
    leverage: int
    entry_price: Decimal
    stop_loss: Optional[Decimal] = None
    take_profit: Optional[Decimal] = None


@dataclass(frozen=True)
class ClosePositionCommand:
    user_id: UUID
    position_id: UUID
    exit_price: Decimal


@dataclass(frozen=True)
class LiquidationResult:
    """Summary of one liquidation sweep.

    Attributes:
        checked: Open positions inspected.
        liquidated: Positions liquidated.
        skipped: Positions skipped because no price was available.
        bankrupt_users: Users put under the bankruptcy penalty.
    """

    checked: int
    liquidated: int
    skipped: int = 0
    bankrupt_users: int = 0


@dataclass(frozen=True)
class RecordMovementCommand:
    user_id: UUID
    amount: Decimal
    type: MovementType
    date: Optional[datetime] = None


class StatsMarket(Enum):
    SPOT = "spot"
    FUTURES = "futures"
    ALL = "all"


@dataclass(frozen=True)
class TradingStatsQuery:
    user_id: UUID
    market: StatsMarket = StatsMarket.ALL


@dataclass(frozen=True)
class PortfolioChartQuery:
    user_id: UUID
    granularity: Granularity
    usdt_to_brl_rate: Decimal
