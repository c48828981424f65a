"""
Pydantic schemas for simulator, futures and report endpoints.

These schemas enforce input validation and define the API contract.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.trading.entities import (
    MarketType,
    MovementType,
    PositionSide,
    PositionStatus,
    TradeStatus,
    TradeType,
)

SYMBOL_DESCRIPTION = "Exchange pair, e.g. BTCUSDT or BTCBRL"
SYMBOL_PATTERN = r"^[A-Za-z0-9]+$"
SYMBOL_MIN_LEN = 2
SYMBOL_MAX_LEN = 30


def _symbol_field():
    return Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
        description=SYMBOL_DESCRIPTION,
    )


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


# -- spot simulator -----------------------------------------------------


class OpenTradeRequest(BaseModel):
    """Request schema for opening a spot trade.

    The entry price is the live market price at the time of the request.
    """

    symbol: str = _symbol_field()
    quantity: Decimal = Field(..., gt=0)
    type: TradeType
    stop_loss: Optional[Decimal] = Field(None, gt=0)
    take_profit: Optional[Decimal] = Field(None, gt=0)


class CloseSymbolRequest(BaseModel):
    symbol: str = _symbol_field()


class JournalRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=5000)
    strategy: Optional[str] = Field(None, max_length=120)
    emotion: Optional[str] = Field(None, max_length=60)


class TradeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    symbol: str
    type: TradeType
    status: TradeStatus
    market_type: MarketType
    quantity: Decimal
    entry_price: Decimal
    entry_date: datetime
    exit_price: Optional[Decimal]
    exit_date: Optional[datetime]
    pnl: Optional[Decimal]
    stop_loss: Optional[Decimal]
    take_profit: Optional[Decimal]
    notes: Optional[str]
    strategy: Optional[str]
    emotion: Optional[str]


class CloseSymbolResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    exit_price: Decimal
    closed: int
    total_pnl: Decimal


# -- futures --------------------------------------------------------------


class OpenPositionRequest(BaseModel):
    """Request schema for opening a futures position.

    Attributes:
        leverage: 1 to 125.
        entry_price: Fill price of the order.
    """

    symbol: str = _symbol_field()
    side: PositionSide
    quantity: Decimal = Field(..., gt=0)
    leverage: int = Field(..., ge=1, le=125)
    entry_price: Decimal = Field(..., gt=0)
    stop_loss: Optional[Decimal] = Field(None, gt=0)
    take_profit: Optional[Decimal] = Field(None, gt=0)


class ClosePositionRequest(BaseModel):
    position_id: UUID
    exit_price: Decimal = Field(..., gt=0)


class PositionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    symbol: str
    side: PositionSide
    status: PositionStatus
    quantity: Decimal
    leverage: int
    entry_price: Decimal
    margin: Decimal
    liquidation_price: Decimal
    stop_loss: Optional[Decimal]
    take_profit: Optional[Decimal]
    pnl: Optional[Decimal]
    created_at: Optional[datetime]
    closed_at: Optional[datetime]
    notes: Optional[str]
    strategy: Optional[str]
    emotion: Optional[str]


class AggregatedPositionResponse(BaseModel):
    """Open positions merged by symbol and side."""

    model_config = ConfigDict(from_attributes=True)

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


# -- capital movements and reports ------------------------------------------


class MovementRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    type: MovementType
    date: Optional[datetime] = None


class MovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    amount: Decimal
    type: MovementType
    date: datetime


class TradingStatsResponse(BaseModel):
    """Performance statistics. Infinite ratios are reported as null."""

    total_trades: int
    win_rate: float
    profit_factor: Optional[float]
    payoff: Optional[float]
    max_drawdown: float
    total_profit: float
    best_trade: float
    worst_trade: float
    expectancy: float


class PortfolioPointResponse(BaseModel):
    date: str
    portfolio: Decimal
