"""
Futures and spot simulator arithmetic.

Simplified exchange rules used by the simulator:
    margin            = quantity * entry / leverage
    liquidation LONG  = entry - entry / leverage
    liquidation SHORT = entry + entry / leverage   (floored at 0)
"""

import math
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from app.domain.trading.entities import (
    AggregatedPosition,
    FuturesPosition,
    PositionSide,
    Trade,
    TradeType,
)
from app.domain.trading.errors import InvalidOrderError

MIN_LEVERAGE = 1
MAX_LEVERAGE = 125
ZERO = Decimal("0")


def validate_order(quantity: Decimal, leverage: int, entry_price: Decimal) -> None:
    """Reject orders outside the simulator limits."""
    if quantity <= 0:
        raise InvalidOrderError("quantity must be positive")
    if not MIN_LEVERAGE <= leverage <= MAX_LEVERAGE:
        raise InvalidOrderError(
            f"leverage must be between {MIN_LEVERAGE} and {MAX_LEVERAGE}"
        )
    if entry_price <= 0:
        raise InvalidOrderError("entry price must be positive")


def required_margin(quantity: Decimal, entry_price: Decimal, leverage: int) -> Decimal:
    return quantity * entry_price / Decimal(leverage)


def liquidation_price(
    entry_price: Decimal, leverage: int, side: PositionSide
) -> Decimal:
    move = entry_price / Decimal(leverage)
    price = entry_price - move if side is PositionSide.LONG else entry_price + move
    return max(price, ZERO)


def position_pnl(
    side: PositionSide, entry_price: Decimal, exit_price: Decimal, quantity: Decimal
) -> Decimal:
    if side is PositionSide.LONG:
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity


def trade_pnl(
    trade_type: TradeType, entry_price: Decimal, exit_price: Decimal, quantity: Decimal
) -> Decimal:
    if trade_type is TradeType.BUY:
        return (exit_price - entry_price) * quantity
    return (entry_price - exit_price) * quantity


def should_liquidate(position: FuturesPosition, price: Decimal) -> bool:
    if position.side is PositionSide.LONG:
        return price <= position.liquidation_price
    return price >= position.liquidation_price


def should_exit(trade: Trade, price: Decimal) -> bool:
    """Return True when ``price`` reaches the trade's stop loss or take profit.

    Levels that are not set are ignored.
    """
    stop, target = trade.stop_loss, trade.take_profit
    if trade.type is TradeType.BUY:
        return (stop is not None and price <= stop) or (
            target is not None and price >= target
        )
    return (stop is not None and price >= stop) or (
        target is not None and price <= target
    )


def remaining_cooldown_days(expires_at: datetime, now: datetime) -> int:
    """Whole days (rounded up) until a bankruptcy penalty ends."""
    return math.ceil((expires_at - now).total_seconds() / 86400)


def aggregate_positions(
    positions: Iterable[FuturesPosition],
) -> list[AggregatedPosition]:
    """Merge open positions by (symbol, side).

    Positions must be given oldest first: leverage, stop loss and take
    profit come from the most recent position that sets them, and the
    liquidation price is recomputed from the volume-weighted entry.
    """
    groups: "OrderedDict[tuple[str, PositionSide], list[FuturesPosition]]" = OrderedDict()
    for position in positions:
        groups.setdefault((position.symbol, position.side), []).append(position)

    aggregated = []
    for (symbol, side), members in groups.items():
        quantity = sum((p.quantity for p in members), ZERO)
        notional = sum((p.quantity * p.entry_price for p in members), ZERO)
        margin = sum((p.margin for p in members), ZERO)
        leverage = members[-1].leverage
        stop_loss: Optional[Decimal] = None
        take_profit: Optional[Decimal] = None
        for p in members:
            if p.stop_loss is not None:
                stop_loss = p.stop_loss
            if p.take_profit is not None:
                take_profit = p.take_profit

        average_entry = notional / quantity if quantity else ZERO
        aggregated.append(
            AggregatedPosition(
                ids=[p.id for p in members],
                symbol=symbol,
                side=side,
                quantity=quantity,
                leverage=leverage,
                entry_price=average_entry,
                liquidation_price=liquidation_price(average_entry, leverage, side),
                margin=margin,
                stop_loss=stop_loss,
                take_profit=take_profit,
                created_at=members[0].created_at,
            )
        )
    return aggregated
