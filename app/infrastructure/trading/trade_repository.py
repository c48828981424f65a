"""
Adapter: Spot simulator trade repository.

Implements TradeRepository port. Closing trades and crediting the
realized PnL to the owner's virtual balance share one transaction.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.engine import Engine, RowMapping

from app.domain.trading.entities import MarketType, Trade, TradeStatus, TradeType
from app.domain.trading.ports import TradeClosure, TradeRepository
from app.infrastructure.database import as_utc, trades, users

logger = logging.getLogger(__name__)


def _decimal(value) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


def _row_to_trade(row: RowMapping) -> Trade:
    return Trade(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        symbol=row["symbol"],
        type=TradeType(row["type"]),
        status=TradeStatus(row["status"]),
        market_type=MarketType(row["market_type"]),
        quantity=Decimal(row["quantity"]),
        entry_price=Decimal(row["entry_price"]),
        entry_date=as_utc(row["entry_date"]),
        exit_price=_decimal(row["exit_price"]),
        exit_date=as_utc(row["exit_date"]),
        pnl=_decimal(row["pnl"]),
        stop_loss=_decimal(row["stop_loss"]),
        take_profit=_decimal(row["take_profit"]),
        notes=row["notes"],
        strategy=row["strategy"],
        emotion=row["emotion"],
    )


class TradeRepositoryAdapter(TradeRepository):
    """SQLAlchemy adapter for the ``trades`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, trade: Trade) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                trades.insert().values(
                    id=str(trade.id),
                    user_id=str(trade.user_id),
                    symbol=trade.symbol,
                    type=trade.type.value,
                    status=trade.status.value,
                    market_type=trade.market_type.value,
                    quantity=trade.quantity,
                    entry_price=trade.entry_price,
                    entry_date=trade.entry_date,
                    exit_price=trade.exit_price,
                    exit_date=trade.exit_date,
                    pnl=trade.pnl,
                    stop_loss=trade.stop_loss,
                    take_profit=trade.take_profit,
                    notes=trade.notes,
                    strategy=trade.strategy,
                    emotion=trade.emotion,
                )
            )
        logger.debug("Saved trade id=%s symbol=%s", trade.id, trade.symbol)

    def _fetch(self, stmt) -> list[Trade]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_trade(r) for r in rows]

    def get(self, trade_id: UUID) -> Optional[Trade]:
        found = self._fetch(select(trades).where(trades.c.id == str(trade_id)))
        return found[0] if found else None

    def list_for_user(
        self, user_id: UUID, market_type: MarketType = MarketType.SIMULATOR
    ) -> list[Trade]:
        return self._fetch(
            select(trades)
            .where(trades.c.user_id == str(user_id))
            .where(trades.c.market_type == market_type.value)
            .order_by(trades.c.entry_date.desc())
        )

    def list_open(
        self, user_id: Optional[UUID] = None, symbol: Optional[str] = None
    ) -> list[Trade]:
        stmt = select(trades).where(trades.c.status == TradeStatus.OPEN.value)
        if user_id is not None:
            stmt = stmt.where(trades.c.user_id == str(user_id))
        if symbol is not None:
            stmt = stmt.where(trades.c.symbol == symbol)
        return self._fetch(stmt.order_by(trades.c.entry_date))

    def list_closed(
        self, user_id: Optional[UUID] = None, since: Optional[datetime] = None
    ) -> list[Trade]:
        stmt = select(trades).where(trades.c.status == TradeStatus.CLOSED.value)
        if user_id is not None:
            stmt = stmt.where(trades.c.user_id == str(user_id))
        if since is not None:
            stmt = stmt.where(trades.c.exit_date >= since)
        return self._fetch(stmt.order_by(trades.c.exit_date))

    def close_many(self, closures: list[TradeClosure]) -> int:
        if not closures:
            return 0

        closed = 0
        with self._engine.begin() as conn:
            for closure in closures:
                result = conn.execute(
                    update(trades)
                    .where(trades.c.id == str(closure.trade_id))
                    .where(trades.c.status == TradeStatus.OPEN.value)
                    .values(
                        status=TradeStatus.CLOSED.value,
                        exit_price=closure.exit_price,
                        exit_date=closure.exit_date,
                        pnl=closure.pnl,
                    )
                )
                if result.rowcount == 0:
                    logger.warning("Trade %s was not open; skipping close", closure.trade_id)
                    continue
                conn.execute(
                    update(users)
                    .where(users.c.id == str(closure.user_id))
                    .values(virtual_balance=users.c.virtual_balance + closure.pnl)
                )
                closed += 1
        return closed

    def update_journal(
        self,
        trade_id: UUID,
        notes: Optional[str],
        strategy: Optional[str],
        emotion: Optional[str],
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(trades)
                .where(trades.c.id == str(trade_id))
                .values(notes=notes, strategy=strategy, emotion=emotion)
            )
