"""
Adapter: Futures position repository.

Implements FuturesPositionRepository port. Margin debits and credits
are applied to ``users.virtual_balance`` in the same transaction as
the position change.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.engine import Engine, RowMapping

from app.domain.trading.entities import FuturesPosition, PositionSide, PositionStatus
from app.domain.trading.errors import InsufficientBalanceError, PositionNotFoundError
from app.domain.trading.ports import FuturesPositionRepository, LiquidationOutcome
from app.infrastructure.database import as_utc, futures_positions, users

logger = logging.getLogger(__name__)

_FINISHED = (PositionStatus.CLOSED.value, PositionStatus.LIQUIDATED.value)


def _decimal(value) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


def _row_to_position(row: RowMapping) -> FuturesPosition:
    return FuturesPosition(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        symbol=row["symbol"],
        side=PositionSide(row["side"]),
        quantity=Decimal(row["quantity"]),
        leverage=row["leverage"],
        entry_price=Decimal(row["entry_price"]),
        margin=Decimal(row["margin"]),
        liquidation_price=Decimal(row["liquidation_price"]),
        status=PositionStatus(row["status"]),
        stop_loss=_decimal(row["stop_loss"]),
        take_profit=_decimal(row["take_profit"]),
        pnl=_decimal(row["pnl"]),
        created_at=as_utc(row["created_at"]),
        closed_at=as_utc(row["closed_at"]),
        notes=row["notes"],
        strategy=row["strategy"],
        emotion=row["emotion"],
    )


class FuturesPositionRepositoryAdapter(FuturesPositionRepository):
    """SQLAlchemy adapter for the ``futures_positions`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def open(self, position: FuturesPosition) -> None:
        with self._engine.begin() as conn:
            debit = conn.execute(
                update(users)
                .where(users.c.id == str(position.user_id))
                .where(users.c.virtual_balance >= position.margin)
                .values(virtual_balance=users.c.virtual_balance - position.margin)
            )
            if debit.rowcount == 0:
                balance = conn.execute(
                    select(users.c.virtual_balance).where(
                        users.c.id == str(position.user_id)
                    )
                ).scalar()
                raise InsufficientBalanceError(str(position.margin), str(balance))

            conn.execute(
                futures_positions.insert().values(
                    id=str(position.id),
                    user_id=str(position.user_id),
                    symbol=position.symbol,
                    side=position.side.value,
                    quantity=position.quantity,
                    leverage=position.leverage,
                    entry_price=position.entry_price,
                    margin=position.margin,
                    liquidation_price=position.liquidation_price,
                    stop_loss=position.stop_loss,
                    take_profit=position.take_profit,
                    status=position.status.value,
                    pnl=position.pnl,
                    created_at=position.created_at,
                )
            )
        logger.info(
            "Opened futures position id=%s %s %s x%d",
            position.id,
            position.side.value,
            position.symbol,
            position.leverage,
        )

    def _fetch(self, stmt) -> list[FuturesPosition]:
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_position(r) for r in rows]

    def get(self, position_id: UUID) -> Optional[FuturesPosition]:
        found = self._fetch(
            select(futures_positions).where(futures_positions.c.id == str(position_id))
        )
        return found[0] if found else None

    def list_open(self, user_id: Optional[UUID] = None) -> list[FuturesPosition]:
        stmt = select(futures_positions).where(
            futures_positions.c.status == PositionStatus.OPEN.value
        )
        if user_id is not None:
            stmt = stmt.where(futures_positions.c.user_id == str(user_id))
        return self._fetch(stmt.order_by(futures_positions.c.created_at))

    def list_closed(
        self, user_id: Optional[UUID] = None, since: Optional[datetime] = None
    ) -> list[FuturesPosition]:
        stmt = select(futures_positions).where(
            futures_positions.c.status.in_(_FINISHED)
        )
        if user_id is not None:
            stmt = stmt.where(futures_positions.c.user_id == str(user_id))
        if since is not None:
            stmt = stmt.where(futures_positions.c.closed_at >= since)
        return self._fetch(stmt.order_by(futures_positions.c.closed_at))

    def close(
        self, position_id: UUID, pnl: Decimal, closed_at: datetime
    ) -> FuturesPosition:
        with self._engine.begin() as conn:
            row = conn.execute(
                select(futures_positions)
                .where(futures_positions.c.id == str(position_id))
                .where(futures_positions.c.status == PositionStatus.OPEN.value)
            ).mappings().first()
            if row is None:
                raise PositionNotFoundError(str(position_id))
            position = _row_to_position(row)

            conn.execute(
                update(futures_positions)
                .where(futures_positions.c.id == str(position_id))
                .values(status=PositionStatus.CLOSED.value, pnl=pnl, closed_at=closed_at)
            )
            conn.execute(
                update(users)
                .where(users.c.id == str(position.user_id))
                .values(virtual_balance=users.c.virtual_balance + position.margin + pnl)
            )

        position.status = PositionStatus.CLOSED
        position.pnl = pnl
        position.closed_at = closed_at
        return position

    def liquidate(
        self,
        position_ids: list[UUID],
        closed_at: datetime,
        bankruptcy_expiry: datetime,
    ) -> LiquidationOutcome:
        if not position_ids:
            return LiquidationOutcome(positions=[], bankrupt_user_ids=[])

        liquidated = []
        bankrupt = []
        with self._engine.begin() as conn:
            rows = conn.execute(
                select(futures_positions)
                .where(futures_positions.c.id.in_([str(i) for i in position_ids]))
                .where(futures_positions.c.status == PositionStatus.OPEN.value)
            ).mappings().all()
            for row in rows:
                position = _row_to_position(row)
                position.status = PositionStatus.LIQUIDATED
                position.pnl = -position.margin
                position.closed_at = closed_at
                conn.execute(
                    update(futures_positions)
                    .where(futures_positions.c.id == str(position.id))
                    .values(
                        status=PositionStatus.LIQUIDATED.value,
                        pnl=position.pnl,
                        closed_at=closed_at,
                    )
                )
                liquidated.append(position)

            for user_id in sorted({p.user_id for p in liquidated}, key=str):
                still_open = conn.execute(
                    select(func.count())
                    .select_from(futures_positions)
                    .where(futures_positions.c.user_id == str(user_id))
                    .where(futures_positions.c.status == PositionStatus.OPEN.value)
                ).scalar()
                balance = conn.execute(
                    select(users.c.virtual_balance).where(users.c.id == str(user_id))
                ).scalar()
                if still_open or balance is None or Decimal(balance) > 0:
                    continue
                conn.execute(
                    update(users)
                    .where(users.c.id == str(user_id))
                    .values(bankruptcy_expiry=bankruptcy_expiry)
                )
                bankrupt.append(user_id)
        return LiquidationOutcome(positions=liquidated, bankrupt_user_ids=bankrupt)

    def update_journal(
        self,
        position_id: UUID,
        notes: Optional[str],
        strategy: Optional[str],
        emotion: Optional[str],
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(futures_positions)
                .where(futures_positions.c.id == str(position_id))
                .values(notes=notes, strategy=strategy, emotion=emotion)
            )
