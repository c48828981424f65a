"""
Adapter: Capital movement repository.

Implements CapitalMovementRepository port on the ``capital_movements`` table.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Engine

from app.domain.trading.entities import CapitalMovement, MovementType
from app.domain.trading.ports import CapitalMovementRepository
from app.infrastructure.database import as_utc, capital_movements


class CapitalMovementRepositoryAdapter(CapitalMovementRepository):
    """SQLAlchemy adapter for deposits and withdrawals."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def add(self, movement: CapitalMovement) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                capital_movements.insert().values(
                    id=str(movement.id),
                    user_id=str(movement.user_id),
                    amount=movement.amount,
                    type=movement.type.value,
                    date=as_utc(movement.date),
                )
            )

    def list_for_user(self, user_id: UUID) -> list[CapitalMovement]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(capital_movements)
                .where(capital_movements.c.user_id == str(user_id))
                .order_by(capital_movements.c.date)
            ).mappings().all()
        return [
            CapitalMovement(
                id=UUID(r["id"]),
                user_id=UUID(r["user_id"]),
                amount=Decimal(r["amount"]),
                type=MovementType(r["type"]),
                date=as_utc(r["date"]),
            )
            for r in rows
        ]
