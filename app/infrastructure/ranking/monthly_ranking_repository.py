"""
Adapter: Monthly ranking history.

Implements MonthlyRankingRepository port. Closing a month inserts the
ranking snapshot and rolls every user's monthly starting balance in a
single transaction.
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.engine import Engine

from app.domain.ranking.entities import HallOfFameEntry, MonthlyRanking
from app.domain.ranking.ports import MonthlyRankingRepository
from app.infrastructure.database import monthly_rankings, users

logger = logging.getLogger(__name__)


class MonthlyRankingRepositoryAdapter(MonthlyRankingRepository):
    """SQLAlchemy adapter for the ``monthly_rankings`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def exists(self, year: int, month: int) -> bool:
        with self._engine.connect() as conn:
            found = conn.execute(
                select(monthly_rankings.c.id)
                .where(monthly_rankings.c.year == year)
                .where(monthly_rankings.c.month == month)
                .limit(1)
            ).first()
        return found is not None

    def close_month(self, rankings: list[MonthlyRanking]) -> None:
        with self._engine.begin() as conn:
            if rankings:
                conn.execute(
                    monthly_rankings.insert(),
                    [
                        {
                            "id": str(r.id),
                            "user_id": str(r.user_id),
                            "month": r.month,
                            "year": r.year,
                            "starting_balance": r.starting_balance,
                            "final_balance": r.final_balance,
                            "roi_percentage": Decimal(str(round(r.roi_percentage, 6))),
                            "rank_position": r.rank_position,
                        }
                        for r in rankings
                    ],
                )
            conn.execute(
                update(users).values(monthly_starting_balance=users.c.virtual_balance)
            )
        logger.info("Stored %d monthly ranking rows", len(rankings))

    def hall_of_fame(self, max_rank: Optional[int] = None) -> list[HallOfFameEntry]:
        stmt = (
            select(
                monthly_rankings.c.user_id,
                monthly_rankings.c.month,
                monthly_rankings.c.year,
                monthly_rankings.c.roi_percentage,
                monthly_rankings.c.rank_position,
                monthly_rankings.c.final_balance,
                users.c.username,
            )
            .join(users, users.c.id == monthly_rankings.c.user_id)
            .order_by(
                monthly_rankings.c.year.desc(),
                monthly_rankings.c.month.desc(),
                monthly_rankings.c.rank_position,
            )
        )
        if max_rank is not None:
            stmt = stmt.where(monthly_rankings.c.rank_position <= max_rank)

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [
            HallOfFameEntry(
                user_id=UUID(r["user_id"]),
                username=r["username"],
                month=r["month"],
                year=r["year"],
                roi_percentage=float(r["roi_percentage"]),
                rank_position=r["rank_position"],
                final_balance=Decimal(r["final_balance"]),
            )
            for r in rows
        ]
