"""
Dependency injection for the ranking bounded context.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.ranking.get_hall_of_fame import GetHallOfFameUseCase
from app.application.ranking.get_leaderboard import GetLeaderboardUseCase
from app.core.config import settings
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.infrastructure.ranking.monthly_ranking_repository import (
    MonthlyRankingRepositoryAdapter,
)
from app.infrastructure.trading.futures_position_repository import (
    FuturesPositionRepositoryAdapter,
)
from app.infrastructure.trading.trade_repository import TradeRepositoryAdapter
from app.interfaces.dependencies import get_engine


def get_leaderboard_use_case(
    engine: Engine = Depends(get_engine),
) -> GetLeaderboardUseCase:
    return GetLeaderboardUseCase(
        user_repo=UserRepositoryAdapter(engine),
        trade_repo=TradeRepositoryAdapter(engine),
        position_repo=FuturesPositionRepositoryAdapter(engine),
        initial_balance=settings.initial_virtual_balance,
    )


def get_hall_of_fame_use_case(
    engine: Engine = Depends(get_engine),
) -> GetHallOfFameUseCase:
    return GetHallOfFameUseCase(ranking_repo=MonthlyRankingRepositoryAdapter(engine))

