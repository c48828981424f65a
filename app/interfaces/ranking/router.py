"""
FastAPI router for the ranking bounded context.

The leaderboard and hall of fame are public; a signed-in caller is
highlighted and always ranked even when hidden from the ranking.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.application.ranking.dtos import LeaderboardQuery
from app.application.ranking.get_hall_of_fame import GetHallOfFameUseCase
from app.application.ranking.get_leaderboard import GetLeaderboardUseCase
from app.domain.accounts.entities import User
from app.domain.ranking.entities import RankingMarket, RankingPeriod, RankingSort
from app.interfaces.dependencies import get_optional_user
from app.interfaces.ranking.dependencies import (
    get_hall_of_fame_use_case,
    get_leaderboard_use_case,
)
from app.interfaces.ranking.schemas import HallOfFameEntryResponse, LeaderboardResponse

router = APIRouter(prefix="/ranking", tags=["ranking"])


@router.get(
    "/leaderboard",
    response_model=LeaderboardResponse,
    summary="Live leaderboard",
    description="Traders ranked by ROI, profit or consistency over a period.",
)
def get_leaderboard(
    period: RankingPeriod = Query(RankingPeriod.MONTH),
    market: RankingMarket = Query(RankingMarket.SPOT),
    sort: RankingSort = Query(RankingSort.ROI),
    user: Optional[User] = Depends(get_optional_user),
    use_case: GetLeaderboardUseCase = Depends(get_leaderboard_use_case),
) -> LeaderboardResponse:
    leaderboard = use_case.execute(
        LeaderboardQuery(
            current_user_id=user.id if user else None,
            period=period,
            market=market,
            sort=sort,
        )
    )
    return LeaderboardResponse.model_validate(leaderboard)


@router.get(
    "/hall-of-fame",
    response_model=list[HallOfFameEntryResponse],
    summary="Closed monthly rankings",
)
def get_hall_of_fame(
    limit_per_month: Optional[int] = Query(None, ge=1, le=100),
    use_case: GetHallOfFameUseCase = Depends(get_hall_of_fame_use_case),
) -> list[HallOfFameEntryResponse]:
    return [
        HallOfFameEntryResponse.model_validate(e)
        for e in use_case.execute(limit_per_month)
    ]
