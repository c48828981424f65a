"""
Data Transfer Objects for the ranking application layer.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from app.domain.ranking.entities import RankingMarket, RankingPeriod, RankingSort


@dataclass(frozen=True)
class LeaderboardQuery:
    """Input DTO for the live leaderboard.

    Attributes:
        current_user_id: Signed-in user, always included in the ranking.
        period: Look-back window of realized PnL.
        market: Spot trades, futures positions or both.
        sort: Ranking criterion.
    """

    current_user_id: Optional[UUID] = None
    period: RankingPeriod = RankingPeriod.MONTH
    market: RankingMarket = RankingMarket.SPOT
    sort: RankingSort = RankingSort.ROI


@dataclass(frozen=True)
class MonthlyCloseResult:
    year: int
    month: int
    ranked_users: int
