"""
Use case: Hall of fame of closed monthly rankings.

Input: optional number of places kept per month
Output: list[HallOfFameEntry], newest month first
Side effects: None (read-only query).
"""

from typing import Optional

from app.domain.ranking.entities import HallOfFameEntry
from app.domain.ranking.ports import MonthlyRankingRepository


class GetHallOfFameUseCase:
    def __init__(self, ranking_repo: MonthlyRankingRepository) -> None:
        self._ranking_repo = ranking_repo

    def execute(self, limit_per_month: Optional[int] = None) -> list[HallOfFameEntry]:
        return self._ranking_repo.hall_of_fame(max_rank=limit_per_month)
