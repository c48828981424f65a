"""
Use case: Close the monthly ranking.

Input: the current date; the month before it is closed
Output: MonthlyCloseResult
Side effects: Stores one ranking row per user and rolls every user's
    monthly starting balance to the current balance, atomically.
Failure cases: RankingAlreadyClosedError.
"""

import logging
from datetime import date
from decimal import Decimal

from app.application.ranking.dtos import MonthlyCloseResult
from app.domain.accounts.ports import UserRepository
from app.domain.ranking.errors import RankingAlreadyClosedError
from app.domain.ranking.leaderboard import compute_monthly_rankings, previous_month
from app.domain.ranking.ports import MonthlyRankingRepository

logger = logging.getLogger(__name__)


class CloseMonthlyRankingUseCase:
    def __init__(
        self,
        user_repo: UserRepository,
        ranking_repo: MonthlyRankingRepository,
        initial_balance: Decimal,
    ) -> None:
        self._user_repo = user_repo
        self._ranking_repo = ranking_repo
        self._initial_balance = initial_balance

    def execute(self, today: date) -> MonthlyCloseResult:
        year, month = previous_month(today)
        if self._ranking_repo.exists(year, month):
            raise RankingAlreadyClosedError(month, year)

        users = self._user_repo.list_all()
        rankings = compute_monthly_rankings(
            ((u.id, u.monthly_starting_balance, u.virtual_balance) for u in users),
            year=year,
            month=month,
            fallback_start=self._initial_balance,
        )
        self._ranking_repo.close_month(rankings)

        logger.info("Closed ranking %04d-%02d with %d users", year, month, len(rankings))
        return MonthlyCloseResult(year=year, month=month, ranked_users=len(rankings))
