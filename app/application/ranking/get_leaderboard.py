"""
Use case: Live trading leaderboard.

Input: LeaderboardQuery (current user, period, market, sort)
Output: Leaderboard
Side effects: None (read-only query).
Failure cases: None.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from app.application.ranking.dtos import LeaderboardQuery
from app.domain.accounts.entities import PAID_STATUSES
from app.domain.accounts.ports import UserRepository
from app.domain.ranking.entities import Leaderboard, TraderSnapshot
from app.domain.ranking.leaderboard import build_leaderboard
from app.domain.trading.ports import FuturesPositionRepository, TradeRepository

logger = logging.getLogger(__name__)


class GetLeaderboardUseCase:
    """Rank visible traders by their realized PnL in a period.

    Users who hid themselves from the ranking are excluded, except the
    current user who always sees their own position.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        trade_repo: TradeRepository,
        position_repo: FuturesPositionRepository,
        initial_balance: Decimal,
    ) -> None:
        self._user_repo = user_repo
        self._trade_repo = trade_repo
        self._position_repo = position_repo
        self._initial_balance = initial_balance

    def execute(self, query: LeaderboardQuery) -> Leaderboard:
        window = query.period.window
        since = datetime.now(timezone.utc) - window if window else None

        pnls: dict[UUID, list[Decimal]] = defaultdict(list)
        if query.market.includes_spot:
            for trade in self._trade_repo.list_closed(since=since):
                if trade.pnl is not None:
                    pnls[trade.user_id].append(trade.pnl)
        if query.market.includes_futures:
            for position in self._position_repo.list_closed(since=since):
                if position.pnl is not None:
                    pnls[position.user_id].append(position.pnl)

        users = self._user_repo.list_all()
        snapshots = [
            TraderSnapshot(
                user_id=user.id,
                nickname=user.nickname,
                balance=user.virtual_balance,
                is_pro=user.subscription_status in PAID_STATUSES,
                pnls=pnls.get(user.id, []),
            )
            for user in users
            if user.ranking_visible or user.id == query.current_user_id
        ]
        logger.debug(
            "Leaderboard period=%s market=%s sort=%s traders=%d",
            query.period.value,
            query.market.value,
            query.sort.value,
            len(snapshots),
        )
        return build_leaderboard(
            snapshots,
            sort=query.sort,
            fallback_start=self._initial_balance,
            current_user_id=query.current_user_id,
            total_users=len(users),
        )
