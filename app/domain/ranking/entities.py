"""
Domain entities for the ranking bounded context.

They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class RankingPeriod(Enum):
    """Look-back window of the live leaderboard."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    ALL = "all"

    @property
    def window(self) -> Optional[timedelta]:
        days = {"7d": 7, "30d": 30, "90d": 90}.get(self.value)
        return timedelta(days=days) if days else None


class RankingMarket(Enum):
    SPOT = "spot"
    FUTURES = "futures"
    ALL = "all"

    @property
    def includes_spot(self) -> bool:
        return self in (RankingMarket.SPOT, RankingMarket.ALL)

    @property
    def includes_futures(self) -> bool:
        return self in (RankingMarket.FUTURES, RankingMarket.ALL)


class RankingSort(Enum):
    ROI = "roi"
    PROFIT = "profit"
    CONSISTENCY = "consistency"


class Badge(Enum):
    PRO_TRADER = "proTrader"
    STREAK = "streak"
    TOP10 = "top10"


@dataclass(frozen=True)
class TraderSnapshot:
    """Inputs of one trader for the live leaderboard."""

    user_id: UUID
    nickname: str
    balance: Decimal
    is_pro: bool
    pnls: list[Decimal]


@dataclass
class LeaderboardEntry:
    """A ranked trader on the live leaderboard."""

    user_id: UUID
    nickname: str
    roi: float
    profit: float
    trades: int
    win_rate: float
    plan: str
    badges: list[str] = field(default_factory=list)
    position: int = 0
    is_current_user: bool = False


@dataclass(frozen=True)
class LeaderboardMetrics:
    total_traders: int
    avg_roi: float
    avg_win_rate: float
    top_trader_name: str
    top_trader_roi: float


@dataclass(frozen=True)
class Leaderboard:
    traders: list[LeaderboardEntry]
    current_user: Optional[LeaderboardEntry]
    metrics: LeaderboardMetrics


@dataclass(frozen=True)
class MonthlyRanking:
    """Frozen result of one user for a closed month."""

    user_id: UUID
    month: int
    year: int
    starting_balance: Decimal
    final_balance: Decimal
    roi_percentage: float
    rank_position: int
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class HallOfFameEntry:
    """A monthly ranking row joined with the public user fields."""

    user_id: UUID
    username: Optional[str]
    month: int
    year: int
    roi_percentage: float
    rank_position: int
    final_balance: Decimal
