"""
Leaderboard and monthly ranking computations.

Pure functions over pre-fetched balances and realized PnL.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from app.domain.ranking.entities import (
    Badge,
    Leaderboard,
    LeaderboardEntry,
    LeaderboardMetrics,
    MonthlyRanking,
    RankingSort,
    TraderSnapshot,
)

PAGE_SIZE = 50
METRICS_SAMPLE = 100
TOP_BADGE_POSITIONS = 10


def roi_percentage(balance: Decimal, start: Decimal, fallback: Decimal) -> float:
    """ROI of ``balance`` over ``start``; a non-positive start uses ``fallback``."""
    base = start if start > 0 else fallback
    return float((balance - base) / base * 100)


def _entry(snapshot: TraderSnapshot, fallback_start: Decimal) -> LeaderboardEntry:
    profit = sum(snapshot.pnls, Decimal("0"))
    wins = sum(1 for pnl in snapshot.pnls if pnl > 0)
    trades = len(snapshot.pnls)

    roi = roi_percentage(snapshot.balance, snapshot.balance - profit, fallback_start)
    win_rate = wins / trades * 100 if trades else 0.0

    badges = []
    if roi > 50:
        badges.append(Badge.PRO_TRADER.value)
    if win_rate > 70 and trades > 5:
        badges.append(Badge.STREAK.value)

    return LeaderboardEntry(
        user_id=snapshot.user_id,
        nickname=snapshot.nickname,
        roi=roi,
        profit=float(profit),
        trades=trades,
        win_rate=win_rate,
        plan="pro" if snapshot.is_pro else "free",
        badges=badges,
    )


def _sort_key(sort: RankingSort):
    if sort is RankingSort.PROFIT:
        return lambda e: -e.profit
    if sort is RankingSort.CONSISTENCY:
        return lambda e: (-e.win_rate, -e.trades)
    return lambda e: -e.roi


def _average(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def build_leaderboard(
    snapshots: Iterable[TraderSnapshot],
    sort: RankingSort,
    fallback_start: Decimal,
    current_user_id: Optional[UUID] = None,
    total_users: Optional[int] = None,
) -> Leaderboard:
    """Rank traders by ROI, profit or consistency.

    The estimated starting balance of the period is the current balance
    minus the period profit. Consistency ranks by win rate and breaks
    ties by number of trades. ``total_users`` counts every account on the
    platform, hidden ones included; it defaults to the ranked traders.
    """
    snapshots = list(snapshots)
    entries = sorted(
        (_entry(s, fallback_start) for s in snapshots), key=_sort_key(sort)
    )

    current = None
    for index, entry in enumerate(entries):
        entry.position = index + 1
        if entry.position <= TOP_BADGE_POSITIONS:
            entry.badges.append(Badge.TOP10.value)
        if current_user_id is not None and entry.user_id == current_user_id:
            entry.is_current_user = True
            current = entry

    sample = [e for e in entries if e.trades > 0][:METRICS_SAMPLE]
    top = entries[0] if entries else None
    metrics = LeaderboardMetrics(
        total_traders=len(snapshots) if total_users is None else total_users,
        avg_roi=_average([e.roi for e in sample]),
        avg_win_rate=_average([e.win_rate for e in sample]),
        top_trader_name=top.nickname if top else "-",
        top_trader_roi=top.roi if top else 0.0,
    )
    return Leaderboard(traders=entries[:PAGE_SIZE], current_user=current, metrics=metrics)


def previous_month(today: date) -> tuple[int, int]:
    """Return (year, month) of the month before ``today``."""
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def compute_monthly_rankings(
    balances: Iterable[tuple[UUID, Decimal, Decimal]],
    year: int,
    month: int,
    fallback_start: Decimal,
) -> list[MonthlyRanking]:
    """Rank users by ROI of their balance over the monthly starting balance.

    Args:
        balances: (user_id, monthly_starting_balance, virtual_balance) tuples.
        year: Year of the month being closed.
        month: Month being closed (1-12).
        fallback_start: Starting balance used when the stored one is <= 0.
    """
    rows = [
        (user_id, start, current, roi_percentage(current, start, fallback_start))
        for user_id, start, current in balances
    ]
    rows.sort(key=lambda row: -row[3])
    return [
        MonthlyRanking(
            user_id=user_id,
            month=month,
            year=year,
            starting_balance=start,
            final_balance=current,
            roi_percentage=roi,
            rank_position=index + 1,
        )
        for index, (user_id, start, current, roi) in enumerate(rows)
    ]
