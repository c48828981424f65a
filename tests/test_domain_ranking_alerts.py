"""
Tests for leaderboard computations and price alert rules.

Pure domain functions; no database.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from app.domain.alerts.entities import PriceOperator
from app.domain.alerts.evaluator import parse_operator, parse_target_price, should_trigger
from app.domain.ranking.entities import RankingMarket, RankingPeriod, RankingSort, TraderSnapshot
from app.domain.ranking.leaderboard import (
    build_leaderboard,
    compute_monthly_rankings,
    previous_month,
    roi_percentage,
)

FALLBACK = Decimal("10000")


def _snapshot(name: str, balance: str, pnls: list, is_pro: bool = False) -> TraderSnapshot:
    return TraderSnapshot(
        user_id=uuid4(),
        nickname=name,
        balance=Decimal(balance),
        is_pro=is_pro,
        pnls=[Decimal(str(p)) for p in pnls],
    )


# ══════════════════════════════════════════════════════════════════════
# Live leaderboard
# ══════════════════════════════════════════════════════════════════════


class TestLeaderboard:
    def test_roi_uses_balance_minus_period_profit_as_start(self) -> None:
        board = build_leaderboard(
            [_snapshot("a", "12000", [2000])], RankingSort.ROI, FALLBACK
        )
        assert board.traders[0].roi == pytest.approx(20.0)
        assert board.traders[0].profit == 2000.0

    def test_non_positive_start_uses_fallback(self) -> None:
        board = build_leaderboard(
            [_snapshot("a", "500", [1000])], RankingSort.ROI, FALLBACK
        )
        assert board.traders[0].roi == pytest.approx(-95.0)

    def test_sorting_and_positions(self) -> None:
        steady = _snapshot("steady", "10100", [10] * 10)
        lucky = _snapshot("lucky", "15000", [6000, -1000])
        idle = _snapshot("idle", "10000", [])

        by_roi = build_leaderboard([steady, lucky, idle], RankingSort.ROI, FALLBACK)
        assert [e.nickname for e in by_roi.traders] == ["lucky", "steady", "idle"]
        assert [e.position for e in by_roi.traders] == [1, 2, 3]

        by_consistency = build_leaderboard(
            [lucky, idle, steady], RankingSort.CONSISTENCY, FALLBACK
        )
        assert by_consistency.traders[0].nickname == "steady"

    def test_badges(self) -> None:
        star = _snapshot("star", "30000", [5000] * 6, is_pro=True)
        board = build_leaderboard([star], RankingSort.PROFIT, FALLBACK)
        entry = board.traders[0]
        assert set(entry.badges) == {"proTrader", "streak", "top10"}
        assert entry.plan == "pro"

    def test_current_user_is_flagged(self) -> None:
        me = _snapshot("me", "10000", [])
        board = build_leaderboard(
            [_snapshot("x", "11000", [1000]), me],
            RankingSort.ROI,
            FALLBACK,
            current_user_id=me.user_id,
        )
        assert board.current_user is not None
        assert board.current_user.is_current_user
        assert board.current_user.position == 2

    def test_metrics_only_average_traders_with_trades(self) -> None:
        board = build_leaderboard(
            [_snapshot("a", "11000", [1000]), _snapshot("b", "10000", [])],
            RankingSort.ROI,
            FALLBACK,
        )
        assert board.metrics.total_traders == 2
        assert board.metrics.avg_roi == pytest.approx(10.0)
        assert board.metrics.avg_win_rate == pytest.approx(100.0)
        assert board.metrics.top_trader_name == "a"

    def test_total_counts_hidden_accounts(self) -> None:
        board = build_leaderboard(
            [_snapshot("a", "11000", [1000])], RankingSort.ROI, FALLBACK, total_users=3
        )
        assert len(board.traders) == 1
        assert board.metrics.total_traders == 3

    def test_empty_board(self) -> None:
        board = build_leaderboard([], RankingSort.ROI, FALLBACK)
        assert board.traders == []
        assert board.metrics.top_trader_name == "-"

    def test_period_and_market_flags(self) -> None:
        assert RankingPeriod.ALL.window is None
        assert RankingPeriod.WEEK.window.days == 7
        assert RankingMarket.ALL.includes_spot and RankingMarket.ALL.includes_futures
        assert not RankingMarket.FUTURES.includes_spot


# ══════════════════════════════════════════════════════════════════════
# Monthly ranking
# ══════════════════════════════════════════════════════════════════════


class TestMonthlyRanking:
    def test_previous_month_wraps_year(self) -> None:
        assert previous_month(date(2024, 1, 1)) == (2023, 12)
        assert previous_month(date(2024, 7, 1)) == (2024, 6)

    def test_ranks_by_roi(self) -> None:
        a, b = uuid4(), uuid4()
        rankings = compute_monthly_rankings(
            [
                (a, Decimal("10000"), Decimal("9000")),
                (b, Decimal("0"), Decimal("12000")),
            ],
            year=2024,
            month=5,
            fallback_start=FALLBACK,
        )
        assert [r.user_id for r in rankings] == [b, a]
        assert [r.rank_position for r in rankings] == [1, 2]
        assert rankings[0].roi_percentage == pytest.approx(20.0)
        assert rankings[1].roi_percentage == pytest.approx(-10.0)

    def test_roi_percentage(self) -> None:
        assert roi_percentage(Decimal("150"), Decimal("100"), FALLBACK) == 50.0


# ══════════════════════════════════════════════════════════════════════
# Price alert rules
# ══════════════════════════════════════════════════════════════════════


class TestAlertEvaluator:
    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", "Infinity"])
    def test_invalid_targets(self, raw) -> None:
        assert parse_target_price(raw) is None

    def test_numeric_targets(self) -> None:
        assert parse_target_price("101.5") == Decimal("101.5")
        assert parse_target_price(42) == Decimal("42")

    def test_operator_parsing(self) -> None:
        assert parse_operator("gt") is PriceOperator.GREATER_THAN
        assert parse_operator("ge") is None

    def test_trigger_is_strict(self) -> None:
        target = Decimal("100")
        assert should_trigger(Decimal("101"), target, PriceOperator.GREATER_THAN)
        assert not should_trigger(target, target, PriceOperator.GREATER_THAN)
        assert should_trigger(Decimal("99"), target, PriceOperator.LESS_THAN)
        assert not should_trigger(target, target, PriceOperator.LESS_THAN)
