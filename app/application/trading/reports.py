"""
Use cases: Performance reports of the signed-in user.

GetTradingStatsUseCase evaluates closed spot trades and finished
futures positions with the statistics engine. GetPortfolioChartUseCase
builds the portfolio value curve from spot trades and capital movements.
"""

from app.application.trading.dtos import (
    PortfolioChartQuery,
    StatsMarket,
    TradingStatsQuery,
)
from app.domain.trading.entities import ClosedResult, MarketType, TradeStatus
from app.domain.trading.portfolio_curve import PortfolioPoint, generate_portfolio_data
from app.domain.trading.ports import (
    CapitalMovementRepository,
    FuturesPositionRepository,
    TradeRepository,
)
from app.domain.trading.statistics import TradingStats, calculate_trading_stats


class GetTradingStatsUseCase:
    def __init__(
        self,
        trade_repo: TradeRepository,
        position_repo: FuturesPositionRepository,
    ) -> None:
        self._trade_repo = trade_repo
        self._position_repo = position_repo

    def execute(self, query: TradingStatsQuery) -> TradingStats:
        results: list[ClosedResult] = []

        if query.market in (StatsMarket.SPOT, StatsMarket.ALL):
            results.extend(
                ClosedResult(
                    pnl=t.pnl,
                    closed=t.status is TradeStatus.CLOSED,
                    exit_date=t.exit_date,
                    entry_date=t.entry_date,
                    symbol=t.symbol,
                )
                for t in self._trade_repo.list_for_user(query.user_id, MarketType.SIMULATOR)
            )

        if query.market in (StatsMarket.FUTURES, StatsMarket.ALL):
            results.extend(
                ClosedResult(
                    pnl=p.pnl,
                    closed=True,
                    exit_date=p.closed_at,
                    entry_date=p.created_at,
                    symbol=p.symbol,
                )
                for p in self._position_repo.list_closed(user_id=query.user_id)
            )

        return calculate_trading_stats(results)


class GetPortfolioChartUseCase:
    def __init__(
        self,
        trade_repo: TradeRepository,
        movement_repo: CapitalMovementRepository,
    ) -> None:
        self._trade_repo = trade_repo
        self._movement_repo = movement_repo

    def execute(self, query: PortfolioChartQuery) -> list[PortfolioPoint]:
        return generate_portfolio_data(
            trades=self._trade_repo.list_for_user(query.user_id, MarketType.SIMULATOR),
            movements=self._movement_repo.list_for_user(query.user_id),
            granularity=query.granularity,
            usdt_to_brl_rate=query.usdt_to_brl_rate,
        )
