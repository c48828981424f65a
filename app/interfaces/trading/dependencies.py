"""
Dependency injection for the trading bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the trading context.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.trading.capital_movements import (
    ListMovementsUseCase,
    RecordMovementUseCase,
)
from app.application.trading.futures_positions import (
    ClosePositionUseCase,
    ListOpenPositionsUseCase,
    ListPositionHistoryUseCase,
    OpenPositionUseCase,
    UpdatePositionJournalUseCase,
)
from app.application.trading.reports import (
    GetPortfolioChartUseCase,
    GetTradingStatsUseCase,
)
from app.application.trading.spot_trades import (
    CloseSymbolUseCase,
    CloseTradeUseCase,
    ListTradesUseCase,
    OpenTradeUseCase,
    UpdateTradeJournalUseCase,
)
from app.core.config import settings
from app.domain.trading.ports import PriceFeed
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.infrastructure.trading.capital_movement_repository import (
    CapitalMovementRepositoryAdapter,
)
from app.infrastructure.trading.futures_position_repository import (
    FuturesPositionRepositoryAdapter,
)
from app.infrastructure.trading.trade_repository import TradeRepositoryAdapter
from app.interfaces.dependencies import get_engine, get_price_feed


def get_open_trade_use_case(
    engine: Engine = Depends(get_engine),
    price_feed: PriceFeed = Depends(get_price_feed),
) -> OpenTradeUseCase:
    return OpenTradeUseCase(
        trade_repo=TradeRepositoryAdapter(engine),
        user_repo=UserRepositoryAdapter(engine),
        price_feed=price_feed,
    )


def get_list_trades_use_case(engine: Engine = Depends(get_engine)) -> ListTradesUseCase:
    return ListTradesUseCase(trade_repo=TradeRepositoryAdapter(engine))


def get_close_trade_use_case(
    engine: Engine = Depends(get_engine),
    price_feed: PriceFeed = Depends(get_price_feed),
) -> CloseTradeUseCase:
    return CloseTradeUseCase(trade_repo=TradeRepositoryAdapter(engine), price_feed=price_feed)


def get_close_symbol_use_case(
    engine: Engine = Depends(get_engine),
    price_feed: PriceFeed = Depends(get_price_feed),
) -> CloseSymbolUseCase:
    return CloseSymbolUseCase(trade_repo=TradeRepositoryAdapter(engine), price_feed=price_feed)


def get_trade_journal_use_case(
    engine: Engine = Depends(get_engine),
) -> UpdateTradeJournalUseCase:
    return UpdateTradeJournalUseCase(trade_repo=TradeRepositoryAdapter(engine))


def get_open_position_use_case(
    engine: Engine = Depends(get_engine),
) -> OpenPositionUseCase:
    return OpenPositionUseCase(
        position_repo=FuturesPositionRepositoryAdapter(engine),
        user_repo=UserRepositoryAdapter(engine),
        initial_balance=settings.initial_virtual_balance,
    )


def get_list_open_positions_use_case(
    engine: Engine = Depends(get_engine),
) -> ListOpenPositionsUseCase:
    return ListOpenPositionsUseCase(position_repo=FuturesPositionRepositoryAdapter(engine))


def get_position_history_use_case(
    engine: Engine = Depends(get_engine),
) -> ListPositionHistoryUseCase:
    return ListPositionHistoryUseCase(position_repo=FuturesPositionRepositoryAdapter(engine))


def get_close_position_use_case(
    engine: Engine = Depends(get_engine),
) -> ClosePositionUseCase:
    return ClosePositionUseCase(position_repo=FuturesPositionRepositoryAdapter(engine))


def get_position_journal_use_case(
    engine: Engine = Depends(get_engine),
) -> UpdatePositionJournalUseCase:
    return UpdatePositionJournalUseCase(position_repo=FuturesPositionRepositoryAdapter(engine))


def get_record_movement_use_case(
    engine: Engine = Depends(get_engine),
) -> RecordMovementUseCase:
    return RecordMovementUseCase(movement_repo=CapitalMovementRepositoryAdapter(engine))


def get_list_movements_use_case(
    engine: Engine = Depends(get_engine),
) -> ListMovementsUseCase:
    return ListMovementsUseCase(movement_repo=CapitalMovementRepositoryAdapter(engine))


def get_trading_stats_use_case(
    engine: Engine = Depends(get_engine),
) -> GetTradingStatsUseCase:
    return GetTradingStatsUseCase(
        trade_repo=TradeRepositoryAdapter(engine),
        position_repo=FuturesPositionRepositoryAdapter(engine),
    )


def get_portfolio_chart_use_case(
    engine: Engine = Depends(get_engine),
) -> GetPortfolioChartUseCase:
    return GetPortfolioChartUseCase(
        trade_repo=TradeRepositoryAdapter(engine),
        movement_repo=CapitalMovementRepositoryAdapter(engine),
    )
