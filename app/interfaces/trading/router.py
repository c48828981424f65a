"""
FastAPI routers for the trading bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

import math
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.application.trading.capital_movements import (
    ListMovementsUseCase,
    RecordMovementUseCase,
)
from app.application.trading.dtos import (
    ClosePositionCommand,
    JournalCommand,
    OpenPositionCommand,
    OpenTradeCommand,
    PortfolioChartQuery,
    RecordMovementCommand,
    StatsMarket,
    TradingStatsQuery,
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
from app.domain.accounts.entities import User
from app.domain.trading.portfolio_curve import Granularity
from app.domain.trading.statistics import TradingStats
from app.interfaces.dependencies import require_premium
from app.interfaces.trading.dependencies import (
    get_close_position_use_case,
    get_close_symbol_use_case,
    get_close_trade_use_case,
    get_list_movements_use_case,
    get_list_open_positions_use_case,
    get_list_trades_use_case,
    get_open_position_use_case,
    get_open_trade_use_case,
    get_portfolio_chart_use_case,
    get_position_history_use_case,
    get_position_journal_use_case,
    get_record_movement_use_case,
    get_trade_journal_use_case,
    get_trading_stats_use_case,
)
from app.interfaces.trading.schemas import (
    AggregatedPositionResponse,
    ClosePositionRequest,
    CloseSymbolRequest,
    CloseSymbolResponse,
    ErrorResponse,
    JournalRequest,
    MovementRequest,
    MovementResponse,
    OpenPositionRequest,
    OpenTradeRequest,
    PortfolioPointResponse,
    PositionResponse,
    TradeResponse,
    TradingStatsResponse,
)

simulator_user = require_premium("simulator")
futures_user = require_premium("futures")
reports_user = require_premium("reports")

simulator_router = APIRouter(prefix="/simulator", tags=["simulator"])
futures_router = APIRouter(prefix="/futures", tags=["futures"])
reports_router = APIRouter(prefix="/reports", tags=["reports"])

ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def _finite_or_none(value: float):
    return None if math.isinf(value) else value


def _stats_response(stats: TradingStats) -> TradingStatsResponse:
    return TradingStatsResponse(
        total_trades=stats.total_trades,
        win_rate=stats.win_rate,
        profit_factor=_finite_or_none(stats.profit_factor),
        payoff=_finite_or_none(stats.payoff),
        max_drawdown=stats.max_drawdown,
        total_profit=stats.total_profit,
        best_trade=stats.best_trade,
        worst_trade=stats.worst_trade,
        expectancy=stats.expectancy,
    )


# ── Spot simulator ──────────────────────────────────────────────────


@simulator_router.post(
    "/trades",
    response_model=TradeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ERRORS, 502: {"model": ErrorResponse}},
    summary="Open a simulator trade at the market price",
)
def open_trade(
    request: OpenTradeRequest,
    user: User = Depends(simulator_user),
    use_case: OpenTradeUseCase = Depends(get_open_trade_use_case),
) -> TradeResponse:
    trade = use_case.execute(
        OpenTradeCommand(
            user_id=user.id,
            symbol=request.symbol,
            quantity=request.quantity,
            type=request.type,
            stop_loss=request.stop_loss,
            take_profit=request.take_profit,
        )
    )
    return TradeResponse.model_validate(trade)


@simulator_router.get(
    "/trades", response_model=list[TradeResponse], summary="List simulator trades"
)
def list_trades(
    user: User = Depends(simulator_user),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
) -> list[TradeResponse]:
    return [TradeResponse.model_validate(t) for t in use_case.execute(user.id)]


@simulator_router.post(
    "/trades/{trade_id}/close",
    response_model=TradeResponse,
    responses={**ERRORS, 502: {"model": ErrorResponse}},
    summary="Close a trade at the market price",
)
def close_trade(
    trade_id: UUID,
    user: User = Depends(simulator_user),
    use_case: CloseTradeUseCase = Depends(get_close_trade_use_case),
) -> TradeResponse:
    return TradeResponse.model_validate(use_case.execute(user.id, trade_id))


@simulator_router.post(
    "/positions/close",
    response_model=CloseSymbolResponse,
    responses={**ERRORS, 502: {"model": ErrorResponse}},
    summary="Close every open trade on a symbol",
)
def close_symbol(
    request: CloseSymbolRequest,
    user: User = Depends(simulator_user),
    use_case: CloseSymbolUseCase = Depends(get_close_symbol_use_case),
) -> CloseSymbolResponse:
    return CloseSymbolResponse.model_validate(use_case.execute(user.id, request.symbol))


@simulator_router.put(
    "/trades/{trade_id}/journal",
    response_model=TradeResponse,
    responses=ERRORS,
    summary="Update the journal notes of a trade",
)
def update_trade_journal(
    trade_id: UUID,
    request: JournalRequest,
    user: User = Depends(simulator_user),
    use_case: UpdateTradeJournalUseCase = Depends(get_trade_journal_use_case),
) -> TradeResponse:
    trade = use_case.execute(
        JournalCommand(
            user_id=user.id,
            target_id=trade_id,
            notes=request.notes,
            strategy=request.strategy,
            emotion=request.emotion,
        )
    )
    return TradeResponse.model_validate(trade)


# ── Futures ─────────────────────────────────────────────────────────


@futures_router.post(
    "/positions",
    response_model=PositionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Open a leveraged position",
)
def open_position(
    request: OpenPositionRequest,
    user: User = Depends(futures_user),
    use_case: OpenPositionUseCase = Depends(get_open_position_use_case),
) -> PositionResponse:
    position = use_case.execute(
        OpenPositionCommand(
            user_id=user.id,
            symbol=request.symbol,
            side=request.side,
            quantity=request.quantity,
            leverage=request.leverage,
            entry_price=request.entry_price,
            stop_loss=request.stop_loss,
            take_profit=request.take_profit,
        )
    )
    return PositionResponse.model_validate(position)


@futures_router.get(
    "/positions",
    response_model=list[AggregatedPositionResponse],
    summary="Open positions grouped by symbol and side",
)
def list_open_positions(
    user: User = Depends(futures_user),
    use_case: ListOpenPositionsUseCase = Depends(get_list_open_positions_use_case),
) -> list[AggregatedPositionResponse]:
    return [AggregatedPositionResponse.model_validate(p) for p in use_case.execute(user.id)]


@futures_router.get(
    "/positions/history",
    response_model=list[PositionResponse],
    summary="Closed and liquidated positions",
)
def list_position_history(
    user: User = Depends(futures_user),
    use_case: ListPositionHistoryUseCase = Depends(get_position_history_use_case),
) -> list[PositionResponse]:
    return [PositionResponse.model_validate(p) for p in use_case.execute(user.id)]


@futures_router.post(
    "/positions/close",
    response_model=PositionResponse,
    responses=ERRORS,
    summary="Close a position at the given price",
)
def close_position(
    request: ClosePositionRequest,
    user: User = Depends(futures_user),
    use_case: ClosePositionUseCase = Depends(get_close_position_use_case),
) -> PositionResponse:
    position = use_case.execute(
        ClosePositionCommand(
            user_id=user.id,
            position_id=request.position_id,
            exit_price=request.exit_price,
        )
    )
    return PositionResponse.model_validate(position)


@futures_router.put(
    "/positions/{position_id}/journal",
    response_model=PositionResponse,
    responses=ERRORS,
    summary="Update the journal notes of a position",
)
def update_position_journal(
    position_id: UUID,
    request: JournalRequest,
    user: User = Depends(futures_user),
    use_case: UpdatePositionJournalUseCase = Depends(get_position_journal_use_case),
) -> PositionResponse:
    position = use_case.execute(
        JournalCommand(
            user_id=user.id,
            target_id=position_id,
            notes=request.notes,
            strategy=request.strategy,
            emotion=request.emotion,
        )
    )
    return PositionResponse.model_validate(position)


# ── Capital movements and reports ───────────────────────────────────


@reports_router.post(
    "/movements",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
    summary="Record a deposit or withdrawal",
)
def record_movement(
    request: MovementRequest,
    user: User = Depends(reports_user),
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> MovementResponse:
    movement = use_case.execute(
        RecordMovementCommand(
            user_id=user.id,
            amount=request.amount,
            type=request.type,
            date=request.date,
        )
    )
    return MovementResponse.model_validate(movement)


@reports_router.get(
    "/movements", response_model=list[MovementResponse], summary="List movements"
)
def list_movements(
    user: User = Depends(reports_user),
    use_case: ListMovementsUseCase = Depends(get_list_movements_use_case),
) -> list[MovementResponse]:
    return [MovementResponse.model_validate(m) for m in use_case.execute(user.id)]


@reports_router.get(
    "/stats",
    response_model=TradingStatsResponse,
    summary="Trading performance statistics",
)
def get_trading_stats(
    market: StatsMarket = Query(StatsMarket.ALL),
    user: User = Depends(reports_user),
    use_case: GetTradingStatsUseCase = Depends(get_trading_stats_use_case),
) -> TradingStatsResponse:
    stats = use_case.execute(TradingStatsQuery(user_id=user.id, market=market))
    return _stats_response(stats)


@reports_router.get(
    "/portfolio-chart",
    response_model=list[PortfolioPointResponse],
    summary="Portfolio value over time in BRL",
)
def get_portfolio_chart(
    granularity: Granularity = Query(Granularity.MONTHLY),
    usdt_to_brl_rate: Decimal = Query(Decimal("5"), gt=0),
    user: User = Depends(reports_user),
    use_case: GetPortfolioChartUseCase = Depends(get_portfolio_chart_use_case),
) -> list[PortfolioPointResponse]:
    points = use_case.execute(
        PortfolioChartQuery(
            user_id=user.id,
            granularity=granularity,
            usdt_to_brl_rate=usdt_to_brl_rate,
        )
    )
    return [PortfolioPointResponse(date=p.label, portfolio=p.value) for p in points]
