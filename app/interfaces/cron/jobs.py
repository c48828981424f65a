"""
Composition of the batch jobs.

Each job is a zero-argument callable returning its summary dataclass.
The same mapping backs the cron endpoints and the in-process scheduler.
"""

from datetime import datetime, timezone
from typing import Any, Callable

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.alerts.process_alerts import ProcessAlertsUseCase
from app.application.ranking.close_monthly_ranking import CloseMonthlyRankingUseCase
from app.application.trading.liquidate_positions import LiquidatePositionsUseCase
from app.application.trading.process_trade_exits import ProcessTradeExitsUseCase
from app.core.config import settings
from app.domain.alerts.ports import AlertNotifier
from app.domain.trading.ports import PriceFeed
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.infrastructure.alerts.alert_repository import AlertRepositoryAdapter
from app.infrastructure.ranking.monthly_ranking_repository import (
    MonthlyRankingRepositoryAdapter,
)
from app.infrastructure.scheduler import (
    ALERTS_JOB,
    LIQUIDATION_JOB,
    MONTHLY_RESET_JOB,
    TRADE_EXITS_JOB,
)
from app.infrastructure.trading.futures_position_repository import (
    FuturesPositionRepositoryAdapter,
)
from app.infrastructure.trading.trade_repository import TradeRepositoryAdapter
from app.interfaces.dependencies import get_engine, get_notifier, get_price_feed


def build_batch_jobs(
    engine: Engine, price_feed: PriceFeed, notifier: AlertNotifier
) -> dict[str, Callable[[], Any]]:
    """Wire every batch use case to the given infrastructure."""
    user_repo = UserRepositoryAdapter(engine)

    liquidate = LiquidatePositionsUseCase(
        position_repo=FuturesPositionRepositoryAdapter(engine),
        price_feed=price_feed,
    )
    trade_exits = ProcessTradeExitsUseCase(
        trade_repo=TradeRepositoryAdapter(engine), price_feed=price_feed
    )
    alerts = ProcessAlertsUseCase(
        alert_repo=AlertRepositoryAdapter(engine),
        user_repo=user_repo,
        price_feed=price_feed,
        notifier=notifier,
    )
    monthly_close = CloseMonthlyRankingUseCase(
        user_repo=user_repo,
        ranking_repo=MonthlyRankingRepositoryAdapter(engine),
        initial_balance=settings.initial_virtual_balance,
    )

    return {
        LIQUIDATION_JOB: liquidate.execute,
        TRADE_EXITS_JOB: trade_exits.execute,
        ALERTS_JOB: alerts.execute,
        MONTHLY_RESET_JOB: lambda: monthly_close.execute(
            datetime.now(timezone.utc).date()
        ),
    }


def get_batch_jobs(
    engine: Engine = Depends(get_engine),
    price_feed: PriceFeed = Depends(get_price_feed),
    notifier: AlertNotifier = Depends(get_notifier),
) -> dict[str, Callable[[], Any]]:
    return build_batch_jobs(engine, price_feed, notifier)
