"""
Use case: Close spot trades that reached their stop loss or take profit.

Input: None (sweeps every open simulator trade)
Output: ProcessTradeExitsResult
Side effects: Closes the matching trades and credits their PnL.
Failure cases: None raised; price errors are collected per trade.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.application.trading.dtos import ProcessTradeExitsResult
from app.domain.trading.errors import PriceUnavailableError
from app.domain.trading.futures import should_exit, trade_pnl
from app.domain.trading.ports import PriceFeed, TradeClosure, TradeRepository

logger = logging.getLogger(__name__)


class ProcessTradeExitsUseCase:
    """Batch sweep run by the scheduler and the cron endpoint.

    Prices are fetched once per symbol per run.
    """

    def __init__(self, trade_repo: TradeRepository, price_feed: PriceFeed) -> None:
        self._trade_repo = trade_repo
        self._price_feed = price_feed

    def execute(self) -> ProcessTradeExitsResult:
        open_trades = self._trade_repo.list_open()
        prices: dict[str, Optional[Decimal]] = {}
        errors: list[str] = []
        closures: list[TradeClosure] = []
        now = datetime.now(timezone.utc)

        for trade in open_trades:
            if trade.stop_loss is None and trade.take_profit is None:
                continue

            if trade.symbol not in prices:
                try:
                    prices[trade.symbol] = self._price_feed.get_spot_price(trade.symbol)
                except PriceUnavailableError as exc:
                    logger.warning("No price for %s: %s", trade.symbol, exc.message)
                    prices[trade.symbol] = None

            price = prices[trade.symbol]
            if price is None:
                errors.append(f"Trade {trade.id}: price unavailable for {trade.symbol}")
                continue

            if should_exit(trade, price):
                closures.append(
                    TradeClosure(
                        trade_id=trade.id,
                        user_id=trade.user_id,
                        exit_price=price,
                        exit_date=now,
                        pnl=trade_pnl(trade.type, trade.entry_price, price, trade.quantity),
                    )
                )

        closed = self._trade_repo.close_many(closures)
        logger.info(
            "Trade exit sweep: processed=%d closed=%d errors=%d",
            len(open_trades),
            closed,
            len(errors),
        )
        return ProcessTradeExitsResult(
            processed=len(open_trades), closed=closed, errors=errors
        )
