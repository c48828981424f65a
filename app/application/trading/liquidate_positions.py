"""
Use case: Liquidate futures positions that crossed their liquidation price.

Input: None (sweeps every open position)
Output: LiquidationResult
Side effects: Marks positions LIQUIDATED (pnl = -margin) and puts users
    left without balance and without open positions under the
    bankruptcy penalty until the first day of next month (UTC).
Failure cases: None raised; positions without a price are skipped.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.application.trading.dtos import LiquidationResult
from app.domain.trading.errors import PriceUnavailableError
from app.domain.trading.futures import should_liquidate
from app.domain.trading.ports import FuturesPositionRepository, PriceFeed

logger = logging.getLogger(__name__)


def first_day_of_next_month(now: datetime) -> datetime:
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)


class LiquidatePositionsUseCase:
    def __init__(
        self,
        position_repo: FuturesPositionRepository,
        price_feed: PriceFeed,
    ) -> None:
        self._position_repo = position_repo
        self._price_feed = price_feed

    def execute(self) -> LiquidationResult:
        open_positions = self._position_repo.list_open()
        if not open_positions:
            return LiquidationResult(checked=0, liquidated=0)

        prices: dict[str, Optional[Decimal]] = {}
        to_liquidate = []
        skipped = 0

        for position in open_positions:
            if position.symbol not in prices:
                try:
                    prices[position.symbol] = self._price_feed.get_futures_price(
                        position.symbol
                    )
                except PriceUnavailableError as exc:
                    logger.warning(
                        "Skipping liquidation check for %s: %s",
                        position.symbol,
                        exc.message,
                    )
                    prices[position.symbol] = None

            price = prices[position.symbol]
            if price is None:
                skipped += 1
                continue
            if should_liquidate(position, price):
                to_liquidate.append(position.id)

        now = datetime.now(timezone.utc)
        expires_at = first_day_of_next_month(now)
        outcome = self._position_repo.liquidate(to_liquidate, now, expires_at)
        liquidated = outcome.positions
        bankrupt = len(outcome.bankrupt_user_ids)
        for user_id in outcome.bankrupt_user_ids:
            logger.info("User id=%s bankrupt until %s", user_id, expires_at.date())

        logger.info(
            "Liquidation sweep: checked=%d liquidated=%d skipped=%d bankrupt=%d",
            len(open_positions),
            len(liquidated),
            skipped,
            bankrupt,
        )
        return LiquidationResult(
            checked=len(open_positions),
            liquidated=len(liquidated),
            skipped=skipped,
            bankrupt_users=bankrupt,
        )

