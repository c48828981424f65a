"""
Use cases: Spot simulator trades.

Opening a trade quotes the symbol through the PriceFeed and checks the
cost against the virtual balance without debiting it. Closing a trade
credits its realized PnL to the balance in the same transaction as the
trade update.

Failure cases: TradeNotFoundError, TradeOwnershipError,
    TradeAlreadyClosedError, InsufficientBalanceError, InvalidOrderError,
    PriceUnavailableError, UserNotFoundError.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from app.application.trading.dtos import (
    CloseSymbolResult,
    JournalCommand,
    OpenTradeCommand,
)
from app.domain.accounts.errors import UserNotFoundError
from app.domain.accounts.ports import UserRepository
from app.domain.trading.entities import MarketType, Trade
from app.domain.trading.errors import (
    InsufficientBalanceError,
    InvalidOrderError,
    TradeAlreadyClosedError,
    TradeNotFoundError,
    TradeOwnershipError,
)
from app.domain.trading.futures import trade_pnl
from app.domain.trading.ports import PriceFeed, TradeClosure, TradeRepository

logger = logging.getLogger(__name__)


def normalize_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not cleaned:
        raise InvalidOrderError("symbol is required")
    return cleaned


def load_owned_trade(trade_repo: TradeRepository, user_id: UUID, trade_id: UUID) -> Trade:
    trade = trade_repo.get(trade_id)
    if trade is None:
        raise TradeNotFoundError(str(trade_id))
    if trade.user_id != user_id:
        raise TradeOwnershipError(str(trade_id))
    return trade


class OpenTradeUseCase:
    """Open a BUY or SELL trade at the current market price."""

    def __init__(
        self,
        trade_repo: TradeRepository,
        user_repo: UserRepository,
        price_feed: PriceFeed,
    ) -> None:
        self._trade_repo = trade_repo
        self._user_repo = user_repo
        self._price_feed = price_feed

    def execute(self, command: OpenTradeCommand) -> Trade:
        if command.quantity <= 0:
            raise InvalidOrderError("quantity must be positive")
        symbol = normalize_symbol(command.symbol)

        user = self._user_repo.get_by_id(command.user_id)
        if user is None:
            raise UserNotFoundError(str(command.user_id))

        price = self._price_feed.get_spot_price(symbol)
        cost = command.quantity * price
        if cost > user.virtual_balance:
            raise InsufficientBalanceError(str(cost), str(user.virtual_balance))

        trade = Trade(
            user_id=user.id,
            symbol=symbol,
            type=command.type,
            quantity=command.quantity,
            entry_price=price,
            entry_date=datetime.now(timezone.utc),
            market_type=MarketType.SIMULATOR,
            stop_loss=command.stop_loss,
            take_profit=command.take_profit,
        )
        self._trade_repo.add(trade)
        logger.info(
            "Opened trade id=%s %s %s qty=%s @ %s",
            trade.id,
            trade.type.value,
            symbol,
            command.quantity,
            price,
        )
        return trade


class ListTradesUseCase:
    def __init__(self, trade_repo: TradeRepository) -> None:
        self._trade_repo = trade_repo

    def execute(self, user_id: UUID) -> list[Trade]:
        return self._trade_repo.list_for_user(user_id, MarketType.SIMULATOR)


class CloseTradeUseCase:
    """Close one open trade at the current market price."""

    def __init__(self, trade_repo: TradeRepository, price_feed: PriceFeed) -> None:
        self._trade_repo = trade_repo
        self._price_feed = price_feed

    def execute(self, user_id: UUID, trade_id: UUID) -> Trade:
        trade = load_owned_trade(self._trade_repo, user_id, trade_id)
        if not trade.is_open:
            raise TradeAlreadyClosedError(str(trade_id))

        exit_price = self._price_feed.get_spot_price(trade.symbol)
        pnl = trade_pnl(trade.type, trade.entry_price, exit_price, trade.quantity)
        exit_date = datetime.now(timezone.utc)

        closed = self._trade_repo.close_many(
            [
                TradeClosure(
                    trade_id=trade.id,
                    user_id=user_id,
                    exit_price=exit_price,
                    exit_date=exit_date,
                    pnl=pnl,
                )
            ]
        )
        if closed == 0:
            raise TradeAlreadyClosedError(str(trade_id))

        logger.info("Closed trade id=%s pnl=%s", trade.id, pnl)
        return self._trade_repo.get(trade.id)


class CloseSymbolUseCase:
    """Close every open trade of the user on one symbol at a single price."""

    def __init__(self, trade_repo: TradeRepository, price_feed: PriceFeed) -> None:
        self._trade_repo = trade_repo
        self._price_feed = price_feed

    def execute(self, user_id: UUID, symbol: str) -> CloseSymbolResult:
        symbol = normalize_symbol(symbol)
        open_trades = self._trade_repo.list_open(user_id=user_id, symbol=symbol)
        if not open_trades:
            raise TradeNotFoundError(f"open trades for {symbol}")

        exit_price = self._price_feed.get_spot_price(symbol)
        exit_date = datetime.now(timezone.utc)
        closures = [
            TradeClosure(
                trade_id=t.id,
                user_id=user_id,
                exit_price=exit_price,
                exit_date=exit_date,
                pnl=trade_pnl(t.type, t.entry_price, exit_price, t.quantity),
            )
            for t in open_trades
        ]
        closed = self._trade_repo.close_many(closures)
        total = sum((c.pnl for c in closures), Decimal("0"))
        logger.info("Closed %d trades on %s pnl=%s", closed, symbol, total)
        return CloseSymbolResult(
            symbol=symbol, exit_price=exit_price, closed=closed, total_pnl=total
        )


class UpdateTradeJournalUseCase:
    def __init__(self, trade_repo: TradeRepository) -> None:
        self._trade_repo = trade_repo

    def execute(self, command: JournalCommand) -> Trade:
        trade = load_owned_trade(self._trade_repo, command.user_id, command.target_id)
        self._trade_repo.update_journal(
            trade.id, command.notes, command.strategy, command.emotion
        )
        trade.notes = command.notes
        trade.strategy = command.strategy
        trade.emotion = command.emotion
        return trade
