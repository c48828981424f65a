"""
Port interfaces (ABCs) for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.trading.entities import (
    CapitalMovement,
    FuturesPosition,
    MarketType,
    Trade,
)


@dataclass(frozen=True)
class TradeClosure:
    """Instruction to close one spot trade and credit its PnL."""

    trade_id: UUID
    user_id: UUID
    exit_price: Decimal
    exit_date: datetime
    pnl: Decimal


@dataclass(frozen=True)
class LiquidationOutcome:
    """Positions liquidated in one sweep and the users left bankrupt by it."""

    positions: list[FuturesPosition]
    bankrupt_user_ids: list[UUID]


class PriceFeed(ABC):
    """Port for live exchange prices."""

    @abstractmethod
    def get_spot_price(self, symbol: str) -> Decimal:
        """Return the last spot price for a symbol.

        Raises:
            PriceUnavailableError: If no source could quote the symbol.
        """
        raise NotImplementedError

    @abstractmethod
    def get_futures_price(self, symbol: str) -> Decimal:
        """Return the last perpetual futures price for a symbol.

        Raises:
            PriceUnavailableError: If no source could quote the symbol.
        """
        raise NotImplementedError


class TradeRepository(ABC):
    """Port for spot simulator trades."""

    @abstractmethod
    def add(self, trade: Trade) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, trade_id: UUID) -> Optional[Trade]:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(
        self, user_id: UUID, market_type: MarketType = MarketType.SIMULATOR
    ) -> list[Trade]:
        """Return the user's trades, newest entry first."""
        raise NotImplementedError

    @abstractmethod
    def list_open(
        self, user_id: Optional[UUID] = None, symbol: Optional[str] = None
    ) -> list[Trade]:
        """Return open trades, optionally filtered by user and symbol."""
        raise NotImplementedError

    @abstractmethod
    def list_closed(
        self, user_id: Optional[UUID] = None, since: Optional[datetime] = None
    ) -> list[Trade]:
        """Return closed trades, optionally filtered by user and exit date."""
        raise NotImplementedError

    @abstractmethod
    def close_many(self, closures: list[TradeClosure]) -> int:
        """Close trades and credit each PnL to its owner in one transaction.

        Trades that are no longer open are skipped.

        Returns:
            Number of trades closed.
        """
        raise NotImplementedError

    @abstractmethod
    def update_journal(
        self,
        trade_id: UUID,
        notes: Optional[str],
        strategy: Optional[str],
        emotion: Optional[str],
    ) -> None:
        raise NotImplementedError


class FuturesPositionRepository(ABC):
    """Port for futures positions and their margin bookkeeping."""

    @abstractmethod
    def open(self, position: FuturesPosition) -> None:
        """Debit the margin and persist the position atomically.

        Raises:
            InsufficientBalanceError: If the balance no longer covers the margin.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, position_id: UUID) -> Optional[FuturesPosition]:
        raise NotImplementedError

    @abstractmethod
    def list_open(self, user_id: Optional[UUID] = None) -> list[FuturesPosition]:
        """Return open positions, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def list_closed(
        self, user_id: Optional[UUID] = None, since: Optional[datetime] = None
    ) -> list[FuturesPosition]:
        """Return closed and liquidated positions."""
        raise NotImplementedError

    @abstractmethod
    def close(
        self, position_id: UUID, pnl: Decimal, closed_at: datetime
    ) -> FuturesPosition:
        """Close an open position and credit margin + pnl atomically.

        Raises:
            PositionNotFoundError: If the position is not open anymore.
        """
        raise NotImplementedError

    @abstractmethod
    def liquidate(
        self,
        position_ids: list[UUID],
        closed_at: datetime,
        bankruptcy_expiry: datetime,
    ) -> LiquidationOutcome:
        """Mark open positions as liquidated, losing their margin.

        In the same transaction, owners left with no balance and no open
        position get ``bankruptcy_expiry``.

        Returns:
            The positions actually liquidated and the bankrupt users.
        """
        raise NotImplementedError

    @abstractmethod
    def update_journal(
        self,
        position_id: UUID,
        notes: Optional[str],
        strategy: Optional[str],
        emotion: Optional[str],
    ) -> None:
        raise NotImplementedError


class CapitalMovementRepository(ABC):
    """Port for deposits and withdrawals."""

    @abstractmethod
    def add(self, movement: CapitalMovement) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: UUID) -> list[CapitalMovement]:
        """Return the user's movements ordered by date ascending."""
        raise NotImplementedError
