"""
Use cases: Futures positions.

Opening a position debits its margin; closing it credits margin plus
PnL. Both happen atomically inside the FuturesPositionRepository.

Failure cases: BankruptcyCooldownError, InsufficientBalanceError,
    InvalidOrderError, PositionNotFoundError, UserNotFoundError.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from app.application.trading.dtos import (
    ClosePositionCommand,
    JournalCommand,
    OpenPositionCommand,
)
from app.application.trading.spot_trades import normalize_symbol
from app.domain.accounts.errors import UserNotFoundError
from app.domain.accounts.ports import UserRepository
from app.domain.trading.entities import (
    AggregatedPosition,
    FuturesPosition,
    PositionStatus,
)
from app.domain.trading.errors import (
    BankruptcyCooldownError,
    InsufficientBalanceError,
    InvalidOrderError,
    PositionNotFoundError,
)
from app.domain.trading.futures import (
    aggregate_positions,
    liquidation_price,
    position_pnl,
    remaining_cooldown_days,
    required_margin,
    validate_order,
)
from app.domain.trading.ports import FuturesPositionRepository

logger = logging.getLogger(__name__)


class OpenPositionUseCase:
    """Open a leveraged position.

    A user under an active bankruptcy penalty cannot trade. Once the
    penalty has expired the wallet is reset to the initial balance
    before the order is placed.
    """

    def __init__(
        self,
        position_repo: FuturesPositionRepository,
        user_repo: UserRepository,
        initial_balance: Decimal,
    ) -> None:
        self._position_repo = position_repo
        self._user_repo = user_repo
        self._initial_balance = initial_balance

    def execute(self, command: OpenPositionCommand) -> FuturesPosition:
        validate_order(command.quantity, command.leverage, command.entry_price)
        symbol = normalize_symbol(command.symbol)

        user = self._user_repo.get_by_id(command.user_id)
        if user is None:
            raise UserNotFoundError(str(command.user_id))

        now = datetime.now(timezone.utc)
        if user.bankruptcy_expiry is not None:
            if now < user.bankruptcy_expiry:
                raise BankruptcyCooldownError(
                    user.bankruptcy_expiry,
                    remaining_cooldown_days(user.bankruptcy_expiry, now),
                )
            self._user_repo.reset_wallet(user.id, self._initial_balance)
            user.virtual_balance = self._initial_balance
            user.monthly_starting_balance = self._initial_balance
            user.bankruptcy_expiry = None
            logger.info("Bankruptcy penalty over; wallet reset for user id=%s", user.id)

        margin = required_margin(command.quantity, command.entry_price, command.leverage)
        if user.virtual_balance < margin:
            raise InsufficientBalanceError(str(margin), str(user.virtual_balance))

        position = FuturesPosition(
            user_id=user.id,
            symbol=symbol,
            side=command.side,
            quantity=command.quantity,
            leverage=command.leverage,
            entry_price=command.entry_price,
            margin=margin,
            liquidation_price=liquidation_price(
                command.entry_price, command.leverage, command.side
            ),
            stop_loss=command.stop_loss,
            take_profit=command.take_profit,
            created_at=now,
        )
        self._position_repo.open(position)
        return position


class ListOpenPositionsUseCase:
    """Open positions of a user merged by symbol and side."""

    def __init__(self, position_repo: FuturesPositionRepository) -> None:
        self._position_repo = position_repo

    def execute(self, user_id: UUID) -> list[AggregatedPosition]:
        return aggregate_positions(self._position_repo.list_open(user_id=user_id))


class ListPositionHistoryUseCase:
    """Closed and liquidated positions of a user, most recent first."""

    def __init__(self, position_repo: FuturesPositionRepository) -> None:
        self._position_repo = position_repo

    def execute(self, user_id: UUID) -> list[FuturesPosition]:
        return list(reversed(self._position_repo.list_closed(user_id=user_id)))


class ClosePositionUseCase:
    def __init__(self, position_repo: FuturesPositionRepository) -> None:
        self._position_repo = position_repo

    def execute(self, command: ClosePositionCommand) -> FuturesPosition:
        if command.exit_price <= 0:
            raise InvalidOrderError("exit price must be positive")

        position = self._position_repo.get(command.position_id)
        if (
            position is None
            or position.user_id != command.user_id
            or position.status is not PositionStatus.OPEN
        ):
            raise PositionNotFoundError(str(command.position_id))

        pnl = position_pnl(
            position.side, position.entry_price, command.exit_price, position.quantity
        )
        closed = self._position_repo.close(
            position.id, pnl, datetime.now(timezone.utc)
        )
        logger.info("Closed futures position id=%s pnl=%s", closed.id, pnl)
        return closed


class UpdatePositionJournalUseCase:
    def __init__(self, position_repo: FuturesPositionRepository) -> None:
        self._position_repo = position_repo

    def execute(self, command: JournalCommand) -> FuturesPosition:
        position = self._position_repo.get(command.target_id)
        if position is None or position.user_id != command.user_id:
            raise PositionNotFoundError(str(command.target_id))

        self._position_repo.update_journal(
            position.id, command.notes, command.strategy, command.emotion
        )
        position.notes = command.notes
        position.strategy = command.strategy
        position.emotion = command.emotion
        return position
