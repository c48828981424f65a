"""
Use cases: Deposits and withdrawals of the tracked portfolio.

Failure cases: InvalidOrderError (non-positive amount).
"""

from datetime import datetime, timezone
from uuid import UUID

from app.application.trading.dtos import RecordMovementCommand
from app.domain.trading.entities import CapitalMovement
from app.domain.trading.errors import InvalidOrderError
from app.domain.trading.ports import CapitalMovementRepository


def _to_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class RecordMovementUseCase:
    def __init__(self, movement_repo: CapitalMovementRepository) -> None:
        self._movement_repo = movement_repo

    def execute(self, command: RecordMovementCommand) -> CapitalMovement:
        if command.amount <= 0:
            raise InvalidOrderError("amount must be positive")
        movement = CapitalMovement(
            user_id=command.user_id,
            amount=command.amount,
            type=command.type,
            date=_to_utc(command.date) if command.date else datetime.now(timezone.utc),
        )
        self._movement_repo.add(movement)
        return movement


class ListMovementsUseCase:
    def __init__(self, movement_repo: CapitalMovementRepository) -> None:
        self._movement_repo = movement_repo

    def execute(self, user_id: UUID) -> list[CapitalMovement]:
        return self._movement_repo.list_for_user(user_id)
