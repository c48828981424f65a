"""
Use cases: Price alert management for the signed-in user.

Every operation on an existing alert checks ownership; alerts of other
users are reported as not found.

Failure cases: AlertNotFoundError, AlertStateError, InvalidOrderError.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from app.application.alerts.dtos import CreatePriceAlertCommand, UpdateAlertCommand
from app.application.trading.spot_trades import normalize_symbol
from app.domain.alerts.entities import Alert, AlertStatus, AlertType
from app.domain.alerts.errors import AlertNotFoundError, AlertStateError
from app.domain.alerts.ports import AlertRepository
from app.domain.trading.errors import InvalidOrderError

logger = logging.getLogger(__name__)


def load_owned_alert(alert_repo: AlertRepository, user_id: UUID, alert_id: UUID) -> Alert:
    alert = alert_repo.get(alert_id)
    if alert is None or alert.user_id != user_id or alert.status is AlertStatus.DELETED:
        raise AlertNotFoundError(str(alert_id))
    return alert


class CreatePriceAlertUseCase:
    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, command: CreatePriceAlertCommand) -> Alert:
        if command.target_price <= 0:
            raise InvalidOrderError("target price must be positive")

        alert = Alert(
            user_id=command.user_id,
            type=AlertType.PRICE,
            config={
                "symbol": normalize_symbol(command.symbol),
                "target_price": str(command.target_price),
                "operator": command.operator.value,
            },
            created_at=datetime.now(timezone.utc),
        )
        self._alert_repo.add(alert)
        logger.info("Created price alert id=%s on %s", alert.id, alert.symbol)
        return alert


class ListAlertsUseCase:
    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, user_id: UUID) -> list[Alert]:
        return self._alert_repo.list_for_user(user_id)


class ListNotificationsUseCase:
    """Triggered alerts the user has not acknowledged yet."""

    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, user_id: UUID) -> list[Alert]:
        return self._alert_repo.list_for_user(user_id, status=AlertStatus.TRIGGERED)


class UpdateAlertUseCase:
    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, command: UpdateAlertCommand) -> Alert:
        alert = load_owned_alert(self._alert_repo, command.user_id, command.alert_id)

        if command.status is not None and command.status is not AlertStatus.ACTIVE:
            raise AlertStateError(alert.status.value, command.status.value)

        config = dict(alert.config)
        if command.target_price is not None:
            if command.target_price <= 0:
                raise InvalidOrderError("target price must be positive")
            config["target_price"] = str(command.target_price)
        if command.operator is not None:
            config["operator"] = command.operator.value

        if config != alert.config:
            self._alert_repo.update_config(alert.id, config)
            alert.config = config

        if command.status is AlertStatus.ACTIVE:
            self._alert_repo.set_status([alert.id], AlertStatus.ACTIVE, triggered_at=None)
            alert.status = AlertStatus.ACTIVE
            alert.triggered_at = None
        return alert


class DeleteAlertUseCase:
    """Soft delete: the alert stays stored with status DELETED."""

    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, user_id: UUID, alert_id: UUID) -> None:
        alert = load_owned_alert(self._alert_repo, user_id, alert_id)
        self._alert_repo.set_status([alert.id], AlertStatus.DELETED, alert.triggered_at)


class AcknowledgeAlertUseCase:
    def __init__(self, alert_repo: AlertRepository) -> None:
        self._alert_repo = alert_repo

    def execute(self, user_id: UUID, alert_id: UUID) -> Alert:
        alert = load_owned_alert(self._alert_repo, user_id, alert_id)
        if alert.status is not AlertStatus.TRIGGERED:
            raise AlertStateError(alert.status.value, AlertStatus.ACKNOWLEDGED.value)
        self._alert_repo.set_status(
            [alert.id], AlertStatus.ACKNOWLEDGED, alert.triggered_at
        )
        alert.status = AlertStatus.ACKNOWLEDGED
        return alert
