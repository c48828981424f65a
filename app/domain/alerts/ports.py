"""
Port interfaces (ABCs) for the alerts bounded context.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from app.domain.alerts.entities import (
    Alert,
    AlertStatus,
    AlertType,
    PriceAlertMessage,
)


class AlertRepository(ABC):
    """Port for persisting and retrieving alerts."""

    @abstractmethod
    def add(self, alert: Alert) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, alert_id: UUID) -> Optional[Alert]:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(
        self, user_id: UUID, status: Optional[AlertStatus] = None
    ) -> list[Alert]:
        """Return the user's alerts except deleted ones, newest first."""
        raise NotImplementedError

    @abstractmethod
    def list_active(self, alert_type: Optional[AlertType] = None) -> list[Alert]:
        raise NotImplementedError

    @abstractmethod
    def update_config(self, alert_id: UUID, config: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_status(
        self,
        alert_ids: list[UUID],
        status: AlertStatus,
        triggered_at: Optional[datetime] = None,
    ) -> int:
        """Set the status (and triggered time) of several alerts.

        Returns:
            Number of alerts updated.
        """
        raise NotImplementedError


class AlertNotifier(ABC):
    """Port for delivering triggered alerts to users."""

    @abstractmethod
    def send_price_alert(self, message: PriceAlertMessage) -> None:
        """Deliver a price alert.

        Raises:
            NotificationError: If delivery failed.
        """
        raise NotImplementedError
