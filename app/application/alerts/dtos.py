"""
Data Transfer Objects for the alerts application layer.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.alerts.entities import AlertStatus, PriceOperator


@dataclass(frozen=True)
class CreatePriceAlertCommand:
    user_id: UUID
    symbol: str
    target_price: Decimal
    operator: PriceOperator


@dataclass(frozen=True)
class UpdateAlertCommand:
    """Partial update of a price alert.

    Attributes:
        target_price: New target, when given.
        operator: New comparison, when given.
        status: Only ACTIVE is accepted; it re-arms the alert.
    """

    user_id: UUID
    alert_id: UUID
    target_price: Optional[Decimal] = None
    operator: Optional[PriceOperator] = None
    status: Optional[AlertStatus] = None


@dataclass(frozen=True)
class ProcessAlertsResult:
    """Summary of one alert processing run.

    Attributes:
        active: Active alerts found (all types).
        triggered: Price alerts triggered.
        errored: Price alerts moved to ERROR.
        skipped: Budget and bill alerts left untouched.
        notified: Notifications delivered.
    """

    active: int
    triggered: int
    errored: int
    skipped: int = 0
    notified: int = 0
