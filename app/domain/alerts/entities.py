"""
Domain entities for the alerts bounded context.

They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class AlertType(Enum):
    PRICE = "PRICE"
    BUDGET = "BUDGET"
    BILL = "BILL"


class AlertStatus(Enum):
    ACTIVE = "ACTIVE"
    TRIGGERED = "TRIGGERED"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    ERROR = "ERROR"
    DELETED = "DELETED"


class PriceOperator(Enum):
    """Comparison applied between the live price and the target."""

    GREATER_THAN = "gt"
    LESS_THAN = "lt"


@dataclass
class Alert:
    """A user alert. ``config`` holds type-specific settings.

    Price alerts use ``{"symbol": str, "target_price": str, "operator": "gt"|"lt"}``.
    """

    user_id: UUID
    type: AlertType
    config: dict[str, Any]
    id: UUID = field(default_factory=uuid4)
    status: AlertStatus = AlertStatus.ACTIVE
    created_at: Optional[datetime] = None
    triggered_at: Optional[datetime] = None

    @property
    def symbol(self) -> Optional[str]:
        return self.config.get("symbol")


@dataclass(frozen=True)
class PriceAlertMessage:
    """Content of a triggered price alert notification."""

    to: str
    user_name: str
    symbol: str
    price: Decimal
    target_price: Decimal
    operator: PriceOperator
