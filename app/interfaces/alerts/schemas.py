"""
Pydantic schemas for alert endpoints.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.alerts.entities import AlertStatus, AlertType, PriceOperator
from app.interfaces.trading.schemas import SYMBOL_MAX_LEN, SYMBOL_MIN_LEN, SYMBOL_PATTERN


class CreatePriceAlertRequest(BaseModel):
    """Alert fired when the price crosses ``target_price``.

    ``gt`` triggers above the target, ``lt`` below it.
    """

    symbol: str = Field(
        ..., min_length=SYMBOL_MIN_LEN, max_length=SYMBOL_MAX_LEN, pattern=SYMBOL_PATTERN
    )
    target_price: Decimal = Field(..., gt=0)
    operator: PriceOperator


class UpdateAlertRequest(BaseModel):
    target_price: Optional[Decimal] = Field(None, gt=0)
    operator: Optional[PriceOperator] = None
    status: Optional[AlertStatus] = Field(
        None, description="Only ACTIVE is accepted; it re-arms the alert."
    )


class AlertResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: AlertType
    status: AlertStatus
    symbol: Optional[str] = None
    config: dict[str, Any]
    created_at: Optional[datetime] = None
    triggered_at: Optional[datetime] = None
