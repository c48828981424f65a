"""
Price alert evaluation rules.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from app.domain.alerts.entities import PriceOperator


def parse_target_price(raw: Any) -> Optional[Decimal]:
    """Return the target price as Decimal, or None when missing or not numeric."""
    if raw is None or raw == "":
        return None
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def parse_operator(raw: Any) -> Optional[PriceOperator]:
    try:
        return PriceOperator(raw)
    except ValueError:
        return None


def should_trigger(price: Decimal, target: Decimal, operator: PriceOperator) -> bool:
    """Strict comparison: touching the target exactly does not trigger."""
    if operator is PriceOperator.GREATER_THAN:
        return price > target
    return price < target
