"""
Data Transfer Objects for the budget application layer.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from app.domain.budget.entities import CategoryType


@dataclass(frozen=True)
class CategoryCommand:
    user_id: UUID
    name: str
    type: CategoryType


@dataclass(frozen=True)
class SaveBudgetItemCommand:
    """Planned amount for one category in one month.

    Attributes:
        year: Budget year.
        month: 1 to 12.
        amount: Non-negative planned amount.
    """

    user_id: UUID
    year: int
    month: int
    category_id: UUID
    amount: Decimal
