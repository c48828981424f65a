"""
Pydantic schemas for budget endpoints.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.domain.budget.entities import CategoryType


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)
    type: CategoryType = CategoryType.EXPENSE


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: CategoryType


class BudgetItemRequest(BaseModel):
    category_id: UUID
    month: int = Field(..., ge=1, le=12)
    amount: Decimal = Field(..., ge=0)


class BudgetItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    month: int
    amount: Decimal


class MonthSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    income: Decimal
    expense: Decimal

    @computed_field
    @property
    def balance(self) -> Decimal:
        return self.income - self.expense
