"""
Domain entities for the budget bounded context.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


class CategoryType(Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


DEFAULT_CATEGORIES = (
    "Investimento",
    "Reserva Financeira",
    "Despesas",
    "Lazer",
    "Outros",
)


@dataclass
class BudgetCategory:
    user_id: UUID
    name: str
    type: CategoryType
    id: UUID = field(default_factory=uuid4)


@dataclass
class BudgetItem:
    """Planned amount of one category in one month of a yearly budget."""

    budget_id: UUID
    category_id: UUID
    month: int
    amount: Decimal
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class MonthSummary:
    month: int
    income: Decimal
    expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense
