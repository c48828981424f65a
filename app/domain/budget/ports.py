"""
Port interfaces (ABCs) for the budget bounded context.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.budget.entities import BudgetCategory, BudgetItem


class BudgetRepository(ABC):
    """Port for budget categories, yearly budgets and their items."""

    @abstractmethod
    def list_categories(self, user_id: UUID) -> list[BudgetCategory]:
        """Return the user's categories ordered by name."""
        raise NotImplementedError

    @abstractmethod
    def add_categories(self, categories: list[BudgetCategory]) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_category(self, category_id: UUID) -> Optional[BudgetCategory]:
        raise NotImplementedError

    @abstractmethod
    def update_category(self, category: BudgetCategory) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_category(self, category_id: UUID) -> None:
        """Delete a category together with its budget items."""
        raise NotImplementedError

    @abstractmethod
    def get_or_create_budget(self, user_id: UUID, year: int) -> UUID:
        """Return the ID of the user's budget for ``year``, creating it if needed."""
        raise NotImplementedError

    @abstractmethod
    def list_items(self, user_id: UUID, year: int) -> list[BudgetItem]:
        raise NotImplementedError

    @abstractmethod
    def upsert_item(
        self, budget_id: UUID, category_id: UUID, month: int, amount: Decimal
    ) -> BudgetItem:
        """Insert or update the item keyed by (budget, category, month)."""
        raise NotImplementedError
