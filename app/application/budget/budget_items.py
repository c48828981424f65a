"""
Use cases: Yearly budget items and the monthly summary.

Failure cases: CategoryNotFoundError, InvalidBudgetItemError.
"""

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from app.application.budget.categories import load_owned_category
from app.application.budget.dtos import SaveBudgetItemCommand
from app.domain.budget.entities import BudgetItem, CategoryType, MonthSummary
from app.domain.budget.errors import InvalidBudgetItemError
from app.domain.budget.ports import BudgetRepository


class GetBudgetItemsUseCase:
    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, user_id: UUID, year: int) -> list[BudgetItem]:
        return self._budget_repo.list_items(user_id, year)


class SaveBudgetItemUseCase:
    """Insert or update the amount of a category in a month.

    The yearly budget is created on first use.
    """

    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, command: SaveBudgetItemCommand) -> BudgetItem:
        if not 1 <= command.month <= 12:
            raise InvalidBudgetItemError("month must be between 1 and 12")
        if command.amount < 0:
            raise InvalidBudgetItemError("amount must not be negative")

        category = load_owned_category(
            self._budget_repo, command.user_id, command.category_id
        )
        budget_id = self._budget_repo.get_or_create_budget(command.user_id, command.year)
        return self._budget_repo.upsert_item(
            budget_id, category.id, command.month, command.amount
        )


class GetBudgetSummaryUseCase:
    """Income, expense and balance of every month of a year."""

    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, user_id: UUID, year: int) -> list[MonthSummary]:
        types = {c.id: c.type for c in self._budget_repo.list_categories(user_id)}
        income: dict[int, Decimal] = defaultdict(Decimal)
        expense: dict[int, Decimal] = defaultdict(Decimal)

        for item in self._budget_repo.list_items(user_id, year):
            if types.get(item.category_id) is CategoryType.INCOME:
                income[item.month] += item.amount
            else:
                expense[item.month] += item.amount

        return [
            MonthSummary(month=month, income=income[month], expense=expense[month])
            for month in range(1, 13)
        ]
