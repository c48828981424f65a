"""
Use cases: Budget categories.

A user without categories gets the default expense categories the
first time they list them.

Failure cases: CategoryNotFoundError, InvalidBudgetItemError,
DuplicateCategoryError.
"""

import logging
from typing import Optional
from uuid import UUID

from app.application.budget.dtos import CategoryCommand
from app.domain.budget.entities import DEFAULT_CATEGORIES, BudgetCategory, CategoryType
from app.domain.budget.errors import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    InvalidBudgetItemError,
)
from app.domain.budget.ports import BudgetRepository

logger = logging.getLogger(__name__)


def load_owned_category(
    budget_repo: BudgetRepository, user_id: UUID, category_id: UUID
) -> BudgetCategory:
    category = budget_repo.get_category(category_id)
    if category is None or category.user_id != user_id:
        raise CategoryNotFoundError(str(category_id))
    return category


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidBudgetItemError("category name is required")
    return cleaned


def _ensure_unique_name(
    budget_repo: BudgetRepository,
    user_id: UUID,
    name: str,
    category_id: Optional[UUID] = None,
) -> None:
    for existing in budget_repo.list_categories(user_id):
        if existing.name == name and existing.id != category_id:
            raise DuplicateCategoryError(name)


class ListCategoriesUseCase:
    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, user_id: UUID) -> list[BudgetCategory]:
        categories = self._budget_repo.list_categories(user_id)
        if categories:
            return categories

        self._budget_repo.add_categories(
            [
                BudgetCategory(user_id=user_id, name=name, type=CategoryType.EXPENSE)
                for name in DEFAULT_CATEGORIES
            ]
        )
        logger.info("Seeded default budget categories for user id=%s", user_id)
        return self._budget_repo.list_categories(user_id)


class CreateCategoryUseCase:
    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, command: CategoryCommand) -> BudgetCategory:
        name = _clean_name(command.name)
        _ensure_unique_name(self._budget_repo, command.user_id, name)
        category = BudgetCategory(user_id=command.user_id, name=name, type=command.type)
        self._budget_repo.add_categories([category])
        return category


class UpdateCategoryUseCase:
    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, category_id: UUID, command: CategoryCommand) -> BudgetCategory:
        category = load_owned_category(self._budget_repo, command.user_id, category_id)
        name = _clean_name(command.name)
        _ensure_unique_name(self._budget_repo, command.user_id, name, category.id)
        category.name = name
        category.type = command.type
        self._budget_repo.update_category(category)
        return category


class DeleteCategoryUseCase:
    def __init__(self, budget_repo: BudgetRepository) -> None:
        self._budget_repo = budget_repo

    def execute(self, user_id: UUID, category_id: UUID) -> None:
        load_owned_category(self._budget_repo, user_id, category_id)
        self._budget_repo.delete_category(category_id)
