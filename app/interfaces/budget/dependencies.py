"""
Dependency injection for the budget bounded context.
"""

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.budget.budget_items import (
    GetBudgetItemsUseCase,
    GetBudgetSummaryUseCase,
    SaveBudgetItemUseCase,
)
from app.application.budget.categories import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    ListCategoriesUseCase,
    UpdateCategoryUseCase,
)
from app.infrastructure.budget.budget_repository import BudgetRepositoryAdapter
from app.interfaces.dependencies import get_engine


def get_list_categories_use_case(
    engine: Engine = Depends(get_engine),
) -> ListCategoriesUseCase:
    return ListCategoriesUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_create_category_use_case(
    engine: Engine = Depends(get_engine),
) -> CreateCategoryUseCase:
    return CreateCategoryUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_update_category_use_case(
    engine: Engine = Depends(get_engine),
) -> UpdateCategoryUseCase:
    return UpdateCategoryUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_delete_category_use_case(
    engine: Engine = Depends(get_engine),
) -> DeleteCategoryUseCase:
    return DeleteCategoryUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_budget_items_use_case(
    engine: Engine = Depends(get_engine),
) -> GetBudgetItemsUseCase:
    return GetBudgetItemsUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_save_budget_item_use_case(
    engine: Engine = Depends(get_engine),
) -> SaveBudgetItemUseCase:
    return SaveBudgetItemUseCase(budget_repo=BudgetRepositoryAdapter(engine))


def get_budget_summary_use_case(
    engine: Engine = Depends(get_engine),
) -> GetBudgetSummaryUseCase:
    return GetBudgetSummaryUseCase(budget_repo=BudgetRepositoryAdapter(engine))
