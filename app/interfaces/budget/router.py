"""
FastAPI router for budget categories and yearly budgets.

Available to every signed-in user.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status

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
from app.application.budget.dtos import CategoryCommand, SaveBudgetItemCommand
from app.domain.accounts.entities import User
from app.interfaces.budget.dependencies import (
    get_budget_items_use_case,
    get_budget_summary_use_case,
    get_create_category_use_case,
    get_delete_category_use_case,
    get_list_categories_use_case,
    get_save_budget_item_use_case,
    get_update_category_use_case,
)
from app.interfaces.budget.schemas import (
    BudgetItemRequest,
    BudgetItemResponse,
    CategoryRequest,
    CategoryResponse,
    MonthSummaryResponse,
)
from app.interfaces.dependencies import get_current_user
from app.interfaces.trading.schemas import ErrorResponse

router = APIRouter(prefix="/budget", tags=["budget"])

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="List budget categories",
    description="Users without categories get the default ones on first call.",
)
def list_categories(
    user: User = Depends(get_current_user),
    use_case: ListCategoriesUseCase = Depends(get_list_categories_use_case),
) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in use_case.execute(user.id)]


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget category",
)
def create_category(
    request: CategoryRequest,
    user: User = Depends(get_current_user),
    use_case: CreateCategoryUseCase = Depends(get_create_category_use_case),
) -> CategoryResponse:
    category = use_case.execute(
        CategoryCommand(user_id=user.id, name=request.name, type=request.type)
    )
    return CategoryResponse.model_validate(category)


@router.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    responses=NOT_FOUND,
    summary="Rename or retype a category",
)
def update_category(
    category_id: UUID,
    request: CategoryRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateCategoryUseCase = Depends(get_update_category_use_case),
) -> CategoryResponse:
    category = use_case.execute(
        category_id,
        CategoryCommand(user_id=user.id, name=request.name, type=request.type),
    )
    return CategoryResponse.model_validate(category)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND,
    summary="Delete a category and its budget items",
)
def delete_category(
    category_id: UUID,
    user: User = Depends(get_current_user),
    use_case: DeleteCategoryUseCase = Depends(get_delete_category_use_case),
) -> Response:
    use_case.execute(user.id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{year}/items",
    response_model=list[BudgetItemResponse],
    summary="Budget items of a year",
)
def get_items(
    year: int = Path(..., ge=1900, le=2200),
    user: User = Depends(get_current_user),
    use_case: GetBudgetItemsUseCase = Depends(get_budget_items_use_case),
) -> list[BudgetItemResponse]:
    return [BudgetItemResponse.model_validate(i) for i in use_case.execute(user.id, year)]


@router.put(
    "/{year}/items",
    response_model=BudgetItemResponse,
    responses={400: {"model": ErrorResponse}, **NOT_FOUND},
    summary="Set the planned amount of a category in a month",
)
def save_item(
    request: BudgetItemRequest,
    year: int = Path(..., ge=1900, le=2200),
    user: User = Depends(get_current_user),
    use_case: SaveBudgetItemUseCase = Depends(get_save_budget_item_use_case),
) -> BudgetItemResponse:
    item = use_case.execute(
        SaveBudgetItemCommand(
            user_id=user.id,
            year=year,
            month=request.month,
            category_id=request.category_id,
            amount=request.amount,
        )
    )
    return BudgetItemResponse.model_validate(item)


@router.get(
    "/{year}/summary",
    response_model=list[MonthSummaryResponse],
    summary="Monthly income, expense and balance",
)
def get_summary(
    year: int = Path(..., ge=1900, le=2200),
    user: User = Depends(get_current_user),
    use_case: GetBudgetSummaryUseCase = Depends(get_budget_summary_use_case),
) -> list[MonthSummaryResponse]:
    return [
        MonthSummaryResponse.model_validate(m) for m in use_case.execute(user.id, year)
    ]
