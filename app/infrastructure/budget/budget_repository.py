"""
Adapter: Budget categories, yearly budgets and items.

Implements BudgetRepository port.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.engine import Engine, RowMapping

from app.domain.budget.entities import BudgetCategory, BudgetItem, CategoryType
from app.domain.budget.errors import DuplicateCategoryError
from app.domain.budget.ports import BudgetRepository
from app.infrastructure.database import budget_categories, budget_items, budgets


def _row_to_category(row: RowMapping) -> BudgetCategory:
    return BudgetCategory(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=row["name"],
        type=CategoryType(row["type"]),
    )


def _row_to_item(row: RowMapping) -> BudgetItem:
    return BudgetItem(
        id=UUID(row["id"]),
        budget_id=UUID(row["budget_id"]),
        category_id=UUID(row["category_id"]),
        month=row["month"],
        amount=Decimal(row["amount"]),
    )


class BudgetRepositoryAdapter(BudgetRepository):
    """SQLAlchemy adapter for the budget tables."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    # -- categories -----------------------------------------------------

    def list_categories(self, user_id: UUID) -> list[BudgetCategory]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(budget_categories)
                .where(budget_categories.c.user_id == str(user_id))
                .order_by(budget_categories.c.name)
            ).mappings().all()
        return [_row_to_category(r) for r in rows]

    def add_categories(self, categories: list[BudgetCategory]) -> None:
        if not categories:
            return
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    budget_categories.insert(),
                    [
                        {
                            "id": str(c.id),
                            "user_id": str(c.user_id),
                            "name": c.name,
                            "type": c.type.value,
                        }
                        for c in categories
                    ],
                )
        except IntegrityError as exc:
            raise DuplicateCategoryError(categories[0].name) from exc

    def get_category(self, category_id: UUID) -> Optional[BudgetCategory]:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(budget_categories).where(budget_categories.c.id == str(category_id))
            ).mappings().first()
        return _row_to_category(row) if row else None

    def update_category(self, category: BudgetCategory) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    update(budget_categories)
                    .where(budget_categories.c.id == str(category.id))
                    .values(name=category.name, type=category.type.value)
                )
        except IntegrityError as exc:
            raise DuplicateCategoryError(category.name) from exc

    def delete_category(self, category_id: UUID) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                delete(budget_items).where(budget_items.c.category_id == str(category_id))
            )
            conn.execute(
                delete(budget_categories).where(budget_categories.c.id == str(category_id))
            )

    # -- budgets and items ----------------------------------------------

    def get_or_create_budget(self, user_id: UUID, year: int) -> UUID:
        with self._engine.begin() as conn:
            existing = conn.execute(
                select(budgets.c.id)
                .where(budgets.c.user_id == str(user_id))
                .where(budgets.c.year == year)
            ).scalar()
            if existing:
                return UUID(existing)
            budget_id = uuid4()
            conn.execute(
                budgets.insert().values(id=str(budget_id), user_id=str(user_id), year=year)
            )
        return budget_id

    def list_items(self, user_id: UUID, year: int) -> list[BudgetItem]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(budget_items)
                .join(budgets, budgets.c.id == budget_items.c.budget_id)
                .where(budgets.c.user_id == str(user_id))
                .where(budgets.c.year == year)
                .order_by(budget_items.c.month)
            ).mappings().all()
        return [_row_to_item(r) for r in rows]

    def upsert_item(
        self, budget_id: UUID, category_id: UUID, month: int, amount: Decimal
    ) -> BudgetItem:
        key = (
            (budget_items.c.budget_id == str(budget_id))
            & (budget_items.c.category_id == str(category_id))
            & (budget_items.c.month == month)
        )
        with self._engine.begin() as conn:
            existing = conn.execute(select(budget_items.c.id).where(key)).scalar()
            if existing:
                conn.execute(update(budget_items).where(key).values(amount=amount))
                item_id = UUID(existing)
            else:
                item_id = uuid4()
                conn.execute(
                    budget_items.insert().values(
                        id=str(item_id),
                        budget_id=str(budget_id),
                        category_id=str(category_id),
                        month=month,
                        amount=amount,
                    )
                )
        return BudgetItem(
            id=item_id,
            budget_id=budget_id,
            category_id=category_id,
            month=month,
            amount=amount,
        )
