"""
Domain-specific errors for the budget bounded context.
"""

from app.domain.errors import BusinessRuleError, ConflictError, NotFoundError


class CategoryNotFoundError(NotFoundError):
    """Raised when a category does not exist or belongs to another user."""

    def __init__(self, category_id: str) -> None:
        super().__init__(
            f"Category not found or not owned by the user: {category_id}"
        )
        self.category_id = category_id


class InvalidBudgetItemError(BusinessRuleError):
    """Raised when a budget item has an invalid month or amount."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid budget item: {reason}")
        self.reason = reason


class DuplicateCategoryError(ConflictError):
    """Raised when the user already has a category with that name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Category already exists: {name}")
        self.name = name
