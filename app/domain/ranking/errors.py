"""
Domain-specific errors for the ranking bounded context.
"""

from app.domain.errors import ConflictError


class RankingAlreadyClosedError(ConflictError):
    """Raised when a month's ranking has already been frozen."""

    def __init__(self, month: int, year: int) -> None:
        super().__init__(f"Ranking for {month:02d}/{year} is already closed")
        self.month = month
        self.year = year
