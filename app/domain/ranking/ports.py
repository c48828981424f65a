"""
Port interfaces (ABCs) for the ranking bounded context.
"""

from abc import ABC, abstractmethod

from app.domain.ranking.entities import HallOfFameEntry, MonthlyRanking


class MonthlyRankingRepository(ABC):
    """Port for the monthly ranking history."""

    @abstractmethod
    def exists(self, year: int, month: int) -> bool:
        """Return True when the month has already been closed."""
        raise NotImplementedError

    @abstractmethod
    def close_month(self, rankings: list[MonthlyRanking]) -> None:
        """Persist the rankings and roll every user's monthly starting balance.

        Both writes happen in one transaction: after it, each user's
        monthly starting balance equals the current virtual balance.
        """
        raise NotImplementedError

    @abstractmethod
    def hall_of_fame(self, max_rank: int | None = None) -> list[HallOfFameEntry]:
        """Return rankings ordered by year desc, month desc, rank asc."""
        raise NotImplementedError
