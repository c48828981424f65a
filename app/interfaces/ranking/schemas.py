"""
Pydantic schemas for ranking endpoints.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class LeaderboardEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    nickname: str
    roi: float
    profit: float
    trades: int
    win_rate: float
    plan: str
    badges: list[str]
    position: int
    is_current_user: bool


class LeaderboardMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_traders: int
    avg_roi: float
    avg_win_rate: float
    top_trader_name: str
    top_trader_roi: float


class LeaderboardResponse(BaseModel):
    """Top traders, the caller's own entry and the aggregate metrics."""

    model_config = ConfigDict(from_attributes=True)

    traders: list[LeaderboardEntryResponse]
    current_user: Optional[LeaderboardEntryResponse] = None
    metrics: LeaderboardMetricsResponse


class HallOfFameEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    username: Optional[str] = None
    month: int
    year: int
    roi_percentage: float
    rank_position: int
    final_balance: Decimal
