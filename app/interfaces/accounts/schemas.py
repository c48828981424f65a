"""
Pydantic schemas for account, session and subscription endpoints.

These schemas enforce input validation and define the API contract.
Business rules (username format, password length) are enforced again
by the use cases.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.accounts.entities import SubscriptionStatus

USERNAME_PATTERN = r"^[A-Za-z0-9_.]{3,30}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    username: str = Field(..., pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=8, max_length=128)
    name: Optional[str] = Field(None, max_length=120)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1, max_length=128)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)


class PasswordResetRequest(BaseModel):
    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)


class PasswordResetConfirmRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)


class MessageResponse(BaseModel):
    message: str


class UpdateUsernameRequest(BaseModel):
    username: str = Field(..., pattern=USERNAME_PATTERN)


class RankingVisibilityRequest(BaseModel):
    visible: bool


class PaymentEventRequest(BaseModel):
    """Normalized payment notification sent by the billing integration."""

    email: str = Field(..., max_length=320, pattern=EMAIL_PATTERN)
    status: SubscriptionStatus


class UserProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: Optional[str]
    name: Optional[str]
    is_admin: bool
    subscription_status: SubscriptionStatus
    trial_ends_at: Optional[datetime]
    created_at: Optional[datetime]
    virtual_balance: Decimal
    monthly_starting_balance: Decimal
    bankruptcy_expiry: Optional[datetime]
    ranking_visible: bool
    has_premium_access: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserProfileResponse


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: SubscriptionStatus
    trial_ends_at: Optional[datetime]
    has_premium_access: bool
    has_subscription_access: bool
