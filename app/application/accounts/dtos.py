"""
Data Transfer Objects for the accounts application layer.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.accounts.access import has_premium_access, has_subscription_access
from app.domain.accounts.entities import SubscriptionStatus, User


@dataclass(frozen=True)
class RegisterUserCommand:
    email: str
    username: str
    password: str
    name: Optional[str] = None


@dataclass(frozen=True)
class LoginCommand:
    email: str
    password: str


@dataclass(frozen=True)
class ChangePasswordCommand:
    user_id: UUID
    current_password: str
    new_password: str


@dataclass(frozen=True)
class UpdateUsernameCommand:
    user_id: UUID
    username: str


@dataclass(frozen=True)
class ResetPasswordCommand:
    token: str
    new_password: str


@dataclass(frozen=True)
class PaymentEventCommand:
    """Normalized payment-provider notification.

    Attributes:
        email: Email of the paying account.
        status: New subscription status reported by the provider.
    """

    email: str
    status: SubscriptionStatus


@dataclass(frozen=True)
class UserProfile:
    """Public view of an account, as returned to its owner."""

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

    @classmethod
    def from_user(cls, user: User, now: datetime) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            name=user.name,
            is_admin=user.is_admin,
            subscription_status=user.subscription_status,
            trial_ends_at=user.trial_ends_at,
            created_at=user.created_at,
            virtual_balance=user.virtual_balance,
            monthly_starting_balance=user.monthly_starting_balance,
            bankruptcy_expiry=user.bankruptcy_expiry,
            ranking_visible=user.ranking_visible,
            has_premium_access=has_premium_access(user, now),
        )


@dataclass(frozen=True)
class AuthResult:
    token: str
    expires_at: datetime
    user: UserProfile


@dataclass(frozen=True)
class SubscriptionInfo:
    """Subscription state of an account.

    Attributes:
        status: Billing status.
        trial_ends_at: End of the free trial, if any.
        has_premium_access: Paid, admin or still in trial.
        has_subscription_access: Paid or admin (trial excluded).
    """

    status: SubscriptionStatus
    trial_ends_at: Optional[datetime]
    has_premium_access: bool
    has_subscription_access: bool

    @classmethod
    def from_user(cls, user: User, now: datetime) -> "SubscriptionInfo":
        return cls(
            status=user.subscription_status,
            trial_ends_at=user.trial_ends_at,
            has_premium_access=has_premium_access(user, now),
            has_subscription_access=has_subscription_access(user),
        )
