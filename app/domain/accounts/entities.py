"""
Domain entities for the accounts bounded context.

They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class SubscriptionStatus(Enum):
    """Billing state of an account as reported by the payment provider."""

    NONE = "none"
    PENDING = "pending"
    AUTHORIZED = "authorized"
    LIFETIME = "lifetime"
    CANCELLED = "cancelled"


PAID_STATUSES = frozenset({SubscriptionStatus.AUTHORIZED, SubscriptionStatus.LIFETIME})


@dataclass
class User:
    """A platform account with its paper-trading wallet."""

    email: str
    username: Optional[str]
    password_hash: str
    id: UUID = field(default_factory=uuid4)
    name: Optional[str] = None
    is_admin: bool = False
    subscription_status: SubscriptionStatus = SubscriptionStatus.NONE
    trial_ends_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    virtual_balance: Decimal = Decimal("10000")
    monthly_starting_balance: Decimal = Decimal("10000")
    bankruptcy_expiry: Optional[datetime] = None
    ranking_visible: bool = True

    @property
    def display_name(self) -> str:
        """Name used in emails and greetings."""
        return self.name or self.username or "Investidor"

    @property
    def nickname(self) -> str:
        """Public name used on leaderboards."""
        return self.username or f"User {str(self.id)[:4]}"


@dataclass(frozen=True)
class Session:
    """An authenticated login session identified by an opaque token."""

    token: str
    user_id: UUID
    expires_at: datetime
    created_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class PasswordResetMessage:
    """Content of a password reset email."""

    to: str
    user_name: str
    reset_link: str
    expires_in_minutes: int
