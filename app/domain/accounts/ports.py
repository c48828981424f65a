"""
Port interfaces (ABCs) for the accounts bounded context.

Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from app.domain.accounts.entities import (
    PasswordResetMessage,
    Session,
    SubscriptionStatus,
    User,
)


class UserRepository(ABC):
    """Port for persisting and retrieving user accounts."""

    @abstractmethod
    def add(self, user: User) -> None:
        """Persist a new user."""
        raise NotImplementedError

    @abstractmethod
    def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Return a user by ID, or None."""
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email (case-insensitive), or None."""
        raise NotImplementedError

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        """Return a user by username, or None."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[User]:
        """Return every user account."""
        raise NotImplementedError

    @abstractmethod
    def update_password(self, user_id: UUID, password_hash: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_username(self, user_id: UUID, username: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_ranking_visibility(self, user_id: UUID, visible: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_subscription_status(
        self, user_id: UUID, status: SubscriptionStatus
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def reset_wallet(self, user_id: UUID, balance: Decimal) -> None:
        """Reset balance and monthly starting balance, clearing bankruptcy."""
        raise NotImplementedError

    @abstractmethod
    def set_password_reset(
        self, user_id: UUID, token_hash: str, expires_at: datetime
    ) -> None:
        """Store the hash of a pending reset token, replacing any earlier one."""
        raise NotImplementedError

    @abstractmethod
    def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[User]:
        """Return the user whose unexpired reset token has this hash, or None."""
        raise NotImplementedError

    @abstractmethod
    def complete_password_reset(self, user_id: UUID, password_hash: str) -> None:
        """Set the new password and clear the pending reset token."""
        raise NotImplementedError


class SessionRepository(ABC):
    """Port for login sessions."""

    @abstractmethod
    def add(self, session: Session) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_for_user(self, user_id: UUID) -> int:
        """Drop every session of a user. Returns the number removed."""
        raise NotImplementedError

    @abstractmethod
    def delete_expired(self, now: datetime) -> int:
        raise NotImplementedError


class AccountNotifier(ABC):
    """Port for emails about the account itself."""

    @abstractmethod
    def send_password_reset(self, message: PasswordResetMessage) -> None:
        """Deliver a password reset link.

        Raises:
            NotificationError: If delivery failed.
        """
        raise NotImplementedError
