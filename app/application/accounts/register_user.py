"""
Use case: Register a new account.

Input: RegisterUserCommand (email, username, password, optional name)
Output: UserProfile
Side effects: Persists the user with a fresh paper-trading wallet and
    a premium trial.
Failure cases: EmailAlreadyRegisteredError, UsernameTakenError,
    InvalidUsernameError, WeakPasswordError.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.application.accounts.dtos import RegisterUserCommand, UserProfile
from app.domain.accounts.entities import SubscriptionStatus, User
from app.domain.accounts.errors import (
    EmailAlreadyRegisteredError,
    InvalidUsernameError,
    UsernameTakenError,
    WeakPasswordError,
)
from app.domain.accounts.ports import UserRepository
from app.shared.security.passwords import hash_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,30}$")


def validate_username(username: str) -> str:
    cleaned = username.strip()
    if not USERNAME_PATTERN.match(cleaned):
        raise InvalidUsernameError(username)
    return cleaned


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(MIN_PASSWORD_LENGTH)


class RegisterUserUseCase:
    """Create an account with the initial virtual balance and a trial."""

    def __init__(
        self,
        user_repo: UserRepository,
        initial_balance: Decimal,
        trial_days: int,
    ) -> None:
        self._user_repo = user_repo
        self._initial_balance = initial_balance
        self._trial = timedelta(days=trial_days)

    def execute(self, command: RegisterUserCommand) -> UserProfile:
        email = command.email.strip().lower()
        username = validate_username(command.username)
        validate_password(command.password)

        if self._user_repo.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError()
        if self._user_repo.get_by_username(username) is not None:
            raise UsernameTakenError(username)

        now = datetime.now(timezone.utc)
        user = User(
            email=email,
            username=username,
            name=command.name,
            password_hash=hash_password(command.password),
            subscription_status=SubscriptionStatus.NONE,
            trial_ends_at=now + self._trial,
            created_at=now,
            virtual_balance=self._initial_balance,
            monthly_starting_balance=self._initial_balance,
        )
        self._user_repo.add(user)
        logger.info("Registered user id=%s", user.id)
        return UserProfile.from_user(user, now)
