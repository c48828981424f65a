"""
Use cases: Profile settings of the signed-in user.

Failure cases: InvalidCredentialsError (wrong current password),
    WeakPasswordError, InvalidUsernameError, UsernameTakenError,
    UserNotFoundError.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from app.application.accounts.dtos import (
    ChangePasswordCommand,
    UpdateUsernameCommand,
    UserProfile,
)
from app.application.accounts.register_user import validate_password, validate_username
from app.domain.accounts.entities import User
from app.domain.accounts.errors import (
    InvalidCredentialsError,
    UsernameTakenError,
    UserNotFoundError,
)
from app.domain.accounts.ports import UserRepository
from app.shared.security.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def _load(user_repo: UserRepository, user_id: UUID) -> User:
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise UserNotFoundError(str(user_id))
    return user


class GetProfileUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: UUID) -> UserProfile:
        user = _load(self._user_repo, user_id)
        return UserProfile.from_user(user, datetime.now(timezone.utc))


class ChangePasswordUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, command: ChangePasswordCommand) -> None:
        user = _load(self._user_repo, command.user_id)
        if not verify_password(command.current_password, user.password_hash):
            raise InvalidCredentialsError()
        validate_password(command.new_password)
        self._user_repo.update_password(user.id, hash_password(command.new_password))
        logger.info("Password changed for user id=%s", user.id)


class UpdateUsernameUseCase:
    """Change the public username; it must stay unique."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, command: UpdateUsernameCommand) -> UserProfile:
        user = _load(self._user_repo, command.user_id)
        username = validate_username(command.username)

        owner = self._user_repo.get_by_username(username)
        if owner is not None and owner.id != user.id:
            raise UsernameTakenError(username)

        self._user_repo.update_username(user.id, username)
        user.username = username
        return UserProfile.from_user(user, datetime.now(timezone.utc))


class SetRankingVisibilityUseCase:
    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def execute(self, user_id: UUID, visible: bool) -> None:
        _load(self._user_repo, user_id)
        self._user_repo.set_ranking_visibility(user_id, visible)
