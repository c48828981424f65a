"""
Use cases: Password recovery by email.

RequestPasswordResetUseCase stores the hash of a fresh token and
emails a link carrying the token. The answer is the same whether or
not the email belongs to an account. ResetPasswordUseCase exchanges a
valid token for a new password and revokes every open session.

Failure cases: InvalidResetTokenError, WeakPasswordError,
    NotificationError (email provider down).
"""

import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from app.application.accounts.dtos import ResetPasswordCommand
from app.application.accounts.register_user import validate_password
from app.domain.accounts.entities import PasswordResetMessage
from app.domain.accounts.errors import InvalidResetTokenError
from app.domain.accounts.ports import AccountNotifier, SessionRepository, UserRepository
from app.shared.security.passwords import hash_password, hash_reset_token, new_reset_token

logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    def __init__(
        self,
        user_repo: UserRepository,
        notifier: AccountNotifier,
        reset_url: str,
        token_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._user_repo = user_repo
        self._notifier = notifier
        self._reset_url = reset_url
        self._token_ttl = token_ttl

    def execute(self, email: str) -> None:
        user = self._user_repo.get_by_email(email.strip())
        if user is None:
            logger.info("Password reset requested for an unknown email")
            return

        token = new_reset_token()
        expires_at = datetime.now(timezone.utc) + self._token_ttl
        self._user_repo.set_password_reset(user.id, hash_reset_token(token), expires_at)

        self._notifier.send_password_reset(
            PasswordResetMessage(
                to=user.email,
                user_name=user.display_name,
                reset_link=f"{self._reset_url}?{urlencode({'token': token})}",
                expires_in_minutes=int(self._token_ttl.total_seconds() // 60),
            )
        )
        logger.info("Password reset link sent to user id=%s", user.id)


class ResetPasswordUseCase:
    def __init__(self, user_repo: UserRepository, session_repo: SessionRepository) -> None:
        self._user_repo = user_repo
        self._session_repo = session_repo

    def execute(self, command: ResetPasswordCommand) -> None:
        validate_password(command.new_password)
        user = self._user_repo.get_by_reset_token(
            hash_reset_token(command.token.strip()), datetime.now(timezone.utc)
        )
        if user is None:
            raise InvalidResetTokenError()

        self._user_repo.complete_password_reset(user.id, hash_password(command.new_password))
        revoked = self._session_repo.delete_for_user(user.id)
        logger.info("Password reset for user id=%s, %d sessions revoked", user.id, revoked)
