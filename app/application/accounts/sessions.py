"""
Use cases: Login sessions.

LoginUseCase exchanges credentials for an opaque bearer token,
LogoutUseCase revokes it and ResolveSessionUseCase maps a token back
to its user for authenticated requests.
"""

import logging
from datetime import datetime, timedelta, timezone

from app.application.accounts.dtos import AuthResult, LoginCommand, UserProfile
from app.domain.accounts.entities import Session, User
from app.domain.accounts.errors import InvalidCredentialsError, InvalidSessionError
from app.domain.accounts.ports import SessionRepository, UserRepository
from app.shared.security.passwords import new_session_token, verify_password

logger = logging.getLogger(__name__)


class LoginUseCase:
    """Check credentials and open a session.

    Unknown emails and wrong passwords raise the same error.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        session_ttl: timedelta,
    ) -> None:
        self._user_repo = user_repo
        self._session_repo = session_repo
        self._session_ttl = session_ttl

    def execute(self, command: LoginCommand) -> AuthResult:
        user = self._user_repo.get_by_email(command.email.strip())
        if user is None or not verify_password(command.password, user.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        now = datetime.now(timezone.utc)
        session = Session(
            token=new_session_token(),
            user_id=user.id,
            created_at=now,
            expires_at=now + self._session_ttl,
        )
        self._session_repo.add(session)
        logger.info("User id=%s logged in", user.id)
        return AuthResult(
            token=session.token,
            expires_at=session.expires_at,
            user=UserProfile.from_user(user, now),
        )


class LogoutUseCase:
    def __init__(self, session_repo: SessionRepository) -> None:
        self._session_repo = session_repo

    def execute(self, token: str) -> None:
        self._session_repo.delete(token)


class ResolveSessionUseCase:
    """Return the user owning a valid session token.

    Expired sessions are deleted and rejected.
    """

    def __init__(
        self, user_repo: UserRepository, session_repo: SessionRepository
    ) -> None:
        self._user_repo = user_repo
        self._session_repo = session_repo

    def execute(self, token: str) -> User:
        session = self._session_repo.get(token)
        if session is None:
            raise InvalidSessionError()

        if session.is_expired(datetime.now(timezone.utc)):
            self._session_repo.delete(token)
            raise InvalidSessionError()

        user = self._user_repo.get_by_id(session.user_id)
        if user is None:
            self._session_repo.delete(token)
            raise InvalidSessionError()
        return user
