"""
Shared FastAPI dependencies.

Process-wide infrastructure (database engine, price feed, email
notifier) is built once and reused. Authentication resolves the
bearer session token to the current user; premium features and batch
endpoints add their own guards on top.
"""

import hmac
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from app.application.accounts.sessions import ResolveSessionUseCase
from app.core.config import settings
from app.domain.accounts.access import has_premium_access
from app.domain.accounts.entities import User
from app.domain.accounts.errors import InvalidSessionError, PremiumRequiredError
from app.domain.accounts.ports import AccountNotifier
from app.domain.alerts.ports import AlertNotifier
from app.domain.errors import AuthenticationError
from app.domain.trading.ports import PriceFeed
from app.infrastructure.accounts.session_repository import SessionRepositoryAdapter
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.infrastructure.database import build_engine
from app.infrastructure.email_notifier import EmailNotifier
from app.infrastructure.trading.binance_price_feed import BinancePriceFeed

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_engine() -> Engine:
    """Process-wide SQLAlchemy engine."""
    return build_engine(settings.get_database_url())


@lru_cache
def get_price_feed() -> PriceFeed:
    return BinancePriceFeed(
        spot_endpoints=settings.binance_spot_endpoints,
        futures_endpoints=settings.binance_futures_endpoints,
        mercado_bitcoin_url=settings.mercado_bitcoin_url,
        bitget_url=settings.bitget_url,
        timeout=settings.price_timeout_seconds,
    )


@lru_cache
def _email_notifier() -> EmailNotifier:
    return EmailNotifier(
        api_url=settings.email_api_url,
        api_key=settings.email_api_key,
        sender=settings.email_sender,
        timeout=settings.price_timeout_seconds,
    )


def get_notifier() -> AlertNotifier:
    return _email_notifier()


def get_account_notifier() -> AccountNotifier:
    return _email_notifier()


def get_session_ttl() -> timedelta:
    return timedelta(hours=settings.session_ttl_hours)


def get_cron_secret() -> Optional[str]:
    return settings.cron_secret


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise InvalidSessionError()
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    engine: Engine = Depends(get_engine),
) -> User:
    """Resolve the bearer session token to its user (401 otherwise)."""
    use_case = ResolveSessionUseCase(
        user_repo=UserRepositoryAdapter(engine),
        session_repo=SessionRepositoryAdapter(engine),
    )
    return use_case.execute(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    engine: Engine = Depends(get_engine),
) -> Optional[User]:
    """Like get_current_user, but anonymous and invalid tokens give None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return get_current_user(credentials.credentials, engine)
    except InvalidSessionError:
        return None


def require_premium(feature: str) -> Callable[..., User]:
    """Build a dependency that only lets premium users through (403)."""

    def _premium_user(user: User = Depends(get_current_user)) -> User:
        if not has_premium_access(user, datetime.now(timezone.utc)):
            raise PremiumRequiredError(feature)
        return user

    return _premium_user


def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    secret: Optional[str] = Depends(get_cron_secret),
) -> None:
    """Guard for batch endpoints: ``Authorization: Bearer <CRON_SECRET>``.

    Without a configured secret every call is rejected.
    """
    supplied = credentials.credentials if credentials else ""
    if not secret or not hmac.compare_digest(supplied.encode(), secret.encode()):
        raise AuthenticationError("Invalid batch job credentials")
