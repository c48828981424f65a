"""
Dependency injection for the accounts bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
"""

from datetime import timedelta

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.accounts.password_reset import (
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from app.application.accounts.profile import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    SetRankingVisibilityUseCase,
    UpdateUsernameUseCase,
)
from app.application.accounts.register_user import RegisterUserUseCase
from app.application.accounts.sessions import LoginUseCase, LogoutUseCase
from app.application.accounts.subscription import (
    ApplyPaymentEventUseCase,
    CancelSubscriptionUseCase,
    GetSubscriptionUseCase,
)
from app.core.config import settings
from app.domain.accounts.ports import AccountNotifier
from app.infrastructure.accounts.session_repository import SessionRepositoryAdapter
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.interfaces.dependencies import (
    get_account_notifier,
    get_engine,
    get_session_ttl,
)


def get_register_user_use_case(
    engine: Engine = Depends(get_engine),
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        user_repo=UserRepositoryAdapter(engine),
        initial_balance=settings.initial_virtual_balance,
        trial_days=settings.trial_days,
    )


def get_login_use_case(
    engine: Engine = Depends(get_engine),
    session_ttl: timedelta = Depends(get_session_ttl),
) -> LoginUseCase:
    return LoginUseCase(
        user_repo=UserRepositoryAdapter(engine),
        session_repo=SessionRepositoryAdapter(engine),
        session_ttl=session_ttl,
    )


def get_logout_use_case(engine: Engine = Depends(get_engine)) -> LogoutUseCase:
    return LogoutUseCase(session_repo=SessionRepositoryAdapter(engine))


def get_profile_use_case(engine: Engine = Depends(get_engine)) -> GetProfileUseCase:
    return GetProfileUseCase(user_repo=UserRepositoryAdapter(engine))


def get_change_password_use_case(
    engine: Engine = Depends(get_engine),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(user_repo=UserRepositoryAdapter(engine))


def get_update_username_use_case(
    engine: Engine = Depends(get_engine),
) -> UpdateUsernameUseCase:
    return UpdateUsernameUseCase(user_repo=UserRepositoryAdapter(engine))


def get_ranking_visibility_use_case(
    engine: Engine = Depends(get_engine),
) -> SetRankingVisibilityUseCase:
    return SetRankingVisibilityUseCase(user_repo=UserRepositoryAdapter(engine))


def get_subscription_use_case(
    engine: Engine = Depends(get_engine),
) -> GetSubscriptionUseCase:
    return GetSubscriptionUseCase(user_repo=UserRepositoryAdapter(engine))


def get_cancel_subscription_use_case(
    engine: Engine = Depends(get_engine),
) -> CancelSubscriptionUseCase:
    return CancelSubscriptionUseCase(user_repo=UserRepositoryAdapter(engine))


def get_payment_event_use_case(
    engine: Engine = Depends(get_engine),
) -> ApplyPaymentEventUseCase:
    return ApplyPaymentEventUseCase(user_repo=UserRepositoryAdapter(engine))


def get_request_password_reset_use_case(
    engine: Engine = Depends(get_engine),
    notifier: AccountNotifier = Depends(get_account_notifier),
) -> RequestPasswordResetUseCase:
    return RequestPasswordResetUseCase(
        user_repo=UserRepositoryAdapter(engine),
        notifier=notifier,
        reset_url=settings.password_reset_url,
        token_ttl=timedelta(minutes=settings.password_reset_ttl_minutes),
    )


def get_reset_password_use_case(
    engine: Engine = Depends(get_engine),
) -> ResetPasswordUseCase:
    return ResetPasswordUseCase(
        user_repo=UserRepositoryAdapter(engine),
        session_repo=SessionRepositoryAdapter(engine),
    )
