"""
Tests for the accounts use cases.

Run against the SQLAlchemy adapters on an in-memory SQLite database.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from urllib.parse import parse_qs, urlsplit

import pytest

from conftest import PASSWORD, FakeNotifier, make_user

from app.application.accounts.dtos import (
    ChangePasswordCommand,
    LoginCommand,
    PaymentEventCommand,
    RegisterUserCommand,
    ResetPasswordCommand,
    UpdateUsernameCommand,
)
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
from app.application.accounts.sessions import (
    LoginUseCase,
    LogoutUseCase,
    ResolveSessionUseCase,
)
from app.application.accounts.subscription import (
    ApplyPaymentEventUseCase,
    CancelSubscriptionUseCase,
    GetSubscriptionUseCase,
)
from app.domain.accounts.entities import Session, SubscriptionStatus
from app.domain.accounts.errors import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    InvalidSessionError,
    InvalidUsernameError,
    SubscriptionStateError,
    UsernameTakenError,
    UserNotFoundError,
    WeakPasswordError,
)
from app.infrastructure.accounts.session_repository import SessionRepositoryAdapter
from app.infrastructure.accounts.user_repository import UserRepositoryAdapter
from app.shared.security.passwords import hash_reset_token

TTL = timedelta(hours=1)


@pytest.fixture
def users(engine) -> UserRepositoryAdapter:
    return UserRepositoryAdapter(engine)


@pytest.fixture
def sessions(engine) -> SessionRepositoryAdapter:
    return SessionRepositoryAdapter(engine)


def _register(users, email="New@Example.com", username="newbie", password="long-enough"):
    return RegisterUserUseCase(users, Decimal("10000"), 7).execute(
        RegisterUserCommand(email=email, username=username, password=password)
    )


# ══════════════════════════════════════════════════════════════════════
# Registration
# ══════════════════════════════════════════════════════════════════════


class TestRegisterUser:
    def test_new_account_gets_wallet_and_trial(self, users) -> None:
        profile = _register(users)

        assert profile.email == "new@example.com"
        assert profile.virtual_balance == Decimal("10000")
        assert profile.monthly_starting_balance == Decimal("10000")
        assert profile.subscription_status is SubscriptionStatus.NONE
        assert profile.has_premium_access
        assert users.get_by_email("NEW@example.com") is not None

    def test_duplicate_email_rejected_case_insensitively(self, users) -> None:
        _register(users)
        with pytest.raises(EmailAlreadyRegisteredError):
            _register(users, email="new@EXAMPLE.com", username="other")

    def test_duplicate_username_rejected(self, users) -> None:
        _register(users)
        with pytest.raises(UsernameTakenError):
            _register(users, email="other@example.com")

    def test_input_validation(self, users) -> None:
        with pytest.raises(InvalidUsernameError):
            _register(users, username="a b")
        with pytest.raises(WeakPasswordError):
            _register(users, password="short")


# ══════════════════════════════════════════════════════════════════════
# Sessions
# ══════════════════════════════════════════════════════════════════════


class TestSessions:
    def test_login_then_resolve(self, engine, users, sessions) -> None:
        user = make_user(engine)
        result = LoginUseCase(users, sessions, TTL).execute(
            LoginCommand("ANA@example.com", PASSWORD)
        )

        assert result.user.id == user.id
        assert ResolveSessionUseCase(users, sessions).execute(result.token).id == user.id

    def test_wrong_password_and_unknown_email_look_the_same(
        self, engine, users, sessions
    ) -> None:
        make_user(engine)
        login = LoginUseCase(users, sessions, TTL)
        with pytest.raises(InvalidCredentialsError):
            login.execute(LoginCommand("ana@example.com", "nope"))
        with pytest.raises(InvalidCredentialsError):
            login.execute(LoginCommand("ghost@example.com", PASSWORD))

    def test_logout_revokes_token(self, engine, users, sessions) -> None:
        make_user(engine)
        token = LoginUseCase(users, sessions, TTL).execute(
            LoginCommand("ana@example.com", PASSWORD)
        ).token

        LogoutUseCase(sessions).execute(token)

        with pytest.raises(InvalidSessionError):
            ResolveSessionUseCase(users, sessions).execute(token)

    def test_expired_session_is_deleted(self, engine, users, sessions) -> None:
        user = make_user(engine)
        now = datetime.now(timezone.utc)
        sessions.add(
            Session(
                token="old",
                user_id=user.id,
                expires_at=now - timedelta(seconds=1),
                created_at=now - TTL,
            )
        )

        with pytest.raises(InvalidSessionError):
            ResolveSessionUseCase(users, sessions).execute("old")
        assert sessions.get("old") is None

    def test_unknown_token(self, users, sessions) -> None:
        with pytest.raises(InvalidSessionError):
            ResolveSessionUseCase(users, sessions).execute("missing")


# ══════════════════════════════════════════════════════════════════════
# Password recovery
# ══════════════════════════════════════════════════════════════════════

RESET_URL = "https://criptoplay.example/auth/redefinir-senha"


def _token_from(message) -> str:
    return parse_qs(urlsplit(message.reset_link).query)["token"][0]


class TestPasswordReset:
    def test_unknown_email_sends_nothing(self, users) -> None:
        notifier = FakeNotifier()
        RequestPasswordResetUseCase(users, notifier, RESET_URL).execute("ghost@example.com")
        assert notifier.password_resets == []

    def test_request_stores_only_the_token_hash(self, engine, users) -> None:
        user = make_user(engine)
        notifier = FakeNotifier()

        RequestPasswordResetUseCase(users, notifier, RESET_URL).execute("ANA@example.com")

        [message] = notifier.password_resets
        assert message.to == user.email
        assert message.reset_link.startswith(RESET_URL + "?token=")
        assert message.expires_in_minutes == 60
        token = _token_from(message)
        assert users.get_by_reset_token(token, datetime.now(timezone.utc)) is None
        assert users.get_by_reset_token(
            hash_reset_token(token), datetime.now(timezone.utc)
        ).id == user.id

    def test_reset_changes_password_and_revokes_sessions(
        self, engine, users, sessions
    ) -> None:
        user = make_user(engine)
        old = LoginUseCase(users, sessions, TTL).execute(LoginCommand(user.email, PASSWORD))
        notifier = FakeNotifier()
        RequestPasswordResetUseCase(users, notifier, RESET_URL).execute(user.email)
        token = _token_from(notifier.password_resets[0])

        ResetPasswordUseCase(users, sessions).execute(
            ResetPasswordCommand(token=token, new_password="brand-new-pass")
        )

        with pytest.raises(InvalidSessionError):
            ResolveSessionUseCase(users, sessions).execute(old.token)
        with pytest.raises(InvalidCredentialsError):
            LoginUseCase(users, sessions, TTL).execute(LoginCommand(user.email, PASSWORD))
        LoginUseCase(users, sessions, TTL).execute(LoginCommand(user.email, "brand-new-pass"))

    def test_token_is_single_use(self, engine, users, sessions) -> None:
        user = make_user(engine)
        notifier = FakeNotifier()
        RequestPasswordResetUseCase(users, notifier, RESET_URL).execute(user.email)
        token = _token_from(notifier.password_resets[0])
        reset = ResetPasswordUseCase(users, sessions)

        reset.execute(ResetPasswordCommand(token=token, new_password="brand-new-pass"))

        with pytest.raises(InvalidResetTokenError):
            reset.execute(ResetPasswordCommand(token=token, new_password="other-new-pass"))

    def test_expired_token_is_rejected(self, engine, users, sessions) -> None:
        user = make_user(engine)
        expired = datetime.now(timezone.utc) - timedelta(minutes=1)
        users.set_password_reset(user.id, hash_reset_token("old-token"), expired)
        with pytest.raises(InvalidResetTokenError):
            ResetPasswordUseCase(users, sessions).execute(
                ResetPasswordCommand(token="old-token", new_password="brand-new-pass")
            )

    def test_weak_password_keeps_the_token(self, engine, users, sessions) -> None:
        user = make_user(engine)
        users.set_password_reset(
            user.id, hash_reset_token("tok"), datetime.now(timezone.utc) + TTL
        )
        with pytest.raises(WeakPasswordError):
            ResetPasswordUseCase(users, sessions).execute(
                ResetPasswordCommand(token="tok", new_password="short")
            )
        assert users.get_by_reset_token(
            hash_reset_token("tok"), datetime.now(timezone.utc)
        ) is not None


# ══════════════════════════════════════════════════════════════════════
# Profile and subscription
# ══════════════════════════════════════════════════════════════════════


class TestProfile:
    def test_change_password(self, engine, users, sessions) -> None:
        user = make_user(engine)
        with pytest.raises(InvalidCredentialsError):
            ChangePasswordUseCase(users).execute(
                ChangePasswordCommand(user.id, "wrong", "new-password")
            )

        ChangePasswordUseCase(users).execute(
            ChangePasswordCommand(user.id, PASSWORD, "new-password")
        )

        LoginUseCase(users, sessions, TTL).execute(
            LoginCommand(user.email, "new-password")
        )

    def test_username_must_stay_unique(self, engine, users) -> None:
        ana = make_user(engine)
        make_user(engine, email="bo@example.com", username="bo")

        with pytest.raises(UsernameTakenError):
            UpdateUsernameUseCase(users).execute(UpdateUsernameCommand(ana.id, "bo"))
        profile = UpdateUsernameUseCase(users).execute(UpdateUsernameCommand(ana.id, "ana"))
        assert profile.username == "ana"

    def test_ranking_visibility(self, engine, users) -> None:
        user = make_user(engine)
        SetRankingVisibilityUseCase(users).execute(user.id, False)
        assert GetProfileUseCase(users).execute(user.id).ranking_visible is False


class TestSubscription:
    def test_trial_counts_as_premium_only(self, engine, users) -> None:
        user = make_user(engine)
        info = GetSubscriptionUseCase(users).execute(user.id)
        assert info.has_premium_access
        assert not info.has_subscription_access

    def test_payment_event_then_cancel(self, engine, users) -> None:
        user = make_user(engine, premium=False)
        info = ApplyPaymentEventUseCase(users).execute(
            PaymentEventCommand("ANA@example.com", SubscriptionStatus.AUTHORIZED)
        )
        assert info.has_subscription_access

        cancelled = CancelSubscriptionUseCase(users).execute(user.id)

        assert cancelled.status is SubscriptionStatus.CANCELLED
        assert not cancelled.has_premium_access

    def test_only_authorized_can_cancel(self, engine, users) -> None:
        user = make_user(engine, subscription_status=SubscriptionStatus.LIFETIME)
        with pytest.raises(SubscriptionStateError):
            CancelSubscriptionUseCase(users).execute(user.id)

    def test_payment_for_unknown_email(self, users) -> None:
        with pytest.raises(UserNotFoundError):
            ApplyPaymentEventUseCase(users).execute(
                PaymentEventCommand("ghost@example.com", SubscriptionStatus.AUTHORIZED)
            )
