"""
Tests for account access rules and password hashing.
"""

from datetime import datetime, timedelta, timezone

from app.domain.accounts.access import has_premium_access, has_subscription_access
from app.domain.accounts.entities import SubscriptionStatus, User
from app.shared.security.passwords import hash_password, new_session_token, verify_password

NOW = datetime(2024, 6, 15, tzinfo=timezone.utc)


def _user(**kw) -> User:
    return User(email="u@example.com", username="u", password_hash="x", **kw)


class TestPremiumAccess:
    def test_anonymous_has_no_access(self) -> None:
        assert not has_premium_access(None, NOW)
        assert not has_subscription_access(None)

    def test_admin_always_allowed(self) -> None:
        user = _user(is_admin=True)
        assert has_premium_access(user, NOW)
        assert has_subscription_access(user)

    def test_paid_statuses_allowed(self) -> None:
        for status in (SubscriptionStatus.AUTHORIZED, SubscriptionStatus.LIFETIME):
            user = _user(subscription_status=status)
            assert has_premium_access(user, NOW)
            assert has_subscription_access(user)

    def test_trial_gives_premium_but_not_subscription(self) -> None:
        user = _user(trial_ends_at=NOW + timedelta(hours=1))
        assert has_premium_access(user, NOW)
        assert not has_subscription_access(user)

    def test_expired_trial_denied(self) -> None:
        user = _user(
            trial_ends_at=NOW - timedelta(seconds=1),
            subscription_status=SubscriptionStatus.CANCELLED,
        )
        assert not has_premium_access(user, NOW)

    def test_missing_trial_end_falls_back_to_creation_date(self) -> None:
        assert has_premium_access(_user(created_at=NOW - timedelta(days=6)), NOW)
        assert not has_premium_access(_user(created_at=NOW - timedelta(days=8)), NOW)


class TestUserNames:
    def test_display_name_fallbacks(self) -> None:
        assert _user(name="Ana").display_name == "Ana"
        assert _user().display_name == "u"
        assert User(email="e", username=None, password_hash="x").display_name == "Investidor"

    def test_nickname_without_username(self) -> None:
        user = User(email="e", username=None, password_hash="x")
        assert user.nickname == f"User {str(user.id)[:4]}"


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        stored = hash_password("correct horse")
        assert stored.startswith("pbkdf2_sha256$")
        assert verify_password("correct horse", stored)
        assert not verify_password("wrong horse", stored)

    def test_salts_differ(self) -> None:
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_never_verifies(self) -> None:
        assert not verify_password("anything", "not-a-hash")

    def test_session_tokens_are_unique(self) -> None:
        assert new_session_token() != new_session_token()
