"""
Access rules for premium and subscriber-only features.

Premium features (simulator, futures, alerts, reports) are open to
admins, paying subscribers and accounts still inside their trial.
Subscriber content excludes trial accounts.
"""

from datetime import datetime, timedelta
from typing import Optional

from app.domain.accounts.entities import PAID_STATUSES, User

DEFAULT_TRIAL = timedelta(days=7)


def has_premium_access(user: Optional[User], now: datetime) -> bool:
    """Return True when the user may use premium features at ``now``.

    A missing ``trial_ends_at`` falls back to seven days after account
    creation.
    """
    if user is None:
        return False
    if user.is_admin:
        return True
    if user.subscription_status in PAID_STATUSES:
        return True

    if user.trial_ends_at is not None:
        return user.trial_ends_at > now
    if user.created_at is not None:
        return now - user.created_at < DEFAULT_TRIAL
    return False


def has_subscription_access(user: Optional[User]) -> bool:
    """Return True only for admins and paying subscribers (no trial)."""
    if user is None:
        return False
    if user.is_admin:
        return True
    return user.subscription_status in PAID_STATUSES
